"""Roles."""

from __future__ import annotations

from core.domain.models import Role
from core.domain.resources import ROLE
from core.services.base import ResourceApi


class RoleApi(ResourceApi[Role]):
    spec = ROLE
