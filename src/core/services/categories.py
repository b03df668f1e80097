"""Course categories."""

from __future__ import annotations

from core.domain.models import Category
from core.domain.resources import CATEGORY
from core.services.base import ResourceApi


class CategoryApi(ResourceApi[Category]):
    spec = CATEGORY
