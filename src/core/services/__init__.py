"""Módulos de API por recurso y la composición de la fachada."""

from core.services.lms_api import LmsApi, build_lms_api

__all__ = [
	"LmsApi",
	"build_lms_api",
]
