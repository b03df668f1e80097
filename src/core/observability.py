"""Logging del proyecto (canal de diagnóstico).

Por qué aquí:
- Todos los módulos usan `logging.getLogger(__name__)`; este módulo solo
  decide *dónde* se ven esos logs.
- Rich ya es dependencia de la CLI, así que el handler por defecto es
  `RichHandler` (tracebacks legibles); fuera de una terminal se puede
  desactivar con `rich_output=False`.
"""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGERS = ("core", "adapters", "cli")
_HANDLER_NAME = "lms-facade"


def setup_logging(level: str = "INFO", *, rich_output: bool = True) -> None:
    """Configura los loggers del proyecto. Idempotente."""

    resolved = getattr(logging, level.upper(), logging.INFO)

    handler: logging.Handler
    if rich_output:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    handler.set_name(_HANDLER_NAME)

    for name in _ROOT_LOGGERS:
        log = logging.getLogger(name)
        for existing in list(log.handlers):
            if existing.get_name() == _HANDLER_NAME:
                log.removeHandler(existing)
        log.addHandler(handler)
        log.setLevel(resolved)
        log.propagate = False
