"""Modo offline: fixtures en memoria con la misma forma que el backend.

Por qué un paquete:
- Separa datos (`fixtures`), estado (`store`) y el `DataSource` que los sirve
  (`source`).
"""

from adapters.offline.source import FixtureDataSource
from adapters.offline.store import FixtureStore

__all__ = [
	"FixtureDataSource",
	"FixtureStore",
]
