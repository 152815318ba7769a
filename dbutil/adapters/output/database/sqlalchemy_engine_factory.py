"""SQLAlchemy engine construction for resolved connection profiles."""
from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from dbutil.domain.value_objects.connection_profile import ConnectionProfile


class SqlAlchemyEngineFactory:
  """Keeps one engine per connection URL; pooling is left to SQLAlchemy."""

  def __init__(self, **engine_options: Any) -> None:
    self._engines: Dict[str, Engine] = {}
    self._engine_options = engine_options

  def engine_for(self, profile: ConnectionProfile) -> Engine:
    url = profile.url()
    key = url.render_as_string(hide_password=False)
    if key not in self._engines:
      self._engines[key] = create_engine(url, **self._engine_options)
    return self._engines[key]

  def dispose(self) -> None:
    for engine in self._engines.values():
      engine.dispose()
    self._engines.clear()
