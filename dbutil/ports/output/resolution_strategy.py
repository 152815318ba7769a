"""Output port for replacing the built-in connection resolution."""
from __future__ import annotations

from typing import Protocol

from dbutil.domain.value_objects.connection_profile import ConnectionProfile


class ResolutionStrategy(Protocol):
  """Resolves a logical database name to connection parameters.

  When a strategy is registered with the resolver it takes precedence over
  the environment lookup and receives only the logical name.
  """

  def __call__(self, name: str) -> ConnectionProfile:
    ...
