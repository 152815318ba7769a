"""Output port for server-side advisory lock primitives."""
from __future__ import annotations

from typing import Protocol

from sqlalchemy.engine import Connection

from dbutil.domain.value_objects.lock_handle import LockHandle


class AdvisoryLockBackend(Protocol):
  """Dialect-specific acquire/release of a named lock."""

  def acquire(self, connection: Connection, handle: LockHandle) -> bool:
    """Wait up to ``handle.timeout_seconds``; return whether the lock is held."""
    ...

  def release(self, connection: Connection, handle: LockHandle) -> None:
    ...
