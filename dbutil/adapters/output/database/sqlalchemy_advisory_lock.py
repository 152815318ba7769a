"""Named advisory locks for cross-process mutual exclusion."""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Mapping, Optional, TypeVar

from sqlalchemy import text
from sqlalchemy.engine import Connection

from dbutil.domain.errors import LockTimeout
from dbutil.domain.value_objects.lock_handle import LockHandle
from dbutil.ports.output.advisory_lock_backend import AdvisoryLockBackend

LOG = logging.getLogger(__name__)

T = TypeVar('T')


class MySqlLockBackend:
  """GET_LOCK / RELEASE_LOCK, available on MySQL and MariaDB."""

  def acquire(self, connection: Connection, handle: LockHandle) -> bool:
    result = connection.execute(
      text('SELECT GET_LOCK(:name, :timeout)'),
      {'name': handle.normalized_name, 'timeout': handle.timeout_seconds},
    ).scalar()
    return result == 1

  def release(self, connection: Connection, handle: LockHandle) -> None:
    connection.execute(text('SELECT RELEASE_LOCK(:name)'), {'name': handle.normalized_name})


class PostgresLockBackend:
  """Session-level advisory locks keyed on ``hashtext(name)``.

  PostgreSQL has no timed wait for advisory locks, so the non-blocking
  variant is polled until the timeout elapses.
  """

  def __init__(self, poll_interval: float = 0.1, clock: Callable[[], float] = time.monotonic,
               sleep: Callable[[float], None] = time.sleep):
    self._poll_interval = poll_interval
    self._clock = clock
    self._sleep = sleep

  def acquire(self, connection: Connection, handle: LockHandle) -> bool:
    deadline = self._clock() + handle.timeout_seconds
    while True:
      acquired = connection.execute(
        text('SELECT pg_try_advisory_lock(hashtext(:name))'),
        {'name': handle.normalized_name},
      ).scalar()
      if acquired:
        return True
      remaining = deadline - self._clock()
      if remaining <= 0:
        return False
      self._sleep(min(self._poll_interval, remaining))

  def release(self, connection: Connection, handle: LockHandle) -> None:
    connection.execute(
      text('SELECT pg_advisory_unlock(hashtext(:name))'),
      {'name': handle.normalized_name},
    )


DEFAULT_BACKENDS: Mapping[str, AdvisoryLockBackend] = {
  'mysql': MySqlLockBackend(),
  'mariadb': MySqlLockBackend(),
  'postgresql': PostgresLockBackend(),
}


class AdvisoryLock:
  """Runs callbacks while holding a named server-side lock.

  Dialects without a registered backend (SQLite in tests, for instance) run
  the callback without any locking.
  """

  def __init__(self, backends: Optional[Mapping[str, AdvisoryLockBackend]] = None):
    self._backends: Dict[str, AdvisoryLockBackend] = dict(DEFAULT_BACKENDS if backends is None else backends)

  def backend_for(self, connection: Connection) -> Optional[AdvisoryLockBackend]:
    return self._backends.get(connection.dialect.name)

  def with_lock(
    self,
    connection: Connection,
    lock_name: str,
    timeout_seconds: int,
    callback: Callable[[Connection], T],
  ) -> T:
    with self.hold(connection, lock_name, timeout_seconds):
      return callback(connection)

  @contextmanager
  def hold(self, connection: Connection, lock_name: str, timeout_seconds: int) -> Iterator[LockHandle]:
    handle = LockHandle.create(lock_name, timeout_seconds)
    backend = self.backend_for(connection)
    if backend is None:
      LOG.debug(
        'Advisory locks unsupported, running unprotected',
        extra={'lock': handle.normalized_name, 'dialect': connection.dialect.name},
      )
      yield handle
      return

    acquired = _outside_transaction(connection, lambda: backend.acquire(connection, handle))
    if not acquired:
      raise LockTimeout(handle.name, handle.timeout_seconds)
    LOG.debug('Acquired advisory lock', extra={'lock': handle.normalized_name})

    succeeded = False
    try:
      yield handle
      succeeded = True
    finally:
      try:
        _outside_transaction(connection, lambda: backend.release(connection, handle))
        LOG.debug('Released advisory lock', extra={'lock': handle.normalized_name})
      except Exception:
        LOG.exception('Failed to release advisory lock', extra={'lock': handle.normalized_name})
        if succeeded:
          raise


def _outside_transaction(connection: Connection, statement: Callable[[], T]) -> T:
  """Run a lock statement without leaving behind a transaction it autobegan.

  Session-level locks survive commit, so the statement's own transaction is
  committed, or rolled back when the statement fails, while any transaction
  the caller already had is left alone.
  """
  owned = not connection.in_transaction()
  try:
    result = statement()
  except Exception:
    if owned and connection.in_transaction():
      connection.rollback()
    raise
  if owned and connection.in_transaction():
    connection.commit()
  return result
