"""Error taxonomy for the database utility layer."""
from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy.exc import DBAPIError

# Driver and database failures surface unchanged as SQLAlchemy errors.
QueryError = DBAPIError


class DatabaseUtilError(Exception):
  """Base exception for errors raised by this package."""


class ConfigurationError(DatabaseUtilError):
  """A required connection parameter could not be resolved."""

  def __init__(self, message: str, candidates: Sequence[str] = ()):
    super().__init__(message)
    self.candidates = tuple(candidates)


class LockTimeout(DatabaseUtilError):
  """An advisory lock was not acquired within its timeout."""

  def __init__(self, lock_name: str, timeout_seconds: int):
    super().__init__(f'Could not acquire lock "{lock_name}" within {timeout_seconds}s')
    self.lock_name = lock_name
    self.timeout_seconds = timeout_seconds


class NestedTransactionError(DatabaseUtilError):
  """A transactional callback was started on a connection already in a transaction."""


class SchemaApplyError(DatabaseUtilError):
  """A schema operation failed for a reason other than the object already existing."""

  def __init__(self, message: str, operation: Optional[object] = None):
    super().__init__(message)
    self.operation = operation


class DecodeError(DatabaseUtilError):
  """The JSON payload column of a loaded row could not be decoded."""

  def __init__(self, table: str, key: object, reason: str):
    super().__init__(f'Invalid JSON payload in {table} row {key!r}: {reason}')
    self.table = table
    self.key = key
    self.reason = reason
