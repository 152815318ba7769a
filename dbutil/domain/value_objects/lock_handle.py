"""Value object for a named advisory lock request."""
from __future__ import annotations

import hashlib
from dataclasses import dataclass

MAX_LOCK_NAME_LENGTH = 64


def normalize_lock_name(name: str) -> str:
  """Return `name`, or its MD5 hex digest when it exceeds the server limit."""
  if len(name) > MAX_LOCK_NAME_LENGTH:
    return hashlib.md5(name.encode('utf-8')).hexdigest()
  return name


@dataclass(frozen=True)
class LockHandle:
  """A single acquisition request; never reused across calls."""

  name: str
  normalized_name: str
  timeout_seconds: int

  @staticmethod
  def create(name: str, timeout_seconds: int) -> 'LockHandle':
    if not name:
      raise ValueError('Lock name is required')
    if timeout_seconds < 0:
      raise ValueError('timeout_seconds must not be negative')
    return LockHandle(
      name=name,
      normalized_name=normalize_lock_name(name),
      timeout_seconds=int(timeout_seconds),
    )
