"""Process-lifetime keyed memo store with reset-to-default semantics."""
from __future__ import annotations

import threading
from typing import Any, Dict, Hashable, Optional


class ProcessCache:
  """Keyed values that remember the default they were first created with.

  The first ``get(key, default)`` stores ``default`` both as the live value
  and as the remembered default. ``reset=True`` restores the remembered
  default, never a recomputed value. Querying without a key folds every
  remembered default back into the live values and returns the result.
  All access goes through one re-entrant lock, so a shared instance may be
  used from several threads.
  """

  def __init__(self) -> None:
    self._lock = threading.RLock()
    self._values: Dict[Hashable, Any] = {}
    self._defaults: Dict[Hashable, Any] = {}

  def get(self, key: Optional[Hashable] = None, default: Any = None, reset: bool = False) -> Any:
    if key is None:
      return self.reset_all()

    with self._lock:
      if key in self._values:
        if reset:
          self._values[key] = self._defaults[key]
        return self._values[key]

      self._defaults[key] = default
      self._values[key] = default
      return default

  def set(self, key: Hashable, value: Any) -> Any:
    with self._lock:
      if key not in self._defaults:
        self._defaults[key] = value
      self._values[key] = value
      return value

  def get_all(self) -> Dict[Hashable, Any]:
    with self._lock:
      return dict(self._values)

  def reset_all(self) -> Dict[Hashable, Any]:
    with self._lock:
      self._values.update(self._defaults)
      return dict(self._values)

  def __contains__(self, key: Hashable) -> bool:
    with self._lock:
      return key in self._values


process_cache = ProcessCache()
