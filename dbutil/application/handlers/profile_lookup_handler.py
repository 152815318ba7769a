"""Application handler resolving connection profiles with per-process memoization."""
from __future__ import annotations

from typing import Optional

from dbutil.common.process_cache import ProcessCache
from dbutil.domain.services.connection_resolver import ConnectionResolver
from dbutil.domain.value_objects.connection_profile import ConnectionProfile, Intent


class ProfileLookupHandler:
  """Resolves each (name, intent) pair once per process through the cache."""

  def __init__(self, resolver: ConnectionResolver, cache: ProcessCache):
    self._resolver = resolver
    self._cache = cache

  def handle(self, name: str, intent: Optional[Intent] = None) -> ConnectionProfile:
    effective = self._resolver.effective_intent(intent)
    key = f'connection_profile:{name}:{effective.value}'
    if key in self._cache:
      return self._cache.get(key)
    return self._cache.get(key, self._resolver.resolve(name, effective))
