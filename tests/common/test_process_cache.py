"""Tests for the process cache."""
from __future__ import annotations

import threading

from dbutil.common.process_cache import ProcessCache


def test_first_access_stores_default() -> None:
  cache = ProcessCache()

  assert cache.get('x', 10) == 10
  assert cache.get('x', 999) == 10
  assert 'x' in cache


def test_reset_restores_original_default() -> None:
  cache = ProcessCache()
  cache.get('x', 10)
  cache.set('x', 42)

  assert cache.get('x') == 42
  assert cache.get('x', 999, reset=True) == 10
  assert cache.get('x') == 10


def test_set_on_new_key_remembers_value_as_default() -> None:
  cache = ProcessCache()
  cache.set('y', 'first')
  cache.set('y', 'second')

  assert cache.get('y', reset=True) == 'first'


def test_global_reset_folds_defaults_back() -> None:
  cache = ProcessCache()
  cache.get('a', 1)
  cache.get('b', 2)
  cache.set('a', 100)
  cache.set('b', 200)

  assert cache.get_all() == {'a': 100, 'b': 200}
  assert cache.get() == {'a': 1, 'b': 2}
  assert cache.get_all() == {'a': 1, 'b': 2}


def test_keyless_query_folds_defaults_with_or_without_reset() -> None:
  cache = ProcessCache()
  cache.get('a', 1)
  cache.set('a', 5)
  cache.set('fresh', 'x')

  assert cache.get(reset=True) == {'a': 1, 'fresh': 'x'}
  cache.set('a', 6)
  assert cache.get() == {'a': 1, 'fresh': 'x'}


def test_get_all_returns_a_copy() -> None:
  cache = ProcessCache()
  cache.get('a', 1)

  snapshot = cache.get_all()
  snapshot['a'] = 5

  assert cache.get('a') == 1


def test_concurrent_first_access_keeps_one_default() -> None:
  cache = ProcessCache()
  results = []

  def worker(value: int) -> None:
    results.append(cache.get('shared', value))

  threads = [threading.Thread(target=worker, args=(value,)) for value in range(8)]
  for thread in threads:
    thread.start()
  for thread in threads:
    thread.join()

  assert len(set(results)) == 1
  assert cache.get('shared', reset=True) == results[0]
