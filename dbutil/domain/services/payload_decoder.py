"""Decode the JSON-encoded payload column of loaded rows."""
from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Mapping, MutableMapping, Union

from dbutil.domain.errors import DecodeError
from dbutil.domain.value_objects.fetch_shape import FetchShape

PAYLOAD_COLUMN = 'data'

Row = Union[SimpleNamespace, MutableMapping[str, Any]]


class PayloadDecoder:
  """Materializes rows in a fetch shape and decodes their payload column once.

  A payload that is still serialized (``str`` or ``bytes``) is parsed as JSON
  into the same shape as the row: nested ``SimpleNamespace`` objects for
  `FetchShape.OBJECT`, plain dicts and lists for `FetchShape.MAP`. Missing,
  NULL or already structured payloads are left untouched. Malformed JSON
  raises `DecodeError` rather than leaking the raw string.
  """

  def __init__(self, column: str = PAYLOAD_COLUMN):
    self.column = column

  def materialize(
    self,
    mapping: Mapping[str, Any],
    fetch_shape: FetchShape,
    table: str = '',
    key: object = None,
  ) -> Row:
    values = dict(mapping)
    if self.column in values:
      values[self.column] = self.decode_value(values[self.column], fetch_shape, table, key)
    if fetch_shape == FetchShape.OBJECT:
      return SimpleNamespace(**values)
    return values

  def decode_value(self, value: Any, fetch_shape: FetchShape, table: str = '', key: object = None) -> Any:
    if not isinstance(value, (str, bytes, bytearray)):
      return value

    object_hook = _to_namespace if fetch_shape == FetchShape.OBJECT else None
    try:
      return json.loads(value, object_hook=object_hook)
    except ValueError as exc:
      raise DecodeError(table, key, str(exc)) from exc


def _to_namespace(obj: dict) -> SimpleNamespace:
  return SimpleNamespace(**obj)
