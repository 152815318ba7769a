"""Row materialization shapes for loaded rows."""
from __future__ import annotations

from enum import Enum


class FetchShape(str, Enum):
  OBJECT = 'object'
  MAP = 'map'
