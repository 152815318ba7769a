"""Update-or-insert of a single row identified by key columns."""
from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import and_, column, insert, literal, select, table, update
from sqlalchemy.engine import Connection


class Upserter:
  """Updates the row matching all key columns, or inserts it when missing.

  The existence check and the write are separate statements, so two callers
  merging the same keys concurrently may both insert. Wrap the call in an
  advisory lock or rely on a unique constraint when that matters.
  """

  def merge(
    self,
    connection: Connection,
    table_name: str,
    keys: Mapping[str, Any],
    fields: Mapping[str, Any],
  ) -> int:
    if not keys:
      raise ValueError('At least one key column is required')

    target = table(table_name, *(column(name) for name in {**keys, **fields}))
    condition = and_(*(target.c[name] == value for name, value in keys.items()))

    found = connection.execute(select(literal(1)).select_from(target).where(condition).limit(1)).first()
    if found is not None:
      if not fields:
        return 0
      result = connection.execute(update(target).where(condition).values(dict(fields)))
    else:
      result = connection.execute(insert(target).values({**keys, **fields}))
    return result.rowcount
