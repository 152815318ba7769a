"""Load rows by primary key in one round trip, decoding the payload column."""
from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import column, literal_column, select, table
from sqlalchemy.engine import Connection

from dbutil.domain.services.payload_decoder import PayloadDecoder, Row
from dbutil.domain.value_objects.fetch_shape import FetchShape


class BatchLoader:
  def __init__(self, decoder: Optional[PayloadDecoder] = None):
    self._decoder = decoder or PayloadDecoder()

  def load_multiple(
    self,
    connection: Connection,
    table_name: str,
    ids: Iterable[object],
    fetch_shape: FetchShape = FetchShape.OBJECT,
    key_column: str = 'id',
  ) -> List[Row]:
    """Return the rows whose `key_column` is in `ids`; an empty id set skips the query."""
    wanted = list(dict.fromkeys(ids))
    if not wanted:
      return []

    target = table(table_name, column(key_column))
    query = select(literal_column('*')).select_from(target).where(target.c[key_column].in_(wanted))

    rows = []
    for record in connection.execute(query).mappings():
      rows.append(
        self._decoder.materialize(record, fetch_shape, table=table_name, key=record.get(key_column))
      )
    return rows

  def load(
    self,
    connection: Connection,
    table_name: str,
    id: object,
    fetch_shape: FetchShape = FetchShape.OBJECT,
    key_column: str = 'id',
  ) -> Optional[Row]:
    rows = self.load_multiple(connection, table_name, [id], fetch_shape, key_column)
    return rows[0] if rows else None
