"""Single commit/rollback boundary around a callback."""
from __future__ import annotations

from typing import Callable, TypeVar

from sqlalchemy.engine import Connection

from dbutil.domain.errors import NestedTransactionError

T = TypeVar('T')


class TransactionRunner:
  """Runs a callback inside ``connection.begin()`` and hands back its result.

  Commit happens on normal return and rollback on any exception, which then
  propagates unchanged. Transactions are never nested: calling ``run`` on a
  connection that already has a transaction in progress raises
  `NestedTransactionError` without touching that transaction.
  """

  def run(self, connection: Connection, callback: Callable[[Connection], T]) -> T:
    if connection.in_transaction():
      raise NestedTransactionError(
        'Connection already has a transaction in progress; commit or roll it back first'
      )

    with connection.begin():
      return callback(connection)
