"""Tests for the transactional runner."""
from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.engine import Connection

from dbutil.adapters.output.database.sqlalchemy_transaction import TransactionRunner
from dbutil.domain.errors import NestedTransactionError


def _count(connection: Connection) -> int:
  value = connection.execute(text('SELECT COUNT(*) FROM users')).scalar_one()
  connection.rollback()
  return value


def test_returns_callback_result_and_commits(connection: Connection, users_table: str) -> None:
  def insert(conn: Connection) -> str:
    conn.execute(text("INSERT INTO users (id, name) VALUES (1, 'ada')"))
    return 'done'

  result = TransactionRunner().run(connection, insert)

  assert result == 'done'
  assert not connection.in_transaction()
  assert _count(connection) == 1


def test_rolls_back_and_propagates_failures(connection: Connection, users_table: str) -> None:
  def insert_then_fail(conn: Connection) -> None:
    conn.execute(text("INSERT INTO users (id, name) VALUES (1, 'ada')"))
    raise RuntimeError('boom')

  with pytest.raises(RuntimeError, match='boom'):
    TransactionRunner().run(connection, insert_then_fail)

  assert not connection.in_transaction()
  assert _count(connection) == 0


def test_refuses_to_nest(connection: Connection, users_table: str) -> None:
  connection.execute(text('SELECT 1'))
  assert connection.in_transaction()

  with pytest.raises(NestedTransactionError):
    TransactionRunner().run(connection, lambda conn: None)

  assert connection.in_transaction()
  connection.rollback()
