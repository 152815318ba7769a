"""Tests for update-or-insert merges."""
from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.engine import Connection

from dbutil.adapters.output.database.sqlalchemy_upserter import Upserter


def _rows(connection: Connection, sql: str) -> list:
  return [tuple(row) for row in connection.execute(text(sql))]


def test_inserts_when_no_row_matches(connection: Connection, users_table: str) -> None:
  affected = Upserter().merge(connection, 'users', {'id': 5}, {'name': 'x'})

  assert affected == 1
  assert _rows(connection, 'SELECT id, name FROM users') == [(5, 'x')]


def test_updates_only_given_fields_when_row_exists(connection: Connection, users_table: str) -> None:
  connection.execute(text("INSERT INTO users (id, name, data) VALUES (5, 'old', '{\"a\": 1}')"))

  affected = Upserter().merge(connection, 'users', {'id': 5}, {'name': 'x'})

  assert affected == 1
  assert _rows(connection, 'SELECT id, name, data FROM users') == [(5, 'x', '{"a": 1}')]


def test_merge_twice_keeps_a_single_row(connection: Connection, users_table: str) -> None:
  upserter = Upserter()
  upserter.merge(connection, 'users', {'id': 1}, {'name': 'first'})
  upserter.merge(connection, 'users', {'id': 1}, {'name': 'second'})

  assert _rows(connection, 'SELECT id, name FROM users') == [(1, 'second')]


def test_composite_keys(connection: Connection) -> None:
  connection.execute(text('CREATE TABLE memberships (user_id INTEGER, group_id INTEGER, role VARCHAR(20))'))
  upserter = Upserter()

  upserter.merge(connection, 'memberships', {'user_id': 1, 'group_id': 2}, {'role': 'member'})
  upserter.merge(connection, 'memberships', {'user_id': 1, 'group_id': 3}, {'role': 'member'})
  upserter.merge(connection, 'memberships', {'user_id': 1, 'group_id': 2}, {'role': 'owner'})

  assert _rows(connection, 'SELECT user_id, group_id, role FROM memberships ORDER BY group_id') == [
    (1, 2, 'owner'),
    (1, 3, 'member'),
  ]


def test_requires_key_columns(connection: Connection, users_table: str) -> None:
  with pytest.raises(ValueError):
    Upserter().merge(connection, 'users', {}, {'name': 'x'})
