"""Shared fixtures: an in-memory SQLite engine and a seeded users table."""
from __future__ import annotations

from typing import Iterator

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool


@pytest.fixture
def engine() -> Iterator[Engine]:
  engine = create_engine(
    'sqlite://',
    poolclass=StaticPool,
    connect_args={'check_same_thread': False},
  )
  try:
    yield engine
  finally:
    engine.dispose()


@pytest.fixture
def connection(engine: Engine) -> Iterator[Connection]:
  with engine.connect() as connection:
    yield connection


@pytest.fixture
def users_table(connection: Connection) -> str:
  connection.execute(text('CREATE TABLE users (id INTEGER PRIMARY KEY, name VARCHAR(50), data TEXT)'))
  connection.commit()
  return 'users'
