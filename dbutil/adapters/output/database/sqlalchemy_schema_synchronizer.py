"""Synchronize a declared schema against the live database, applying only the delta."""
from __future__ import annotations

import logging
import sqlite3
from contextlib import nullcontext
from typing import Callable, Iterable, Optional, Sequence, Union

from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy import MetaData
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError

from dbutil.adapters.output.database.sqlalchemy_transaction import TransactionRunner
from dbutil.domain.entities.schema_delta import InstallReport, SchemaOperation
from dbutil.domain.errors import SchemaApplyError
from dbutil.domain.services.schema_differ import SchemaDiffer, clone_metadata

LOG = logging.getLogger(__name__)

SchemaBuilder = Callable[[MetaData], object]

# MySQL: table, column, key name, foreign key name already exists.
MYSQL_ALREADY_EXISTS = frozenset({1050, 1060, 1061, 1826})
# PostgreSQL SQLSTATE: duplicate table/index, duplicate column, duplicate object.
POSTGRES_ALREADY_EXISTS = frozenset({'42P07', '42701', '42710'})
SQLITE_ALREADY_EXISTS = ('already exists', 'duplicate column name')


def is_already_exists_error(error: DBAPIError) -> bool:
  """True when the driver reports that the object being created already exists."""
  orig = getattr(error, 'orig', None)
  if orig is None:
    return False

  # MySQL drivers carry a numeric code; mysql-connector also sets a SQLSTATE.
  code = _mysql_error_code(orig)
  if code is not None:
    return code in MYSQL_ALREADY_EXISTS

  sqlstate = getattr(orig, 'pgcode', None) or getattr(orig, 'sqlstate', None)
  if sqlstate is not None:
    return sqlstate in POSTGRES_ALREADY_EXISTS

  if isinstance(orig, sqlite3.Error):
    message = str(orig).lower()
    return any(marker in message for marker in SQLITE_ALREADY_EXISTS)
  return False


def _mysql_error_code(orig: BaseException) -> Optional[int]:
  errno = getattr(orig, 'errno', None)
  if isinstance(errno, int):
    return errno
  args = getattr(orig, 'args', ())
  if args and isinstance(args[0], int):
    return args[0]
  return None


class SchemaSynchronizer:
  """Diff-and-apply installer for caller-declared schemas.

  ``install`` snapshots the live schema, lets each builder declare tables,
  columns, indexes and constraints on that snapshot, diffs it against an
  untouched copy and applies the additive operations one at a time within a
  single transaction. An operation failing because its object already exists
  is tolerated and recorded, so re-running an install is safe; any other
  failure aborts the remaining operations and the transaction.
  """

  def __init__(self, runner: Optional[TransactionRunner] = None, differ: Optional[SchemaDiffer] = None):
    self._runner = runner or TransactionRunner()
    self._differ = differ or SchemaDiffer()

  def install(
    self,
    connection: Connection,
    builders: Union[SchemaBuilder, Sequence[SchemaBuilder]],
  ) -> InstallReport:
    callbacks = [builders] if callable(builders) else list(builders)
    return self._runner.run(connection, lambda conn: self._install(conn, callbacks))

  def _install(self, connection: Connection, builders: Iterable[SchemaBuilder]) -> InstallReport:
    schema = MetaData()
    schema.reflect(bind=connection)
    origin = clone_metadata(schema)

    for builder in builders:
      builder(schema)

    delta = self._differ.diff(origin, schema)
    report = InstallReport()
    if delta.is_empty():
      LOG.debug('Schema already up to date')
      return report

    operations = Operations(MigrationContext.configure(connection=connection))
    for operation in delta:
      if self._apply(connection, operations, operation):
        report.applied.append(operation)
      else:
        report.tolerated.append(operation)

    LOG.info(
      'Schema install finished',
      extra={'applied': len(report.applied), 'tolerated': len(report.tolerated)},
    )
    return report

  def _apply(self, connection: Connection, operations: Operations, operation: SchemaOperation) -> bool:
    try:
      with _savepoint(connection):
        operations.invoke(operation.ddl)
    except DBAPIError as exc:
      if is_already_exists_error(exc):
        LOG.info('Tolerated existing object', extra={'operation': operation.describe()})
        return False
      raise SchemaApplyError(f'Failed to {operation.describe()}: {exc}', operation) from exc
    except NotImplementedError as exc:
      raise SchemaApplyError(
        f'Failed to {operation.describe()}: not supported by {connection.dialect.name}', operation
      ) from exc

    LOG.info('Applied schema operation', extra={'operation': operation.describe()})
    return True


def _savepoint(connection: Connection):
  # A failed statement poisons the whole PostgreSQL transaction unless it is
  # isolated in a savepoint. MySQL commits DDL implicitly, which would drop
  # the savepoint, and pysqlite does not transact DDL.
  if connection.dialect.name == 'postgresql':
    return connection.begin_nested()
  return nullcontext()
