"""Domain service computing the additive difference between two schemas."""
from __future__ import annotations

from typing import Dict, Hashable, Iterable, List, Tuple

from alembic.operations import ops
from sqlalchemy import ForeignKeyConstraint, Index, MetaData, Table, UniqueConstraint

from dbutil.domain.entities.schema_delta import OperationKind, SchemaDelta, SchemaOperation


def clone_metadata(source: MetaData) -> MetaData:
  """Deep-copy every table of `source` into a fresh `MetaData`."""
  copy = MetaData(schema=source.schema)
  for table in source.sorted_tables:
    table.to_metadata(copy)
  return copy


class SchemaDiffer:
  """Structural comparison of an origin schema with a declared target.

  Only additive operations are produced: new tables (each followed by its
  indexes), then for tables present in both schemas any new columns,
  indexes, unique constraints and foreign keys. Dropped or altered objects
  in the target are ignored.
  """

  def diff(self, origin: MetaData, target: MetaData) -> SchemaDelta:
    operations: List[SchemaOperation] = []

    tables = target.sorted_tables
    for table in tables:
      if table.key not in origin.tables:
        operations.extend(self._create_table(table))
    for table in tables:
      existing = origin.tables.get(table.key)
      if existing is not None:
        operations.extend(self._alter_table(existing, table))

    return SchemaDelta(operations=tuple(operations))

  def _create_table(self, table: Table) -> List[SchemaOperation]:
    operations = [
      SchemaOperation(
        kind=OperationKind.CREATE_TABLE,
        table=table.name,
        ddl=ops.CreateTableOp.from_table(table),
      )
    ]
    for index in _sorted_indexes(table.indexes):
      operations.append(self._create_index(table, index))
    return operations

  def _alter_table(self, existing: Table, table: Table) -> List[SchemaOperation]:
    operations: List[SchemaOperation] = []

    known_columns = {column.name for column in existing.columns}
    for column in table.columns:
      if column.name in known_columns:
        continue
      operations.append(
        SchemaOperation(
          kind=OperationKind.ADD_COLUMN,
          table=table.name,
          target=column.name,
          ddl=ops.AddColumnOp.from_column_and_tablename(table.schema, table.name, column),
        )
      )

    known_indexes = {_index_key(index) for index in existing.indexes}
    for index in _sorted_indexes(table.indexes):
      if _index_key(index) not in known_indexes:
        operations.append(self._create_index(table, index))

    known_uniques = _constraint_keys(existing, UniqueConstraint)
    for key, constraint in _constraints(table, UniqueConstraint):
      if key in known_uniques:
        continue
      operations.append(
        SchemaOperation(
          kind=OperationKind.CREATE_UNIQUE_CONSTRAINT,
          table=table.name,
          target=constraint.name,
          ddl=ops.CreateUniqueConstraintOp.from_constraint(constraint),
        )
      )

    known_foreign_keys = _constraint_keys(existing, ForeignKeyConstraint)
    for key, constraint in _constraints(table, ForeignKeyConstraint):
      if key in known_foreign_keys:
        continue
      operations.append(
        SchemaOperation(
          kind=OperationKind.CREATE_FOREIGN_KEY,
          table=table.name,
          target=constraint.name,
          ddl=ops.CreateForeignKeyOp.from_constraint(constraint),
        )
      )

    return operations

  @staticmethod
  def _create_index(table: Table, index: Index) -> SchemaOperation:
    return SchemaOperation(
      kind=OperationKind.CREATE_INDEX,
      table=table.name,
      target=index.name,
      ddl=ops.CreateIndexOp.from_index(index),
    )


def _column_names(columns: Iterable) -> Tuple[str, ...]:
  return tuple(getattr(column, 'name', str(column)) for column in columns)


def _index_key(index: Index) -> Hashable:
  # Unnamed indexes are matched on their shape.
  if index.name:
    return index.name
  return (_column_names(index.expressions), bool(index.unique))


def _sorted_indexes(indexes: Iterable[Index]) -> List[Index]:
  return sorted(indexes, key=lambda index: str(_index_key(index)))


def _constraint_key(constraint) -> Hashable:
  if isinstance(constraint, ForeignKeyConstraint):
    targets = [element.target_fullname.rsplit('.', 1) for element in constraint.elements]
    return (
      _column_names(constraint.columns),
      tuple(target[0] for target in targets),
      tuple(target[-1] for target in targets),
    )
  return _column_names(constraint.columns)


def _constraints(table: Table, kind: type) -> List[Tuple[Hashable, object]]:
  found: Dict[Hashable, object] = {}
  for constraint in table.constraints:
    if isinstance(constraint, kind):
      found.setdefault(_constraint_key(constraint), constraint)
  return sorted(found.items(), key=lambda item: str(item[0]))


def _constraint_keys(table: Table, kind: type) -> set:
  return {key for key, _ in _constraints(table, kind)}
