"""Domain entities describing a computed schema delta and its application."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple


class OperationKind(str, Enum):
  CREATE_TABLE = 'create_table'
  ADD_COLUMN = 'add_column'
  CREATE_INDEX = 'create_index'
  CREATE_UNIQUE_CONSTRAINT = 'create_unique_constraint'
  CREATE_FOREIGN_KEY = 'create_foreign_key'


@dataclass(frozen=True)
class SchemaOperation:
  """One additive DDL operation; `ddl` is the executable migration operation."""

  kind: OperationKind
  table: str
  target: Optional[str] = None
  ddl: Any = field(default=None, compare=False, repr=False)

  def describe(self) -> str:
    if self.target:
      return f'{self.kind.value} {self.table}.{self.target}'
    return f'{self.kind.value} {self.table}'


@dataclass(frozen=True)
class SchemaDelta:
  """Ordered operations needed to bring the origin schema to the target."""

  operations: Tuple[SchemaOperation, ...] = ()

  def __iter__(self) -> Iterator[SchemaOperation]:
    return iter(self.operations)

  def __len__(self) -> int:
    return len(self.operations)

  def is_empty(self) -> bool:
    return not self.operations

  def tables_created(self) -> List[str]:
    return [op.table for op in self.operations if op.kind == OperationKind.CREATE_TABLE]


@dataclass
class InstallReport:
  """Outcome of a schema install: what ran and which conflicts were tolerated."""

  applied: List[SchemaOperation] = field(default_factory=list)
  tolerated: List[SchemaOperation] = field(default_factory=list)

  @property
  def is_noop(self) -> bool:
    return not self.applied and not self.tolerated
