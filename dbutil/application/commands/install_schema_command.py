"""Command object representing a schema install request."""
from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Callable, Iterable, Tuple

from sqlalchemy import MetaData

SchemaBuilder = Callable[[MetaData], object]


@dataclass(frozen=True)
class InstallSchemaCommand:
  database: str
  builders: Tuple[SchemaBuilder, ...]
  lock_timeout: int = 10

  def __post_init__(self) -> None:
    if not self.database:
      raise ValueError('database is required')
    if not self.builders:
      raise ValueError('at least one schema builder is required')
    if not all(callable(builder) for builder in self.builders):
      raise ValueError('schema builders must be callable')
    if self.lock_timeout < 0:
      raise ValueError('lock_timeout must not be negative')

  @property
  def lock_name(self) -> str:
    return f'install:{self.database}'

  @staticmethod
  def from_references(database: str, references: Iterable[str], lock_timeout: int = 10) -> 'InstallSchemaCommand':
    """Build a command from ``module:callable`` builder references."""
    return InstallSchemaCommand(
      database=database,
      builders=tuple(load_builder(reference) for reference in references),
      lock_timeout=lock_timeout,
    )


def load_builder(reference: str) -> SchemaBuilder:
  module_name, _, attribute = reference.partition(':')
  if not module_name or not attribute:
    raise ValueError(f'Builder reference must look like "module:callable", got {reference!r}')

  try:
    module = importlib.import_module(module_name)
  except ImportError as exc:
    raise ValueError(f'Cannot import builder module {module_name!r}: {exc}') from exc

  target = module
  for part in attribute.split('.'):
    try:
      target = getattr(target, part)
    except AttributeError as exc:
      raise ValueError(f'{reference!r} does not name an attribute of {module_name!r}') from exc

  if not callable(target):
    raise ValueError(f'{reference!r} is not callable')
  return target
