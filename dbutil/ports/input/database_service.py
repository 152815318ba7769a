"""Input port defining the database service contract."""
from __future__ import annotations

from typing import Optional, Protocol

from dbutil.application.commands.install_schema_command import InstallSchemaCommand
from dbutil.application.queries.install_result import InstallResult
from dbutil.domain.value_objects.connection_profile import ConnectionProfile, Intent


class DatabaseService(Protocol):
  def install_schema(self, command: InstallSchemaCommand) -> InstallResult:
    ...

  def connection_profile(self, name: str, intent: Optional[Intent] = None) -> ConnectionProfile:
    ...
