"""Implementation of the database service port."""
from __future__ import annotations

from typing import Optional

from dbutil.application.commands.install_schema_command import InstallSchemaCommand
from dbutil.application.handlers.install_schema_handler import InstallSchemaHandler
from dbutil.application.handlers.profile_lookup_handler import ProfileLookupHandler
from dbutil.application.queries.install_result import InstallResult
from dbutil.domain.value_objects.connection_profile import ConnectionProfile, Intent
from dbutil.ports.input.database_service import DatabaseService


class DatabaseServiceImpl(DatabaseService):
  """Concrete implementation that delegates to the appropriate handler."""

  def __init__(
    self,
    install_handler: InstallSchemaHandler,
    profile_handler: ProfileLookupHandler,
  ) -> None:
    self._install_handler = install_handler
    self._profile_handler = profile_handler

  def install_schema(self, command: InstallSchemaCommand) -> InstallResult:
    return self._install_handler.handle(command)

  def connection_profile(self, name: str, intent: Optional[Intent] = None) -> ConnectionProfile:
    return self._profile_handler.handle(name, intent)
