"""CLI adapter for interacting with the database service."""
from __future__ import annotations

from typing import Optional, Tuple

import click

from dbutil.application.commands.install_schema_command import InstallSchemaCommand
from dbutil.domain.errors import DatabaseUtilError
from dbutil.domain.value_objects.connection_profile import Intent
from dbutil.ports.input.database_service import DatabaseService
from dbutil.ports.input.result_presenter import ResultPresenter


class CLIAdapter:
  def __init__(self, database_service: DatabaseService, presenter: ResultPresenter, lock_timeout: int = 10):
    self._database_service = database_service
    self._presenter = presenter
    self._lock_timeout = lock_timeout

  def build(self) -> click.Group:
    cli = click.Group(help='Database access utilities.')

    @cli.command('profile')
    @click.argument('name')
    @click.option('--intent', type=click.Choice(['read', 'write']), default=None,
                  help='Route to the replica (read) or the primary (write)')
    def profile(name: str, intent: Optional[str]) -> None:
      """Show the resolved connection profile for a logical database."""
      try:
        resolved = self._database_service.connection_profile(name, Intent(intent) if intent else None)
      except DatabaseUtilError as exc:
        raise click.ClickException(self._presenter.present_error(exc))
      click.echo(self._presenter.present_profile(resolved))

    @cli.command('install')
    @click.argument('name')
    @click.argument('builders', nargs=-1, required=True)
    @click.option('--timeout', default=self._lock_timeout, type=click.IntRange(0), show_default=True,
                  help='Seconds to wait for the install lock')
    def install(name: str, builders: Tuple[str, ...], timeout: int) -> None:
      """Apply the schema declared by BUILDERS (module:callable) to NAME.

      Examples:

        cli install users myapp.schema:declare_users myapp.schema:declare_audit
      """
      try:
        command = InstallSchemaCommand.from_references(name, builders, lock_timeout=timeout)
      except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint='BUILDERS')
      try:
        result = self._database_service.install_schema(command)
      except DatabaseUtilError as exc:
        raise click.ClickException(self._presenter.present_error(exc))
      click.echo(self._presenter.present(result))

    return cli

  def run(self) -> None:
    self.build()()
