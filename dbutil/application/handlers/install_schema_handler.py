"""Application handler that orchestrates schema installs."""
from __future__ import annotations

import logging
import time

from dbutil.adapters.output.database.sqlalchemy_advisory_lock import AdvisoryLock
from dbutil.adapters.output.database.sqlalchemy_engine_factory import SqlAlchemyEngineFactory
from dbutil.adapters.output.database.sqlalchemy_schema_synchronizer import SchemaSynchronizer
from dbutil.application.commands.install_schema_command import InstallSchemaCommand
from dbutil.application.handlers.profile_lookup_handler import ProfileLookupHandler
from dbutil.application.queries.install_result import InstallResult
from dbutil.domain.value_objects.connection_profile import Intent

LOG = logging.getLogger(__name__)


class InstallSchemaHandler:
  """Installs declared schemas on the primary, one installer per database at a time."""

  def __init__(
    self,
    profiles: ProfileLookupHandler,
    engine_factory: SqlAlchemyEngineFactory,
    lock: AdvisoryLock,
    synchronizer: SchemaSynchronizer,
  ):
    self._profiles = profiles
    self._engine_factory = engine_factory
    self._lock = lock
    self._synchronizer = synchronizer

  def handle(self, command: InstallSchemaCommand) -> InstallResult:
    start = time.perf_counter()
    profile = self._profiles.handle(command.database, Intent.WRITE)
    engine = self._engine_factory.engine_for(profile)

    with engine.connect() as connection:
      report = self._lock.with_lock(
        connection,
        command.lock_name,
        command.lock_timeout,
        lambda conn: self._synchronizer.install(conn, command.builders),
      )

    execution_time = time.perf_counter() - start
    LOG.info(
      'Installed schema',
      extra={'database_name': command.database, 'applied': len(report.applied), 'tolerated': len(report.tolerated)},
    )
    return InstallResult.from_report(command.database, report, execution_time)
