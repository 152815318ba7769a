"""Simple dependency wiring helpers."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dbutil.adapters.output.database.sqlalchemy_advisory_lock import AdvisoryLock
from dbutil.adapters.output.database.sqlalchemy_engine_factory import SqlAlchemyEngineFactory
from dbutil.adapters.output.database.sqlalchemy_schema_synchronizer import SchemaSynchronizer
from dbutil.adapters.output.database.sqlalchemy_transaction import TransactionRunner
from dbutil.application.handlers.install_schema_handler import InstallSchemaHandler
from dbutil.application.handlers.profile_lookup_handler import ProfileLookupHandler
from dbutil.application.services.database_service_impl import DatabaseServiceImpl
from dbutil.common.config import get_settings
from dbutil.common.log_config import configure_logging
from dbutil.common.process_cache import ProcessCache, process_cache
from dbutil.domain.services.connection_resolver import ConnectionResolver
from dbutil.ports.output.resolution_strategy import ResolutionStrategy


def build_database_service(
  resolver: ConnectionResolver,
  engine_factory: SqlAlchemyEngineFactory,
  cache: Optional[ProcessCache] = None,
) -> DatabaseServiceImpl:
  profiles = ProfileLookupHandler(resolver, cache if cache is not None else process_cache)
  install_handler = InstallSchemaHandler(
    profiles=profiles,
    engine_factory=engine_factory,
    lock=AdvisoryLock(),
    synchronizer=SchemaSynchronizer(TransactionRunner()),
  )
  return DatabaseServiceImpl(install_handler, profiles)


@lru_cache(maxsize=1)
def create_database_service(strategy: Optional[ResolutionStrategy] = None) -> DatabaseServiceImpl:
  settings = get_settings()
  configure_logging(settings.log_level)
  resolver = ConnectionResolver(strategy=strategy, driver=settings.driver)
  return build_database_service(resolver, SqlAlchemyEngineFactory(pool_pre_ping=True))
