"""Resolve connection parameters for a logical database from the environment."""
from __future__ import annotations

import logging
import os
from contextvars import ContextVar
from typing import Callable, Mapping, Optional, Sequence

from dbutil.domain.errors import ConfigurationError
from dbutil.domain.value_objects.connection_profile import (
  DEFAULT_DRIVER,
  DEFAULT_PORT,
  ConnectionProfile,
  DeploymentStage,
  Intent,
)
from dbutil.ports.output.resolution_strategy import ResolutionStrategy

LOG = logging.getLogger(__name__)

# Method of the inbound request being served, published by the HTTP adapter.
current_request_method: ContextVar[Optional[str]] = ContextVar('current_request_method', default=None)

SAFE_METHODS = frozenset({'GET', 'HEAD', 'OPTIONS'})
PRODUCTION_STAGES = frozenset({'qa', 'staging', 'production'})
STAGE_VARIABLES = ('_DOCKER_ENV', 'ENV')

# Logical names whose databases predate the {name}_{stage} convention.
LEGACY_DATABASE_NAMES = {
  'go1': {DeploymentStage.DEVELOPMENT: 'dev_go1', DeploymentStage.PRODUCTION: 'gc_go1'},
}


def _ambient_request_method() -> str:
  return current_request_method.get() or 'GET'


class ConnectionResolver:
  """Turns a logical database name and an intent into a `ConnectionProfile`.

  Resolution is a pure function of the environment mapping and the call-time
  intent; nothing is cached here.
  """

  def __init__(
    self,
    environ: Optional[Mapping[str, str]] = None,
    strategy: Optional[ResolutionStrategy] = None,
    request_method: Optional[Callable[[], str]] = None,
    driver: str = DEFAULT_DRIVER,
  ) -> None:
    self._environ = environ if environ is not None else os.environ
    self._strategy = strategy
    self._request_method = request_method or _ambient_request_method
    self._driver = driver

  def resolve(self, name: str, intent: Optional[Intent] = None) -> ConnectionProfile:
    if not name:
      raise ValueError('Logical database name is required')

    if self._strategy is not None:
      return self._strategy(name)

    prefix = f'{name.upper()}_DB'
    host = self._first([f'{prefix}_HOST', 'RDS_DB_HOST', 'DEV_DB_HOST'])
    user = self._first([f'{prefix}_USERNAME', 'RDS_DB_USERNAME', 'DEV_DB_USERNAME'])
    password = self._first([f'{prefix}_PASSWORD', 'RDS_DB_PASSWORD', 'DEV_DB_PASSWORD'])

    is_replica = False
    if self._wants_replica(intent):
      replica_host = self._first([f'{prefix}_SLAVE', 'RDS_DB_SLAVE', 'DEV_DB_SLAVE'])
      if replica_host:
        host = replica_host
        is_replica = True
      user = self._first([f'{prefix}_USERNAME_SLAVE', 'RDS_DB_USERNAME_SLAVE', 'DEV_DB_USERNAME_SLAVE']) or user
      password = self._first([f'{prefix}_PASSWORD_SLAVE', 'RDS_DB_PASSWORD_SLAVE', 'DEV_DB_PASSWORD_SLAVE']) or password

    if not host:
      raise ConfigurationError(
        f'No database host configured for "{name}"',
        candidates=[f'{prefix}_HOST', 'RDS_DB_HOST', 'DEV_DB_HOST'],
      )
    if not user:
      raise ConfigurationError(
        f'No database user configured for "{name}"',
        candidates=[f'{prefix}_USERNAME', 'RDS_DB_USERNAME', 'DEV_DB_USERNAME'],
      )

    raw_port = self._first([f'{prefix}_PORT', 'RDS_DB_PORT']) or str(DEFAULT_PORT)
    try:
      port = int(raw_port)
    except ValueError as exc:
      raise ConfigurationError(
        f'Invalid database port {raw_port!r} for "{name}"',
        candidates=[f'{prefix}_PORT', 'RDS_DB_PORT'],
      ) from exc

    database = self._first([f'{prefix}_NAME']) or self.database_name(name)

    LOG.debug(
      'Resolved connection profile',
      extra={'database_name': name, 'db_host': host, 'replica': is_replica},
    )
    return ConnectionProfile(
      name=name,
      host=host,
      user=user,
      password=password,
      port=port,
      database=database,
      is_replica=is_replica,
      driver=self._driver,
    )

  def stage(self) -> DeploymentStage:
    token = self._first(STAGE_VARIABLES)
    if token in PRODUCTION_STAGES:
      return DeploymentStage.PRODUCTION
    return DeploymentStage.DEVELOPMENT

  def database_name(self, name: str) -> str:
    """Database name derived from the logical name and the deployment stage."""
    stage = self.stage()
    legacy = LEGACY_DATABASE_NAMES.get(name)
    if legacy:
      return legacy[stage]
    suffix = 'prod' if stage == DeploymentStage.PRODUCTION else 'dev'
    return f'{name}_{suffix}'

  def effective_intent(self, intent: Optional[Intent] = None) -> Intent:
    """The explicit intent, else the one implied by the ambient request method."""
    if intent is not None:
      return intent
    if self._request_method().upper() in SAFE_METHODS:
      return Intent.READ
    return Intent.WRITE

  def _wants_replica(self, intent: Optional[Intent]) -> bool:
    return self.effective_intent(intent) == Intent.READ

  def _first(self, names: Sequence[str]) -> Optional[str]:
    for candidate in names:
      value = self._environ.get(candidate)
      if value:
        return value
    return None
