"""Tests for environment-based connection resolution."""
from __future__ import annotations

from typing import Dict

import pytest

from dbutil.domain.errors import ConfigurationError
from dbutil.domain.services.connection_resolver import ConnectionResolver, current_request_method
from dbutil.domain.value_objects.connection_profile import ConnectionProfile, DeploymentStage, Intent

PRIMARY_ENV = {
  'USERS_DB_HOST': 'primary.local',
  'USERS_DB_USERNAME': 'app',
  'USERS_DB_PASSWORD': 'secret',
}

REPLICA_ENV = {
  **PRIMARY_ENV,
  'USERS_DB_SLAVE': 'replica.local',
  'USERS_DB_USERNAME_SLAVE': 'reader',
  'USERS_DB_PASSWORD_SLAVE': 'read-secret',
}


def _resolver(env: Dict[str, str], method: str = 'POST') -> ConnectionResolver:
  return ConnectionResolver(environ=env, request_method=lambda: method)


def test_resolves_primary_for_unsafe_methods() -> None:
  profile = _resolver(REPLICA_ENV, method='POST').resolve('users')

  assert profile.host == 'primary.local'
  assert profile.user == 'app'
  assert profile.password == 'secret'
  assert profile.port == 3306
  assert profile.database == 'users_dev'
  assert profile.is_replica is False


def test_get_requests_route_to_replica_credentials() -> None:
  profile = _resolver(REPLICA_ENV, method='GET').resolve('users')

  assert profile.host == 'replica.local'
  assert profile.user == 'reader'
  assert profile.password == 'read-secret'
  assert profile.is_replica is True


def test_write_intent_overrides_safe_request_method() -> None:
  profile = _resolver(REPLICA_ENV, method='GET').resolve('users', Intent.WRITE)

  assert profile.host == 'primary.local'
  assert profile.is_replica is False


def test_read_intent_overrides_unsafe_request_method() -> None:
  profile = _resolver(REPLICA_ENV, method='POST').resolve('users', Intent.READ)

  assert profile.host == 'replica.local'
  assert profile.user == 'reader'


def test_read_intent_falls_back_to_primary_when_replica_unset() -> None:
  profile = _resolver(PRIMARY_ENV).resolve('users', Intent.READ)

  assert profile.host == 'primary.local'
  assert profile.user == 'app'
  assert profile.password == 'secret'
  assert profile.is_replica is False


def test_generic_fallbacks_are_used_in_priority_order() -> None:
  env = {
    'USERS_DB_HOST': '',
    'RDS_DB_HOST': 'rds.local',
    'DEV_DB_HOST': 'dev.local',
    'DEV_DB_USERNAME': 'dev-user',
    'RDS_DB_PORT': '3307',
  }

  profile = _resolver(env).resolve('users')

  assert profile.host == 'rds.local'
  assert profile.user == 'dev-user'
  assert profile.password is None
  assert profile.port == 3307


def test_production_stage_changes_database_name() -> None:
  env = {**PRIMARY_ENV, 'ENV': 'staging'}
  resolver = _resolver(env)

  assert resolver.stage() == DeploymentStage.PRODUCTION
  assert resolver.resolve('users').database == 'users_prod'


def test_docker_env_takes_precedence_over_env() -> None:
  env = {**PRIMARY_ENV, '_DOCKER_ENV': 'production', 'ENV': 'local'}

  assert _resolver(env).resolve('users').database == 'users_prod'


def test_unrecognized_stage_is_development() -> None:
  env = {**PRIMARY_ENV, 'ENV': 'prod'}

  assert _resolver(env).resolve('users').database == 'users_dev'


@pytest.mark.parametrize('stage,expected', [(None, 'dev_go1'), ('production', 'gc_go1'), ('qa', 'gc_go1')])
def test_legacy_database_name(stage, expected) -> None:
  env = {'GO1_DB_HOST': 'h', 'GO1_DB_USERNAME': 'u'}
  if stage:
    env['ENV'] = stage

  assert _resolver(env).resolve('go1').database == expected


def test_explicit_database_name_wins() -> None:
  env = {**PRIMARY_ENV, 'USERS_DB_NAME': 'custom', 'ENV': 'production'}

  assert _resolver(env).resolve('users').database == 'custom'


def test_missing_host_raises_configuration_error() -> None:
  with pytest.raises(ConfigurationError) as excinfo:
    _resolver({'USERS_DB_USERNAME': 'app'}).resolve('users')

  assert 'USERS_DB_HOST' in excinfo.value.candidates


def test_missing_user_raises_configuration_error() -> None:
  with pytest.raises(ConfigurationError):
    _resolver({'USERS_DB_HOST': 'h'}).resolve('users')


def test_invalid_port_raises_configuration_error() -> None:
  with pytest.raises(ConfigurationError):
    _resolver({**PRIMARY_ENV, 'USERS_DB_PORT': 'abc'}).resolve('users')


def test_strategy_takes_precedence_and_receives_only_the_name() -> None:
  calls = []

  def strategy(name: str) -> ConnectionProfile:
    calls.append(name)
    return ConnectionProfile(name=name, host='custom', user='u', password=None, port=5432, database='x')

  resolver = ConnectionResolver(environ=REPLICA_ENV, strategy=strategy)

  profile = resolver.resolve('users', Intent.READ)

  assert calls == ['users']
  assert profile.host == 'custom'


def test_resolution_is_deterministic() -> None:
  resolver = _resolver(REPLICA_ENV, method='GET')

  assert resolver.resolve('users') == resolver.resolve('users')


def test_ambient_request_method_defaults_to_replica() -> None:
  resolver = ConnectionResolver(environ=REPLICA_ENV)

  assert resolver.resolve('users').is_replica is True

  token = current_request_method.set('DELETE')
  try:
    assert resolver.resolve('users').is_replica is False
  finally:
    current_request_method.reset(token)
