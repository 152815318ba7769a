"""Application-level configuration utilities."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from dbutil.domain.value_objects.connection_profile import DEFAULT_DRIVER


@dataclass(frozen=True)
class Settings:
  """Immutable application settings loaded from environment variables."""

  log_level: str = 'INFO'
  lock_timeout_seconds: int = 10
  driver: str = DEFAULT_DRIVER
  api_host: str = '0.0.0.0'
  api_port: int = 8000
  output_format: str = 'text'


def _int_from_env(name: str, default: int) -> int:
  from os import getenv

  raw = getenv(name)
  if not raw:
    return default
  try:
    return int(raw)
  except ValueError as exc:
    raise ValueError(f'{name} must be an integer, got {raw!r}') from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings from environment variables once per process."""
  env_path = Path(__file__).resolve().parents[2] / '.env'
  if env_path.exists():
    load_dotenv(env_path)
  else:
    load_dotenv()

  from os import getenv

  return Settings(
    log_level=getenv('DBUTIL_LOG_LEVEL', 'INFO').upper(),
    lock_timeout_seconds=_int_from_env('DBUTIL_LOCK_TIMEOUT', 10),
    driver=getenv('DBUTIL_DB_DRIVER') or DEFAULT_DRIVER,
    api_host=getenv('DBUTIL_API_HOST', '0.0.0.0'),
    api_port=_int_from_env('DBUTIL_API_PORT', 8000),
    output_format=getenv('DBUTIL_OUTPUT_FORMAT', 'text').lower(),
  )
