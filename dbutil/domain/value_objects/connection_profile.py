"""Value objects describing how to reach a logical database."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.engine import URL, make_url

DEFAULT_PORT = 3306
DEFAULT_DRIVER = 'mysql+pymysql'
DEFAULT_CHARSET = 'utf8mb4'


class Intent(str, Enum):
  READ = 'read'
  WRITE = 'write'


class DeploymentStage(str, Enum):
  DEVELOPMENT = 'development'
  PRODUCTION = 'production'


@dataclass(frozen=True)
class ConnectionProfile:
  """Immutable connection parameters for one logical database."""

  name: str
  host: str
  user: str
  password: Optional[str]
  port: int
  database: str
  is_replica: bool = False
  driver: str = DEFAULT_DRIVER
  charset: Optional[str] = DEFAULT_CHARSET

  def __post_init__(self) -> None:
    if not self.name:
      raise ValueError('name is required')
    if not self.database:
      raise ValueError('database is required')
    if self.port <= 0:
      raise ValueError('port must be positive')

  def url(self) -> URL:
    """Build the SQLAlchemy URL for this profile."""
    query = {'charset': self.charset} if self.charset else {}
    return URL.create(
      drivername=self.driver,
      username=self.user,
      password=self.password,
      host=self.host,
      port=self.port,
      database=self.database,
      query=query,
    )

  def as_dict(self, mask_password: bool = True) -> dict:
    password = self.password
    if mask_password and password:
      password = '***'
    return {
      'name': self.name,
      'host': self.host,
      'user': self.user,
      'password': password,
      'port': self.port,
      'database': self.database,
      'is_replica': self.is_replica,
      'driver': self.driver,
    }

  @staticmethod
  def from_url(name: str, url: str, is_replica: bool = False) -> 'ConnectionProfile':
    if not url:
      raise ValueError('Database URL is required')

    parsed = make_url(url)
    return ConnectionProfile(
      name=name,
      host=parsed.host or '',
      user=parsed.username or '',
      password=parsed.password,
      port=parsed.port or DEFAULT_PORT,
      database=parsed.database or '',
      is_replica=is_replica,
      driver=parsed.drivername,
      charset=parsed.query.get('charset'),
    )
