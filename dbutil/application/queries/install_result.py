"""Application-level install result representation."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

from dbutil.domain.entities.schema_delta import InstallReport


def _utcnow() -> datetime:
  return datetime.now(tz=timezone.utc)


@dataclass
class InstallResult:
  database: str
  applied: List[str] = field(default_factory=list)
  tolerated: List[str] = field(default_factory=list)
  execution_time: float = 0.0
  timestamp: datetime = field(default_factory=_utcnow)

  @staticmethod
  def from_report(database: str, report: InstallReport, execution_time: float) -> 'InstallResult':
    return InstallResult(
      database=database,
      applied=[operation.describe() for operation in report.applied],
      tolerated=[operation.describe() for operation in report.tolerated],
      execution_time=execution_time,
    )
