"""JSON presenter implementation."""
from __future__ import annotations

import json

from dbutil.application.queries.install_result import InstallResult
from dbutil.domain.value_objects.connection_profile import ConnectionProfile
from dbutil.ports.input.result_presenter import ResultPresenter


class JsonPresenter(ResultPresenter):
  def present(self, result: InstallResult) -> str:
    payload = {
      'database': result.database,
      'applied': result.applied,
      'tolerated': result.tolerated,
      'execution_time': result.execution_time,
      'timestamp': result.timestamp.isoformat(),
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)

  def present_profile(self, profile: ConnectionProfile) -> str:
    return json.dumps(profile.as_dict(), ensure_ascii=False, indent=2)

  def present_error(self, error: Exception) -> str:
    return json.dumps({'status': 'error', 'error': str(error)}, ensure_ascii=False, indent=2)
