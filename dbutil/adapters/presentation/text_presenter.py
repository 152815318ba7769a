"""Plain text presenter."""
from __future__ import annotations

from dbutil.application.queries.install_result import InstallResult
from dbutil.domain.value_objects.connection_profile import ConnectionProfile
from dbutil.ports.input.result_presenter import ResultPresenter


class TextPresenter(ResultPresenter):
  def present(self, result: InstallResult) -> str:
    lines = [
      '=' * 60,
      f'INSTALL {result.database}',
      '=' * 60,
    ]
    if not result.applied and not result.tolerated:
      lines.append('Schema already up to date')
    for operation in result.applied:
      lines.append(f'+ {operation}')
    for operation in result.tolerated:
      lines.append(f'= {operation} (already exists)')
    lines.append('')
    lines.append(f'Execution time: {result.execution_time:.2f}s')
    return '\n'.join(lines)

  def present_profile(self, profile: ConnectionProfile) -> str:
    lines = [f'{key}: {value}' for key, value in profile.as_dict().items()]
    return '\n'.join(lines)

  def present_error(self, error: Exception) -> str:
    return f'ERROR: {error}'
