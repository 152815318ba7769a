"""Input port for formatting service results."""
from __future__ import annotations

from typing import Any, Protocol

from dbutil.application.queries.install_result import InstallResult
from dbutil.domain.value_objects.connection_profile import ConnectionProfile


class ResultPresenter(Protocol):
  def present(self, result: InstallResult) -> Any:
    ...

  def present_profile(self, profile: ConnectionProfile) -> Any:
    ...

  def present_error(self, error: Exception) -> Any:
    ...
