"""CLI entrypoint for dbutil."""
from __future__ import annotations

import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dbutil.adapters.input.cli.cli_adapter import CLIAdapter
from dbutil.adapters.presentation.json_presenter import JsonPresenter
from dbutil.adapters.presentation.text_presenter import TextPresenter
from dbutil.common.config import get_settings
from dbutil.common.container import create_database_service


def main() -> None:
  settings = get_settings()
  database_service = create_database_service()
  presenter = JsonPresenter() if settings.output_format == 'json' else TextPresenter()
  CLIAdapter(database_service, presenter, lock_timeout=settings.lock_timeout_seconds).run()


if __name__ == '__main__':
  main()
