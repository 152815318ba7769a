"""API server entrypoint."""
from __future__ import annotations

import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import uvicorn

from dbutil.adapters.input.api.fastapi_adapter import FastAPIAdapter
from dbutil.common.config import get_settings
from dbutil.common.container import create_database_service


def get_app():
  database_service = create_database_service()
  adapter = FastAPIAdapter(database_service)
  return adapter.app


def main() -> None:
  settings = get_settings()
  uvicorn.run(get_app(), host=settings.api_host, port=settings.api_port)


if __name__ == '__main__':
  main()
