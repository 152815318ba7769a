"""Logging setup for the package loggers."""
from __future__ import annotations

import logging

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


class PackageStreamHandler(logging.StreamHandler):
  """Stream handler installed by `configure_logging`."""


def configure_logging(level: str = 'INFO') -> logging.Logger:
  """Attach one stream handler to the ``dbutil`` logger; safe to call repeatedly."""
  logger = logging.getLogger('dbutil')
  logger.setLevel(level)
  if not any(isinstance(handler, PackageStreamHandler) for handler in logger.handlers):
    handler = PackageStreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
  return logger
