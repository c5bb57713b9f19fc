"""Centralised logging configuration.

Importing this module applies the project-wide format once. The level comes
from ``LOG_LEVEL`` (default ``INFO``). Other modules should simply import
`logging` and call `logging.getLogger(__name__)`.
"""

import logging
import os

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format=LOG_FORMAT,
)
# pymongo logs every heartbeat at DEBUG
logging.getLogger("pymongo").setLevel(logging.WARNING)

__all__ = ["logging", "LOG_FORMAT"]
