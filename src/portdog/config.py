"""
config.py - Runtime settings for portdog.

Only diagnostics are configurable. Socket and process state is always read
live from the OS, so nothing here changes what a command reports.
"""

from __future__ import annotations

import os

__version__ = "0.1.0"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Placeholder shown where the OS gives us no owner or no executable path
UNKNOWN = "<unknown>"


class Settings:
    """Settings populated from environment variables."""

    log_level: str = os.getenv("PORTDOG_LOG_LEVEL", "WARNING")


settings = Settings()
