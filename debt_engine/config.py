"""Centralized configuration for the debt engine.

Business defaults live here as module constants. Deployment settings are read
from environment variables so the CLI and the web app can be pointed at a
different database or log level without code changes.
"""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from typing import Optional

# =============================================================================
# LOAN DEFAULTS
# =============================================================================

DEFAULT_INSTALLMENT_PERIOD = "monthly"

# Balances at or below this amount count as fully repaid
BALANCE_EPSILON = Decimal("0.01")

# =============================================================================
# DISPLAY FORMATS
# =============================================================================

DATE_FORMAT_STORAGE = "%Y-%m-%d"

DATE_FORMAT_DISPLAY = "%Y-%m-%d"

# Rows printed or returned before a schedule is truncated
MAX_SCHEDULE_ROWS = 120

# =============================================================================
# ENVIRONMENT
# =============================================================================

DEFAULT_DATABASE_URL = "sqlite:///debt_data.sqlite3"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def database_url() -> str:
    return os.environ.get("DEBT_DATABASE_URL") or DEFAULT_DATABASE_URL


def secret_key() -> str:
    return os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")


def log_level() -> int:
    name = os.environ.get("DEBT_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: Optional[int] = None) -> None:
    """Configure root logging for the CLI and the web app."""
    logging.basicConfig(level=level if level is not None else log_level(), format=LOG_FORMAT)
    if level is not None:
        logging.getLogger().setLevel(level)
