"""
Application configuration, constants, and default values.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# ── Market data ───────────────────────────────────────────────
DEFAULT_SYMBOL = "SLV"
ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"
COMPACT_ROWS = 100                     # rows in an outputsize=compact response
DEFAULT_HTTP_TIMEOUT = 10.0

# ── Persistence ───────────────────────────────────────────────
DEFAULT_DB_PATH = "slv_calls.db"

# ── Strategy defaults (seeded into the settings table) ────────
DEFAULT_SHARES_OWNED = 100
DEFAULT_PREMIUM_PCT = 3.0

# ── Reporting ─────────────────────────────────────────────────
STATUS_PRICE_ROWS = 30
REFRESH_DAYS = 365
HISTORY_DAYS = 90
MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class AppConfig:
    """Process-wide settings read from the environment."""
    api_key: str = "demo"
    symbol: str = DEFAULT_SYMBOL
    db_path: str = DEFAULT_DB_PATH
    http_timeout: float = DEFAULT_HTTP_TIMEOUT


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """Build an ``AppConfig`` from environment variables (and ``.env``).

    Variables already set in the process environment win over the file.
    """
    load_dotenv(env_file)
    return AppConfig(
        api_key=os.getenv("ALPHA_VANTAGE_KEY", "demo"),
        symbol=os.getenv("SLV_SYMBOL", DEFAULT_SYMBOL),
        db_path=os.getenv("SLV_DB_PATH", DEFAULT_DB_PATH),
        http_timeout=float(os.getenv("SLV_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)),
    )
