"""SQLite persistence for price bars, call positions and strategy settings."""

from __future__ import annotations
import logging
import os
import sqlite3
from datetime import datetime
from typing import Iterable, List, Optional

from .config import DEFAULT_DB_PATH, DEFAULT_PREMIUM_PCT, DEFAULT_SHARES_OWNED
from .core import (
    CallPosition, PriceBar, StrategyConfig, InvalidInput, OPEN, CLOSED,
)

logger = logging.getLogger(__name__)

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS prices (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT UNIQUE,
        close REAL,
        high REAL,
        low REAL,
        volume INTEGER,
        fetched_at TEXT
    );

    CREATE TABLE IF NOT EXISTS calls (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        strike_date TEXT,
        strike_price REAL,
        current_price REAL,
        premium REAL,
        premium_pct REAL,
        shares INTEGER,
        income REAL,
        status TEXT DEFAULT 'open',
        expires TEXT,
        created_at TEXT
    );

    CREATE TABLE IF NOT EXISTS settings (
        key TEXT PRIMARY KEY,
        value TEXT
    );
"""

_CALL_COLUMNS = (
    "id, strike_date, strike_price, current_price, premium, premium_pct, "
    "shares, income, status, expires, created_at"
)


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


class Store:
    """One SQLite connection per instance; not shared across threads."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self._conn = sqlite3.connect(db_path)
        self._init_db()

    def _init_db(self):
        with self._conn:
            self._conn.executescript(_SCHEMA)
            self._conn.executemany(
                "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)",
                [("shares_owned", str(DEFAULT_SHARES_OWNED)),
                 ("premium_pct", str(DEFAULT_PREMIUM_PCT))],
            )
        logger.debug("Store initialized at %s", self.db_path)

    def close(self):
        self._conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -- prices -------------------------------------------------------------

    def upsert_prices(self, bars: Iterable[PriceBar]) -> int:
        fetched_at = _now()
        rows = [(b.date, b.close, b.high, b.low, b.volume, fetched_at) for b in bars]
        with self._conn:
            self._conn.executemany(
                """
                INSERT OR REPLACE INTO prices (date, close, high, low, volume, fetched_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
        return len(rows)

    def recent_prices(self, n: int) -> List[PriceBar]:
        """Latest ``n`` bars in chronological order."""
        rows = self._conn.execute(
            "SELECT date, close, high, low, volume FROM prices ORDER BY date DESC LIMIT ?",
            (n,),
        ).fetchall()
        return [PriceBar(d, c, h, lo, v or 0) for d, c, h, lo, v in reversed(rows)]

    # -- calls --------------------------------------------------------------

    def insert_call(self, strike_date: str, strike_price: float, current_price: float,
                    premium: float, premium_pct: float, shares: int, income: float,
                    expires: str) -> CallPosition:
        with self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO calls (strike_date, strike_price, current_price, premium,
                                   premium_pct, shares, income, status, expires, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (strike_date, strike_price, current_price, premium, premium_pct,
                 shares, income, OPEN, expires, _now()),
            )
        logger.info("Opened call %s: strike %.2f exp %s", cur.lastrowid, strike_price, expires)
        return self.get_call(cur.lastrowid)

    def get_call(self, call_id: int) -> Optional[CallPosition]:
        row = self._conn.execute(
            f"SELECT {_CALL_COLUMNS} FROM calls WHERE id = ?", (call_id,)
        ).fetchone()
        return CallPosition(*row) if row else None

    def list_calls(self) -> List[CallPosition]:
        """All calls, newest first."""
        rows = self._conn.execute(
            f"SELECT {_CALL_COLUMNS} FROM calls ORDER BY created_at DESC, id DESC"
        ).fetchall()
        return [CallPosition(*row) for row in rows]

    def close_call(self, call_id: int) -> bool:
        """Mark a call closed.  Returns False when no such call exists."""
        with self._conn:
            cur = self._conn.execute(
                "UPDATE calls SET status = ? WHERE id = ?", (CLOSED, call_id)
            )
        return cur.rowcount > 0

    def total_closed_income(self) -> float:
        (total,) = self._conn.execute(
            "SELECT COALESCE(SUM(income), 0) FROM calls WHERE status = ?", (CLOSED,)
        ).fetchone()
        return float(total)

    # -- settings -----------------------------------------------------------

    def get_setting(self, key: str) -> Optional[float]:
        row = self._conn.execute(
            "SELECT value FROM settings WHERE key = ?", (key,)
        ).fetchone()
        return float(row[0]) if row else None

    def set_setting(self, key: str, value) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                (key, str(value)),
            )

    def load_strategy_config(self, defaults: StrategyConfig = StrategyConfig()) -> StrategyConfig:
        """Snapshot stored settings into a ``StrategyConfig``."""
        shares = self.get_setting("shares_owned")
        pct = self.get_setting("premium_pct")
        return StrategyConfig(
            shares_owned=int(shares) if shares is not None else defaults.shares_owned,
            premium_pct=pct if pct is not None else defaults.premium_pct,
            volatility=defaults.volatility,
            risk_free_rate=defaults.risk_free_rate,
        )

    def save_strategy_config(self, shares_owned: Optional[int] = None,
                             premium_pct: Optional[float] = None) -> StrategyConfig:
        """Write only the values that were given; return the stored result."""
        if shares_owned is not None:
            if shares_owned <= 0:
                raise InvalidInput(f"shares_owned must be positive, got {shares_owned}")
            self.set_setting("shares_owned", int(shares_owned))
        if premium_pct is not None:
            self.set_setting("premium_pct", float(premium_pct))
        return self.load_strategy_config()
