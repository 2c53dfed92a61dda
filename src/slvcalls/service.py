"""Covered-call strategy orchestration.

Composes the expiry scheduler and premium estimator with a price source
and a store.  Strategy parameters arrive as a ``StrategyConfig`` on every
call; the service keeps no settings of its own.
"""

from __future__ import annotations
import logging
from datetime import datetime
from typing import List, Optional, Sequence

import numpy as np

from .black_scholes import estimate_premium
from .black_scholes_vec import estimate_premium_vec
from .config import MONTHS_PER_YEAR, REFRESH_DAYS, STATUS_PRICE_ROWS
from .core import (
    CallPosition, Quote, StrategyConfig, StrategyStatus,
    PriceUnavailable, PositionNotFound,
)
from .expiry import next_monthly_expiry, days_to_expiry
from .sources import PriceSource
from .store import Store

logger = logging.getLogger(__name__)


def strike_for(current_price: float, premium_pct: float) -> float:
    return current_price * (1 + premium_pct / 100)


def annualized_return(total_income: float, current_price: float, shares_owned: int) -> float:
    """Closed income over position value, times 12 (not compounded)."""
    return total_income / (current_price * shares_owned) * MONTHS_PER_YEAR


class StrategyService:
    def __init__(self, source: PriceSource, store: Store):
        self.source = source
        self.store = store

    # -- pure composition ---------------------------------------------------

    def quote(self, current_price: float, config: StrategyConfig,
              now: Optional[datetime] = None) -> Quote:
        """Strike, premium and income for the next monthly expiry."""
        now = now or datetime.now()
        expiry = next_monthly_expiry(now)
        days = days_to_expiry(expiry, now)
        strike = strike_for(current_price, config.premium_pct)
        premium = estimate_premium(current_price, strike, days,
                                   config.volatility, config.risk_free_rate)
        return Quote(
            current_price=current_price,
            strike_price=strike,
            estimated_premium=premium,
            estimated_income=premium * config.shares_owned,
            premium_pct=config.premium_pct,
            shares_owned=config.shares_owned,
            days_to_expiry=days,
            next_expiry=expiry.isoformat(),
        )

    def premium_ladder(self, current_price: float, offsets_pct: Sequence[float],
                       config: StrategyConfig, now: Optional[datetime] = None) -> List[dict]:
        """Premium and income for several strike offsets at the next expiry."""
        now = now or datetime.now()
        expiry = next_monthly_expiry(now)
        days = days_to_expiry(expiry, now)
        offsets = np.asarray(offsets_pct, dtype=float)
        strikes = current_price * (1 + offsets / 100)
        premiums = estimate_premium_vec(current_price, strikes, days,
                                        config.volatility, config.risk_free_rate)
        return [
            {
                "premium_pct": float(pct),
                "strike_price": float(k),
                "premium": float(px),
                "income": float(px) * config.shares_owned,
                "days_to_expiry": days,
                "next_expiry": expiry.isoformat(),
            }
            for pct, k, px in zip(offsets, strikes, premiums)
        ]

    # -- collaborators ------------------------------------------------------

    def current_price(self) -> float:
        bars = self.source.latest(1)
        if not bars:
            raise PriceUnavailable("no price data from feed or cache")
        return bars[-1].close

    def status(self, config: StrategyConfig, now: Optional[datetime] = None) -> StrategyStatus:
        price = self.current_price()
        q = self.quote(price, config, now)
        total = self.store.total_closed_income()
        return StrategyStatus(
            quote=q,
            recent_prices=self.store.recent_prices(STATUS_PRICE_ROWS),
            total_income=total,
            annualized_return=annualized_return(total, price, config.shares_owned),
        )

    def open_call(self, config: StrategyConfig, now: Optional[datetime] = None) -> CallPosition:
        q = self.quote(self.current_price(), config, now)
        return self.store.insert_call(
            strike_date=q.next_expiry,
            strike_price=q.strike_price,
            current_price=q.current_price,
            premium=q.estimated_premium,
            premium_pct=q.premium_pct,
            shares=q.shares_owned,
            income=q.estimated_income,
            expires=q.next_expiry,
        )

    def close_call(self, call_id: int) -> None:
        if not self.store.close_call(call_id):
            raise PositionNotFound(f"no call with id {call_id}")
        logger.info("Closed call %s", call_id)

    def list_calls(self) -> List[CallPosition]:
        return self.store.list_calls()

    def refresh(self, days: int = REFRESH_DAYS) -> int:
        return len(self.source.latest(days))
