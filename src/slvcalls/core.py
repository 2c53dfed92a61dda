from __future__ import annotations
from dataclasses import asdict, dataclass

DAYS_PER_YEAR = 365
DEFAULT_VOLATILITY = 0.30
DEFAULT_RATE = 0.05

OPEN = "open"
CLOSED = "closed"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class InvalidInput(ValueError):
    """Non-positive price, strike, volatility or share count."""


class PriceUnavailable(RuntimeError):
    """Neither the remote feed nor the local cache produced a price."""


class PositionNotFound(LookupError):
    pass


# ---------------------------------------------------------------------------
# Pricing input
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PricingInput:
    """Everything the premium estimator needs for one call option.

    Parameters
    ----------
    spot : float
        Current price of the underlying.
    strike : float
        Strike price.
    days_to_expiry : int
        Calendar days until expiry.  Zero means the option expires now.
    volatility : float
        Annualised volatility as a fraction (0.30 = 30%).
    risk_free_rate : float
        Continuously-compounded risk-free rate as a fraction.
    """
    spot: float
    strike: float
    days_to_expiry: int
    volatility: float = DEFAULT_VOLATILITY
    risk_free_rate: float = DEFAULT_RATE

    def __post_init__(self):
        if self.spot <= 0:
            raise InvalidInput(f"spot must be positive, got {self.spot}")
        if self.strike <= 0:
            raise InvalidInput(f"strike must be positive, got {self.strike}")
        if self.volatility <= 0:
            raise InvalidInput(f"volatility must be positive, got {self.volatility}")
        if self.days_to_expiry < 0:
            raise InvalidInput(
                f"days_to_expiry must be non-negative, got {self.days_to_expiry}"
            )

    @property
    def T(self) -> float:
        """Time to expiry in years."""
        return self.days_to_expiry / DAYS_PER_YEAR


# ---------------------------------------------------------------------------
# Strategy configuration
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StrategyConfig:
    """Per-request strategy parameters.

    ``premium_pct`` is the strike offset above spot in percent, so 3.0
    sells a call struck 3% out of the money.
    """
    shares_owned: int = 100
    premium_pct: float = 3.0
    volatility: float = DEFAULT_VOLATILITY
    risk_free_rate: float = DEFAULT_RATE

    def __post_init__(self):
        if self.shares_owned <= 0:
            raise InvalidInput(
                f"shares_owned must be positive, got {self.shares_owned}"
            )
        if self.volatility <= 0:
            raise InvalidInput(f"volatility must be positive, got {self.volatility}")


# ---------------------------------------------------------------------------
# Market data and positions
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PriceBar:
    date: str          # YYYY-MM-DD
    close: float
    high: float
    low: float
    volume: int = 0


@dataclass(frozen=True)
class CallPosition:
    id: int
    strike_date: str
    strike_price: float
    current_price: float
    premium: float
    premium_pct: float
    shares: int
    income: float
    status: str
    expires: str
    created_at: str

    @property
    def is_open(self) -> bool:
        return self.status == OPEN


@dataclass(frozen=True)
class Quote:
    """Strike, premium and projected income for the next monthly expiry."""
    current_price: float
    strike_price: float
    estimated_premium: float
    estimated_income: float
    premium_pct: float
    shares_owned: int
    days_to_expiry: int
    next_expiry: str


@dataclass(frozen=True)
class StrategyStatus:
    quote: Quote
    recent_prices: list
    total_income: float
    annualized_return: float

    def to_dict(self) -> dict:
        out = asdict(self.quote)
        out["recent_prices"] = [{"date": b.date, "close": b.close} for b in self.recent_prices]
        out["total_income"] = self.total_income
        out["annualized_return"] = self.annualized_return
        return out
