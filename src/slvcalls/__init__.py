# slvcalls: covered-call premium estimator
# Public API

# Data model
from .core import (
    PricingInput, StrategyConfig, PriceBar, CallPosition, Quote, StrategyStatus,
    InvalidInput, PriceUnavailable, PositionNotFound,
)

# Pricing
from .black_scholes import estimate_premium, norm_cdf, price
from .black_scholes_vec import estimate_premium_vec, norm_cdf_vec

# Expiry schedule
from .expiry import next_monthly_expiry, third_friday, days_to_expiry

# Validation
from .validation import reference_premium, cross_validate, cdf_max_error

# Collaborators
from .sources import AlphaVantageSource, CachedPriceSource, StoredPriceSource
from .store import Store
from .service import StrategyService

__all__ = [
    # Data model
    "PricingInput", "StrategyConfig", "PriceBar", "CallPosition", "Quote",
    "StrategyStatus", "InvalidInput", "PriceUnavailable", "PositionNotFound",
    # Pricing
    "estimate_premium", "norm_cdf", "price",
    "estimate_premium_vec", "norm_cdf_vec",
    # Expiry
    "next_monthly_expiry", "third_friday", "days_to_expiry",
    # Validation
    "reference_premium", "cross_validate", "cdf_max_error",
    # Collaborators
    "AlphaVantageSource", "CachedPriceSource", "StoredPriceSource",
    "Store", "StrategyService",
]

__version__ = "0.1.0"
