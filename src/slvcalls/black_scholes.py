import math
from math import log, sqrt, exp
from .core import PricingInput, DEFAULT_VOLATILITY, DEFAULT_RATE

# Abramowitz & Stegun 7.1.26
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def norm_cdf(x: float) -> float:
    """Standard normal CDF via the Abramowitz-Stegun erf approximation.

    Maximum absolute error is about 1.5e-7.
    """
    sign = -1.0 if x < 0 else 1.0
    z = abs(x) / math.sqrt(2.0)
    t = 1.0 / (1.0 + _P * z)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-z * z)
    return 0.5 * (1.0 + sign * y)


def _d1_d2(S, K, T, r, sigma):
    rt = sigma * sqrt(T)
    d1 = (log(S / K) + (r + 0.5 * sigma * sigma) * T) / rt
    d2 = d1 - rt
    return d1, d2


def intrinsic_value(spot: float, strike: float) -> float:
    return max(spot - strike, 0.0)


def price(inp: PricingInput) -> float:
    """Theoretical European call premium, floored at zero."""
    T = inp.T
    if T <= 0:
        return intrinsic_value(inp.spot, inp.strike)
    d1, d2 = _d1_d2(inp.spot, inp.strike, T, inp.risk_free_rate, inp.volatility)
    disc_r = exp(-inp.risk_free_rate * T)
    call_px = inp.spot * norm_cdf(d1) - inp.strike * disc_r * norm_cdf(d2)
    return max(call_px, 0.0)


def estimate_premium(spot: float, strike: float, days_to_expiry: int,
                     volatility: float = DEFAULT_VOLATILITY,
                     risk_free_rate: float = DEFAULT_RATE) -> float:
    """Estimate the premium of a call struck at ``strike``.

    Raises ``InvalidInput`` for non-positive spot, strike or volatility.
    A zero ``days_to_expiry`` returns intrinsic value.
    """
    return price(PricingInput(spot, strike, days_to_expiry, volatility, risk_free_rate))
