# black_scholes_vec.py
# Vectorised premium estimator.
# All public functions accept scalars *or* NumPy arrays and broadcast.

from __future__ import annotations
import numpy as np

from .black_scholes import _A1, _A2, _A3, _A4, _A5, _P
from .core import InvalidInput, DAYS_PER_YEAR, DEFAULT_VOLATILITY, DEFAULT_RATE


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def norm_cdf_vec(x) -> np.ndarray:
    """Element-wise Abramowitz-Stegun normal CDF (same form as ``norm_cdf``)."""
    x = np.asarray(x, dtype=float)
    sign = np.where(x < 0, -1.0, 1.0)
    z = np.abs(x) / np.sqrt(2.0)
    t = 1.0 / (1.0 + _P * z)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * np.exp(-z * z)
    return 0.5 * (1.0 + sign * y)


def _check(S, K, days, sigma):
    if np.any(S <= 0):
        raise InvalidInput("spot must be positive")
    if np.any(K <= 0):
        raise InvalidInput("strike must be positive")
    if np.any(sigma <= 0):
        raise InvalidInput("volatility must be positive")
    if np.any(days < 0):
        raise InvalidInput("days_to_expiry must be non-negative")


# ---------------------------------------------------------------------------
# Vectorised premium
# ---------------------------------------------------------------------------
def estimate_premium_vec(spot, strike, days_to_expiry,
                         volatility=DEFAULT_VOLATILITY,
                         risk_free_rate=DEFAULT_RATE) -> np.ndarray:
    """Vectorised call premium.

    Parameters accept scalars or arrays; NumPy broadcasting rules apply.
    Entries with zero days to expiry are priced at intrinsic value.

    Returns
    -------
    np.ndarray
        Non-negative premiums (same shape as broadcasted inputs).
    """
    S, K, days, sigma, r = (
        np.asarray(x, dtype=float)
        for x in (spot, strike, days_to_expiry, volatility, risk_free_rate)
    )
    _check(S, K, days, sigma)
    S, K, days, sigma, r = np.broadcast_arrays(S, K, days, sigma, r)

    T = days / DAYS_PER_YEAR
    live = T > 0
    # placeholder T keeps d1 finite where the option has already expired
    T_safe = np.where(live, T, 1.0)
    sig_sqrt_T = sigma * np.sqrt(T_safe)
    d1 = (np.log(S / K) + (r + 0.5 * sigma * sigma) * T_safe) / sig_sqrt_T
    d2 = d1 - sig_sqrt_T

    call_px = S * norm_cdf_vec(d1) - K * np.exp(-r * T_safe) * norm_cdf_vec(d2)
    intrinsic = np.maximum(S - K, 0.0)
    return np.where(live, np.maximum(call_px, 0.0), intrinsic)
