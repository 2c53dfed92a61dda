"""Accuracy checks for the premium estimator.

The estimator uses a rational approximation to the normal CDF.  These
helpers price the same inputs with SciPy's exact CDF so the gap can be
measured and reported.
"""

from __future__ import annotations

import numpy as np
from typing import Optional
from math import log, sqrt, exp
from scipy.stats import norm

from .core import PricingInput
from .black_scholes import price as approx_price, intrinsic_value
from .black_scholes_vec import norm_cdf_vec

__all__ = [
    "reference_premium",
    "cross_validate",
    "cdf_max_error",
]


# ---------------------------------------------------------------------------
# Exact reference
# ---------------------------------------------------------------------------

def reference_premium(inp: PricingInput) -> float:
    """Black-Scholes call premium with ``scipy.stats.norm.cdf``.

    Expired options (zero days) are priced at intrinsic value, matching
    the estimator.
    """
    T = inp.T
    if T <= 0:
        return intrinsic_value(inp.spot, inp.strike)
    S, K, r, sigma = inp.spot, inp.strike, inp.risk_free_rate, inp.volatility
    rt = sigma * sqrt(T)
    d1 = (log(S / K) + (r + 0.5 * sigma * sigma) * T) / rt
    d2 = d1 - rt
    call_px = S * norm.cdf(d1) - K * exp(-r * T) * norm.cdf(d2)
    return max(float(call_px), 0.0)


# ---------------------------------------------------------------------------
# Cross-check
# ---------------------------------------------------------------------------

def cross_validate(inp: PricingInput) -> dict:
    """Compare the approximated premium with the exact reference.

    Returns
    -------
    dict
        ``"approx"``, ``"exact"``, ``"abs_error"``.
    """
    approx = approx_price(inp)
    exact = reference_premium(inp)
    return {
        "approx": approx,
        "exact": exact,
        "abs_error": abs(approx - exact),
    }


def cdf_max_error(xs: Optional[np.ndarray] = None) -> float:
    """Maximum absolute error of the approximate CDF over ``xs``.

    Default grid is 20 001 points on [-8, 8].
    """
    if xs is None:
        xs = np.linspace(-8.0, 8.0, 20_001)
    xs = np.asarray(xs, dtype=float)
    return float(np.max(np.abs(norm_cdf_vec(xs) - norm.cdf(xs))))
