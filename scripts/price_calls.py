#!/usr/bin/env python3
"""Batch-estimate covered-call premiums from a CSV of candidates.

Usage
-----
    python scripts/price_calls.py --input candidates.csv --output premiums.csv
    python scripts/price_calls.py --input candidates.csv --output premiums.json --reference

Input CSV format
----------------
    id,spot,strike,days,volatility,rate
    1,22.50,23.18,30,0.30,0.05
    2,22.50,23.63,30,0.30,0.05
    3,25.00,24.00,0,,

Blank volatility / rate fall back to 0.30 / 0.05.

Output
------
    CSV or JSON with columns: id, premium, [exact, abs_error], error
"""

from __future__ import annotations
import argparse
import csv
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from slvcalls.core import PricingInput, DEFAULT_VOLATILITY, DEFAULT_RATE
from slvcalls.black_scholes import price
from slvcalls.validation import cross_validate


def _float(row: dict, key: str, default: float) -> float:
    val = (row.get(key) or "").strip()
    return float(val) if val else default


def _price_row(row: dict, with_reference: bool) -> dict:
    """Price a single candidate row and return result dict."""
    inp = PricingInput(
        spot=float(row["spot"]),
        strike=float(row["strike"]),
        days_to_expiry=int(row["days"]),
        volatility=_float(row, "volatility", DEFAULT_VOLATILITY),
        risk_free_rate=_float(row, "rate", DEFAULT_RATE),
    )
    result = {"id": row.get("id", "")}
    if with_reference:
        check = cross_validate(inp)
        result["premium"] = check["approx"]
        result["exact"] = check["exact"]
        result["abs_error"] = check["abs_error"]
    else:
        result["premium"] = price(inp)
    return result


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Batch-estimate covered-call premiums."
    )
    parser.add_argument("--input", required=True, help="Path to candidates CSV")
    parser.add_argument("--output", required=True, help="Output path (.csv or .json)")
    parser.add_argument("--reference", action="store_true",
                        help="Add exact (SciPy) price and absolute error")
    args = parser.parse_args(argv)

    with open(args.input, newline="") as f:
        rows = list(csv.DictReader(f))

    print(f"Pricing {len(rows)} candidates...")

    results = []
    for i, row in enumerate(rows):
        try:
            results.append(_price_row(row, args.reference))
        except (KeyError, ValueError) as e:
            print(f"  Row {i} (id={row.get('id', '?')}): ERROR: {e}")
            results.append({"id": row.get("id", ""), "premium": None, "error": str(e)})

    output_path = Path(args.output)
    if output_path.suffix == ".json":
        with open(output_path, "w") as f:
            json.dump(results, f, indent=2, default=str)
    else:
        if not results:
            print("No results to write.")
            return
        fieldnames = list(results[0].keys())
        for r in results:
            for k in r:
                if k not in fieldnames:
                    fieldnames.append(k)
        with open(output_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(results)

    print(f"Results written to {args.output}")

    priced = [r for r in results if r.get("premium") is not None]
    failed = [r for r in results if r.get("premium") is None]
    print(f"  Priced: {len(priced)}  |  Failed: {len(failed)}")


if __name__ == "__main__":
    main()
