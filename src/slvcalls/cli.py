import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import date, datetime

from .black_scholes import estimate_premium
from .config import HISTORY_DAYS, REFRESH_DAYS, load_config
from .core import InvalidInput, PriceUnavailable, PositionNotFound, DEFAULT_VOLATILITY, DEFAULT_RATE
from .expiry import next_monthly_expiry, days_to_expiry
from .service import StrategyService
from .sources import AlphaVantageSource, CachedPriceSource
from .store import Store


def _print_json(obj):
    print(json.dumps(obj, indent=2, default=str))


def _offsets(s: str):
    try:
        return [float(x) for x in s.split(",") if x.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError("offsets must be comma-separated numbers")


def _positive_int(s: str):
    try:
        n = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {s!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def _date(s: str):
    try:
        return date.fromisoformat(s)
    except ValueError:
        raise argparse.ArgumentTypeError("date must be YYYY-MM-DD")


# ---------------------------------------------------------------------------
# Pure commands
# ---------------------------------------------------------------------------
def cmd_premium(args):
    px = estimate_premium(args.spot, args.strike, args.days, args.sigma, args.r)
    print(f"{px:.10f}")


def cmd_expiry(args):
    ref = args.date or datetime.now()
    expiry = next_monthly_expiry(ref)
    print(f"{expiry.isoformat()}  ({days_to_expiry(expiry, ref)} days)")


# ---------------------------------------------------------------------------
# Commands backed by the store and price feed
# ---------------------------------------------------------------------------
def cmd_status(service, store, args):
    _print_json(service.status(store.load_strategy_config()).to_dict())


def cmd_refresh(service, store, args):
    _print_json({"count": service.refresh(args.days)})


def cmd_open(service, store, args):
    _print_json(asdict(service.open_call(store.load_strategy_config())))


def cmd_calls(service, store, args):
    _print_json([asdict(c) for c in service.list_calls()])


def cmd_close(service, store, args):
    service.close_call(args.id)
    _print_json({"success": True})


def cmd_settings(service, store, args):
    cfg = store.save_strategy_config(args.shares, args.premium_pct)
    _print_json({"success": True, "shares_owned": cfg.shares_owned,
                 "premium_pct": cfg.premium_pct})


def cmd_prices(service, store, args):
    bars = store.recent_prices(args.days)
    _print_json([{"date": b.date, "close": b.close, "high": b.high, "low": b.low}
                 for b in bars])


def cmd_ladder(service, store, args):
    rows = service.premium_ladder(service.current_price(), args.offsets,
                                  store.load_strategy_config())
    print(f"{'pct':>6} {'strike':>10} {'premium':>10} {'income':>10}")
    for row in rows:
        print(f"{row['premium_pct']:>6.2f} {row['strike_price']:>10.4f} "
              f"{row['premium']:>10.4f} {row['income']:>10.2f}")
    if rows:
        print(f"expiry {rows[0]['next_expiry']} ({rows[0]['days_to_expiry']} days)")


def _with_service(func):
    def run(args):
        cfg = load_config()
        remote = AlphaVantageSource(cfg.api_key, cfg.symbol, timeout=cfg.http_timeout)
        try:
            with Store(args.db or cfg.db_path) as store:
                service = StrategyService(CachedPriceSource(remote, store), store)
                func(service, store, args)
        finally:
            remote.close()
    return run


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="slvcalls", description="Covered-call premium estimator")
    p.add_argument("--db", default=None, help="SQLite path (default: $SLV_DB_PATH)")
    p.add_argument("--log-level", default="WARNING", type=str.upper,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    p_prem = sub.add_parser("premium", help="Estimate a call premium")
    p_prem.add_argument("--spot", type=float, required=True)
    p_prem.add_argument("--strike", type=float, required=True)
    p_prem.add_argument("--days", type=int, required=True, help="days to expiry")
    p_prem.add_argument("--sigma", type=float, default=DEFAULT_VOLATILITY)
    p_prem.add_argument("--r", type=float, default=DEFAULT_RATE, help="cont. risk-free")
    p_prem.set_defaults(func=cmd_premium)

    p_exp = sub.add_parser("expiry", help="Next monthly expiry (third Friday)")
    p_exp.add_argument("--date", type=_date, default=None, help="reference YYYY-MM-DD")
    p_exp.set_defaults(func=cmd_expiry)

    sub.add_parser("status", help="Current quote and income summary").set_defaults(
        func=_with_service(cmd_status))

    p_ref = sub.add_parser("refresh", help="Pull price history into the cache")
    p_ref.add_argument("--days", type=_positive_int, default=REFRESH_DAYS)
    p_ref.set_defaults(func=_with_service(cmd_refresh))

    sub.add_parser("open", help="Open a call at the configured offset").set_defaults(
        func=_with_service(cmd_open))
    sub.add_parser("calls", help="List call positions").set_defaults(
        func=_with_service(cmd_calls))

    p_close = sub.add_parser("close", help="Mark a call closed")
    p_close.add_argument("id", type=int)
    p_close.set_defaults(func=_with_service(cmd_close))

    p_set = sub.add_parser("settings", help="Update shares owned / premium pct")
    p_set.add_argument("--shares", type=int, default=None)
    p_set.add_argument("--premium-pct", dest="premium_pct", type=float, default=None)
    p_set.set_defaults(func=_with_service(cmd_settings))

    p_px = sub.add_parser("prices", help="Cached price history")
    p_px.add_argument("--days", type=_positive_int, default=HISTORY_DAYS)
    p_px.set_defaults(func=_with_service(cmd_prices))

    p_lad = sub.add_parser("ladder", help="Premiums across strike offsets")
    p_lad.add_argument("--offsets", type=_offsets, default=[1.0, 2.0, 3.0, 5.0])
    p_lad.set_defaults(func=_with_service(cmd_ladder))

    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except (InvalidInput, PriceUnavailable, PositionNotFound) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
