"""Tests for the strategy orchestrator."""

from datetime import datetime

import pytest
from slvcalls.black_scholes import estimate_premium
from slvcalls.core import (
    PriceBar, StrategyConfig, PriceUnavailable, PositionNotFound,
)
from slvcalls.service import StrategyService, annualized_return, strike_for
from slvcalls.store import Store

NOW = datetime(2024, 1, 10, 9, 30)
CFG = StrategyConfig(shares_owned=100, premium_pct=3.0)


class FakeSource:
    def __init__(self, bars):
        self.bars = bars
        self.calls = []

    def latest(self, n):
        self.calls.append(n)
        return self.bars[-n:]


@pytest.fixture
def store(tmp_path):
    s = Store(str(tmp_path / "calls.db"))
    yield s
    s.close()


@pytest.fixture
def service(store):
    bars = [PriceBar("2024-01-09", 22.1, 22.3, 21.8, 2000),
            PriceBar("2024-01-10", 22.5, 22.7, 22.2, 3000)]
    store.upsert_prices(bars)
    return StrategyService(FakeSource(bars), store)


class TestQuote:
    def test_composition(self, service):
        q = service.quote(22.5, CFG, NOW)
        assert q.next_expiry == "2024-02-16"
        assert q.days_to_expiry == 37
        assert q.strike_price == pytest.approx(23.175)
        assert q.estimated_premium == estimate_premium(22.5, q.strike_price, 37, 0.30, 0.05)
        assert q.estimated_income == pytest.approx(q.estimated_premium * 100)
        assert 0 < q.estimated_premium < 22.5

    def test_config_passed_per_call(self, service):
        wide = service.quote(22.5, StrategyConfig(shares_owned=200, premium_pct=10.0), NOW)
        narrow = service.quote(22.5, CFG, NOW)
        assert wide.strike_price > narrow.strike_price
        assert wide.estimated_premium < narrow.estimated_premium
        assert wide.shares_owned == 200

    def test_ladder_matches_quote(self, service):
        rows = service.premium_ladder(22.5, [1.0, 3.0, 5.0], CFG, NOW)
        assert [r["premium_pct"] for r in rows] == [1.0, 3.0, 5.0]
        q = service.quote(22.5, CFG, NOW)
        assert rows[1]["premium"] == pytest.approx(q.estimated_premium, abs=1e-12)
        assert rows[0]["premium"] > rows[1]["premium"] > rows[2]["premium"]


class TestStatus:
    def test_status_fields(self, service, store):
        call = service.open_call(CFG, NOW)
        service.close_call(call.id)
        st = service.status(CFG, NOW)
        assert st.quote.current_price == 22.5
        assert st.total_income == pytest.approx(call.income)
        assert st.annualized_return == pytest.approx(call.income / (22.5 * 100) * 12)
        assert [b.date for b in st.recent_prices] == ["2024-01-09", "2024-01-10"]
        d = st.to_dict()
        assert d["next_expiry"] == "2024-02-16"
        assert d["recent_prices"][-1] == {"date": "2024-01-10", "close": 22.5}

    def test_no_price(self, store):
        svc = StrategyService(FakeSource([]), store)
        with pytest.raises(PriceUnavailable):
            svc.status(CFG, NOW)


class TestCalls:
    def test_open_call_persists_quote(self, service):
        call = service.open_call(CFG, NOW)
        assert call.expires == call.strike_date == "2024-02-16"
        assert call.shares == 100
        assert call.status == "open"
        assert service.list_calls() == [call]

    def test_close_missing(self, service):
        with pytest.raises(PositionNotFound):
            service.close_call(42)

    def test_refresh_counts(self, service):
        assert service.refresh(365) == 2
        assert service.source.calls[-1] == 365


def test_helpers():
    assert strike_for(100.0, 3.0) == pytest.approx(103.0)
    assert annualized_return(30.0, 20.0, 100) == pytest.approx(0.18)
