"""Tests for the SQLite store."""

import sqlite3

import pytest
from slvcalls.core import PriceBar, StrategyConfig, InvalidInput
from slvcalls.store import Store


@pytest.fixture
def store(tmp_path):
    s = Store(str(tmp_path / "calls.db"))
    yield s
    s.close()


def _bars():
    return [
        PriceBar("2024-01-08", 21.9, 22.1, 21.7, 1000),
        PriceBar("2024-01-10", 22.5, 22.7, 22.2, 3000),
        PriceBar("2024-01-09", 22.1, 22.3, 21.8, 2000),
    ]


def _open(store, income=10.0):
    return store.insert_call(
        strike_date="2024-02-16", strike_price=23.175, current_price=22.5,
        premium=income / 100, premium_pct=3.0, shares=100, income=income,
        expires="2024-02-16",
    )


class TestPrices:
    def test_recent_is_chronological(self, store):
        store.upsert_prices(_bars())
        got = store.recent_prices(2)
        assert [b.date for b in got] == ["2024-01-09", "2024-01-10"]

    def test_upsert_replaces_same_date(self, store):
        store.upsert_prices(_bars())
        store.upsert_prices([PriceBar("2024-01-10", 23.0, 23.1, 22.9, 10)])
        got = store.recent_prices(10)
        assert len(got) == 3
        assert got[-1].close == 23.0

    def test_empty(self, store):
        assert store.recent_prices(5) == []


class TestCalls:
    def test_insert_returns_open_position(self, store):
        call = _open(store)
        assert call.id == 1
        assert call.status == "open"
        assert call.is_open
        assert call.created_at

    def test_close_and_total_income(self, store):
        a = _open(store, income=40.0)
        _open(store, income=25.0)
        assert store.total_closed_income() == 0.0
        assert store.close_call(a.id)
        assert store.total_closed_income() == 40.0
        assert not store.get_call(a.id).is_open

    def test_close_missing(self, store):
        assert store.close_call(99) is False

    def test_list_newest_first(self, store):
        ids = [_open(store).id for _ in range(3)]
        assert [c.id for c in store.list_calls()] == ids[::-1]


class TestSettings:
    def test_seeded_defaults(self, store):
        cfg = store.load_strategy_config()
        assert cfg.shares_owned == 100
        assert cfg.premium_pct == 3.0

    def test_partial_update(self, store):
        cfg = store.save_strategy_config(premium_pct=5)
        assert cfg.premium_pct == 5.0
        assert cfg.shares_owned == 100
        cfg = store.save_strategy_config(shares_owned=300)
        assert cfg.shares_owned == 300
        assert cfg.premium_pct == 5.0

    def test_rejects_non_positive_shares(self, store):
        with pytest.raises(InvalidInput):
            store.save_strategy_config(shares_owned=0)

    def test_defaults_carry_pricing_params(self, store):
        cfg = store.load_strategy_config(StrategyConfig(volatility=0.4, risk_free_rate=0.03))
        assert cfg.volatility == 0.4
        assert cfg.risk_free_rate == 0.03

    def test_reopen_keeps_settings(self, tmp_path):
        path = str(tmp_path / "calls.db")
        with Store(path) as s:
            s.save_strategy_config(shares_owned=500)
        with Store(path) as s:
            assert s.load_strategy_config().shares_owned == 500


def test_creates_parent_dir(tmp_path):
    path = tmp_path / "nested" / "calls.db"
    with Store(str(path)):
        pass
    tables = {r[0] for r in sqlite3.connect(str(path)).execute(
        "SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"prices", "calls", "settings"} <= tables
