"""Tests for the command-line interface."""

import json

import pytest
from slvcalls import cli
from slvcalls.core import PriceBar


class FakeAlphaVantage:
    def __init__(self, *args, **kwargs):
        pass

    def latest(self, n):
        return [PriceBar("2024-01-09", 22.1, 22.3, 21.8, 2000),
                PriceBar("2024-01-10", 22.5, 22.7, 22.2, 3000)][-n:]

    def close(self):
        pass


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "AlphaVantageSource", FakeAlphaVantage)
    return str(tmp_path / "calls.db")


def test_premium(capsys):
    assert cli.main(["premium", "--spot", "25", "--strike", "24", "--days", "0"]) == 0
    assert capsys.readouterr().out.strip() == "1.0000000000"


def test_premium_invalid(capsys):
    assert cli.main(["premium", "--spot", "0", "--strike", "24", "--days", "30"]) == 1
    assert "error:" in capsys.readouterr().err


def test_expiry(capsys):
    cli.main(["expiry", "--date", "2024-12-20"])
    assert capsys.readouterr().out.startswith("2025-01-17")


def test_status(db, capsys):
    assert cli.main(["--db", db, "status"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["current_price"] == 22.5
    assert out["shares_owned"] == 100
    assert out["strike_price"] == pytest.approx(23.175)


def test_open_close_cycle(db, capsys):
    cli.main(["--db", db, "open"])
    call = json.loads(capsys.readouterr().out)
    assert call["status"] == "open"
    assert cli.main(["--db", db, "close", str(call["id"])]) == 0
    assert json.loads(capsys.readouterr().out) == {"success": True}
    cli.main(["--db", db, "calls"])
    assert json.loads(capsys.readouterr().out)[0]["status"] == "closed"


def test_close_missing(db, capsys):
    assert cli.main(["--db", db, "close", "7"]) == 1
    assert "no call with id 7" in capsys.readouterr().err


def test_settings_and_prices(db, capsys):
    cli.main(["--db", db, "settings", "--shares", "300"])
    out = json.loads(capsys.readouterr().out)
    assert out["shares_owned"] == 300
    assert out["premium_pct"] == 3.0
    cli.main(["--db", db, "refresh", "--days", "2"])
    assert json.loads(capsys.readouterr().out) == {"count": 2}
    cli.main(["--db", db, "prices"])
    prices = json.loads(capsys.readouterr().out)
    assert [p["date"] for p in prices] == ["2024-01-09", "2024-01-10"]


def test_ladder(db, capsys):
    assert cli.main(["--db", db, "ladder", "--offsets", "2,4"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 4
    assert lines[-1].startswith("expiry ")


@pytest.mark.parametrize("cmd", ["prices", "refresh"])
@pytest.mark.parametrize("days", ["0", "-1", "ten"])
def test_days_must_be_positive(db, cmd, days, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--db", db, cmd, "--days", days])
    assert exc.value.code == 2
    assert "--days" in capsys.readouterr().err


def test_log_level_is_case_insensitive(capsys):
    assert cli.main(["--log-level", "debug", "expiry", "--date", "2024-01-10"]) == 0
    assert capsys.readouterr().out.startswith("2024-02-16")


def test_unknown_log_level_rejected(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--log-level", "LOUD", "expiry"])
    assert exc.value.code == 2
    assert "--log-level" in capsys.readouterr().err
