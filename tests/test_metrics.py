"""
Tests for the performance metrics module.
"""
from typing import List

import pytest

from tradejournal.metrics import (
    compute_summary,
    equity_curve,
    monthly_pl,
    recent_trades,
    trades_frame,
    win_loss_counts,
    win_rate_label,
)
from tradejournal.types import Trade


def make_trade(trade_id: str, symbol: str, date: str, pl, side: str = "long") -> Trade:
    return Trade(id=trade_id, date=date, time="10:00", symbol=symbol, side=side, entry=1.0, exit=2.0, pl=pl)


@pytest.fixture
def sample_trades() -> List[Trade]:
    """Newest first, as the store keeps them."""
    return [
        make_trade("t4", "XAUUSD", "2024-02-10", 100.0),
        make_trade("t3", "EURUSD", "2024-01-05", -50.0, side="short"),
        make_trade("t2", "BTCUSD", "2024-02-01", 0.0),
        make_trade("t1", "US30", "", 25.5),
    ]


def test_compute_summary(sample_trades: List[Trade]) -> None:
    summary = compute_summary(sample_trades)

    assert summary["total_trades"] == 4
    assert summary["net_pl"] == pytest.approx(75.5)
    assert summary["wins"] == 2
    assert summary["losses"] == 1
    assert summary["win_rate"] == pytest.approx(50.0)
    assert summary["average_win"] == pytest.approx(62.75)
    assert summary["average_loss"] == pytest.approx(-50.0)
    assert summary["largest_win"] == pytest.approx(100.0)
    assert summary["largest_loss"] == pytest.approx(-50.0)
    assert summary["profit_factor"] == pytest.approx(2.51)


def test_compute_summary_empty() -> None:
    summary = compute_summary([])
    assert summary["total_trades"] == 0
    assert summary["net_pl"] == 0.0
    assert summary["win_rate"] is None


def test_compute_summary_no_losses() -> None:
    summary = compute_summary([make_trade("a", "XAUUSD", "2024-01-01", 10.0)])
    assert summary["profit_factor"] == 0.0
    assert summary["win_rate"] == pytest.approx(100.0)


def test_missing_pl_counts_as_zero() -> None:
    trades = [make_trade("a", "US30", "2024-01-01", None), make_trade("b", "US30", "2024-01-02", 5.0)]
    summary = compute_summary(trades)
    assert summary["net_pl"] == pytest.approx(5.0)
    assert win_loss_counts(trades) == {"wins": 1, "losses": 0}


def test_win_loss_counts(sample_trades: List[Trade]) -> None:
    """Break-even trades are neither wins nor losses."""
    assert win_loss_counts(sample_trades) == {"wins": 2, "losses": 1}


def test_equity_curve_follows_list_order(sample_trades: List[Trade]) -> None:
    curve = equity_curve(sample_trades)

    assert list(curve.columns) == ["date", "equity"]
    assert list(curve["date"]) == ["2024-02-10", "2024-01-05", "2024-02-01", ""]
    assert list(curve["equity"]) == pytest.approx([100.0, 50.0, 50.0, 75.5])


def test_equity_curve_empty() -> None:
    curve = equity_curve([])
    assert curve.empty
    assert list(curve.columns) == ["date", "equity"]


def test_monthly_pl(sample_trades: List[Trade]) -> None:
    """Months ascend; trades without a date land in "unknown"."""
    monthly = monthly_pl(sample_trades)

    assert list(monthly.index) == ["2024-01", "2024-02", "unknown"]
    assert monthly.to_dict() == pytest.approx({"2024-01": -50.0, "2024-02": 100.0, "unknown": 25.5})
    assert monthly.index.name == "month"
    assert monthly.name == "pl"


def test_monthly_pl_empty() -> None:
    assert monthly_pl([]).empty


def test_trades_frame(sample_trades: List[Trade]) -> None:
    df = trades_frame(sample_trades)

    assert len(df) == 4
    assert "screenshot" not in df.columns
    assert list(df["category"]) == ["Gold", "Forex", "Crypto", "Other"]
    assert list(df["side"]) == ["long", "short", "long", "long"]


def test_trades_frame_empty() -> None:
    df = trades_frame([])
    assert df.empty
    assert "category" in df.columns


def test_recent_trades(sample_trades: List[Trade]) -> None:
    assert [t.id for t in recent_trades(sample_trades, 2)] == ["t4", "t3"]
    assert len(recent_trades(sample_trades)) == 4


def test_win_rate_label() -> None:
    assert win_rate_label(None) == "—"
    assert win_rate_label(66.6666) == "66.7%"
