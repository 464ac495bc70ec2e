"""
Performance metrics derived from a journal snapshot.

Every function takes the complete, ordered trade list and recomputes its
result from scratch; nothing here is cached or updated incrementally.
Trades without a stored P/L count as zero.
"""
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from tradejournal.instruments import classify
from tradejournal.types import Trade

__all__ = [
    "trades_frame",
    "compute_summary",
    "equity_curve",
    "win_loss_counts",
    "monthly_pl",
    "recent_trades",
    "win_rate_label",
]

FRAME_COLUMNS = [
    "id", "date", "time", "symbol", "category", "side",
    "entry", "exit", "lot", "contract", "pl", "notes",
]


def trades_frame(trades: List[Trade]) -> pd.DataFrame:
    """
    One row per trade, in list order, with the derived category attached.
    The screenshot payload is left out.
    """
    if not trades:
        return pd.DataFrame(columns=FRAME_COLUMNS)

    records = [
        {
            "id": t.id,
            "date": t.date,
            "time": t.time,
            "symbol": t.symbol,
            "category": classify(t.symbol).value,
            "side": t.side.value,
            "entry": t.entry,
            "exit": t.exit,
            "lot": t.lot,
            "contract": t.contract,
            "pl": t.pl,
            "notes": t.notes,
        }
        for t in trades
    ]
    df = pd.DataFrame(records, columns=FRAME_COLUMNS)
    df["pl"] = pd.to_numeric(df["pl"], errors="coerce")
    return df


def _pl_series(trades: List[Trade]) -> pd.Series:
    return pd.Series([t.pl for t in trades], dtype="float64").fillna(0.0)


def win_loss_counts(trades: List[Trade]) -> Dict[str, int]:
    """Counts of strictly positive and strictly negative trades."""
    pls = _pl_series(trades)
    return {"wins": int((pls > 0).sum()), "losses": int((pls < 0).sum())}


def compute_summary(trades: List[Trade]) -> Dict[str, Any]:
    """
    Computes aggregate statistics for the given trades.

    Returns:
        A dictionary with keys:
        - total_trades: int
        - net_pl: float
        - wins / losses: int
        - win_rate: float percentage, or None for an empty journal
        - average_win / average_loss: float
        - largest_win / largest_loss: float
        - profit_factor: float (0.0 when there are no losses)
    """
    summary: Dict[str, Any] = {
        "total_trades": 0,
        "net_pl": 0.0,
        "wins": 0,
        "losses": 0,
        "win_rate": None,
        "average_win": 0.0,
        "average_loss": 0.0,
        "largest_win": 0.0,
        "largest_loss": 0.0,
        "profit_factor": 0.0,
    }
    if not trades:
        return summary

    pls = _pl_series(trades)
    wins = pls[pls > 0]
    losses = pls[pls < 0]
    total = len(pls)
    gross_loss = -losses.sum()

    summary.update(
        {
            "total_trades": total,
            "net_pl": float(pls.sum()),
            "wins": len(wins),
            "losses": len(losses),
            "win_rate": len(wins) / total * 100,
            "average_win": float(wins.mean()) if len(wins) else 0.0,
            "average_loss": float(losses.mean()) if len(losses) else 0.0,
            "largest_win": float(wins.max()) if len(wins) else 0.0,
            "largest_loss": float(losses.min()) if len(losses) else 0.0,
            "profit_factor": float(wins.sum() / gross_loss) if gross_loss else 0.0,
        }
    )
    return summary


def equity_curve(trades: List[Trade]) -> pd.DataFrame:
    """
    Running sum of P/L in list order, labelled by each trade's date.

    Returns:
        A DataFrame with columns `date` and `equity`, one row per trade.
    """
    if not trades:
        return pd.DataFrame({"date": pd.Series(dtype=object), "equity": pd.Series(dtype="float64")})
    return pd.DataFrame(
        {
            "date": [t.date for t in trades],
            "equity": np.cumsum(_pl_series(trades).to_numpy()),
        }
    )


def monthly_pl(trades: List[Trade]) -> pd.Series:
    """
    Summed P/L per calendar month (`YYYY-MM`), sorted ascending.
    Trades without a date are grouped under "unknown".
    """
    if not trades:
        return pd.Series(dtype="float64", name="pl")
    months = [(t.date or "")[:7] or "unknown" for t in trades]
    series = _pl_series(trades).groupby(months).sum().sort_index()
    series.index.name = "month"
    series.name = "pl"
    return series


def recent_trades(trades: List[Trade], count: int = 6) -> List[Trade]:
    return trades[:count]


def win_rate_label(win_rate: Optional[float]) -> str:
    """Win rate with one decimal and a percent sign, or an em dash when undefined."""
    return "—" if win_rate is None else f"{win_rate:.1f}%"
