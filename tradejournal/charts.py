"""
Dashboard charts rendered to PNG files with matplotlib.
"""
import logging
from pathlib import Path
from typing import Dict, List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from tradejournal.metrics import equity_curve, monthly_pl, win_loss_counts  # noqa: E402
from tradejournal.types import Trade  # noqa: E402

__all__ = ["plot_equity_curve", "plot_win_loss", "plot_monthly_pl", "generate_charts"]

log = logging.getLogger(__name__)

EQUITY_COLOR = "#00f0d1"
WIN_COLOR = "#16a34a"
LOSS_COLOR = "#ef4444"
MONTH_UP_COLOR = "#00f0d1"
MONTH_DOWN_COLOR = "#ff6b6b"


# impure
def plot_equity_curve(curve: pd.DataFrame, save_path: Path) -> Path:
    """Line chart of the running P/L, one point per trade."""
    fig, ax = plt.subplots(figsize=(10, 4))
    positions = range(len(curve))
    ax.plot(positions, curve["equity"], color=EQUITY_COLOR, linewidth=2)
    ax.fill_between(positions, curve["equity"], color=EQUITY_COLOR, alpha=0.06)
    ax.set_xticks(list(positions))
    ax.set_xticklabels(curve["date"], rotation=45, ha="right", fontsize=8)
    ax.set_title("Equity", fontsize=14)
    ax.set_ylabel("P/L", fontsize=12)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return save_path


# impure
def plot_win_loss(counts: Dict[str, int], save_path: Path) -> Path:
    """Doughnut of winning vs losing trades."""
    fig, ax = plt.subplots(figsize=(5, 5))
    ax.pie(
        [counts["wins"], counts["losses"]],
        labels=["Wins", "Losses"],
        colors=[WIN_COLOR, LOSS_COLOR],
        wedgeprops={"width": 0.4},
        startangle=90,
        counterclock=False,
    )
    ax.set_title("Wins / Losses", fontsize=14)
    ax.axis("equal")
    fig.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return save_path


# impure
def plot_monthly_pl(monthly: pd.Series, save_path: Path) -> Path:
    """Bar chart of P/L per month, coloured by sign."""
    fig, ax = plt.subplots(figsize=(10, 4))
    colors = [MONTH_UP_COLOR if v >= 0 else MONTH_DOWN_COLOR for v in monthly.values]
    ax.bar(list(monthly.index), monthly.values, color=colors)
    ax.axhline(y=0, color="grey", linewidth=0.8)
    ax.set_title("Monthly P/L", fontsize=14)
    ax.set_ylabel("P/L", fontsize=12)
    ax.grid(True, axis="y", alpha=0.3)
    plt.setp(ax.get_xticklabels(), rotation=45)
    fig.tight_layout()
    fig.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return save_path


# impure
def generate_charts(trades: List[Trade], output_dir: Path) -> List[Path]:
    """
    Writes equity, win/loss and monthly charts for the snapshot.
    Charts with nothing to show are skipped.
    #impure: Writes to the filesystem.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    if not trades:
        log.info("No trades, no charts generated.")
        return written

    written.append(plot_equity_curve(equity_curve(trades), output_dir / "equity_curve.png"))

    counts = win_loss_counts(trades)
    if counts["wins"] or counts["losses"]:
        written.append(plot_win_loss(counts, output_dir / "win_loss.png"))
    else:
        log.info("Only break-even trades, skipping win/loss chart.")

    written.append(plot_monthly_pl(monthly_pl(trades), output_dir / "monthly_pl.png"))
    log.info(f"Generated {len(written)} charts in {output_dir}")
    return written
