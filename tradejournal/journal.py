"""
Journal views: filtering the trade snapshot and rendering it with rich.
"""
from typing import Any, Dict, List, Optional, Union

from rich.table import Table
from rich.text import Text

from tradejournal.instruments import classify
from tradejournal.metrics import win_rate_label
from tradejournal.types import ALL_CATEGORIES, Category, Trade

__all__ = [
    "filter_trades",
    "format_number",
    "format_pl",
    "build_journal_table",
    "build_stats_table",
    "build_recent_table",
    "ticker_line",
]

PROFIT_STYLE = "#7ef0c7"
LOSS_STYLE = "#ff7b7b"


def filter_trades(
    trades: List[Trade],
    category: Union[Category, str] = ALL_CATEGORIES,
    search: str = "",
) -> List[Trade]:
    """
    Keeps trades matching the category filter and the free-text search.

    `category` is either "All" or an exact category name. `search` is matched
    case-insensitively against the symbol and the notes.
    """
    wanted = category.value if isinstance(category, Category) else (category or ALL_CATEGORIES)
    needle = (search or "").lower()

    rows = []
    for t in trades:
        if wanted != ALL_CATEGORIES and classify(t.symbol).value != wanted:
            continue
        if needle and needle not in (t.symbol or "").lower() and needle not in (t.notes or "").lower():
            continue
        rows.append(t)
    return rows


def format_number(value: Optional[float]) -> str:
    """Prices and sizes as typed: no trailing `.0` on whole numbers."""
    if value is None:
        return "-"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_pl(pl: Optional[float], signed: bool = False) -> str:
    if pl is None:
        return "—"
    prefix = "+" if signed and pl >= 0 else ""
    return f"{prefix}{pl:.2f}"


def _pl_text(pl: Optional[float]) -> Text:
    if pl is None:
        return Text("—")
    return Text(format_pl(pl), style=PROFIT_STYLE if pl >= 0 else LOSS_STYLE)


def build_journal_table(trades: List[Trade], title: str = "Journal") -> Table:
    table = Table(title=title, header_style="bold")
    for column in ("Date", "Symbol", "Category", "Side", "Entry", "Exit", "Lot", "P/L", "Notes", "Screenshot", "ID"):
        table.add_column(column, justify="right" if column in ("Entry", "Exit", "Lot", "P/L") else "left")

    for t in trades:
        table.add_row(
            f"{t.date} {t.time}".strip(),
            Text(t.symbol, style="bold"),
            classify(t.symbol).value,
            t.side.value,
            format_number(t.entry),
            format_number(t.exit),
            format_number(t.lot),
            _pl_text(t.pl),
            t.notes or "",
            "yes" if t.screenshot else "—",
            t.id,
        )
    return table


def build_stats_table(summary: Dict[str, Any]) -> Table:
    """The dashboard headline numbers. Risk/reward is not tracked and shows as a dash."""
    table = Table(show_header=True, header_style="bold", title="Dashboard")
    for column in ("Net P/L", "Win Rate", "Avg RR", "Total Trades"):
        table.add_column(column, justify="center")
    net = summary["net_pl"]
    table.add_row(
        Text(f"${net:.2f}", style=PROFIT_STYLE if net >= 0 else LOSS_STYLE),
        win_rate_label(summary["win_rate"]),
        "—",
        str(summary["total_trades"]),
    )
    return table


def build_recent_table(trades: List[Trade]) -> Table:
    table = Table(title="Recent Trades", show_header=False, box=None)
    table.add_column("Trade")
    table.add_column("P/L", justify="right")
    for t in trades:
        table.add_row(
            Text.assemble((t.symbol, "bold"), "\n", (t.date, "dim")),
            Text.assemble(_pl_text(t.pl), "\n", (classify(t.symbol).value, "dim")),
        )
    return table


def ticker_line(summary: Dict[str, Any]) -> str:
    win_rate = summary["win_rate"]
    rate = "0" if win_rate is None else f"{win_rate:.1f}"
    return (
        f"Net P/L: ${summary['net_pl']:.2f}   "
        f"Wins: {summary['wins']}   "
        f"Losses: {summary['losses']}   "
        f"WinRate: {rate}%   "
        f"Trades: {summary['total_trades']}"
    )
