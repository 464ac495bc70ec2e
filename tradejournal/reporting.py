"""
Generating exported reports from a journal snapshot.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
from matplotlib.backends.backend_pdf import PdfPages  # noqa: E402
from rich.console import Console  # noqa: E402

from tradejournal.charts import generate_charts  # noqa: E402
from tradejournal.config import Config  # noqa: E402
from tradejournal.journal import format_number  # noqa: E402
from tradejournal.metrics import compute_summary, monthly_pl, trades_frame, win_rate_label  # noqa: E402
from tradejournal.types import Trade  # noqa: E402

__all__ = ["generate_all_reports", "write_pdf_report", "report_rows", "paginate", "EmptyJournalError"]

REPORT_HEADERS = ["Date", "Time", "Symbol", "Side", "Entry", "Exit", "Lot", "P/L"]
HEADER_COLOR = (22 / 255, 160 / 255, 133 / 255)
ALT_ROW_COLOR = (240 / 255, 240 / 255, 240 / 255)
PAGE_SIZE = (8.27, 11.69)  # A4, inches


class EmptyJournalError(Exception):
    """Raised when a report is requested for a journal with no trades."""


def _to_json_serializable(data):
    """Recursively converts non-serializable types in a dictionary."""
    if isinstance(data, dict):
        return {k: _to_json_serializable(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_to_json_serializable(i) for i in data]
    if isinstance(data, (Path, pd.Timestamp)):
        return str(data)
    if data is None or (isinstance(data, float) and np.isnan(data)):
        return None
    if isinstance(data, np.integer):
        return int(data)
    if isinstance(data, np.floating):
        return None if np.isnan(data) else float(data)
    if isinstance(data, np.bool_):
        return bool(data)
    return data


def _signed_pl(pl) -> str:
    if pl is None:
        return "-"
    return f"{'+' if pl >= 0 else ''}{pl:.2f}"


def report_rows(trades: List[Trade]) -> List[List[str]]:
    """One table row per trade, in journal order."""
    return [
        [
            t.date or "-",
            t.time or "-",
            t.symbol or "-",
            t.side.value,
            format_number(t.entry),
            format_number(t.exit),
            format_number(t.lot),
            _signed_pl(t.pl),
        ]
        for t in trades
    ]


def paginate(rows: List[List[str]], rows_per_page: int) -> List[List[List[str]]]:
    """Splits table rows into pages; an empty table still yields one page."""
    if rows_per_page <= 0:
        raise ValueError("rows_per_page must be positive")
    pages = [rows[i:i + rows_per_page] for i in range(0, len(rows), rows_per_page)]
    return pages or [[]]


def _draw_table(ax, rows: List[List[str]]) -> None:
    ax.axis("off")
    if not rows:
        return
    table = ax.table(cellText=rows, colLabels=REPORT_HEADERS, loc="upper center", cellLoc="center")
    table.auto_set_font_size(False)
    table.set_fontsize(10)
    table.scale(1, 1.3)
    for (row, _col), cell in table.get_celld().items():
        if row == 0:
            cell.set_facecolor(HEADER_COLOR)
            cell.get_text().set_color("white")
            cell.get_text().set_weight("bold")
        elif row % 2 == 0:
            cell.set_facecolor(ALT_ROW_COLOR)


# impure
def write_pdf_report(trades: List[Trade], save_path: Path, title: str, rows_per_page: int) -> Path:
    """
    Writes a paginated PDF: title and totals on the first page, then the trade table.
    #impure: Writes to the filesystem.
    """
    if not trades:
        raise EmptyJournalError("No trades to export")

    summary = compute_summary(trades)
    pages = paginate(report_rows(trades), rows_per_page)

    with PdfPages(save_path) as pdf:
        for number, rows in enumerate(pages, start=1):
            fig = plt.figure(figsize=PAGE_SIZE)
            if number == 1:
                fig.text(0.07, 0.95, title, fontsize=16, weight="bold")
                fig.text(0.07, 0.915, f"Total Trades: {summary['total_trades']}", fontsize=12)
                fig.text(0.07, 0.89, f"Net P/L: {summary['net_pl']:.2f}", fontsize=12)
                table_top = 0.86
            else:
                table_top = 0.95
            ax = fig.add_axes([0.05, 0.05, 0.9, table_top - 0.05])
            _draw_table(ax, rows)
            fig.text(0.5, 0.02, f"Page {number} of {len(pages)}", ha="center", fontsize=8)
            pdf.savefig(fig)
            plt.close(fig)

        pdf.infodict()["Title"] = title
    return save_path


# impure
def _write_trade_ledger_csv(trades: List[Trade], output_dir: Path) -> Path:
    """Generates a CSV file with all trade details."""
    path = output_dir / "trade_ledger.csv"
    trades_frame(trades).to_csv(path, index=False)
    return path


# impure
def _write_summary_json(trades: List[Trade], config: Config, output_dir: Path) -> Path:
    """Generates a JSON file with summary metrics."""
    summary = {
        "title": config.reporting.title,
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "metrics": _to_json_serializable(compute_summary(trades)),
        "monthly_pl": _to_json_serializable(monthly_pl(trades).to_dict()),
    }
    path = output_dir / "summary.json"
    with path.open("w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)
    return path


# impure
def _write_summary_markdown(trades: List[Trade], config: Config, output_dir: Path) -> Path:
    """Generates a Markdown file with a human-readable summary."""
    stats = compute_summary(trades)
    md = f"# {config.reporting.title}\n\n"
    md += "## Key Metrics\n\n"
    md += f"- **Total Trades**: {stats['total_trades']}\n"
    md += f"- **Net P/L**: {stats['net_pl']:.2f}\n"
    md += f"- **Win Rate**: {win_rate_label(stats['win_rate'])}\n"
    md += f"- **Wins / Losses**: {stats['wins']} / {stats['losses']}\n"
    md += f"- **Average Win**: {stats['average_win']:.2f}\n"
    md += f"- **Average Loss**: {stats['average_loss']:.2f}\n"
    md += f"- **Profit Factor**: {stats['profit_factor']:.2f}\n"

    monthly = monthly_pl(trades)
    md += "\n## Monthly P/L\n\n| Month | P/L |\n|---|---|\n"
    for month, value in monthly.items():
        md += f"| {month} | {value:.2f} |\n"

    path = output_dir / "summary.md"
    path.write_text(md, encoding="utf-8")
    return path


# impure
def generate_all_reports(
    config: Config,
    trades: List[Trade],
    run_dir: Path,
    console: Console,
) -> List[Path]:
    """
    Orchestrates the generation of all configured reports.
    Raises EmptyJournalError when there is nothing to export.
    #impure: Writes to the filesystem.
    """
    if not trades:
        raise EmptyJournalError("No trades to export")

    run_dir.mkdir(parents=True, exist_ok=True)
    formats = config.reporting.output_formats
    written: List[Path] = []

    if "pdf" in formats:
        console.print("Generating PDF report...")
        written.append(
            write_pdf_report(
                trades, run_dir / "trade_report.pdf", config.reporting.title, config.reporting.rows_per_page
            )
        )

    if "csv" in formats:
        console.print("Generating trade ledger CSV...")
        written.append(_write_trade_ledger_csv(trades, run_dir))

    if "json" in formats:
        console.print("Generating summary JSON...")
        written.append(_write_summary_json(trades, config, run_dir))

    if "markdown" in formats:
        console.print("Generating summary Markdown...")
        written.append(_write_summary_markdown(trades, config, run_dir))

    if config.reporting.generate_plots:
        console.print("Generating charts...")
        written.extend(generate_charts(trades, run_dir))

    console.print("All reports generated.")
    return written