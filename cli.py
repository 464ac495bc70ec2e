"""
CLI entry point for the trade journal.
"""
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from tradejournal.adapters.attachments import AttachmentError, read_screenshot
from tradejournal.adapters.storage import JsonFileStorage
from tradejournal.charts import generate_charts
from tradejournal.config import Config, default_config, load_config
from tradejournal.instruments import classify, compute_pl, stop_loss_risk
from tradejournal.journal import (
    build_journal_table,
    build_recent_table,
    build_stats_table,
    filter_trades,
    format_pl,
    ticker_line,
)
from tradejournal.metrics import compute_summary, recent_trades
from tradejournal.reporting import EmptyJournalError, generate_all_reports
from tradejournal.store import TradeStore, TradeValidationError
from tradejournal.types import ALL_CATEGORIES, Category, TradeDraft

# Log to stderr to separate from potential data output to stdout.
app = typer.Typer(pretty_exceptions_show_locals=False, help="Local trade journal with P/L tracking and reports.")
console = Console(stderr=True)

CATEGORY_CHOICES = [ALL_CATEGORIES] + [c.value for c in Category]

ConfigOption = typer.Option(
    None, "--config", "-c", help="Path to the YAML configuration file.", exists=True, dir_okay=False
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show log messages."),
):
    """Local trade journal with P/L tracking and reports."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config_or_exit(config_path: Optional[Path]) -> Config:
    """Helper to load config and exit on failure."""
    if config_path is None:
        return default_config()
    try:
        return load_config(config_path)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        raise typer.Exit(code=1)


def _open_store(config: Config) -> TradeStore:
    store = TradeStore(JsonFileStorage(config.storage.path), key=config.storage.key)
    store.load()
    return store


@app.command()
def add(
    symbol: Optional[str] = typer.Option(None, "--symbol", "-s", help="Instrument symbol, e.g. XAUUSD."),
    entry: Optional[float] = typer.Option(None, "--entry", help="Entry price."),
    exit_price: Optional[float] = typer.Option(None, "--exit", help="Exit price."),
    side: str = typer.Option("long", "--side", help="long or short."),
    lot: Optional[float] = typer.Option(None, "--lot", help="Lot size (default 1)."),
    contract: Optional[float] = typer.Option(None, "--contract", help="Contract size (default 1)."),
    trade_date: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default today)."),
    trade_time: Optional[str] = typer.Option(None, "--time", help="HH:MM (default now)."),
    notes: str = typer.Option("", "--notes", help="Free text notes."),
    screenshot: Optional[Path] = typer.Option(None, "--screenshot", help="Image file to attach."),
    config_path: Optional[Path] = ConfigOption,
):
    """Record a closed trade."""
    config = _load_config_or_exit(config_path)
    store = _open_store(config)

    draft = TradeDraft(
        symbol=symbol,
        entry=entry,
        exit=exit_price,
        side=side,
        lot=lot,
        contract=contract,
        date=trade_date,
        time=trade_time,
        notes=notes,
    )
    # The attachment is read completely before the trade is inserted.
    if screenshot is not None:
        try:
            draft.screenshot = read_screenshot(screenshot)
        except AttachmentError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)

    try:
        trade = store.insert(draft)
    except TradeValidationError as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(code=1)

    console.print(
        f"[bold green]Trade saved![/bold green] {trade.symbol} ({classify(trade.symbol).value}) "
        f"P/L {format_pl(trade.pl, signed=True)}  id={trade.id}"
    )


@app.command()
def remove(
    trade_id: str = typer.Argument(..., help="Id of the trade to remove."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
    config_path: Optional[Path] = ConfigOption,
):
    """Remove a trade by id."""
    config = _load_config_or_exit(config_path)
    store = _open_store(config)

    trade = store.get(trade_id)
    if trade is None:
        console.print(f"[yellow]No trade with id {trade_id}.[/yellow]")
        raise typer.Exit()

    if not yes and not typer.confirm(f"Remove this trade? {trade.date} {trade.symbol} {format_pl(trade.pl)}"):
        console.print("Nothing removed.")
        raise typer.Exit()

    store.remove(trade_id)
    console.print(f"[bold green]Removed trade {trade_id}.[/bold green]")


@app.command()
def journal(
    category: str = typer.Option(ALL_CATEGORIES, "--category", help=f"One of: {', '.join(CATEGORY_CHOICES)}."),
    search: str = typer.Option("", "--search", help="Case-insensitive match on symbol and notes."),
    config_path: Optional[Path] = ConfigOption,
):
    """List trades, newest first."""
    if category not in CATEGORY_CHOICES:
        console.print(f"[bold red]Unknown category {category!r}.[/bold red] Choose from {', '.join(CATEGORY_CHOICES)}.")
        raise typer.Exit(code=2)
    config = _load_config_or_exit(config_path)
    trades = filter_trades(_open_store(config).snapshot(), category, search)
    console.print(build_journal_table(trades))
    console.print(f"{len(trades)} trades shown.")


@app.command()
def dashboard(config_path: Optional[Path] = ConfigOption):
    """Show headline statistics and the most recent trades."""
    config = _load_config_or_exit(config_path)
    trades = _open_store(config).snapshot()
    summary = compute_summary(trades)
    console.print(build_stats_table(summary))
    console.print(build_recent_table(recent_trades(trades, config.journal.recent_count)))
    console.rule()
    console.print(ticker_line(summary))


@app.command()
def preview(
    symbol: str = typer.Option(..., "--symbol", "-s", help="Instrument symbol."),
    entry: float = typer.Option(..., "--entry", help="Entry price."),
    exit_price: float = typer.Option(..., "--exit", help="Exit price."),
    side: str = typer.Option("long", "--side", help="long or short."),
    lot: Optional[float] = typer.Option(None, "--lot", help="Lot size (default 1)."),
    contract: Optional[float] = typer.Option(None, "--contract", help="Contract size (default 1)."),
    stop_loss: Optional[float] = typer.Option(None, "--stop-loss", help="Stop-loss price for a risk estimate."),
):
    """Show the category and P/L a trade would get, without saving it."""
    lot = lot or 1
    contract = contract or 1
    side = side.strip().lower()
    try:
        pl = compute_pl(symbol, entry, exit_price, lot, contract, side)
        risk = stop_loss_risk(symbol, entry, stop_loss, lot, contract, side) if stop_loss is not None else None
    except ValueError:
        console.print(f"[bold red]Side must be 'long' or 'short', got {side!r}.[/bold red]")
        raise typer.Exit(code=1)

    line = f"{symbol.upper()} ({classify(symbol).value})  P/L: {format_pl(pl, signed=True)}"
    if risk is not None:
        line += f" | SL Risk: {risk:.2f}"
    console.print(line)


@app.command()
def export(
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Overrides reporting.output_dir."),
    config_path: Optional[Path] = ConfigOption,
):
    """Export the journal as a PDF report plus the other configured formats."""
    config = _load_config_or_exit(config_path)
    trades = _open_store(config).snapshot()
    run_dir = output_dir or config.reporting.output_dir

    try:
        written = generate_all_reports(config, trades, run_dir, console)
    except EmptyJournalError as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(code=1)

    for path in written:
        console.print(f" - [cyan]{path}[/cyan]")
    console.print("[bold green]Export finished.[/bold green]")


@app.command()
def charts(
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Overrides reporting.output_dir."),
    config_path: Optional[Path] = ConfigOption,
):
    """Render the equity, win/loss and monthly P/L charts as PNG files."""
    config = _load_config_or_exit(config_path)
    trades = _open_store(config).snapshot()
    if not trades:
        console.print("[yellow]No trades to chart.[/yellow]")
        raise typer.Exit()

    for path in generate_charts(trades, output_dir or config.reporting.output_dir):
        console.print(f" - [cyan]{path}[/cyan]")


if __name__ == "__main__":
    app()
