"""
Tests for CLI interface.
"""
from pathlib import Path
from typing import List

import yaml
from typer.testing import CliRunner

from cli import app
from tradejournal.adapters.storage import JsonFileStorage
from tradejournal.store import TradeStore
from tradejournal.types import Trade

# Default CliRunner mixes stderr and stdout into the .output attribute,
# which is what we want for testing console output.
runner = CliRunner()


def create_temp_config(tmp_path: Path) -> Path:
    """Creates a temporary, valid YAML config file for testing."""
    config_path = tmp_path / "test_config.yaml"
    config_dict = {
        "storage": {"path": str(tmp_path / "data" / "journal.json"), "key": "tj_ftmo_v1"},
        "journal": {"recent_count": 6},
        "reporting": {
            "output_dir": str(tmp_path / "reports"),
            "title": "CLI Report",
            "output_formats": ["pdf", "json"],
            "rows_per_page": 25,
            "generate_plots": False,
        },
    }
    config_path.write_text(yaml.dump(config_dict))
    return config_path


def stored_trades(tmp_path: Path) -> List[Trade]:
    return TradeStore(JsonFileStorage(tmp_path / "data" / "journal.json")).load()


def add_gold_trade(config_path: Path, *extra: str):
    return runner.invoke(
        app,
        ["add", "--config", str(config_path), "--symbol", "xauusd", "--entry", "1900", "--exit", "1910",
         "--date", "2024-03-01", "--time", "10:15", *extra],
    )


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Local trade journal" in result.output


def test_cli_missing_config_file() -> None:
    """Test that commands exit if the config file does not exist."""
    result = runner.invoke(app, ["journal", "--config", "nonexistent.yaml"])
    assert result.exit_code == 2
    assert "nonexistent.yaml" in result.output


def test_cli_invalid_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("reporting: {rows_per_page: 0}")
    result = runner.invoke(app, ["dashboard", "--config", str(config_path)])
    assert result.exit_code == 1
    assert "Configuration Error" in result.output


def test_cli_config_with_non_numeric_count(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("journal: {recent_count: six}")
    result = runner.invoke(app, ["dashboard", "--config", str(config_path)])
    assert result.exit_code == 1
    assert "Configuration Error" in result.output


def test_cli_add_saves_trade(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)

    result = add_gold_trade(config_path, "--notes", "news spike")

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert "Trade saved!" in result.output
    (trade,) = stored_trades(tmp_path)
    assert trade.symbol == "XAUUSD"
    assert trade.pl == 1000.00
    assert trade.date == "2024-03-01"
    assert trade.notes == "news spike"


def test_cli_add_with_screenshot(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    image = tmp_path / "setup.png"
    image.write_bytes(b"\x89PNG\r\n\x1a\n")

    result = add_gold_trade(config_path, "--screenshot", str(image))

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    (trade,) = stored_trades(tmp_path)
    assert trade.screenshot.startswith("data:image/png;base64,")


def test_cli_add_missing_screenshot_saves_nothing(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    result = add_gold_trade(config_path, "--screenshot", str(tmp_path / "missing.png"))
    assert result.exit_code == 1
    assert not (tmp_path / "data" / "journal.json").exists()


def test_cli_add_rejects_missing_exit(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)

    result = runner.invoke(app, ["add", "--config", str(config_path), "--symbol", "EURUSD", "--entry", "1.1"])

    assert result.exit_code == 1
    assert "Please fill Symbol, Entry, and Exit" in result.output
    assert not (tmp_path / "data" / "journal.json").exists()


def test_cli_add_rejects_malformed_date(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)

    result = runner.invoke(
        app,
        ["add", "--config", str(config_path), "--symbol", "XAUUSD", "--entry", "1900", "--exit", "1910",
         "--date", "next tuesday"],
    )

    assert result.exit_code == 1
    assert "does not match" in result.output
    assert not (tmp_path / "data" / "journal.json").exists()


def test_cli_remove_with_confirmation(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    add_gold_trade(config_path)
    (trade,) = stored_trades(tmp_path)

    result = runner.invoke(app, ["remove", trade.id, "--config", str(config_path)], input="y\n")

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert "Removed trade" in result.output
    assert stored_trades(tmp_path) == []


def test_cli_remove_declined(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    add_gold_trade(config_path)
    (trade,) = stored_trades(tmp_path)

    result = runner.invoke(app, ["remove", trade.id, "--config", str(config_path)], input="n\n")

    assert result.exit_code == 0
    assert "Nothing removed" in result.output
    assert stored_trades(tmp_path) == [trade]


def test_cli_remove_unknown_id(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    result = runner.invoke(app, ["remove", "missing", "--yes", "--config", str(config_path)])
    assert result.exit_code == 0
    assert "No trade with id missing" in result.output


def test_cli_journal_filters(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    add_gold_trade(config_path)
    runner.invoke(
        app, ["add", "--config", str(config_path), "--symbol", "EURUSD", "--entry", "1.1", "--exit", "1.1010"]
    )

    all_rows = runner.invoke(app, ["journal", "--config", str(config_path)])
    gold_rows = runner.invoke(app, ["journal", "--category", "Gold", "--config", str(config_path)])
    searched = runner.invoke(app, ["journal", "--search", "eur", "--config", str(config_path)])

    assert "2 trades shown." in all_rows.output
    assert "1 trades shown." in gold_rows.output
    assert "1 trades shown." in searched.output


def test_cli_journal_unknown_category(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    result = runner.invoke(app, ["journal", "--category", "Stocks", "--config", str(config_path)])
    assert result.exit_code == 2
    assert "Unknown category" in result.output


def test_cli_dashboard(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    add_gold_trade(config_path)

    result = runner.invoke(app, ["--verbose", "dashboard", "--config", str(config_path)])

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert "Trades: 1" in result.output
    assert "Wins: 1" in result.output


def test_cli_preview() -> None:
    result = runner.invoke(
        app, ["preview", "--symbol", "XAUUSD", "--entry", "1900", "--exit", "1910", "--stop-loss", "1895"]
    )
    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert "P/L: +1000.00" in result.output
    assert "SL Risk: -500.00" in result.output


def test_cli_preview_side_is_case_insensitive() -> None:
    result = runner.invoke(
        app, ["preview", "--symbol", "XAUUSD", "--entry", "1900", "--exit", "1910", "--side", "SHORT"]
    )
    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert "P/L: -1000.00" in result.output


def test_cli_export_empty_journal(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    result = runner.invoke(app, ["export", "--config", str(config_path)])
    assert result.exit_code == 1
    assert "No trades to export" in result.output


def test_cli_export_runs(mocker, tmp_path: Path) -> None:
    """The export command hands the snapshot to the report generator."""
    config_path = create_temp_config(tmp_path)
    add_gold_trade(config_path)
    m_reports = mocker.patch("cli.generate_all_reports", return_value=[tmp_path / "reports" / "trade_report.pdf"])

    result = runner.invoke(app, ["export", "--config", str(config_path)])

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert "Export finished" in result.output
    m_reports.assert_called_once()
    _config, trades, run_dir, _console = m_reports.call_args.args
    assert [t.symbol for t in trades] == ["XAUUSD"]
    assert run_dir == tmp_path / "reports"


def test_cli_export_writes_pdf(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    add_gold_trade(config_path)
    out_dir = tmp_path / "out"

    result = runner.invoke(app, ["export", "--config", str(config_path), "--output-dir", str(out_dir)])

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert (out_dir / "trade_report.pdf").is_file()
    assert (out_dir / "summary.json").is_file()


def test_cli_charts(tmp_path: Path) -> None:
    config_path = create_temp_config(tmp_path)
    add_gold_trade(config_path)

    result = runner.invoke(app, ["charts", "--config", str(config_path), "-o", str(tmp_path / "charts")])

    assert result.exit_code == 0, f"CLI exited with error: {result.output}"
    assert (tmp_path / "charts" / "equity_curve.png").is_file()
