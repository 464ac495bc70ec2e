"""
Configuration loading and validation for the trade journal.

Configuration objects are frozen standard library dataclasses built from a
YAML file by a small recursive converter, after explicit validation of the
raw dictionary.
"""

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Dict, Any, Type, cast

__all__ = ["load_config", "default_config", "Config"]

REPORT_FORMATS = ("pdf", "csv", "json", "markdown")


# §1. Nested Configuration Dataclasses
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class StorageConfig:
    path: Path = Path("data/journal.json")
    key: str = "tj_ftmo_v1"


@dataclass(frozen=True)
class JournalConfig:
    recent_count: int = 6


@dataclass(frozen=True)
class ReportingConfig:
    output_dir: Path = Path("reports")
    title: str = "Backtesting Report"
    output_formats: List[Literal["pdf", "csv", "json", "markdown"]] = field(
        default_factory=lambda: ["pdf"]
    )
    rows_per_page: int = 25
    generate_plots: bool = False


# §2. Top-Level Configuration
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class Config:
    """The root configuration object, composing all nested sections."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    journal: JournalConfig = field(default_factory=JournalConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)


def default_config() -> Config:
    """Built-in settings used when no configuration file is given."""
    return Config()


# §3. Validation and Loading
# --------------------------------------------------------------------------------------


def _from_dict(data_class: Type[Any], data: Any) -> Any:
    """Recursively creates nested dataclasses from a dictionary."""
    if isinstance(data, dict) and hasattr(data_class, "__dataclass_fields__"):
        field_types = {f.name: f.type for f in data_class.__dataclass_fields__.values()}

        kwargs = {}
        for k, v in data.items():
            field_type = field_types.get(k)
            # Unknown keys are passed through so the dataclass constructor
            # raises a TypeError for them, which the caller reports.
            kwargs[k] = _from_dict(field_type, v) if field_type else v
        return data_class(**kwargs)

    # Convert path strings to Path objects
    if isinstance(data, str) and data_class is Path:
        return Path(data)
    return data


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_config(cfg: Dict[str, Any]) -> None:
    """
    Performs simple, explicit validation checks on the raw config dictionary.
    Fail fast on any logical inconsistencies.
    """
    if not isinstance(cfg, dict):
        raise ValueError("Configuration must be a YAML object.")

    for section in ("storage", "journal", "reporting"):
        if section in cfg and not isinstance(cfg[section], dict):
            raise ValueError(f"Configuration section '{section}' must be a mapping.")

    storage = cfg.get("storage", {})
    if "key" in storage and not str(storage["key"] or "").strip():
        raise ValueError("storage.key must not be empty")

    journal = cfg.get("journal", {})
    if "recent_count" in journal and not _is_int(journal["recent_count"]):
        raise ValueError("journal.recent_count must be an integer")
    if journal.get("recent_count", 0) < 0:
        raise ValueError("journal.recent_count must not be negative")

    reporting = cfg.get("reporting", {})
    if "rows_per_page" in reporting and not _is_int(reporting["rows_per_page"]):
        raise ValueError("reporting.rows_per_page must be an integer")
    if reporting.get("rows_per_page", 1) <= 0:
        raise ValueError("reporting.rows_per_page must be positive")

    if not isinstance(reporting.get("output_formats", []), list):
        raise ValueError("reporting.output_formats must be a list")
    unknown = set(reporting.get("output_formats", [])) - set(REPORT_FORMATS)
    if unknown:
        raise ValueError(
            f"reporting.output_formats contains unsupported formats: {', '.join(sorted(unknown))}"
        )


# impure
def load_config(config_path: Path) -> Config:
    """
    Loads and validates a YAML configuration file into a Config object.
    Missing sections and keys take their defaults.
    #impure: Reads from the filesystem.
    """
    if not config_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in {config_path}: {e}") from e

    if raw_config is None:
        raw_config = {}

    _validate_config(raw_config)

    try:
        # We cast here because _from_dict is too dynamic for mypy to track types.
        return cast(Config, _from_dict(Config, raw_config))
    except (TypeError, KeyError) as e:
        raise ValueError(f"Configuration validation failed: missing or invalid key. Details: {e}") from e
