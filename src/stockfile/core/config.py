"""Configuration for stockfile.

Defines file locations and durability settings, loadable from TOML.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .errors import ConfigError

CONFIG_TABLE = "stockfile"


def default_temp_path(data_path: str | Path) -> Path:
    """Sibling rebuild file for data_path, never equal to data_path itself."""
    data_path = Path(data_path)
    if data_path.suffix == ".tmp":
        return data_path.with_name(data_path.name + ".tmp")
    return data_path.with_suffix(".tmp")


@dataclass
class StoreConfig:
    """Configuration parameters for the record store.

    Attributes:
        data_path: Backing binary file holding the records
        temp_path: Sibling file used while rebuilding on delete
            (defaults to data_path with a .tmp suffix, or .tmp.tmp
            when data_path already ends in .tmp)
        report_path: Destination of the text report
        fsync_every_write: Whether to fsync after append and rebuild
        log_level: Logging level name used by the CLI
        log_file: Optional file that also receives log output
    """

    data_path: str = "inventory.dat"
    temp_path: str | None = None
    report_path: str = "report.txt"
    fsync_every_write: bool = True
    log_level: str = "WARNING"
    log_file: str | None = None

    def __post_init__(self):
        if self.temp_path is None:
            self.temp_path = str(default_temp_path(self.data_path))
        if Path(self.temp_path) == Path(self.data_path):
            raise ConfigError("temp_path must differ from data_path")


_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "data_path": (str,),
    "temp_path": (str,),
    "report_path": (str,),
    "fsync_every_write": (bool,),
    "log_level": (str,),
    "log_file": (str,),
}


def load_config(path: str | Path, **overrides: Any) -> StoreConfig:
    """Load a StoreConfig from the [stockfile] table of a TOML file.

    Keyword overrides that are not None take precedence over file values.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{CONFIG_TABLE}] must be a table")

    known = {f.name for f in fields(StoreConfig)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    for key, value in table.items():
        if not isinstance(value, _FIELD_TYPES[key]):
            raise ConfigError(f"Config key {key!r} has invalid value {value!r}")

    settings = dict(table)
    settings.update({k: v for k, v in overrides.items() if v is not None})
    return StoreConfig(**settings)
