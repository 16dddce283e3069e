"""Configuration management for tmcpu.

Command-line options always win; the config file only supplies defaults,
which keeps the tmux status-line command short.
"""

import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .log import get_logger
from .paths import DEFAULT_CACHE_DIR, DEFAULT_STAT_PATH, get_config_path

_log = get_logger("config")


def get_default_config() -> str:
    """Return the default config file contents."""
    return f"""\
# tmcpu configuration

[status]
# Decimal places of the displayed percentage
precision = 0
# tmux-like format strings placed before/after the percentage.
# #<style>text becomes #[style]text, with HEXGRAD in the style replaced by
# a green (idle) to red (busy) colour.
before = []
after = []

[cache]
# One file per tmux client, holding the previous sample
dir = "{DEFAULT_CACHE_DIR}"
# Register tmux hooks that delete a client's cache file when it detaches
hook = true

[source]
path = "{DEFAULT_STAT_PATH}"
"""


@dataclass
class StatusConfig:
    """Output formatting defaults."""

    precision: int = 0
    before: list[str] = field(default_factory=list)
    after: list[str] = field(default_factory=list)


@dataclass
class CacheConfig:
    """Where samples are cached and whether tmux cleans them up."""

    dir: Path = DEFAULT_CACHE_DIR
    hook: bool = True


@dataclass
class SourceConfig:
    """Where the CPU counters come from."""

    path: Path = DEFAULT_STAT_PATH


@dataclass
class Config:
    """tmcpu configuration."""

    status: StatusConfig = field(default_factory=StatusConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    source: SourceConfig = field(default_factory=SourceConfig)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file, or return defaults."""
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return Config()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return _parse_config(data)
    except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
        # stdout belongs to tmux, so warn on stderr and fall back to defaults
        print(f"Warning: Could not load config from {config_path}: {e}", file=sys.stderr)
        _log.warning("bad config %s: %s", config_path, e)
        return Config()


def _string_list(value: Any, name: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"{name} must be a string or a list of strings")
    return list(value)


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse config dict into Config object."""
    status_data = data.get("status", {})
    precision = status_data.get("precision", 0)
    if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
        raise ValueError(f"status.precision must be a non-negative integer, got {precision!r}")
    status = StatusConfig(
        precision=precision,
        before=_string_list(status_data.get("before", []), "status.before"),
        after=_string_list(status_data.get("after", []), "status.after"),
    )

    cache_data = data.get("cache", {})
    cache = CacheConfig(
        dir=Path(cache_data.get("dir", DEFAULT_CACHE_DIR)).expanduser(),
        hook=bool(cache_data.get("hook", True)),
    )

    source_data = data.get("source", {})
    source = SourceConfig(path=Path(source_data.get("path", DEFAULT_STAT_PATH)).expanduser())

    return Config(status=status, cache=cache, source=source)


def ensure_config_exists(config_path: Path | None = None) -> Path:
    """Ensure the config file exists, creating with defaults if needed."""
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(get_default_config())

    return config_path
