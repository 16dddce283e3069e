"""Path utilities for tmcpu."""

import os
from pathlib import Path

DEFAULT_CACHE_DIR = Path("/tmp/tmcpu")
DEFAULT_STAT_PATH = Path("/proc/stat")


def get_config_path() -> Path:
    """Get the path to the tmcpu config file."""
    xdg_config = Path.home() / ".config"
    return xdg_config / "tmcpu" / "config.toml"


def get_log_dir() -> Path:
    """Get the directory for tmcpu logs.

    Uses the per-user XDG state directory: $XDG_STATE_HOME/tmcpu/ (default
    ~/.local/state/tmcpu/).
    """
    state_home = os.environ.get("XDG_STATE_HOME")
    state_dir = Path(state_home) if state_home else Path.home() / ".local" / "state"
    log_dir = state_dir / "tmcpu"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_log_path() -> Path:
    """Get the path to the tmcpu log file."""
    return get_log_dir() / "tmcpu.log"


def get_cache_path(cachedir: Path, client_id: str) -> Path:
    """Get the cache file for a client: ``cachedir/client_id``."""
    return cachedir / client_id
