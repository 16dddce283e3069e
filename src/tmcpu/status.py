"""One status-line refresh: cached sample in, usage out, new sample cached."""

import sys
from dataclasses import dataclass, field
from pathlib import Path

from . import tmux
from .cache import CacheCorrupt, CacheEmpty, CacheEntry, SampleCache, ensure_cache_dir
from .counters import read_snapshot
from .gradient import Gradient
from .log import get_logger
from .paths import DEFAULT_CACHE_DIR, DEFAULT_STAT_PATH
from .template import render_plain, render_raw
from .usage import delta_usage

_log = get_logger("status")


@dataclass
class Settings:
    """Everything one refresh needs, after merging config and options."""

    client_id: str
    cachedir: Path = DEFAULT_CACHE_DIR
    stat_path: Path = DEFAULT_STAT_PATH
    hook: bool = True
    precision: int = 0
    before: list[str] = field(default_factory=list)
    after: list[str] = field(default_factory=list)
    raw: bool = False


def compute_status(settings: Settings) -> str | None:
    """Compute the status-line text for one refresh.

    Returns None when there is nothing to show yet (first refresh for this
    client) or the cached sample was corrupt. The current sample is cached
    either way.

    Raises:
        CacheError: the cache dir/file can't be created, opened or written.
        CounterSourceError: the counters can't be read.
    """
    ensure_cache_dir(settings.cachedir)

    on_create = tmux.register_cleanup_hooks if settings.hook else None
    with SampleCache.open(settings.cachedir, settings.client_id, on_create=on_create) as cache:
        current = read_snapshot(settings.stat_path)
        cached = cache.read()

        out = None
        if isinstance(cached, CacheEmpty):
            print(f"{cache.path} is empty; no baseline.", file=sys.stderr)
            _log.info("no baseline for client %s", settings.client_id)
        elif isinstance(cached, CacheCorrupt):
            print(
                f"Error parsing {cache.path}: {cached.reason}\n{cached.content!r}",
                file=sys.stderr,
            )
            _log.warning("corrupt cache %s: %s", cache.path, cached.reason)
        else:
            usage = delta_usage(cached.to_snapshot(), current)
            gradient = Gradient(usage)
            if settings.raw:
                out = render_raw(usage, settings.precision, gradient)
            else:
                out = render_plain(
                    usage, settings.precision, settings.before, settings.after, gradient
                )
            _log.debug(
                "client %s usage=%r gradient computed=%s",
                settings.client_id,
                usage,
                gradient.computed,
            )

        cache.write(CacheEntry.from_snapshot(current))

    return out
