"""Per-client cache of the previous counter sample.

Each tmux client gets one file, ``<cachedir>/<client_pid>``, holding the
busy and total counters from the last refresh:

    000...00012345
    000...00067890

Both fields are zero padded to 64 characters (one per bit of the counter
width, which comfortably covers the 20 digits of 2**64 - 1). Every write
is therefore exactly the same length, so rewriting in place from offset 0
never leaves stale trailing bytes and the file never needs truncating.
"""

import os
import re
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .counters import COUNTER_MASK, CounterSnapshot
from .log import get_logger
from .paths import get_cache_path
from .usage import COUNTER_BITS

_log = get_logger("cache")

FIELD_WIDTH = COUNTER_BITS
ENCODED_LENGTH = 2 * FIELD_WIDTH + 1

_DIGITS = re.compile(r"[0-9]+")


class CacheError(Exception):
    """The cache directory or file cannot be created, opened or written."""


@dataclass(slots=True, frozen=True)
class CacheEmpty:
    """Nothing cached yet for this client: no baseline."""


@dataclass(slots=True, frozen=True)
class CacheCorrupt:
    """Cache content that is neither empty nor two counters."""

    content: str
    reason: str


@dataclass(slots=True, frozen=True)
class CacheEntry:
    """A well-formed cached sample."""

    busy: int
    total: int

    @classmethod
    def from_snapshot(cls, snapshot: CounterSnapshot) -> "CacheEntry":
        return cls(busy=snapshot.busy, total=snapshot.total)

    def to_snapshot(self) -> CounterSnapshot:
        return CounterSnapshot(busy=self.busy, total=self.total)


DecodeResult = CacheEmpty | CacheCorrupt | CacheEntry


def encode_entry(entry: CacheEntry | CounterSnapshot) -> str:
    """Encode a sample as two fixed-width lines (no trailing newline)."""
    for value in (entry.busy, entry.total):
        if not 0 <= value <= COUNTER_MASK:
            raise ValueError(f"{value} does not fit in {COUNTER_BITS} bits")
    return f"{entry.busy:0{FIELD_WIDTH}d}\n{entry.total:0{FIELD_WIDTH}d}"


def _decode_field(name: str, field: str, content: str) -> int | CacheCorrupt:
    if not _DIGITS.fullmatch(field):
        return CacheCorrupt(content, f"{name} field {field!r} is not a decimal integer")
    value = int(field)
    if value > COUNTER_MASK:
        return CacheCorrupt(content, f"{name} field {field!r} does not fit in {COUNTER_BITS} bits")
    return value


def decode_entry(content: str) -> DecodeResult:
    """Decode cache content into a tagged result.

    Empty content (or two empty fields) is ``CacheEmpty``; two valid
    counters are a ``CacheEntry``; anything else is ``CacheCorrupt``.
    """
    if not content:
        return CacheEmpty()

    busy_field, sep, total_field = content.partition("\n")
    if not sep:
        return CacheCorrupt(content, "expected two newline separated fields")
    if not busy_field and not total_field:
        return CacheEmpty()

    busy = _decode_field("busy", busy_field, content)
    if isinstance(busy, CacheCorrupt):
        return busy
    total = _decode_field("total", total_field, content)
    if isinstance(total, CacheCorrupt):
        return total
    return CacheEntry(busy=busy, total=total)


def ensure_cache_dir(cachedir: Path) -> None:
    """Create the cache directory if it doesn't exist yet."""
    try:
        cachedir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheError(f"Could not create {cachedir}: {e}") from e


def _check_client_id(client_id: str) -> None:
    if not client_id or client_id in (".", "..") or "/" in client_id or "\0" in client_id:
        raise CacheError(f"Invalid client id {client_id!r}: must be a plain file name")


class SampleCache:
    """An open cache file for one client.

    Use as a context manager; the file is closed on exit.
    """

    def __init__(self, path: Path, file: BinaryIO, created: bool = False) -> None:
        self.path = path
        self.created = created
        self._file = file

    @classmethod
    def open(
        cls,
        cachedir: Path,
        client_id: str,
        on_create: Callable[[Path], object] | None = None,
    ) -> "SampleCache":
        """Open (creating if absent) the cache file for ``client_id``.

        ``on_create`` runs once, before the file is created, only when the
        file did not exist. It is best-effort: its exceptions are logged.
        """
        _check_client_id(client_id)
        path = get_cache_path(cachedir, client_id)

        created = False
        try:
            fd = os.open(path, os.O_RDWR)
        except FileNotFoundError:
            created = True
            if on_create is not None:
                try:
                    on_create(path)
                except Exception as e:
                    print(f"Could not run creation hook for {path}: {e}", file=sys.stderr)
                    _log.warning("creation hook failed for %s: %s", path, e, exc_info=True)
            try:
                fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
            except OSError as e:
                raise CacheError(f"Could not create {path}: {e}") from e
            _log.info("created %s", path)
        except OSError as e:
            raise CacheError(f"Could not open {path}: {e}") from e

        return cls(path, os.fdopen(fd, "r+b"), created=created)

    def read(self) -> DecodeResult:
        """Read the whole file and decode it.

        A file that exists but can't be read is treated as empty.
        """
        try:
            content = self._file.read().decode("ascii")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading from {self.path}: {e}", file=sys.stderr)
            _log.warning("unreadable cache %s: %s", self.path, e)
            return CacheEmpty()
        return decode_entry(content)

    def write(self, entry: CacheEntry | CounterSnapshot) -> None:
        """Overwrite the file from offset 0 with ``entry``."""
        data = encode_entry(entry).encode("ascii")
        try:
            self._file.seek(0)
        except OSError as e:
            raise CacheError(f"Could not rewind cursor on {self.path}: {e}") from e
        try:
            self._file.write(data)
            self._file.flush()
        except OSError as e:
            raise CacheError(f"Could not write stats to {self.path}: {e}") from e

    def close(self) -> None:
        """Close the file; a failure to flush pending bytes is a write failure."""
        try:
            self._file.close()
        except OSError as e:
            raise CacheError(f"Could not write stats to {self.path}: {e}") from e

    def __enter__(self) -> "SampleCache":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.close()
        except CacheError as e:
            if exc_type is None:
                raise
            # keep the error that is already propagating
            _log.warning("closing %s after %s: %s", self.path, exc_type.__name__, e)
