"""Aggregate CPU counters from /proc/stat.

Only the first line (the ``cpu`` aggregate) is used:

    cpu  user nice system idle iowait irq softirq steal guest guest_nice

guest and guest_nice are already accounted for in user and nice
respectively (htop does the same), so they are never added.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from .log import get_logger
from .paths import DEFAULT_STAT_PATH

_log = get_logger("counters")

COUNTER_MASK = (1 << 64) - 1

# user, nice, system, idle, iowait, irq, softirq, steal
_FIELD_COUNT = 8
_DIGITS = re.compile(r"[0-9]+")


class CounterSourceError(Exception):
    """The counter source is missing or not in the expected format."""


@dataclass(slots=True, frozen=True)
class CounterSnapshot:
    """Busy and total jiffies at one point in time."""

    busy: int
    total: int


def _parse_field(token: str, line: str) -> int:
    if not _DIGITS.fullmatch(token):
        raise CounterSourceError(
            f"Did /proc/stat change its format? Bad field {token!r} in {line!r}"
        )
    value = int(token)
    if value > COUNTER_MASK:
        raise CounterSourceError(f"Counter {token} in {line!r} does not fit in 64 bits")
    return value


def parse_counter_line(line: str) -> CounterSnapshot:
    """Parse the aggregate ``cpu`` line into a snapshot.

    Raises:
        CounterSourceError: fewer than eight counters, or a counter that is
            not a non-negative integer.
    """
    tokens = line.split()[1:]  # cpu
    if len(tokens) < _FIELD_COUNT:
        raise CounterSourceError(
            f"Did /proc/stat change its format? Expected {_FIELD_COUNT} counters, "
            f"got {len(tokens)} in {line.strip()!r}"
        )

    user, nice, system, idle, iowait, irq, softirq, steal = (
        _parse_field(token, line.strip()) for token in tokens[:_FIELD_COUNT]
    )

    busy = (user + nice + system + irq + softirq + steal) & COUNTER_MASK
    total = (busy + idle + iowait) & COUNTER_MASK
    return CounterSnapshot(busy=busy, total=total)


def read_counter_line(path: Path = DEFAULT_STAT_PATH) -> str:
    """Read the first line of the counter source."""
    try:
        with open(path, encoding="ascii") as f:
            return f.readline()
    except FileNotFoundError as e:
        raise CounterSourceError(f"Your system does not have a {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise CounterSourceError(f"Error reading from {path}: {e}") from e


def read_snapshot(path: Path = DEFAULT_STAT_PATH) -> CounterSnapshot:
    """Read and parse the current counters."""
    snapshot = parse_counter_line(read_counter_line(path))
    _log.debug("counters from %s: busy=%d total=%d", path, snapshot.busy, snapshot.total)
    return snapshot
