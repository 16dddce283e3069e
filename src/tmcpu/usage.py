"""Delta-based CPU usage between two counter snapshots."""

from .counters import CounterSnapshot

COUNTER_BITS = 64


def wrapping_sub(a: int, b: int, bits: int = COUNTER_BITS) -> int:
    """Unsigned subtraction modulo 2**bits.

    A counter that went backwards (reset, overflow) yields a huge delta
    instead of a negative one.
    """
    return (a - b) % (1 << bits)


def normalized_usage(previous: CounterSnapshot, current: CounterSnapshot) -> float:
    """Fraction of the elapsed jiffies that were busy.

    Nominally in [0, 1]. Not clamped: a zero total delta gives ``nan``
    (0/0) or ``inf`` (x/0), and inconsistent deltas can leave the range.
    """
    total_d = wrapping_sub(current.total, previous.total)
    busy_d = wrapping_sub(current.busy, previous.busy)

    if total_d == 0:
        return float("nan") if busy_d == 0 else float("inf")
    return busy_d / total_d


def delta_usage(previous: CounterSnapshot | None, current: CounterSnapshot) -> float | None:
    """Usage since ``previous``, or None when there is no baseline."""
    if previous is None:
        return None
    return normalized_usage(previous, current)
