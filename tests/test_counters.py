"""Tests for tmcpu.counters - parsing the aggregate cpu line."""

import re

import pytest

from tmcpu.counters import (
    COUNTER_MASK,
    CounterSnapshot,
    CounterSourceError,
    parse_counter_line,
    read_counter_line,
    read_snapshot,
)

PROC_STAT_LINE = "cpu  10132153 290696 3084719 46828483 16683 0 25195 0 175628 0\n"


def test_parse_real_line():
    """busy = user+nice+system+irq+softirq+steal, total adds idle+iowait."""
    snapshot = parse_counter_line(PROC_STAT_LINE)
    assert snapshot.busy == 10132153 + 290696 + 3084719 + 0 + 25195 + 0
    assert snapshot.total == snapshot.busy + 46828483 + 16683


def test_parse_field_positions():
    """Each of the eight counters lands in the right sum."""
    # user nice system idle iowait irq softirq steal
    snapshot = parse_counter_line("cpu 1 2 4 8 16 32 64 128")
    assert snapshot.busy == 1 + 2 + 4 + 32 + 64 + 128
    assert snapshot.total == 255


def test_guest_fields_not_added():
    """guest and guest_nice are already part of user and nice."""
    without = parse_counter_line("cpu 1 2 3 4 5 6 7 8")
    with_guest = parse_counter_line("cpu 1 2 3 4 5 6 7 8 1000 2000")
    assert without == with_guest


def test_fields_after_the_eighth_are_ignored():
    assert parse_counter_line("cpu 1 2 3 4 5 6 7 8 junk") == CounterSnapshot(busy=27, total=36)


def test_too_few_fields():
    with pytest.raises(CounterSourceError, match="Expected 8 counters"):
        parse_counter_line("cpu 1 2 3 4 5 6 7")


def test_empty_line():
    with pytest.raises(CounterSourceError):
        parse_counter_line("")


@pytest.mark.parametrize("bad", ["-1", "1.5", "abc", "+3", "1_000"])
def test_non_integer_field(bad):
    with pytest.raises(CounterSourceError, match="change its format"):
        parse_counter_line(f"cpu 1 2 3 {bad} 5 6 7 8")


def test_field_wider_than_64_bits():
    with pytest.raises(CounterSourceError, match="64 bits"):
        parse_counter_line(f"cpu {1 << 64} 0 0 0 0 0 0 0")


def test_sums_wrap_at_64_bits():
    snapshot = parse_counter_line(f"cpu {COUNTER_MASK} 1 0 0 0 0 0 0")
    assert snapshot.busy == 0
    assert snapshot.total == 0


def test_snapshot_is_immutable():
    snapshot = CounterSnapshot(busy=1, total=2)
    with pytest.raises(AttributeError):
        snapshot.busy = 3


def test_read_counter_line_first_line_only(tmp_path):
    stat = tmp_path / "stat"
    stat.write_text(PROC_STAT_LINE + "cpu0 1 2 3 4 5 6 7 8\nintr 1\n")
    assert read_counter_line(stat) == PROC_STAT_LINE


def test_read_counter_line_missing(tmp_path):
    missing = tmp_path / "nope"
    with pytest.raises(CounterSourceError, match=re.escape(str(missing))):
        read_counter_line(missing)


def test_read_snapshot(tmp_path):
    stat = tmp_path / "stat"
    stat.write_text("cpu 100 0 0 100 0 0 0 0\n")
    assert read_snapshot(stat) == CounterSnapshot(busy=100, total=200)
