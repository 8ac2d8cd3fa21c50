"""Tests for the timing log."""
from timings import TimingLog, log_path


def test_flush_appends(tmp_path):
    timing_log = TimingLog(tmp_path, 2)
    timing_log.record("bloom_add", 120)
    timing_log.flush()
    timing_log.record("session", 5, "us")
    timing_log.flush()

    assert timing_log.path == log_path(tmp_path, 2)
    assert timing_log.path.read_text().splitlines() == ["bloom_add,120,ns", "session,5,us"]


def test_flush_without_rows_writes_nothing(tmp_path):
    timing_log = TimingLog(tmp_path, 0)
    timing_log.flush()
    assert not timing_log.path.exists()


def test_timed_returns_result(tmp_path):
    timing_log = TimingLog(tmp_path, 1)
    assert timing_log.timed("sum", sum, [1, 2, 3]) == 6
    assert timing_log.rows[0][0] == "sum"
    assert timing_log.rows[0][1] >= 0
