"""Tests for the shared date helpers."""
from datetime import datetime, timezone

from hedgeboard.utils.dates import parse_iso_datetime, to_epoch_seconds, years_ago


class TestParseIsoDatetime:
    def test_zulu_suffix(self):
        assert parse_iso_datetime("2024-06-01T12:00:00Z") == datetime(2024, 6, 1, 12, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_iso_datetime("2024-06-01").tzinfo == timezone.utc

    def test_invalid(self):
        assert parse_iso_datetime("yesterday") is None
        assert parse_iso_datetime("") is None
        assert parse_iso_datetime(None) is None


class TestToEpochSeconds:
    def test_seconds_unchanged(self):
        assert to_epoch_seconds(1717200000) == 1717200000

    def test_milliseconds_converted(self):
        assert to_epoch_seconds(1717200000000) == 1717200000

    def test_invalid(self):
        assert to_epoch_seconds(None) is None
        assert to_epoch_seconds("abc") is None


class TestYearsAgo:
    def test_same_day(self):
        now = datetime(2025, 6, 1, tzinfo=timezone.utc)
        assert years_ago(now, 3) == datetime(2022, 6, 1, tzinfo=timezone.utc)

    def test_leap_day(self):
        now = datetime(2024, 2, 29, tzinfo=timezone.utc)
        assert years_ago(now, 1) == datetime(2023, 2, 28, tzinfo=timezone.utc)
