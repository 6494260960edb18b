"""Unit tests for EventProcessor and status classification."""
import pytest
from datetime import datetime, timedelta, timezone
from processor.event_processor import EventProcessor, classify_status, parse_timestamp
from processor.models import Event, Status


NOW = datetime(2025, 11, 15, 12, 0, 0).astimezone()


class TestClassifyStatus:
    """Test cases for classify_status."""

    def test_before_start_is_upcoming(self):
        """Test that an instant before start is UPCOMING."""
        start = NOW + timedelta(seconds=1)
        assert classify_status(NOW, start, start + timedelta(hours=1)) == Status.UPCOMING

    def test_start_boundary_is_live(self):
        """Test that now == start is LIVE (inclusive lower bound)."""
        assert classify_status(NOW, NOW, NOW + timedelta(hours=1)) == Status.LIVE

    def test_inside_window_is_live(self):
        """Test that an instant inside the window is LIVE."""
        start = NOW - timedelta(minutes=30)
        end = NOW + timedelta(minutes=30)
        assert classify_status(NOW, start, end) == Status.LIVE

    def test_end_boundary_is_past(self):
        """Test that now == end is PAST (exclusive upper bound)."""
        assert classify_status(NOW, NOW - timedelta(hours=1), NOW) == Status.PAST

    def test_end_before_start_is_past_once_started(self):
        """Test that an inverted window never reports LIVE."""
        start = NOW - timedelta(minutes=1)
        end = start - timedelta(hours=1)
        assert classify_status(NOW, start, end) == Status.PAST
        assert classify_status(start - timedelta(seconds=1), start, end) == Status.UPCOMING

    @pytest.mark.parametrize("offset_minutes", [-600, -61, -60, -59, -1, 0, 1, 59, 60, 61, 600])
    def test_statuses_are_exclusive_and_exhaustive(self, offset_minutes):
        """Test the half-open interval rule around a one hour window."""
        start = NOW
        end = NOW + timedelta(hours=1)
        now = NOW + timedelta(minutes=offset_minutes)

        status = classify_status(now, start, end)

        if now < start:
            assert status == Status.UPCOMING
        elif now < end:
            assert status == Status.LIVE
        else:
            assert status == Status.PAST


class TestParseTimestamp:
    """Test cases for parse_timestamp."""

    def test_local_datetime(self):
        """Test that timestamps without offset are kept as local time."""
        assert parse_timestamp("2025-11-15T09:00:00") == datetime(2025, 11, 15, 9, 0, 0).astimezone()

    def test_offset_datetime_converted_to_local(self):
        """Test that timestamps with an offset are converted to local time."""
        parsed = parse_timestamp("2025-11-15T09:00:00+00:00")
        expected = datetime(2025, 11, 15, 9, 0, tzinfo=timezone.utc).astimezone()

        assert parsed == expected
        assert parsed.tzinfo is not None

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2025-13-45T99:00:00", 12345])
    def test_invalid_values(self, value):
        """Test that invalid values yield None."""
        assert parse_timestamp(value) is None


class TestEventProcessor:
    """Test cases for EventProcessor class."""

    def test_normalize_event_with_end(self):
        """Test that an explicit end is used."""
        processor = EventProcessor()
        event = Event(
            name="Health Camp",
            start="2025-11-15T09:00:00",
            end="2025-11-15T17:00:00"
        )

        normalized = processor.normalize_event(event, NOW)

        assert normalized.source is event
        assert normalized.start == datetime(2025, 11, 15, 9, 0).astimezone()
        assert normalized.end == datetime(2025, 11, 15, 17, 0).astimezone()
        assert normalized.status == Status.LIVE

    def test_normalize_event_default_duration(self):
        """Test that a missing end resolves to start + 8 hours."""
        processor = EventProcessor()
        event = Event(name="Expo", start="2025-12-02T10:00:00")

        normalized = processor.normalize_event(event, NOW)

        assert normalized.end == normalized.start + timedelta(hours=8)
        assert normalized.status == Status.UPCOMING

    def test_normalize_event_invalid_end_uses_default_duration(self):
        """Test that an unparsable end falls back to the default duration."""
        processor = EventProcessor()
        event = Event(name="Expo", start="2025-12-02T10:00:00", end="later")

        normalized = processor.normalize_event(event, NOW)

        assert normalized.end == datetime(2025, 12, 2, 18, 0).astimezone()

    def test_normalize_event_custom_duration(self):
        """Test that the default duration is configurable."""
        processor = EventProcessor(default_duration_hours=2)
        event = Event(name="Expo", start="2025-12-02T10:00:00")

        assert processor.normalize_event(event, NOW).end == datetime(2025, 12, 2, 12, 0).astimezone()

    def test_normalize_event_invalid_start_excluded(self):
        """Test that events with an unparsable start are excluded."""
        processor = EventProcessor()

        assert processor.normalize_event(Event(name="Broken", start="soon"), NOW) is None
        assert processor.normalize_event(Event(name="Missing", start=None), NOW) is None

    def test_normalize_events_filters_invalid(self):
        """Test that only valid events survive normalization."""
        processor = EventProcessor()
        events = [
            Event(name="A", start="2025-11-16T09:00:00"),
            Event(name="B", start="bogus"),
            Event(name="C", start="2025-11-14T09:00:00"),
        ]

        normalized = processor.normalize_events(events, NOW)

        assert [e.source.name for e in normalized] == ["A", "C"]

    def test_partition_events_sorting(self):
        """Test bucket assignment and per-bucket ordering."""
        processor = EventProcessor()
        events = [
            Event(name="Later", start="2025-11-20T09:00:00"),
            Event(name="Sooner", start="2025-11-16T09:00:00"),
            Event(name="Live late start", start="2025-11-15T11:00:00", end="2025-11-15T13:00:00"),
            Event(name="Live early start", start="2025-11-15T08:00:00", end="2025-11-15T20:00:00"),
            Event(name="Old", start="2025-11-01T09:00:00", end="2025-11-01T10:00:00"),
            Event(name="Recent", start="2025-11-14T09:00:00", end="2025-11-14T10:00:00"),
        ]

        buckets = processor.build_buckets(events, NOW)

        assert [e.source.name for e in buckets.upcoming] == ["Sooner", "Later"]
        assert [e.source.name for e in buckets.live] == ["Live early start", "Live late start"]
        assert [e.source.name for e in buckets.past] == ["Recent", "Old"]

    def test_partition_events_stable_for_equal_keys(self):
        """Test that events with equal sort keys keep their input order."""
        processor = EventProcessor()
        events = [
            Event(name="First", start="2025-11-20T09:00:00"),
            Event(name="Second", start="2025-11-20T09:00:00"),
            Event(name="Old first", start="2025-11-01T09:00:00", end="2025-11-01T10:00:00"),
            Event(name="Old second", start="2025-11-01T08:00:00", end="2025-11-01T10:00:00"),
        ]

        buckets = processor.build_buckets(events, NOW)

        assert [e.source.name for e in buckets.upcoming] == ["First", "Second"]
        assert [e.source.name for e in buckets.past] == ["Old first", "Old second"]

    def test_partition_events_empty(self):
        """Test that no events produce empty buckets."""
        buckets = EventProcessor().partition_events([])

        assert buckets.upcoming == []
        assert buckets.live == []
        assert buckets.past == []


class TestDaylightSavingTime:
    """Test cases for events spanning a daylight saving time change."""

    def test_default_end_is_eight_elapsed_hours(self, eastern_timezone):
        """Test that the default end is 8 real hours after a start before the change."""
        event = Event(name="Night Market", start="2025-11-01T22:00:00")

        normalized = EventProcessor().normalize_event(event, parse_timestamp("2025-11-01T12:00:00"))

        assert normalized.end - normalized.start == timedelta(hours=8)
        assert normalized.end.hour == 5
        assert normalized.end.utcoffset() == timedelta(hours=-5)

    def test_status_uses_elapsed_time(self, eastern_timezone):
        """Test that an event ends 8 real hours after its start across the change."""
        event = Event(name="Night Market", start="2025-11-01T22:00:00")
        processor = EventProcessor()

        before_end = processor.normalize_event(event, parse_timestamp("2025-11-02T04:59:00"))
        after_end = processor.normalize_event(event, parse_timestamp("2025-11-02T05:30:00"))

        assert before_end.status == Status.LIVE
        assert after_end.status == Status.PAST
