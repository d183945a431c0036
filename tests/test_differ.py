"""Unit tests for athletics event change detection."""
from datetime import datetime, timedelta, timezone

from processor.differ import diff_event, format_clock_time, format_time_delta
from processor.models import AthleticsEvent, AthleticsEventData


def make_event(tz, status=None, start=None):
    return AthleticsEvent(
        hash_code='JV Tennis:game:9-12-2024',
        team_name='JV Tennis',
        kind='game',
        start_date_time=start or datetime(2024, 9, 12, 15, 0, tzinfo=tz),
        status=status,
        opponent='Sidwell'
    )


def make_record(tz, status=None, start=None):
    return AthleticsEventData(
        team_name='JV Tennis',
        kind='game',
        start_date_time=start or datetime(2024, 9, 12, 15, 0, tzinfo=tz),
        status=status,
        opponent='Sidwell'
    )


class TestDiffEvent:
    """Test cases for diff_event."""

    def test_no_change_returns_none_and_does_not_mutate(self, tz):
        event = make_event(tz, status='POSTPONED')
        before = AthleticsEvent(**vars(event))

        assert diff_event(event, make_record(tz, status='POSTPONED'), tz) is None
        assert event == before

    def test_same_instant_in_other_zone_is_no_change(self, tz):
        """Test equal instants compare equal across time zones."""
        event = make_event(tz)
        utc_start = event.start_date_time.astimezone(timezone.utc)

        assert diff_event(event, make_record(tz, start=utc_start), tz) is None

    def test_status_change(self, tz):
        event = make_event(tz)

        change_set = diff_event(event, make_record(tz, status='CANCELLED'), tz)

        assert change_set is not None
        assert len(change_set.changes) == 1
        change = change_set.changes[0]
        assert change.field == 'status'
        assert change.old_value is None
        assert change.new_value == 'CANCELLED'
        assert change.description == 'CANCELLED'
        assert event.status == 'CANCELLED'

    def test_status_cleared(self, tz):
        event = make_event(tz, status='CANCELLED')

        change_set = diff_event(event, make_record(tz), tz)

        assert change_set.changes[0].description == 'none'
        assert event.status is None

    def test_time_change(self, tz):
        event = make_event(tz)
        new_start = datetime(2024, 9, 12, 17, 20, tzinfo=tz)

        change_set = diff_event(event, make_record(tz, start=new_start), tz)

        assert [change.field for change in change_set.changes] == ['time']
        assert change_set.changes[0].description == '5:20 PM (2 hr. 20 min. later)'
        assert event.start_date_time == new_start

    def test_status_and_time_change(self, tz):
        event = make_event(tz)
        new_start = datetime(2024, 9, 12, 14, 45, tzinfo=tz)

        change_set = diff_event(event, make_record(tz, status='MOVED', start=new_start), tz)

        assert [change.field for change in change_set.changes] == ['status', 'time']
        assert change_set.hash_code == event.hash_code
        assert event.status == 'MOVED'
        assert event.start_date_time == new_start

    def test_non_diffed_fields_ignored(self, tz):
        """Test opponent and other creation-only fields are not compared."""
        event = make_event(tz)
        record = make_record(tz)
        record.opponent = 'Georgetown Day'
        record.result = 'Win'

        assert diff_event(event, record, tz) is None
        assert event.opponent == 'Sidwell'


class TestFormatTimeDelta:
    """Test cases for format_time_delta."""

    def test_later(self, tz):
        old = datetime(2024, 9, 12, 15, 0, tzinfo=tz)
        new = datetime(2024, 9, 12, 17, 20, tzinfo=tz)
        assert format_time_delta(old, new) == '2 hr. 20 min. later'

    def test_earlier_keeps_zero_hours(self, tz):
        old = datetime(2024, 9, 12, 15, 0, tzinfo=tz)
        assert format_time_delta(old, old - timedelta(minutes=15)) == '0 hr. 15 min. earlier'

    def test_seconds_truncated(self, tz):
        old = datetime(2024, 9, 12, 15, 0, tzinfo=tz)
        assert format_time_delta(old, old + timedelta(minutes=1, seconds=59)) == \
            '0 hr. 1 min. later'
        assert format_time_delta(old, old - timedelta(hours=1, seconds=59)) == \
            '1 hr. 0 min. earlier'


def test_format_clock_time(tz):
    assert format_clock_time(datetime(2024, 9, 12, 0, 5, tzinfo=tz), tz) == '12:05 AM'
    assert format_clock_time(datetime(2024, 9, 12, 12, 0, tzinfo=tz), tz) == '12:00 PM'
    assert format_clock_time(datetime(2024, 9, 12, 17, 20, tzinfo=tz), tz) == '5:20 PM'
