"""Identity keys for athletics events."""
from datetime import datetime, tzinfo

from processor.models import EVENT_KINDS


def derive_event_key(team_name: str, kind: str, start_date_time: datetime,
                     tz: tzinfo) -> str:
    """
    Derive the identity key of an athletics event.

    The key is TEAM:KIND:M-D-YYYY with a one-based month, taken from the
    start date in the given time zone. It is unique as long as a team has
    at most one game and one practice per day.

    Args:
        team_name: Team the event belongs to
        kind: 'game' or 'practice'
        start_date_time: Timezone-aware event start
        tz: Time zone that defines the calendar day

    Returns:
        Event key string
    """
    local = _local_start(kind, start_date_time, tz)
    return f"{team_name}:{kind}:{local.month}-{local.day}-{local.year}"


def legacy_event_key(team_name: str, kind: str, start_date_time: datetime,
                     tz: tzinfo) -> str:
    """
    Derive the event key in the format of records written before the
    one-based key, which used a zero-based month (January is 0).
    """
    local = _local_start(kind, start_date_time, tz)
    return f"{team_name}:{kind}:{local.month - 1}-{local.day}-{local.year}"


def _local_start(kind: str, start_date_time: datetime, tz: tzinfo) -> datetime:
    if kind not in EVENT_KINDS:
        raise ValueError(f"Unknown event kind: {kind}")
    if start_date_time.tzinfo is None:
        raise ValueError("start_date_time must be timezone-aware")
    return start_date_time.astimezone(tz)
