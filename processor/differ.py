"""Change detection between stored athletics events and feed records."""
import logging
from datetime import datetime, tzinfo
from typing import Optional

from processor.models import AthleticsEvent, AthleticsEventData, ChangeSet, FieldChange

logger = logging.getLogger(__name__)

STATUS_FIELD = 'status'
TIME_FIELD = 'time'


def diff_event(existing: AthleticsEvent, incoming: AthleticsEventData,
               tz: tzinfo) -> Optional[ChangeSet]:
    """
    Compare a stored event against the latest feed record for the same key.

    Only status and start time are compared. When either differs, the stored
    event is updated in place with the new values so the caller can persist it.

    Args:
        existing: Event currently in storage
        incoming: Feed record with the same hash key
        tz: Time zone used to describe the new start time

    Returns:
        ChangeSet listing the changed fields, or None if nothing changed
    """
    change_set = ChangeSet(hash_code=existing.hash_code)

    if existing.status != incoming.status:
        change_set.changes.append(FieldChange(
            field=STATUS_FIELD,
            old_value=existing.status,
            new_value=incoming.status,
            description=incoming.status if incoming.status else 'none'
        ))

    if existing.start_date_time != incoming.start_date_time:
        new_time = format_clock_time(incoming.start_date_time, tz)
        delta = format_time_delta(existing.start_date_time, incoming.start_date_time)
        change_set.changes.append(FieldChange(
            field=TIME_FIELD,
            old_value=existing.start_date_time,
            new_value=incoming.start_date_time,
            description=f"{new_time} ({delta})"
        ))

    if not change_set:
        return None

    existing.status = incoming.status
    existing.start_date_time = incoming.start_date_time
    logger.debug(
        f"Event '{existing.hash_code}' changed: "
        f"{', '.join(change.field for change in change_set.changes)}"
    )
    return change_set


def format_time_delta(old: datetime, new: datetime) -> str:
    """
    Describe how far a start time moved, e.g. "2 hr. 20 min. later".

    Seconds are truncated. The hour part is always included, so a
    fifteen minute move reads "0 hr. 15 min. earlier".
    """
    seconds = int((new - old).total_seconds())
    direction = 'later' if seconds >= 0 else 'earlier'
    total_minutes = abs(seconds) // 60
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours} hr. {minutes} min. {direction}"


def format_clock_time(value: datetime, tz: tzinfo) -> str:
    """Format a start time as a 12-hour clock time, e.g. "5:20 PM"."""
    local = value.astimezone(tz)
    hour = local.hour % 12 or 12
    ampm = 'PM' if local.hour >= 12 else 'AM'
    return f"{hour}:{local.minute:02d} {ampm}"
