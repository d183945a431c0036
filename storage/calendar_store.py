"""Storage for school calendar events."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

import boto3

from processor.models import CalendarEvent
from storage.dynamodb_manager import DynamoDBManager

logger = logging.getLogger(__name__)


def serialize_datetime(value: datetime) -> str:
    """Store timestamps as UTC ISO 8601 strings."""
    return value.astimezone(timezone.utc).isoformat()


def deserialize_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


class CalendarEventStore(DynamoDBManager):
    """School calendar event table, keyed by event_id."""

    def __init__(self, table_name: str,
                 session: Optional[boto3.session.Session] = None):
        super().__init__(table_name, key_name='event_id', session=session)

    def create_events(self, events: List[CalendarEvent]) -> int:
        """Bulk-create calendar events."""
        return self.batch_put_items([self._event_to_item(event) for event in events])

    def _item_to_event(self, item: dict) -> Optional[CalendarEvent]:
        try:
            return CalendarEvent(
                event_id=item['event_id'],
                event_name=item['event_name'],
                start_date_time=deserialize_datetime(item['start_date_time']),
                end_date_time=(
                    deserialize_datetime(item['end_date_time'])
                    if item.get('end_date_time') else None
                ),
                location=item.get('location')
            )
        except (KeyError, ValueError) as e:
            logger.warning(f"Failed to convert item to CalendarEvent: {e}")
            return None

    def _event_to_item(self, event: CalendarEvent) -> dict:
        item = {
            'event_id': event.event_id,
            'event_name': event.event_name,
            'start_date_time': serialize_datetime(event.start_date_time)
        }

        # Add optional fields if present
        if event.end_date_time:
            item['end_date_time'] = serialize_datetime(event.end_date_time)
        if event.location:
            item['location'] = event.location

        return item
