"""Event processor for validating and normalizing calendar feed data."""
import logging
import uuid
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional

from processor.models import (
    AthleticsEventData,
    AthleticsTeam,
    CalendarEvent,
    EVENT_KINDS,
)

logger = logging.getLogger(__name__)


class EventProcessor:
    """Processor for turning raw feed JSON into typed records."""

    def __init__(self, tz: tzinfo):
        """
        Initialize the processor.

        Args:
            tz: Time zone assumed for feed timestamps without an offset
        """
        self.tz = tz
        self.invalid_count = 0

    def process_school_calendar(self, raw_events: List[Dict[str, Any]]) -> List[CalendarEvent]:
        """
        Process and validate school calendar records.

        Args:
            raw_events: List of raw event dicts from /schoolCalendar

        Returns:
            List of CalendarEvent objects with fresh event IDs
        """
        events = []

        for raw in raw_events:
            event = self._process_calendar_event(raw)
            if event:
                events.append(event)

        logger.info(
            f"Processed {len(events)} valid calendar events out of "
            f"{len(raw_events)} total events"
        )
        return events

    def process_athletics_events(self, raw_events: List[Dict[str, Any]],
                                 kind: str) -> List[AthleticsEventData]:
        """
        Process and validate game or practice records, keeping feed order.

        Args:
            raw_events: List of raw event dicts from /athleticsCalendar
            kind: 'game' or 'practice'

        Returns:
            List of AthleticsEventData objects
        """
        if kind not in EVENT_KINDS:
            raise ValueError(f"Unknown event kind: {kind}")

        events = []
        for raw in raw_events:
            event = self._process_athletics_event(raw, kind)
            if event:
                events.append(event)

        logger.info(
            f"Processed {len(events)} valid {kind} records out of "
            f"{len(raw_events)} total records"
        )
        return events

    def process_athletics_teams(self, raw_teams: Dict[str, List[str]]) -> List[AthleticsTeam]:
        """
        Build AthleticsTeam objects from a season -> team names mapping.

        Args:
            raw_teams: Mapping of season name to list of team names

        Returns:
            List of AthleticsTeam objects with empty games and practices
        """
        teams = []
        seen_names = set()
        for season, team_names in raw_teams.items():
            if not isinstance(team_names, list):
                logger.warning(f"Season '{season}' has no team list, skipping")
                self.invalid_count += 1
                continue
            for team_name in team_names:
                if not isinstance(team_name, str) or not team_name.strip():
                    logger.warning(f"Invalid team name in season '{season}': {team_name!r}")
                    self.invalid_count += 1
                    continue
                # Team names are the storage key
                if team_name in seen_names:
                    logger.warning(f"Duplicate team '{team_name}' in season '{season}', skipping")
                    self.invalid_count += 1
                    continue
                seen_names.add(team_name)
                teams.append(AthleticsTeam(team_name=team_name, season=season))
        return teams

    def _process_calendar_event(self, raw: Dict[str, Any]) -> Optional[CalendarEvent]:
        if not isinstance(raw, dict):
            self._reject(f"Calendar record is not an object: {raw!r}")
            return None

        event_name = _optional_str(raw.get('eventName'))
        if not event_name:
            self._reject("Calendar event missing required field: eventName")
            return None

        start = self.parse_date_time(raw.get('startDateTime'))
        if not start:
            self._reject(
                f"Calendar event '{event_name}' has invalid startDateTime: "
                f"{raw.get('startDateTime')!r}"
            )
            return None

        end = None
        if raw.get('endDateTime'):
            end = self.parse_date_time(raw['endDateTime'])
            if not end:
                logger.warning(
                    f"Ignoring invalid endDateTime for '{event_name}': {raw['endDateTime']!r}"
                )

        return CalendarEvent(
            event_id=str(uuid.uuid4()),
            event_name=event_name,
            start_date_time=start,
            end_date_time=end,
            location=_optional_str(raw.get('location'))
        )

    def _process_athletics_event(self, raw: Dict[str, Any],
                                 kind: str) -> Optional[AthleticsEventData]:
        if not isinstance(raw, dict):
            self._reject(f"Athletics record is not an object: {raw!r}")
            return None

        team_name = _optional_str(raw.get('team'))
        if not team_name:
            self._reject(f"Athletics {kind} missing required field: team")
            return None

        start = self.parse_date_time(raw.get('startDateTime'))
        if not start:
            self._reject(
                f"{team_name} {kind} has invalid startDateTime: {raw.get('startDateTime')!r}"
            )
            return None

        is_home = raw.get('isHome')
        if not isinstance(is_home, bool):
            is_home = None

        return AthleticsEventData(
            team_name=team_name,
            kind=kind,
            start_date_time=start,
            is_home=is_home,
            opponent=_optional_str(raw.get('opponent')),
            location=_optional_str(raw.get('location')),
            result=_optional_str(raw.get('result')),
            status=_optional_str(raw.get('status'))
        )

    def parse_date_time(self, value: Any) -> Optional[datetime]:
        """
        Parse an ISO 8601 timestamp into a timezone-aware datetime.

        Args:
            value: Timestamp string, e.g. "2024-09-10T19:00:00.000Z"

        Returns:
            Aware datetime, or None if the value cannot be parsed
        """
        if not isinstance(value, str) or not value.strip():
            return None

        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'

        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

        # Timestamps without an offset are local to the school
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self.tz)
        return parsed

    def _reject(self, message: str) -> None:
        logger.warning(message)
        self.invalid_count += 1


def _optional_str(value: Any) -> Optional[str]:
    """Treat missing, null and empty strings alike as absent."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None
