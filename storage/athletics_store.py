"""Storage for athletics events and teams."""
import logging
from typing import Dict, List, Optional

import boto3

from processor.models import AthleticsEvent, AthleticsTeam, GAME
from storage.calendar_store import deserialize_datetime, serialize_datetime
from storage.dynamodb_manager import DynamoDBManager

logger = logging.getLogger(__name__)


class AthleticsEventStore(DynamoDBManager):
    """Athletics event table, keyed by hash_code."""

    def __init__(self, table_name: str,
                 session: Optional[boto3.session.Session] = None):
        super().__init__(table_name, key_name='hash_code', session=session)

    def get_all_events(self) -> Dict[str, AthleticsEvent]:
        """
        Retrieve all stored athletics events.

        Returns:
            Dictionary mapping hash_code to AthleticsEvent objects
        """
        events = {}
        for item in self.scan_all():
            event = self._item_to_event(item)
            if event:
                events[event.hash_code] = event
        logger.info(f"Retrieved {len(events)} athletics events from DynamoDB")
        return events

    def find_events_for_team(self, team_name: str) -> List[AthleticsEvent]:
        """Find all stored events of one team."""
        events = []
        for item in self.find_by_field('team_name', team_name):
            event = self._item_to_event(item)
            if event:
                events.append(event)
        return events

    def save_event(self, event: AthleticsEvent) -> None:
        """Create or update a single event."""
        self.put_item(self._event_to_item(event))

    def delete_events(self, hash_codes: List[str]) -> int:
        """Bulk-delete events by hash_code."""
        return self.batch_delete_items(hash_codes)

    def _item_to_event(self, item: dict) -> Optional[AthleticsEvent]:
        try:
            return AthleticsEvent(
                hash_code=item['hash_code'],
                team_name=item['team_name'],
                kind=item['kind'],
                start_date_time=deserialize_datetime(item['start_date_time']),
                status=item.get('status'),
                is_home=item.get('is_home'),
                opponent=item.get('opponent'),
                location=item.get('location'),
                result=item.get('result')
            )
        except (KeyError, ValueError) as e:
            logger.warning(f"Failed to convert item to AthleticsEvent: {e}")
            return None

    def _event_to_item(self, event: AthleticsEvent) -> dict:
        item = {
            'hash_code': event.hash_code,
            'team_name': event.team_name,
            'kind': event.kind,
            'start_date_time': serialize_datetime(event.start_date_time)
        }

        # Add optional fields if present
        if event.status:
            item['status'] = event.status
        if event.is_home is not None:
            item['is_home'] = event.is_home
        if event.opponent:
            item['opponent'] = event.opponent
        if event.location:
            item['location'] = event.location
        if event.result:
            item['result'] = event.result

        return item


class AthleticsTeamStore(DynamoDBManager):
    """Athletics team table, keyed by team_name."""

    def __init__(self, table_name: str,
                 session: Optional[boto3.session.Session] = None):
        super().__init__(table_name, key_name='team_name', session=session)

    def get_all_teams(self) -> List[AthleticsTeam]:
        teams = []
        for item in self.scan_all():
            team = self._item_to_team(item)
            if team:
                teams.append(team)
        return teams

    def get_team(self, team_name: str) -> Optional[AthleticsTeam]:
        item = self.get_item(team_name)
        return self._item_to_team(item) if item else None

    def create_teams(self, teams: List[AthleticsTeam]) -> int:
        """Bulk-create teams."""
        return self.batch_put_items([self._team_to_item(team) for team in teams])

    def add_event_to_team(self, team_name: str, event: AthleticsEvent) -> bool:
        """
        Append an event's hash_code to the team's games or practices list.

        Args:
            team_name: Name of the owning team
            event: Newly created event

        Returns:
            True if the team exists and was updated, False otherwise
        """
        team = self.get_team(team_name)
        if team is None:
            logger.warning(
                f"Team '{team_name}' not found, event '{event.hash_code}' "
                f"is not linked to a team"
            )
            return False

        if event.kind == GAME:
            team.games.append(event.hash_code)
        else:
            team.practices.append(event.hash_code)

        self.put_item(self._team_to_item(team))
        return True

    def _item_to_team(self, item: dict) -> Optional[AthleticsTeam]:
        try:
            return AthleticsTeam(
                team_name=item['team_name'],
                season=item['season'],
                games=list(item.get('games', [])),
                practices=list(item.get('practices', []))
            )
        except KeyError as e:
            logger.warning(f"Failed to convert item to AthleticsTeam: {e}")
            return None

    def _team_to_item(self, team: AthleticsTeam) -> dict:
        return {
            'team_name': team.team_name,
            'season': team.season,
            'games': list(team.games),
            'practices': list(team.practices)
        }
