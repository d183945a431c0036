"""Reconciliation of calendar feeds against stored events."""
import logging
from datetime import datetime, tzinfo
from typing import Callable, Dict, List

from notifier.push_notifier import PushNotifier
from processor.differ import diff_event
from processor.hashing import derive_event_key
from processor.models import (
    AthleticsEvent,
    AthleticsEventData,
    AthleticsTeam,
    CalendarEvent,
    GAME,
    PRACTICE,
    ReconcileCounts,
    ReconcileState,
)
from storage.athletics_store import AthleticsEventStore, AthleticsTeamStore
from storage.calendar_store import CalendarEventStore

logger = logging.getLogger(__name__)

KeyFunction = Callable[[str, str, datetime, tzinfo], str]


class AthleticsReconciler:
    """
    Reconciles the athletics feed against stored games and practices.

    A run seeds the remaining index from storage, folds games and then
    practices over it in feed order, and deletes whatever is left. Records
    are handled one at a time; duplicate detection depends on each record
    being fully processed before the next is looked at.
    """

    def __init__(self, event_store: AthleticsEventStore, team_store: AthleticsTeamStore,
                 notifier: PushNotifier, tz: tzinfo,
                 key_function: KeyFunction = derive_event_key):
        """
        Args:
            event_store: Athletics event storage
            team_store: Athletics team storage
            notifier: Change alert publisher
            tz: Time zone defining calendar days and displayed times
            key_function: Event key derivation (legacy_event_key for old data)
        """
        self.event_store = event_store
        self.team_store = team_store
        self.notifier = notifier
        self.tz = tz
        self.key_function = key_function

    def run(self, games: List[AthleticsEventData],
            practices: List[AthleticsEventData]) -> ReconcileCounts:
        """
        Reconcile one pull of the athletics feed.

        Args:
            games: Game records in feed order
            practices: Practice records in feed order

        Returns:
            Counts of changed, created, duplicate and removed events
        """
        state = self.seed_state()
        state = self.reconcile_category(state, games, GAME)
        state = self.reconcile_category(state, practices, PRACTICE)
        state = self.remove_unmatched(state)

        logger.info(
            "Athletics reconciliation complete",
            extra={'counts': state.counts.as_dict()}
        )
        return state.counts

    def seed_state(self) -> ReconcileState:
        """Build the initial state from every stored athletics event."""
        return ReconcileState(remaining=self.event_store.get_all_events())

    def reconcile_category(self, state: ReconcileState, records: List[AthleticsEventData],
                           kind: str) -> ReconcileState:
        """
        Fold one category of feed records into the state, in order.

        Args:
            state: State returned by seed_state or the previous category
            records: Feed records of this category
            kind: 'game' or 'practice'

        Returns:
            The updated state, to be passed to the next category
        """
        logger.info(f"Updating {kind}s...")
        before = ReconcileCounts(**state.counts.as_dict())

        for record in records:
            state = self.reconcile_record(state, record)

        counts = state.counts
        logger.info(
            f"Done updating {kind}s: {counts.changed - before.changed} changed, "
            f"{counts.created - before.created} new, "
            f"{counts.duplicates - before.duplicates} duplicates, "
            f"{len(records)} total"
        )
        return state

    def reconcile_record(self, state: ReconcileState,
                         record: AthleticsEventData) -> ReconcileState:
        """Apply a single feed record to storage and the state."""
        hash_code = self.key_function(record.team_name, record.kind, record.start_date_time, self.tz)

        if hash_code in state.remaining:
            existing = state.remaining.pop(hash_code)
            state.seen_keys.add(hash_code)
            self._update_event(state, existing, record)
        elif hash_code not in state.seen_keys:
            self._create_event(hash_code, record)
            state.seen_keys.add(hash_code)
            state.counts.created += 1
        else:
            # At most one game and one practice per team per day; later
            # records for the same day are ignored.
            logger.info(f"Skipping duplicate entry for '{hash_code}'")
            state.counts.duplicates += 1

        return state

    def remove_unmatched(self, state: ReconcileState) -> ReconcileState:
        """Delete stored events that no feed record matched."""
        stale_keys = list(state.remaining)
        if stale_keys:
            logger.info(f"Removing {len(stale_keys)} events no longer in the feed")
            state.counts.removed += self.event_store.delete_events(stale_keys)
        state.remaining = {}
        return state

    def _update_event(self, state: ReconcileState, existing: AthleticsEvent,
                      record: AthleticsEventData) -> None:
        original_date = existing.start_date_time
        change_set = diff_event(existing, record, self.tz)
        if not change_set:
            return

        self.event_store.save_event(existing)
        state.counts.changed += 1
        logger.info(f"Event '{existing.hash_code}' updated")

        for change in change_set.changes:
            sent = self.notifier.notify_change(
                team=record.team_name,
                field_kind=change.field,
                new_value_description=change.description,
                is_game=record.is_game,
                original_date=original_date,
                hash_key=existing.hash_code
            )
            if not sent:
                state.counts.notifications_failed += 1

    def _create_event(self, hash_code: str, record: AthleticsEventData) -> AthleticsEvent:
        event = AthleticsEvent(
            hash_code=hash_code,
            team_name=record.team_name,
            kind=record.kind,
            start_date_time=record.start_date_time,
            status=record.status,
            is_home=record.is_home,
            opponent=record.opponent,
            location=record.location,
            result=record.result
        )
        self.event_store.save_event(event)
        self.team_store.add_event_to_team(record.team_name, event)
        logger.debug(f"Created event '{hash_code}'")
        return event


class SchoolCalendarReconciler:
    """Replaces the stored school calendar with the latest feed."""

    def __init__(self, store: CalendarEventStore):
        self.store = store

    def run(self, events: List[CalendarEvent]) -> ReconcileCounts:
        """
        Delete every stored calendar event, then create the given ones.

        Args:
            events: Calendar events from the current feed

        Returns:
            Counts of removed and created events
        """
        counts = ReconcileCounts()
        counts.removed = self.store.delete_all()
        counts.created = self.store.create_events(events)
        logger.info(
            f"School calendar replaced: {counts.removed} removed, {counts.created} created"
        )
        return counts


class TeamReconciler:
    """
    Replaces the stored athletics teams with the latest team list.

    Teams that stay listed keep their games and practices. Events of teams
    that are no longer listed are deleted along with the team.
    """

    def __init__(self, team_store: AthleticsTeamStore, event_store: AthleticsEventStore):
        self.team_store = team_store
        self.event_store = event_store

    def run(self, teams: List[AthleticsTeam]) -> ReconcileCounts:
        """
        Delete every stored team, then create the given ones.

        Args:
            teams: Teams from the current team list

        Returns:
            Counts of removed and created teams
        """
        previous = {team.team_name: team for team in self.team_store.get_all_teams()}
        listed = set()
        for team in teams:
            listed.add(team.team_name)
            old = previous.get(team.team_name)
            if old:
                team.games = list(old.games)
                team.practices = list(old.practices)

        dropped_keys: List[str] = []
        for team_name, old in previous.items():
            if team_name in listed:
                continue
            stored = [
                event.hash_code for event in self.event_store.find_events_for_team(team_name)
            ]
            for hash_code in old.games + old.practices + stored:
                if hash_code not in dropped_keys:
                    dropped_keys.append(hash_code)

        events_removed = 0
        if dropped_keys:
            events_removed = self.event_store.delete_events(dropped_keys)

        counts = ReconcileCounts()
        counts.removed = self.team_store.delete_all()
        counts.created = self.team_store.create_teams(teams)
        by_season: Dict[str, int] = {}
        for team in teams:
            by_season[team.season] = by_season.get(team.season, 0) + 1
        logger.info(
            f"Athletics teams replaced: {counts.removed} removed, {counts.created} created, "
            f"{events_removed} events of dropped teams deleted",
            extra={'teams_by_season': by_season}
        )
        return counts
