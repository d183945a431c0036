"""Data models for calendar and athletics event processing."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Set


GAME = 'game'
PRACTICE = 'practice'
EVENT_KINDS = (GAME, PRACTICE)


@dataclass
class CalendarEvent:
    """School calendar event. Replaced wholesale on every run."""
    event_id: str
    event_name: str
    start_date_time: datetime
    end_date_time: Optional[datetime] = None
    location: Optional[str] = None


@dataclass
class AthleticsEventData:
    """Game or practice record as delivered by the athletics feed."""
    team_name: str
    kind: str
    start_date_time: datetime
    is_home: Optional[bool] = None
    opponent: Optional[str] = None
    location: Optional[str] = None
    result: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_game(self) -> bool:
        return self.kind == GAME


@dataclass
class AthleticsEvent:
    """Stored athletics event, keyed by hash_code."""
    hash_code: str
    team_name: str
    kind: str
    start_date_time: datetime
    status: Optional[str] = None
    is_home: Optional[bool] = None
    opponent: Optional[str] = None
    location: Optional[str] = None
    result: Optional[str] = None

    @property
    def is_game(self) -> bool:
        return self.kind == GAME


@dataclass
class AthleticsTeam:
    """Athletics team with ordered hash_code lists of its games and practices."""
    team_name: str
    season: str
    games: List[str] = field(default_factory=list)
    practices: List[str] = field(default_factory=list)


@dataclass
class FieldChange:
    """A single changed field detected by the differ."""
    field: str
    old_value: Optional[object]
    new_value: Optional[object]
    description: str


@dataclass
class ChangeSet:
    """All field changes detected for one stored event."""
    hash_code: str
    changes: List[FieldChange] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.changes)


@dataclass
class ReconcileCounts:
    """Counters retained for observability of a reconciliation run."""
    changed: int = 0
    created: int = 0
    duplicates: int = 0
    removed: int = 0
    notifications_failed: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            'changed': self.changed,
            'created': self.created,
            'duplicates': self.duplicates,
            'removed': self.removed,
            'notifications_failed': self.notifications_failed
        }


@dataclass
class ReconcileState:
    """
    Accumulator threaded through the games and practices passes of one run.

    remaining holds stored events not yet matched by a feed record;
    seen_keys holds every key matched or created earlier in the same run,
    so a repeated record in one feed pull is recognised as a duplicate.
    """
    remaining: Dict[str, AthleticsEvent]
    seen_keys: Set[str] = field(default_factory=set)
    counts: ReconcileCounts = field(default_factory=ReconcileCounts)
