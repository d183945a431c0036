"""AWS Lambda handler for school and athletics calendar sync."""
import json
import logging
import sys
import time
from typing import Any, Callable, Dict, List, Optional

from config import ConfigurationError, Settings
from notifier.push_notifier import PushNotifier
from processor.event_processor import EventProcessor
from processor.hashing import derive_event_key, legacy_event_key
from processor.models import GAME, PRACTICE, ReconcileCounts
from processor.reconciler import AthleticsReconciler, SchoolCalendarReconciler, TeamReconciler
from scraper.calendar_client import CalendarClient
from storage.athletics_store import AthleticsEventStore, AthleticsTeamStore
from storage.calendar_store import CalendarEventStore
from storage.dynamodb_manager import create_session
from storage.error_log import ErrorLogStore

SYNC_CALENDARS = 'sync_calendars'
UPDATE_TEAMS = 'update_teams'

# Attributes every LogRecord has; anything else came in through extra=
_RESERVED_LOG_ATTRS = set(
    logging.LogRecord('', 0, '', 0, '', (), None).__dict__
) | {'message', 'asctime'}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_LOG_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Create new handler with JSON formatter
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    # Set log level
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


logger = logging.getLogger(__name__)


def sync_school_calendar(client: CalendarClient, processor: EventProcessor,
                         store: CalendarEventStore) -> ReconcileCounts:
    """Fetch the school calendar and replace the stored one with it."""
    raw_events = client.fetch_school_calendar()
    events = processor.process_school_calendar(raw_events)
    return SchoolCalendarReconciler(store).run(events)


def sync_athletics_calendar(client: CalendarClient, processor: EventProcessor,
                            reconciler: AthleticsReconciler) -> ReconcileCounts:
    """Fetch the athletics calendar and reconcile games, then practices."""
    calendar = client.fetch_athletics_calendar()
    games = processor.process_athletics_events(calendar['games'], GAME)
    practices = processor.process_athletics_events(calendar['practices'], PRACTICE)
    return reconciler.run(games, practices)


def sync_athletics_teams(client: CalendarClient, processor: EventProcessor,
                         reconciler: TeamReconciler) -> ReconcileCounts:
    """Fetch the team list and replace the stored teams with it."""
    raw_teams = client.fetch_athletics_teams()
    teams = processor.process_athletics_teams(raw_teams)
    return reconciler.run(teams)


def _run_calendar(name: str, sync: Callable[[], ReconcileCounts],
                  statistics: Dict[str, Any], errors: List[Dict[str, Any]],
                  error_log: Optional[ErrorLogStore]) -> None:
    """Run one calendar's sync; a failure is recorded and does not stop the others."""
    try:
        logger.info(f"Synchronizing {name}")
        counts = sync()
        statistics[name] = counts.as_dict()
    except Exception as e:
        logger.error(
            f"Failed to sync {name}: {str(e)}",
            extra={'calendar': name, 'error_type': type(e).__name__},
            exc_info=True
        )
        error = {
            'calendar': name,
            'error': str(e),
            'error_type': type(e).__name__
        }
        if error_log is not None:
            error['error_id'] = error_log.record_error(name, e)
        errors.append(error)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for calendar sync.

    Args:
        event: EventBridge event payload; 'action' selects 'sync_calendars'
            (default) or 'update_teams'
        context: Lambda context object

    Returns:
        Response dict with statusCode and summary statistics
    """
    start_time = time.time()

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {str(e)}")
        return {
            'statusCode': 500,
            'body': json.dumps({
                'message': 'Invalid configuration',
                'error': str(e),
                'error_type': type(e).__name__
            })
        }

    # Initialize logging
    setup_logging(settings.log_level)

    action = (event or {}).get('action', SYNC_CALENDARS)
    if action not in (SYNC_CALENDARS, UPDATE_TEAMS):
        logger.error(f"Unknown action: {action}")
        return {
            'statusCode': 400,
            'body': json.dumps({'message': f"Unknown action: {action}"})
        }

    # Log Lambda execution start
    logger.info(
        "Lambda execution started",
        extra={
            'action': action,
            'calendar_server_url': settings.calendar_server_url,
            'timeout_seconds': settings.timeout_seconds
        }
    )

    statistics: Dict[str, Any] = {}
    errors: List[Dict[str, Any]] = []

    try:
        # Instantiate components
        session = create_session(settings.storage_role_arn)
        client = CalendarClient(settings.calendar_server_url, timeout=settings.timeout_seconds)
        processor = EventProcessor(settings.timezone)
        team_store = AthleticsTeamStore(settings.athletics_teams_table_name, session=session)
        event_store = AthleticsEventStore(settings.athletics_events_table_name, session=session)
        error_log = (
            ErrorLogStore(settings.error_table_name, session=session)
            if settings.error_table_name else None
        )

        if action == UPDATE_TEAMS:
            _run_calendar(
                'athletics_teams',
                lambda: sync_athletics_teams(
                    client, processor, TeamReconciler(team_store, event_store)
                ),
                statistics, errors, error_log
            )
        else:
            calendar_store = CalendarEventStore(settings.calendar_table_name, session=session)
            reconciler = AthleticsReconciler(
                event_store=event_store,
                team_store=team_store,
                notifier=PushNotifier(
                    settings.notification_topic_arn, settings.timezone, session=session
                ),
                tz=settings.timezone,
                key_function=legacy_event_key if settings.legacy_event_keys else derive_event_key
            )
            _run_calendar(
                'school_calendar',
                lambda: sync_school_calendar(client, processor, calendar_store),
                statistics, errors, error_log
            )
            _run_calendar(
                'athletics_calendar',
                lambda: sync_athletics_calendar(client, processor, reconciler),
                statistics, errors, error_log
            )

    except Exception as e:
        # Calculate execution duration
        duration = time.time() - start_time

        # Log error
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )

        # Return error response
        return {
            'statusCode': 500,
            'body': json.dumps({
                'message': 'Sync failed',
                'error': str(e),
                'error_type': type(e).__name__,
                'duration_seconds': round(duration, 2)
            })
        }

    # Calculate execution duration
    duration = time.time() - start_time

    # Log execution summary
    logger.info(
        "Lambda execution completed",
        extra={
            'duration_seconds': round(duration, 2),
            'statistics': statistics,
            'invalid_records': processor.invalid_count,
            'failed_calendars': [error['calendar'] for error in errors]
        }
    )

    return {
        'statusCode': 500 if errors else 200,
        'body': json.dumps({
            'message': 'Sync completed with errors' if errors else 'Sync completed successfully',
            'statistics': statistics,
            'invalid_records': processor.invalid_count,
            'errors': errors,
            'duration_seconds': round(duration, 2)
        })
    }


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one sync from the command line, e.g. from cron.

    Usage: python lambda_function.py [sync_calendars|update_teams]

    Returns:
        Process exit code (0 on success)
    """
    argv = sys.argv[1:] if argv is None else argv
    action = argv[0] if argv else SYNC_CALENDARS
    response = lambda_handler({'action': action}, None)
    print(response['body'])
    return 0 if response['statusCode'] == 200 else 1


if __name__ == '__main__':
    sys.exit(main())
