"""Environment configuration for the calendar sync."""
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


REQUIRED_VARIABLES = ('CALENDAR_SERVER_URL', 'NOTIFICATION_TOPIC_ARN')


@dataclass
class Settings:
    """Validated sync configuration."""
    calendar_server_url: str
    notification_topic_arn: str
    calendar_table_name: str = 'calendar-events'
    athletics_events_table_name: str = 'athletics-events'
    athletics_teams_table_name: str = 'athletics-teams'
    error_table_name: Optional[str] = None
    storage_role_arn: Optional[str] = None
    timezone: ZoneInfo = ZoneInfo('America/New_York')
    legacy_event_keys: bool = False
    log_level: str = 'INFO'
    timeout_seconds: int = 30

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """
        Read configuration from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If a required variable is missing or a value is invalid
        """
        if environ is None:
            environ = os.environ

        missing = [name for name in REQUIRED_VARIABLES if not environ.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        tz_name = environ.get('TIMEZONE', 'America/New_York')
        try:
            timezone = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Invalid TIMEZONE: {tz_name}") from e

        timeout = environ.get('TIMEOUT_SECONDS', '30')
        try:
            timeout_seconds = int(timeout)
        except ValueError as e:
            raise ConfigurationError(f"Invalid TIMEOUT_SECONDS: {timeout}") from e

        return cls(
            calendar_server_url=environ['CALENDAR_SERVER_URL'],
            notification_topic_arn=environ['NOTIFICATION_TOPIC_ARN'],
            calendar_table_name=environ.get('CALENDAR_TABLE_NAME', 'calendar-events'),
            athletics_events_table_name=environ.get(
                'ATHLETICS_EVENTS_TABLE_NAME', 'athletics-events'
            ),
            athletics_teams_table_name=environ.get(
                'ATHLETICS_TEAMS_TABLE_NAME', 'athletics-teams'
            ),
            error_table_name=environ.get('ERROR_TABLE_NAME') or None,
            storage_role_arn=environ.get('STORAGE_ROLE_ARN') or None,
            timezone=timezone,
            legacy_event_keys=environ.get('LEGACY_EVENT_KEYS', 'false').lower() in ('1', 'true', 'yes'),
            log_level=environ.get('LOG_LEVEL', 'INFO'),
            timeout_seconds=timeout_seconds
        )
