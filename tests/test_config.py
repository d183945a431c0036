"""Unit tests for environment configuration."""
from zoneinfo import ZoneInfo

import pytest

from config import ConfigurationError, Settings

REQUIRED = {
    'CALENDAR_SERVER_URL': 'https://calendar.example.org',
    'NOTIFICATION_TOPIC_ARN': 'arn:aws:sns:us-east-1:123456789012:athletics-alerts'
}


def test_defaults():
    settings = Settings.from_env(REQUIRED)

    assert settings.calendar_server_url == 'https://calendar.example.org'
    assert settings.calendar_table_name == 'calendar-events'
    assert settings.athletics_events_table_name == 'athletics-events'
    assert settings.athletics_teams_table_name == 'athletics-teams'
    assert settings.error_table_name is None
    assert settings.storage_role_arn is None
    assert settings.timezone == ZoneInfo('America/New_York')
    assert settings.legacy_event_keys is False
    assert settings.log_level == 'INFO'
    assert settings.timeout_seconds == 30


def test_overrides():
    settings = Settings.from_env({
        **REQUIRED,
        'ERROR_TABLE_NAME': 'sync-errors',
        'STORAGE_ROLE_ARN': 'arn:aws:iam::123456789012:role/calendar-sync-storage',
        'TIMEZONE': 'America/Chicago',
        'LEGACY_EVENT_KEYS': 'true',
        'TIMEOUT_SECONDS': '10'
    })

    assert settings.error_table_name == 'sync-errors'
    assert settings.storage_role_arn.endswith('calendar-sync-storage')
    assert settings.timezone == ZoneInfo('America/Chicago')
    assert settings.legacy_event_keys is True
    assert settings.timeout_seconds == 10


@pytest.mark.parametrize('missing', ['CALENDAR_SERVER_URL', 'NOTIFICATION_TOPIC_ARN'])
def test_missing_required_variable(missing):
    environ = {key: value for key, value in REQUIRED.items() if key != missing}

    with pytest.raises(ConfigurationError, match=missing):
        Settings.from_env(environ)


def test_invalid_timezone():
    with pytest.raises(ConfigurationError, match='TIMEZONE'):
        Settings.from_env({**REQUIRED, 'TIMEZONE': 'Mars/Olympus_Mons'})


def test_invalid_timeout():
    with pytest.raises(ConfigurationError, match='TIMEOUT_SECONDS'):
        Settings.from_env({**REQUIRED, 'TIMEOUT_SECONDS': 'soon'})
