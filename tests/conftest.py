"""Shared fixtures for calendar sync tests."""
import os
from unittest.mock import patch
from zoneinfo import ZoneInfo

import boto3
import pytest
from moto import mock_aws

from storage.athletics_store import AthleticsEventStore, AthleticsTeamStore
from storage.calendar_store import CalendarEventStore
from storage.error_log import ErrorLogStore

TABLE_KEYS = {
    'test-calendar-events': 'event_id',
    'test-athletics-events': 'hash_code',
    'test-athletics-teams': 'team_name',
    'test-sync-errors': 'error_id'
}


@pytest.fixture(autouse=True)
def aws_credentials():
    """Fake AWS credentials so boto3 never reaches a real account."""
    env_vars = {
        'AWS_ACCESS_KEY_ID': 'testing',
        'AWS_SECRET_ACCESS_KEY': 'testing',
        'AWS_SECURITY_TOKEN': 'testing',
        'AWS_SESSION_TOKEN': 'testing',
        'AWS_DEFAULT_REGION': 'us-east-1'
    }
    with patch.dict(os.environ, env_vars):
        yield env_vars


@pytest.fixture
def tz():
    return ZoneInfo('America/New_York')


@pytest.fixture
def aws():
    """Mock AWS with all sync tables created."""
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name='us-east-1')
        for table_name, key_name in TABLE_KEYS.items():
            dynamodb.create_table(
                TableName=table_name,
                KeySchema=[{'AttributeName': key_name, 'KeyType': 'HASH'}],
                AttributeDefinitions=[{'AttributeName': key_name, 'AttributeType': 'S'}],
                BillingMode='PAY_PER_REQUEST'
            )
        yield dynamodb


@pytest.fixture
def topic_arn(aws):
    sns = boto3.client('sns', region_name='us-east-1')
    return sns.create_topic(Name='test-athletics-alerts')['TopicArn']


@pytest.fixture
def calendar_store(aws):
    return CalendarEventStore('test-calendar-events')


@pytest.fixture
def event_store(aws):
    return AthleticsEventStore('test-athletics-events')


@pytest.fixture
def team_store(aws):
    return AthleticsTeamStore('test-athletics-teams')


@pytest.fixture
def error_log(aws):
    return ErrorLogStore('test-sync-errors')


@pytest.fixture
def stored_calendar_events(calendar_store):
    """Read back every school calendar event in the table."""
    def read_all():
        return [calendar_store._item_to_event(item) for item in calendar_store.scan_all()]
    return read_all
