"""Push notifications for athletics event changes."""
import logging
import re
from datetime import datetime, tzinfo
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


def channel_for_team(team_name: str) -> str:
    """
    Name of the subscription channel for a team.

    Channels hold letters, digits and underscores only, so
    "JV Tennis" becomes "JV_Tennis".
    """
    return re.sub(r'[^A-Za-z0-9]', '_', team_name)


class PushNotifier:
    """Publishes change alerts to an SNS topic, one message per change."""

    def __init__(self, topic_arn: str, tz: tzinfo,
                 session: Optional[boto3.session.Session] = None):
        """
        Initialize SNS client.

        Args:
            topic_arn: Topic that fans out to team channel subscribers
            tz: Time zone used to show the event date
            session: boto3 session to use (default session if None)
        """
        self.topic_arn = topic_arn
        self.tz = tz
        session = session or boto3.session.Session()
        self.sns = session.client('sns')

    def notify_change(self, team: str, field_kind: str, new_value_description: str,
                      is_game: bool, original_date: datetime, hash_key: str) -> bool:
        """
        Send an alert to subscribers of a team that an event changed.

        Delivery failures are logged and never raised.

        Args:
            team: Team name
            field_kind: Changed field ('status' or 'time')
            new_value_description: Human readable new value
            is_game: Whether the event is a game or a practice
            original_date: Start of the event before the change
            hash_key: Event key, sent along so clients can correlate alerts

        Returns:
            True if the message was published, False otherwise
        """
        message = self.format_message(
            team, field_kind, new_value_description, is_game, original_date
        )
        channel = channel_for_team(team)

        try:
            self.sns.publish(
                TopicArn=self.topic_arn,
                Message=message,
                MessageAttributes={
                    'channel': {'DataType': 'String', 'StringValue': channel},
                    'hashCode': {'DataType': 'String', 'StringValue': hash_key},
                    'fieldKind': {'DataType': 'String', 'StringValue': field_kind}
                }
            )
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Failed to send alert to channel {channel}: {e}")
            return False

        logger.info(f"Sent alert to channel {channel}: {message}")
        return True

    def format_message(self, team: str, field_kind: str, new_value_description: str,
                       is_game: bool, original_date: datetime) -> str:
        local = original_date.astimezone(self.tz)
        event_type = 'game' if is_game else 'practice'
        return (
            f"{team} {event_type} on {local.month}/{local.day}: "
            f"{field_kind} changed to {new_value_description}."
        )
