"""Error records kept for later triage of failed sync runs."""
import logging
import time
import uuid
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from storage.dynamodb_manager import DynamoDBManager

logger = logging.getLogger(__name__)


class ErrorLogStore(DynamoDBManager):
    """Error record table, keyed by error_id."""

    def __init__(self, table_name: str,
                 session: Optional[boto3.session.Session] = None):
        super().__init__(table_name, key_name='error_id', session=session)

    def record_error(self, calendar: str, error: Exception) -> Optional[str]:
        """
        Persist an error record for a failed calendar sync.

        Failing to write the record is logged and otherwise ignored.

        Args:
            calendar: Name of the calendar whose sync failed
            error: The exception that aborted it

        Returns:
            The new error_id, or None if the record could not be written
        """
        error_id = str(uuid.uuid4())
        item = {
            'error_id': error_id,
            'calendar': calendar,
            'error_type': type(error).__name__,
            'message': str(error),
            'created_at': int(time.time())
        }

        try:
            self.put_item(item)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to record error for {calendar}: {e}")
            return None

        return error_id
