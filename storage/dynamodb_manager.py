"""DynamoDB manager for generic table operations."""
import logging
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


def create_session(role_arn: Optional[str] = None,
                   session_name: str = 'calendar-sync') -> boto3.session.Session:
    """
    Create the boto3 session used for storage access.

    Calendar data is not owned by any end user, so when a role is given the
    stores run with that role's elevated permissions.

    Args:
        role_arn: IAM role to assume, or None for the default credential chain
        session_name: Role session name recorded in CloudTrail

    Returns:
        boto3 Session
    """
    if not role_arn:
        return boto3.session.Session()

    logger.info(f"Assuming storage role: {role_arn}")
    try:
        credentials = boto3.client('sts').assume_role(
            RoleArn=role_arn,
            RoleSessionName=session_name
        )['Credentials']
    except ClientError as e:
        logger.error(f"Failed to assume storage role {role_arn}: {e}")
        raise

    return boto3.session.Session(
        aws_access_key_id=credentials['AccessKeyId'],
        aws_secret_access_key=credentials['SecretAccessKey'],
        aws_session_token=credentials['SessionToken']
    )


class DynamoDBManager:
    """Manager for DynamoDB operations on a single table."""

    BATCH_SIZE = 25  # DynamoDB batch operation limit

    def __init__(self, table_name: str, key_name: str,
                 session: Optional[boto3.session.Session] = None):
        """
        Initialize DynamoDB resource and table reference.

        Args:
            table_name: Name of the DynamoDB table
            key_name: Name of the table's hash key attribute
            session: boto3 session to use (default session if None)
        """
        self.table_name = table_name
        self.key_name = key_name
        session = session or boto3.session.Session()
        self.dynamodb = session.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized DynamoDBManager for table: {table_name}")

    def scan_all(self, **scan_kwargs) -> List[Dict[str, Any]]:
        """
        Retrieve all items from the table using Scan operation.

        Args:
            **scan_kwargs: Extra arguments passed to Scan (e.g. FilterExpression)

        Returns:
            List of raw DynamoDB items
        """
        try:
            response = self.table.scan(**scan_kwargs)
            items = response.get('Items', [])

            # Handle pagination
            while 'LastEvaluatedKey' in response:
                response = self.table.scan(
                    ExclusiveStartKey=response['LastEvaluatedKey'],
                    **scan_kwargs
                )
                items.extend(response.get('Items', []))

            logger.debug(f"Scanned {len(items)} items from {self.table_name}")
            return items

        except ClientError as e:
            logger.error(f"Error scanning DynamoDB table {self.table_name}: {e}")
            raise

    def find_by_field(self, field: str, value: Any) -> List[Dict[str, Any]]:
        """
        Find all items whose attribute equals the given value.

        Args:
            field: Attribute name
            value: Attribute value to match

        Returns:
            List of matching raw items
        """
        return self.scan_all(FilterExpression=Attr(field).eq(value))

    def get_item(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a single item by its hash key.

        Args:
            key: Hash key value

        Returns:
            Raw item, or None if not found
        """
        try:
            response = self.table.get_item(Key={self.key_name: key})
        except ClientError as e:
            logger.error(f"Error reading {key} from {self.table_name}: {e}")
            raise
        return response.get('Item')

    def put_item(self, item: Dict[str, Any]) -> None:
        """Create or overwrite a single item."""
        try:
            self.table.put_item(Item=item)
        except ClientError as e:
            logger.error(
                f"Error writing {item.get(self.key_name)} to {self.table_name}: {e}"
            )
            raise

    def batch_put_items(self, items: List[Dict[str, Any]]) -> int:
        """
        Create or overwrite items in batches of 25.

        Args:
            items: Raw items to write

        Returns:
            Count of written items

        Raises:
            ClientError: If a batch fails; earlier batches stay written
        """
        if not items:
            return 0

        logger.info(f"Writing {len(items)} items to {self.table_name}")
        success_count = 0

        # Process in batches of 25 (DynamoDB limit)
        for i in range(0, len(items), self.BATCH_SIZE):
            batch = items[i:i + self.BATCH_SIZE]

            try:
                with self.table.batch_writer() as writer:
                    for item in batch:
                        writer.put_item(Item=item)
                success_count += len(batch)

            except ClientError as e:
                logger.error(
                    f"Error writing batch {i // self.BATCH_SIZE + 1} "
                    f"to {self.table_name}: {e}"
                )
                raise

        logger.info(f"Successfully wrote {success_count} items")
        return success_count

    def batch_delete_items(self, keys: List[str]) -> int:
        """
        Delete items by hash key in batches of 25.

        Args:
            keys: Hash key values to delete

        Returns:
            Count of deleted items

        Raises:
            ClientError: If a batch fails; earlier batches stay deleted
        """
        if not keys:
            return 0

        logger.info(f"Deleting {len(keys)} items from {self.table_name}")
        success_count = 0

        # Process in batches of 25 (DynamoDB limit)
        for i in range(0, len(keys), self.BATCH_SIZE):
            batch = keys[i:i + self.BATCH_SIZE]

            try:
                with self.table.batch_writer() as writer:
                    for key in batch:
                        writer.delete_item(Key={self.key_name: key})
                success_count += len(batch)

            except ClientError as e:
                logger.error(
                    f"Error deleting batch {i // self.BATCH_SIZE + 1} "
                    f"from {self.table_name}: {e}"
                )
                raise

        logger.info(f"Successfully deleted {success_count} items")
        return success_count

    def delete_all(self) -> int:
        """
        Delete every item in the table.

        Returns:
            Count of deleted items
        """
        keys = [
            item[self.key_name]
            for item in self.scan_all(ProjectionExpression=self.key_name)
        ]
        return self.batch_delete_items(keys)
