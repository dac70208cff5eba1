"""
S3 Storage Gateway.
Stores the inventory blob as a single object in Amazon S3.
"""
from typing import Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pharmatrack.core import config
from pharmatrack.core.exceptions import StorageUnavailableException
from pharmatrack.repositories.storage_gateway import StorageGateway


class S3StorageGateway(StorageGateway):
    """Gateway for S3 object storage."""

    MISSING_KEY_CODES = {"NoSuchKey", "404"}

    def __init__(self, key: Optional[str] = None, bucket_name: Optional[str] = None):
        super().__init__(key or config.settings.storage_key)
        self.s3_client = boto3.client('s3', region_name=config.settings.aws_region)
        self.bucket_name = bucket_name or config.settings.s3_bucket_name

    def load(self) -> Optional[bytes]:
        """
        Retrieve the stored object.

        Returns:
            bytes: Object content, or None if the key does not exist

        Raises:
            StorageUnavailableException: If retrieval fails
        """
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=self.key)
            return response['Body'].read()
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in self.MISSING_KEY_CODES:
                return None
            raise StorageUnavailableException(f"Failed to retrieve inventory from S3: {str(e)}") from e
        except BotoCoreError as e:
            raise StorageUnavailableException(f"Unexpected error reading from S3: {str(e)}") from e

    def save(self, payload: bytes) -> None:
        """
        Overwrite the stored object with payload.

        Raises:
            StorageUnavailableException: If upload fails
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=self.key,
                Body=payload,
                ContentType='application/json'
            )
        except ClientError as e:
            raise StorageUnavailableException(f"Failed to save inventory to S3: {str(e)}") from e
        except BotoCoreError as e:
            raise StorageUnavailableException(f"Unexpected error writing to S3: {str(e)}") from e
