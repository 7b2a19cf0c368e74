"""
S3 access for the archive store.

Downloads the uploaded source archive that triggered the invocation.
"""

import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import TransferError

log = logging.getLogger(__name__)


def create_s3_client(endpoint_url: Optional[str] = None) -> Any:
    """Create an S3 client, optionally against an S3-compatible endpoint."""
    if endpoint_url:
        log.debug(f"S3 client using endpoint {endpoint_url}")
        return boto3.client("s3", endpoint_url=endpoint_url)
    return boto3.client("s3")


class SourceStore:
    """Read source archives from the archive store bucket."""

    def __init__(self, s3_client: Any):
        self.s3_client = s3_client

    def download(self, bucket: str, key: str) -> bytes:
        """
        Fetch one archive into memory.

        Args:
            bucket: Archive store bucket name
            key: Decoded object key

        Returns:
            Raw archive bytes

        Raises:
            TransferError: If the object cannot be read
        """
        log.info(f"Downloading source archive s3://{bucket}/{key}")

        try:
            response = self.s3_client.get_object(Bucket=bucket, Key=key)
            body = response["Body"].read()
        except (ClientError, BotoCoreError) as e:
            log.error(f"Could not read s3://{bucket}/{key}: {e}")
            raise TransferError(f"Could not read s3://{bucket}/{key}: {e}") from e

        log.info(f"Downloaded {len(body) / 1024:.1f} KB")
        return body
