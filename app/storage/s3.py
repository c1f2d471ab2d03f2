"""S3 backed object storage."""

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.errors import StorageError
from app.core.logger import LogIcon, logger
from app.storage.base import ObjectStorage, StorageReceipt


def create_s3_client(region: str, endpoint_url: str | None = None):
    """Create an S3 client; ``endpoint_url`` points it at an S3-compatible store."""
    client = boto3.client(
        "s3",
        region_name=region,
        endpoint_url=endpoint_url,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path" if endpoint_url else "auto"}),
    )
    logger.info("S3 client initialized", icon=LogIcon.STORAGE, region=region, endpoint=endpoint_url or "aws")
    return client


class S3ObjectStorage(ObjectStorage):
    """Writes objects with ``PutObject``."""

    name = "s3"

    def __init__(self, client) -> None:
        self._client = client

    def put(self, bucket: str, key: str, data: bytes, content_type: str, content_length: int) -> StorageReceipt:
        try:
            result = self._client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ContentLength=content_length,
            )
        except (BotoCoreError, ClientError) as ex:
            raise StorageError(str(ex), bucket=bucket, key=key) from ex

        return StorageReceipt(
            bucket=bucket,
            key=key,
            etag=result.get("ETag"),
            version_id=result.get("VersionId"),
        )
