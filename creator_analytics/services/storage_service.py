"""
S3 object storage for creator profile images.
"""
import asyncio
import os
import time
from typing import Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from creator_analytics.errors import InvalidArgument, StorageFailure
from creator_analytics.utils.logger import logger

UPLOAD_MAX_BYTES = int(os.getenv("UPLOAD_MAX_BYTES", 2 * 1024 * 1024))

def validate_image(content_type: Optional[str], size: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise InvalidArgument("Only image files allowed")
    if size > UPLOAD_MAX_BYTES:
        raise InvalidArgument(f"File too large (max {UPLOAD_MAX_BYTES} bytes)")

def image_key(filename: str, now: Optional[float] = None) -> str:
    name = os.path.basename(filename or "") or "upload"
    millis = int((now if now is not None else time.time()) * 1000)
    return f"creators/{millis}_{name}"

class ObjectStorage:
    """Thin put-object client; the bucket is expected to allow public reads."""

    def __init__(self, bucket: Optional[str] = None, region: Optional[str] = None, client=None):
        self.bucket = bucket or os.getenv("AWS_S3_BUCKET")
        self.region = region or os.getenv("AWS_REGION", "us-east-1")
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
                aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
                region_name=self.region,
            )
        return self._client

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def upload_creator_image(self, content: bytes, filename: str, content_type: str) -> str:
        """Store the image and return its public URL."""
        validate_image(content_type, len(content))
        if not self.bucket:
            logger.error("AWS_S3_BUCKET missing. Upload not possible.")
            raise StorageFailure("Object storage is not configured")

        key = image_key(filename)
        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(
                None,
                lambda: self.client.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=content,
                    ContentType=content_type,
                )
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            raise StorageFailure("Upload failed") from e

        logger.info(f"Uploaded creator image {key} ({len(content)} bytes)")
        return self.public_url(key)
