"""
Bucket storage for r2:-prefixed files.

Talks to Cloudflare R2 (or any S3-compatible endpoint) through boto3.
"""

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from file_host.config.settings import Settings

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

logger = logging.getLogger(__name__)


def create_bucket_client(settings: Settings) -> "S3Client":
    """Build an S3 client pointed at the configured R2 endpoint."""
    client_kwargs: Dict[str, Any] = {"region_name": settings.r2_region}
    if settings.r2_endpoint_url:
        client_kwargs["endpoint_url"] = settings.r2_endpoint_url
    if settings.r2_access_key_id:
        client_kwargs["aws_access_key_id"] = settings.r2_access_key_id
    if settings.r2_secret_access_key:
        client_kwargs["aws_secret_access_key"] = settings.r2_secret_access_key
    return boto3.client("s3", **client_kwargs)


class BucketStore:
    """put / fetch / delete on a single bucket."""

    def __init__(self, bucket_name: str, s3_client: Optional["S3Client"] = None):
        self.bucket_name = bucket_name
        self.s3_client = s3_client or boto3.client("s3")

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["BucketStore"]:
        """None when no bucket is configured."""
        if not settings.bucket_enabled:
            return None
        logger.info(f"Using bucket: {settings.r2_bucket_name}")
        return cls(settings.r2_bucket_name, create_bucket_client(settings))

    def put(self, key: str, file_content: bytes, content_type: Optional[str] = None) -> None:
        """
        Upload an object.

        :param key: bucket key, without the r2: prefix.
        :param file_content: raw bytes of the file.
        :param content_type: MIME type, defaults to application/octet-stream.
        """
        self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=file_content,
            ContentType=content_type or "application/octet-stream",
        )
        logger.info(f"Uploaded {len(file_content)} bytes to bucket as {key}")

    def fetch(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the get_object response, or None if the key does not exist."""
        try:
            return self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            raise

    def delete(self, key: str) -> None:
        self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        logger.info(f"Deleted from bucket: {key}")
