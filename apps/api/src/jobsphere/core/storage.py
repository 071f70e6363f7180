"""
Resume Storage (S3)

Thin async wrapper over a boto3 S3 client for resume uploads and
time-limited download links. The client is created once at startup.
"""

import asyncio
import logging
import re
import time

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from jobsphere.core.config import settings

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


class StorageError(Exception):
    """Raised when the blob store is unconfigured or an upload fails."""


def sanitize_filename(filename: str) -> str:
    """Replace anything outside [A-Za-z0-9._-] with underscores."""
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


class ResumeStorage:
    """S3-backed blob store for student resumes."""

    def __init__(self, client, bucket: str | None):
        self._client = client
        self.bucket = bucket

    @property
    def is_configured(self) -> bool:
        return self._client is not None and bool(self.bucket)

    async def put(
        self,
        owner_id: str,
        data: bytes,
        content_type: str = "application/pdf",
        filename: str = "resume.pdf",
    ) -> str:
        """
        Upload a resume and return its storage key.

        Raises:
            StorageError: If S3 is not configured or the upload fails
        """
        if not self.is_configured:
            raise StorageError("S3 is not configured.")

        key = f"resumes/{owner_id}/{int(time.time() * 1000)}-{sanitize_filename(filename)}"
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Resume upload failed for owner {owner_id}: {e}")
            raise StorageError("Resume upload failed.") from e

        logger.info(f"Uploaded resume for owner {owner_id}")
        return key

    async def signed_url(self, key: str, expires_in: int | None = None) -> str | None:
        """
        Presign a GET URL for a stored object.

        Returns None when S3 is unconfigured or presigning fails.
        """
        if not self.is_configured or not key:
            return None

        try:
            return await asyncio.to_thread(
                self._client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in or settings.s3_signed_url_expires,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to presign resume URL: {e}")
            return None


# Storage instance
resume_storage: ResumeStorage | None = None


def init_storage() -> ResumeStorage:
    """
    Create the S3 client.

    Call this on application startup. Without a region the store is left
    unconfigured and uploads fail with StorageError.
    """
    global resume_storage
    client = None
    if settings.s3_region:
        client = boto3.client(
            "s3",
            region_name=settings.s3_region,
            aws_access_key_id=settings.s3_access_key_id or None,
            aws_secret_access_key=settings.s3_secret_access_key or None,
        )
    resume_storage = ResumeStorage(client, settings.s3_bucket)
    return resume_storage


def get_storage() -> ResumeStorage:
    """FastAPI dependency returning the process-wide resume store."""
    if resume_storage is None:
        return ResumeStorage(None, None)
    return resume_storage


def close_storage() -> None:
    """Drop the S3 client."""
    global resume_storage
    resume_storage = None
