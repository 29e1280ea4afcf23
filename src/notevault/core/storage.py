"""
Attachment storage backends.

The service layer only sees ``AttachmentStorage``: bytes go in, a URL
comes out, and the URL is all that is needed to remove the file again.
``LocalAttachmentStorage`` writes under ``attachment_dir`` (served by the
app at ``attachment_url_prefix``); ``S3AttachmentStorage`` puts objects
in an S3 bucket with boto3.
"""

import re
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Depends
from starlette.concurrency import run_in_threadpool

from ..config import Settings, get_settings
from .errors import ConfigurationError, StorageError
from .logging import get_logger

logger = get_logger("storage")

KEY_PREFIX = "attachments"
_SUFFIX_PATTERN = re.compile(r"^\.[A-Za-z0-9]{1,16}$")


def new_object_name(filename: str) -> str:
    """Random name keeping a sane extension of the uploaded file."""
    suffix = Path(filename).suffix.lower()
    if not _SUFFIX_PATTERN.match(suffix):
        suffix = ""
    return f"{uuid.uuid4()}{suffix}"


class AttachmentStorage(ABC):
    """Where attachment bytes live."""

    @abstractmethod
    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        """Store ``data`` and return the URL it is reachable at."""

    @abstractmethod
    async def delete(self, file_url: str) -> None:
        """Remove the file behind ``file_url``; a missing file is not an error."""


class LocalAttachmentStorage(AttachmentStorage):
    """Files on local disk, one flat directory."""

    def __init__(self, root: str, url_prefix: str = "/attachments"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _path_for(self, file_url: str) -> Path:
        name = file_url.rsplit("/", 1)[-1]
        path = (self.root / name).resolve()
        if path.parent != self.root.resolve():
            raise StorageError("Attachment URL does not point into storage")
        return path

    def _write(self, path: Path, data: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        name = new_object_name(filename)
        try:
            await run_in_threadpool(self._write, self.root / name, data)
        except OSError as exc:
            logger.error("Writing attachment failed", extra={"error": str(exc)})
            raise StorageError() from exc
        return f"{self.url_prefix}/{name}"

    async def delete(self, file_url: str) -> None:
        path = self._path_for(file_url)
        try:
            await run_in_threadpool(path.unlink, missing_ok=True)
        except OSError as exc:
            logger.error("Removing attachment failed", extra={"error": str(exc)})
            raise StorageError() from exc


class S3AttachmentStorage(AttachmentStorage):
    """Objects under ``attachments/`` in one bucket, addressed by their public URL.

    boto3 is synchronous, so every call runs in the threadpool.
    """

    def __init__(self, bucket: str, region: Optional[str] = None, client: Any = None, **credentials):
        self.bucket = bucket
        self.region = region
        self.client = client or boto3.client("s3", region_name=region, **credentials)

    def url_for(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    @staticmethod
    def key_for(file_url: str) -> str:
        return "/".join(file_url.split("/")[-2:])

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        key = f"{KEY_PREFIX}/{new_object_name(filename)}"
        try:
            await run_in_threadpool(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload failed", extra={"bucket": self.bucket, "error": str(exc)})
            raise StorageError() from exc
        return self.url_for(key)

    async def delete(self, file_url: str) -> None:
        try:
            await run_in_threadpool(
                self.client.delete_object, Bucket=self.bucket, Key=self.key_for(file_url)
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 delete failed", extra={"bucket": self.bucket, "error": str(exc)})
            raise StorageError() from exc


def get_attachment_storage(settings: Settings = Depends(get_settings)) -> AttachmentStorage:
    """Backend selected by ``attachment_storage``."""
    if settings.attachment_storage == "local":
        return LocalAttachmentStorage(settings.attachment_dir, settings.attachment_url_prefix)
    if settings.attachment_storage == "s3":
        if not settings.aws_s3_bucket:
            raise ConfigurationError("AWS_S3_BUCKET is required for S3 attachment storage")
        credentials = {}
        if settings.aws_access_key_id and settings.aws_secret_access_key:
            credentials = {
                "aws_access_key_id": settings.aws_access_key_id,
                "aws_secret_access_key": settings.aws_secret_access_key,
            }
        return S3AttachmentStorage(settings.aws_s3_bucket, settings.aws_region, **credentials)
    raise ConfigurationError(f"Unknown attachment storage: {settings.attachment_storage!r}")
