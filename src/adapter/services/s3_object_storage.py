"""
Avatar storage on S3-compatible object storage.

Supports AWS S3, Cloudflare R2, MinIO and other S3-compatible services.
boto3 is blocking, so every call runs in a worker thread with a timeout.
"""

import asyncio
import hashlib
import logging
from datetime import UTC, datetime
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from libs.result import Error, Result, Return
from src.app.services.object_storage import IObjectStorage, StoredObject

logger = logging.getLogger(__name__)


class S3ObjectStorage(IObjectStorage):
    def __init__(
        self,
        bucket: str,
        region: str,
        folder: str,
        endpoint: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        public_url: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.bucket = bucket
        self.region = region
        self.folder = folder.strip("/")
        self.endpoint = endpoint or None
        self.access_key = access_key or None
        self.secret_key = secret_key or None
        self.public_url = public_url or None
        self.timeout = timeout
        self._client = None

    @property
    def client(self):
        """Lazy-load S3 client."""
        if self._client is None:
            client_kwargs = {
                "service_name": "s3",
                "region_name": self.region,
                "aws_access_key_id": self.access_key,
                "aws_secret_access_key": self.secret_key,
                "config": Config(
                    signature_version="s3v4",
                    connect_timeout=self.timeout,
                    read_timeout=self.timeout,
                ),
            }
            if self.endpoint:
                client_kwargs["endpoint_url"] = self.endpoint
            self._client = boto3.client(**client_kwargs)
        return self._client

    def _object_url(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{key}"
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def _generate_key(self, filename: str, content: bytes) -> str:
        content_hash = hashlib.sha256(content).hexdigest()[:12]
        timestamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S")
        safe_filename = "".join(c for c in filename if c.isalnum() or c in ".-_").lower()
        return f"{self.folder}/{timestamp}_{content_hash}_{safe_filename}"

    async def _run(self, fn, **kwargs):
        return await asyncio.wait_for(asyncio.to_thread(fn, **kwargs), timeout=self.timeout)

    async def upload(
        self, content: bytes, filename: str, content_type: str
    ) -> Result[StoredObject]:
        if not self.bucket:
            logger.error("S3 storage not configured")
            return Return.err(Error("STORAGE_FAILURE", "Image storage is not configured"))

        key = self._generate_key(filename, content)
        try:
            await self._run(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Upload failed for {key}: {e!r}")
            return Return.err(Error("STORAGE_FAILURE", "Image upload failed"))

        logger.info(f"Uploaded: {key}")
        return Return.ok(StoredObject(url=self._object_url(key), object_id=key))

    async def destroy(self, object_id: str) -> Result[None]:
        try:
            await self._run(self.client.delete_object, Bucket=self.bucket, Key=object_id)
        except (BotoCoreError, ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Delete failed for {object_id}: {e!r}")
            return Return.err(Error("STORAGE_FAILURE", "Stored image could not be removed"))

        logger.info(f"Deleted object: {object_id}")
        return Return.ok(None)
