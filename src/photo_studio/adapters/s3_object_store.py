"""S3-compatible object storage adapter."""

import asyncio
from dataclasses import dataclass
from typing import Any, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

_MISSING_KEY_CODES = {"404", "NoSuchKey", "NotFound"}


class ObjectStore(Protocol):
    """Interface for key-addressed blob storage."""

    async def delete(self, key: str) -> None:
        """Delete an object. Deleting an absent key is not an error."""

    def presign_get(self, key: str, expires_in: int) -> str:
        """Return a time-limited download URL."""

    def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        """Return a time-limited upload URL bound to a content type."""


@dataclass
class Boto3ObjectStore(ObjectStore):
    """boto3-backed object store."""

    client: Any
    bucket: str

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        bucket: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        endpoint_url: str | None = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 10.0,
        max_attempts: int = 3,
    ) -> "Boto3ObjectStore":
        """Create an object store with bounded per-request timeouts."""
        client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            endpoint_url=endpoint_url,
            config=Config(
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                retries={"max_attempts": max_attempts, "mode": "standard"},
                signature_version="s3v4",
            ),
        )
        return cls(client=client, bucket=bucket)

    async def delete(self, key: str) -> None:
        """Delete an object in a worker thread."""
        await asyncio.to_thread(self._delete_sync, key)

    def _delete_sync(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in _MISSING_KEY_CODES:
                return
            raise

    def presign_get(self, key: str, expires_in: int) -> str:
        """Presign a GET for the object."""
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        """Presign a PUT for the object with a fixed content type."""
        return self.client.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
            ExpiresIn=expires_in,
        )

    def close(self) -> None:
        """Close the underlying client's connection pool."""
        self.client.close()
