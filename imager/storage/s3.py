"""
S3-compatible storage backend.
Supports AWS S3 and S3-compatible services like MinIO.
"""

import asyncio
import logging
from pathlib import Path

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from imager.config import get_settings
from imager.core.exceptions import BackendError, NotFoundError
from imager.storage.base import StorageBackend
from imager.storage.resource_cache import ResourceCache

logger = logging.getLogger(__name__)
settings = get_settings()

NOT_FOUND_CODES = {"404", "NoSuchKey", "NoSuchBucket", "NotFound"}


def _error_code(error: ClientError) -> str | None:
    return error.response.get("Error", {}).get("Code")


class S3StorageBackend(StorageBackend):
    """
    S3-compatible object storage implementation.

    Objects are written under <upload_directory><remote_name> with a
    public-read ACL. The bucket is looked up (and created if missing) once,
    on first use.
    """

    name = "s3"

    def __init__(
        self,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        bucket_name: str | None = None,
        region: str | None = None,
        storage_class: str | None = None,
        acl: str | None = None,
        upload_directory: str | None = None,
        client=None,
    ):
        """
        Initialize S3 storage backend.

        Args:
            endpoint_url: S3 endpoint URL (for MinIO, custom S3-compatible services)
            access_key: AWS access key ID
            secret_key: AWS secret access key
            bucket_name: S3 bucket name
            region: AWS region
            storage_class: Optional storage class for written objects
            acl: Canned ACL for written objects
            upload_directory: Key prefix shared with the other backends
            client: Pre-built boto3 client, mainly for tests
        """
        super().__init__(
            upload_directory if upload_directory is not None else settings.UPLOAD_DIRECTORY
        )
        self.endpoint_url = endpoint_url or settings.S3_ENDPOINT_URL
        self.access_key = access_key or settings.S3_ACCESS_KEY
        self.secret_key = secret_key or settings.S3_SECRET_KEY
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.region = region or settings.S3_REGION
        self.storage_class = storage_class or settings.S3_STORAGE_CLASS
        self.acl = acl or settings.S3_ACL

        if client is None:
            config = Config(
                signature_version="s3v4",
                retries={"max_attempts": 3, "mode": "standard"},
            )
            client = boto3.client(
                "s3",
                endpoint_url=self.endpoint_url,
                aws_access_key_id=self.access_key,
                aws_secret_access_key=self.secret_key,
                region_name=self.region,
                config=config,
            )
        self.client = client
        self._buckets: ResourceCache[str] = ResourceCache()

    def _ensure_bucket_exists(self) -> str:
        """Create bucket if it doesn't exist."""
        try:
            self.client.head_bucket(Bucket=self.bucket_name)
            return self.bucket_name
        except ClientError as e:
            if _error_code(e) not in NOT_FOUND_CODES:
                raise

        logger.info(f"Creating bucket {self.bucket_name}")
        if self.region and self.region != "us-east-1":
            self.client.create_bucket(
                Bucket=self.bucket_name,
                CreateBucketConfiguration={"LocationConstraint": self.region},
            )
        else:
            self.client.create_bucket(Bucket=self.bucket_name)
        self.client.head_bucket(Bucket=self.bucket_name)
        return self.bucket_name

    async def _get_bucket(self) -> str:
        try:
            return await self._buckets.get(
                self.bucket_name,
                lambda: asyncio.to_thread(self._ensure_bucket_exists),
            )
        except (ClientError, BotoCoreError) as e:
            raise BackendError(
                message=f"Failed to resolve bucket: {str(e)}",
                backend=self.name,
                details={"bucket": self.bucket_name},
            )

    async def upload(
        self,
        local_path: str | Path,
        remote_name: str,
        content_type: str,
    ) -> str | None:
        """Upload the artifact with a public-read ACL."""
        bucket = await self._get_bucket()
        key = self.remote_key(remote_name)

        extra_args = {"ACL": self.acl, "ContentType": content_type}
        if self.storage_class:
            extra_args["StorageClass"] = self.storage_class

        try:
            await asyncio.to_thread(
                self.client.upload_file,
                str(local_path),
                bucket,
                key,
                ExtraArgs=extra_args,
            )
        except (ClientError, BotoCoreError) as e:
            raise BackendError(
                message=f"Failed to upload file to S3: {str(e)}",
                backend=self.name,
                details={"path": key, "bucket": bucket},
            )

        logger.info(f"{remote_name} uploaded")
        return remote_name

    async def remove(self, remote_name: str) -> None:
        """Delete an object from the bucket."""
        key = self.remote_key(remote_name)

        try:
            await asyncio.to_thread(
                self.client.delete_object,
                Bucket=self.bucket_name,
                Key=key,
            )
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise NotFoundError(remote_name, backend=self.name)
            raise BackendError(
                message=f"Failed to delete file from S3: {str(e)}",
                backend=self.name,
                details={"path": key, "bucket": self.bucket_name},
            )
        except BotoCoreError as e:
            raise BackendError(
                message=f"Failed to delete file from S3: {str(e)}",
                backend=self.name,
                details={"path": key, "bucket": self.bucket_name},
            )

        logger.info(f"{remote_name} removed")

    def base_uri(self) -> str | None:
        """Public bucket URL derived from the client endpoint."""
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com"
