"""
CDN-backed container storage backend.

Artifacts go to a blob container (Azure Blob Storage) that is served
through a CDN. The container is resolved lazily: looked up on first use,
created when missing, and cached for the lifetime of the backend.
"""

import asyncio
import logging
from pathlib import Path

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from imager.config import get_settings
from imager.core.exceptions import BackendError, ConfigurationError
from imager.storage.base import StorageBackend
from imager.storage.resource_cache import ResourceCache

logger = logging.getLogger(__name__)
settings = get_settings()

# Container metadata keys an operator may set to advertise CDN endpoints
CDN_METADATA_KEYS = {
    "cdn_uri": "cdnuri",
    "cdn_ssl_uri": "cdnssluri",
    "cdn_streaming_uri": "cdnstreaminguri",
}


class CDNContainerStorageBackend(StorageBackend):
    """
    Container storage fronted by a CDN.

    Configured via CDN_* environment variables. CDN URIs come from
    configuration first, then from container metadata, then from the
    container URL itself when the container allows public access.
    """

    name = "rackspace"

    def __init__(
        self,
        connection_string: str | None = None,
        container_name: str | None = None,
        upload_directory: str | None = None,
        cdn_uri: str | None = None,
        cdn_ssl_uri: str | None = None,
        cdn_streaming_uri: str | None = None,
        blob_service_client: BlobServiceClient | None = None,
    ):
        """
        Initialize CDN container backend.

        Args:
            connection_string: Azure Storage connection string
            container_name: Blob container name
            upload_directory: Blob name prefix shared with the other backends
            cdn_uri: Plain CDN endpoint, overrides what the container reports
            cdn_ssl_uri: HTTPS CDN endpoint
            cdn_streaming_uri: Streaming CDN endpoint
            blob_service_client: Pre-built service client, mainly for tests
        """
        super().__init__(
            upload_directory if upload_directory is not None else settings.UPLOAD_DIRECTORY
        )
        self.connection_string = connection_string or settings.CDN_CONNECTION_STRING
        self.container_name = container_name or settings.CDN_CONTAINER_NAME

        self._configured_uris = {
            "cdn_uri": cdn_uri or settings.CDN_URI,
            "cdn_ssl_uri": cdn_ssl_uri or settings.CDN_SSL_URI,
            "cdn_streaming_uri": cdn_streaming_uri or settings.CDN_STREAMING_URI,
        }
        self.cdn_uri: str | None = None
        self.cdn_ssl_uri: str | None = None
        self.cdn_streaming_uri: str | None = None

        if blob_service_client is None:
            if not self.connection_string:
                raise ConfigurationError(
                    message="CDN container connection string not configured",
                    details={"required": "CDN_CONNECTION_STRING"},
                )
            blob_service_client = BlobServiceClient.from_connection_string(
                self.connection_string
            )
        self.blob_service_client = blob_service_client
        self._containers: ResourceCache[ContainerClient] = ResourceCache()

    def _lookup_container(self) -> ContainerClient:
        """Look the container up, creating it when it does not exist."""
        container = self.blob_service_client.get_container_client(self.container_name)
        try:
            properties = container.get_container_properties()
        except ResourceNotFoundError:
            logger.info(f"Creating container {self.container_name}")
            try:
                container.create_container()
            except ResourceExistsError:
                pass
            properties = container.get_container_properties()

        self._record_cdn_uris(container, properties)
        return container

    def _record_cdn_uris(self, container: ContainerClient, properties) -> None:
        metadata = getattr(properties, "metadata", None) or {}
        public = bool(getattr(properties, "public_access", None))

        reported = {
            attr: metadata.get(key) for attr, key in CDN_METADATA_KEYS.items()
        }
        if public:
            url = container.url
            reported["cdn_uri"] = reported["cdn_uri"] or url
            if url.startswith("https://"):
                reported["cdn_ssl_uri"] = reported["cdn_ssl_uri"] or url

        for attr, value in reported.items():
            setattr(self, attr, self._configured_uris[attr] or value)

    async def get_container(self) -> ContainerClient:
        """Resolved container handle, shared by all concurrent callers."""
        try:
            return await self._containers.get(
                self.container_name,
                lambda: asyncio.to_thread(self._lookup_container),
            )
        except AzureError as e:
            raise BackendError(
                message=f"Failed to resolve container: {str(e)}",
                backend=self.name,
                details={"container": self.container_name},
            )

    def _upload_file(
        self,
        container: ContainerClient,
        local_path: str | Path,
        key: str,
        content_type: str,
    ):
        with open(local_path, "rb") as stream:
            return container.upload_blob(
                name=key,
                data=stream,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )

    async def upload(
        self,
        local_path: str | Path,
        remote_name: str,
        content_type: str,
    ) -> str | None:
        """Stream the artifact into the container."""
        container = await self.get_container()
        key = self.remote_key(remote_name)

        try:
            uploaded = await asyncio.to_thread(
                self._upload_file, container, local_path, key, content_type
            )
        except (AzureError, OSError) as e:
            raise BackendError(
                message=f"Failed to upload file to container: {str(e)}",
                backend=self.name,
                details={"path": key, "container": self.container_name},
            )

        if not uploaded:
            return None

        logger.info(f"{remote_name} uploaded")
        return remote_name

    async def remove(self, remote_name: str) -> None:
        """Delete a blob; a missing blob counts as removed."""
        container = await self.get_container()
        key = self.remote_key(remote_name)

        try:
            await asyncio.to_thread(container.delete_blob, key)
        except ResourceNotFoundError:
            logger.info(f"{remote_name} not found")
            return
        except AzureError as e:
            raise BackendError(
                message=f"Failed to delete file from container: {str(e)}",
                backend=self.name,
                details={"path": key, "container": self.container_name},
            )

        logger.info(f"{remote_name} removed")

    def base_uri(self) -> str | None:
        return self.cdn_uri or self._configured_uris["cdn_uri"]
