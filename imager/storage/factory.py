"""
Storage backend registry.
Builds the configured set of backends by type name.
"""

from functools import lru_cache
from typing import Callable

from imager.config import Settings, get_settings
from imager.core.exceptions import ConfigurationError
from imager.storage.base import StorageBackend
from imager.storage.cdn import CDNContainerStorageBackend
from imager.storage.local import LocalStorageBackend
from imager.storage.s3 import S3StorageBackend


def _build_local(settings: Settings) -> StorageBackend:
    return LocalStorageBackend(
        base_path=settings.LOCAL_STORAGE_PATH,
        upload_directory=settings.UPLOAD_DIRECTORY,
        base_uri=settings.LOCAL_BASE_URI,
        mode=settings.LOCAL_FILE_MODE,
    )


def _build_s3(settings: Settings) -> StorageBackend:
    return S3StorageBackend(
        endpoint_url=settings.S3_ENDPOINT_URL,
        access_key=settings.S3_ACCESS_KEY,
        secret_key=settings.S3_SECRET_KEY,
        bucket_name=settings.S3_BUCKET_NAME,
        region=settings.S3_REGION,
        storage_class=settings.S3_STORAGE_CLASS,
        acl=settings.S3_ACL,
        upload_directory=settings.UPLOAD_DIRECTORY,
    )


def _build_cdn_container(settings: Settings) -> StorageBackend:
    return CDNContainerStorageBackend(
        connection_string=settings.CDN_CONNECTION_STRING,
        container_name=settings.CDN_CONTAINER_NAME,
        upload_directory=settings.UPLOAD_DIRECTORY,
        cdn_uri=settings.CDN_URI,
        cdn_ssl_uri=settings.CDN_SSL_URI,
        cdn_streaming_uri=settings.CDN_STREAMING_URI,
    )


BACKEND_REGISTRY: dict[str, Callable[[Settings], StorageBackend]] = {
    "local": _build_local,
    "s3": _build_s3,
    "rackspace": _build_cdn_container,
    "azure": _build_cdn_container,
}


def build_backends(
    settings: Settings,
    names: list[str] | None = None,
) -> list[StorageBackend]:
    """
    Construct backends in registration order.

    Args:
        settings: Application settings holding each backend's configuration
        names: Backend type names. Defaults to settings.STORAGE_BACKENDS

    Raises:
        ConfigurationError: If no backend is named or a name is unknown
    """
    names = names if names is not None else settings.storage_backend_names
    if not names:
        raise ConfigurationError(message="Please specify a storage backend")

    backends = []
    for name in names:
        builder = BACKEND_REGISTRY.get(name.lower())
        if builder is None:
            raise ConfigurationError(
                message=f"Unknown storage backend: {name}",
                details={"available": sorted(BACKEND_REGISTRY)},
            )
        backends.append(builder(settings))
    return backends


@lru_cache
def get_storage_backends() -> tuple[StorageBackend, ...]:
    """
    Get the configured storage backends.

    Uses LRU cache so each backend (and its cached container handle)
    lives for the whole process.
    """
    return tuple(build_backends(get_settings()))
