"""
Storage abstraction layer for imager.
Supports multiple backends: Local filesystem, S3/MinIO, CDN-backed containers.
"""

from imager.storage.base import StorageBackend
from imager.storage.resource_cache import EntryState, ResourceCache
from imager.storage.local import LocalStorageBackend
from imager.storage.s3 import S3StorageBackend
from imager.storage.cdn import CDNContainerStorageBackend
from imager.storage.factory import BACKEND_REGISTRY, build_backends, get_storage_backends

__all__ = [
    "StorageBackend",
    "EntryState",
    "ResourceCache",
    "LocalStorageBackend",
    "S3StorageBackend",
    "CDNContainerStorageBackend",
    "BACKEND_REGISTRY",
    "build_backends",
    "get_storage_backends",
]
