"""
FastAPI dependency injection functions.
Provides common dependencies used across endpoints.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from imager.config import Settings, get_settings
from imager.services.imager_service import Imager
from imager.storage import get_storage_backends


@lru_cache
def get_imager() -> Imager:
    """
    Process-wide Imager built from settings.

    Backends are shared so remote container handles are resolved once.
    """
    return Imager.from_settings(get_settings(), get_storage_backends())


# Type aliases for cleaner endpoint signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
ImagerService = Annotated[Imager, Depends(get_imager)]
