"""
Pydantic schemas for upload responses.
"""

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Base URI of the storage plus every produced artifact name."""

    base_uri: str = Field(alias="baseUri")
    files: list[str]

    model_config = ConfigDict(populate_by_name=True)
