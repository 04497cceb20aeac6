"""Vocabulary document schemas."""

from pydantic import BaseModel


class MetadataValues(BaseModel):
    values: list[str]


class MetadataResponse(BaseModel):
    key: str
    values: list[str]
