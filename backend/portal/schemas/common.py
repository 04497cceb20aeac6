"""Shared schema types and list normalisation helpers."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    type: str
    title: str
    status: int
    detail: str | dict | list
    instance: str
    redirect_to: str | None = None


def normalize_tags(value) -> list[str]:
    """Accept a list or a comma separated string; strip, drop blanks, keep first occurrence."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    seen: list[str] = []
    for item in value:
        tag = str(item).strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def validate_http_url(value: str | None) -> str | None:
    if value is None or value == "":
        return value
    if not value.startswith(("http://", "https://")):
        raise ValueError("Must be a valid http(s) URL")
    return value
