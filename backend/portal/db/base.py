from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    """Python-side timestamp default, so rows never need a refresh after flush."""
    return datetime.now(UTC)
