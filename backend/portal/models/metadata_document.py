from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from portal.core.states import MetadataKey, sql_in
from portal.db.base import Base, utcnow


class MetadataDocument(Base):
    """Singleton vocabulary document (``tags`` or ``affiliations``)."""

    __tablename__ = "metadata"
    __table_args__ = (CheckConstraint(f"key IN ({sql_in(MetadataKey)})", name="ck_metadata_key"),)

    key: Mapped[str] = mapped_column(String(32), primary_key=True)
    values: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
