import uuid
from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from portal.core.states import ResourceCategory, ResourceFileType, sql_in
from portal.db.base import Base, utcnow


class Resource(Base):
    __tablename__ = "resources"
    __table_args__ = (
        CheckConstraint(
            f"category IN ({sql_in(ResourceCategory)})", name="ck_resources_category"
        ),
        CheckConstraint(
            f"file_type IN ({sql_in(ResourceFileType)})", name="ck_resources_file_type"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(
        String(64), nullable=False, default=ResourceCategory.OTHER.value, index=True
    )
    file_type: Mapped[str] = mapped_column(String(10), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    size_label: Mapped[str | None] = mapped_column(String(32))
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    uploaded_by: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
