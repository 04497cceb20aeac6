import uuid
from datetime import date, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    String,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from portal.core.states import (
    ChapterLinkState,
    MembershipState,
    MembershipType,
    Role,
    sql_in,
)
from portal.db.base import Base, utcnow


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(f"role IN ({sql_in(Role)})", name="ck_users_role"),
        CheckConstraint(
            f"membership_status IN ({sql_in(MembershipState)})",
            name="ck_users_membership_status",
        ),
        CheckConstraint(
            f"membership_type IN ({sql_in(MembershipType)})",
            name="ck_users_membership_type",
        ),
        CheckConstraint(
            f"chapter_approval_status IN ({sql_in(ChapterLinkState)})",
            name="ck_users_chapter_approval_status",
        ),
    )

    # Identity provider subject; also the owner key for created_by/uploaded_by
    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(50))
    school: Mapped[str | None] = mapped_column(String(255))
    major: Mapped[str | None] = mapped_column(String(255))
    interests: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    affiliations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    skills: Mapped[str | None] = mapped_column(String(1000))
    social_links: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    emergency_contact_name: Mapped[str | None] = mapped_column(String(255))
    emergency_contact_phone: Mapped[str | None] = mapped_column(String(50))

    membership_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=MembershipType.INDIVIDUAL.value
    )
    membership_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MembershipState.PENDING.value, index=True
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.MEMBER.value)

    # No FK: deleting a chapter leaves members pointing at an unknown chapter
    chapter_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    chapter_approval_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ChapterLinkState.NONE.value, index=True
    )

    join_date: Mapped[date | None] = mapped_column(Date)
    chapter_join_date: Mapped[date | None] = mapped_column(Date)
    intake_cohort: Mapped[str | None] = mapped_column(String(100))
    profile_completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=utcnow)
