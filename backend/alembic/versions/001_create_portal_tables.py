"""Create portal tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- chapters ---
    op.create_table(
        "chapters",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            primary_key=True,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("institution", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("president_name", sa.String(255), nullable=False),
        sa.Column("president_email", sa.String(320), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("founded_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="Active"),
        sa.Column("logo_url", sa.String(2048), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('Active', 'Inactive', 'Pending')", name="ck_chapters_status"
        ),
    )

    # --- users (id is the identity provider subject) ---
    # chapter_id carries no FK: deleted chapters leave an unknown reference
    op.create_table(
        "users",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("school", sa.String(255), nullable=True),
        sa.Column("major", sa.String(255), nullable=True),
        sa.Column("interests", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("affiliations", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("skills", sa.String(1000), nullable=True),
        sa.Column("social_links", sa.JSON(), nullable=False, server_default="{}"),
        sa.Column("emergency_contact_name", sa.String(255), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(50), nullable=True),
        sa.Column(
            "membership_type",
            sa.String(32),
            nullable=False,
            server_default="Individual Member",
        ),
        sa.Column(
            "membership_status", sa.String(20), nullable=False, server_default="Pending"
        ),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        sa.Column("chapter_id", sa.UUID(), nullable=True),
        sa.Column(
            "chapter_approval_status", sa.String(20), nullable=False, server_default="none"
        ),
        sa.Column("join_date", sa.Date(), nullable=True),
        sa.Column("chapter_join_date", sa.Date(), nullable=True),
        sa.Column("intake_cohort", sa.String(100), nullable=True),
        sa.Column(
            "profile_completed", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("role IN ('member', 'moderator', 'admin')", name="ck_users_role"),
        sa.CheckConstraint(
            "membership_status IN ('Pending', 'Active', 'Inactive', 'Invalid', 'Rejected')",
            name="ck_users_membership_status",
        ),
        sa.CheckConstraint(
            "membership_type IN "
            "('Individual Member', 'Chapter Member', 'Fellow', 'Alumni')",
            name="ck_users_membership_type",
        ),
        sa.CheckConstraint(
            "chapter_approval_status IN ('none', 'pending', 'approved', 'rejected')",
            name="ck_users_chapter_approval_status",
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_chapter_id", "users", ["chapter_id"])
    op.create_index("ix_users_membership_status", "users", ["membership_status"])
    op.create_index("ix_users_chapter_approval_status", "users", ["chapter_approval_status"])

    # --- opportunities (NULL status = legacy row, treated as approved) ---
    op.create_table(
        "opportunities",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            primary_key=True,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("organization", sa.String(255), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("deadline", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("link", sa.String(2048), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("status", sa.String(20), nullable=True),
        sa.Column("created_by", sa.String(128), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "type IN ('Internship', 'Fellowship', 'Job', 'Scholarship', 'Conference')",
            name="ck_opportunities_type",
        ),
        sa.CheckConstraint(
            "status IS NULL OR status IN ('pending', 'approved', 'rejected')",
            name="ck_opportunities_status",
        ),
    )
    op.create_index("ix_opportunities_status", "opportunities", ["status"])
    op.create_index("ix_opportunities_created_by", "opportunities", ["created_by"])

    # --- resources ---
    op.create_table(
        "resources",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            primary_key=True,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("category", sa.String(64), nullable=False, server_default="Other"),
        sa.Column("file_type", sa.String(10), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("size_label", sa.String(32), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("uploaded_by", sa.String(128), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(
            "category IN ('Governance & Organizational', 'Chapter Development', "
            "'Membership Experience', 'Career Readiness', 'Other')",
            name="ck_resources_category",
        ),
        sa.CheckConstraint(
            "file_type IN ('PDF', 'DOCX', 'XLSX', 'ZIP', 'LINK')",
            name="ck_resources_file_type",
        ),
    )
    op.create_index("ix_resources_category", "resources", ["category"])

    # --- events (NULL chapter_id = network-wide) ---
    op.create_table(
        "events",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            primary_key=True,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("event_time", sa.String(32), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(128), nullable=False),
        sa.Column("chapter_id", sa.UUID(), nullable=True),
        sa.Column("chapter_name", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_events_event_date", "events", ["event_date"])
    op.create_index("ix_events_chapter_id", "events", ["chapter_id"])

    # --- metadata (one row per vocabulary) ---
    op.create_table(
        "metadata",
        sa.Column("key", sa.String(32), primary_key=True),
        sa.Column("values", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("key IN ('tags', 'affiliations')", name="ck_metadata_key"),
    )
    op.execute("""
        INSERT INTO metadata (key, "values")
        VALUES ('tags', '[]'), ('affiliations', '[]')
    """)

    # --- Grant permissions to app_user ---
    op.execute(
        "GRANT SELECT, INSERT, UPDATE, DELETE ON ALL TABLES IN SCHEMA public TO app_user"
    )


def downgrade() -> None:
    op.execute(
        "REVOKE SELECT, INSERT, UPDATE, DELETE ON ALL TABLES IN SCHEMA public FROM app_user"
    )

    op.drop_table("metadata")
    op.drop_table("events")
    op.drop_table("resources")
    op.drop_table("opportunities")
    op.drop_table("users")
    op.drop_table("chapters")
