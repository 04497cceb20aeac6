"""Enable row-level security on portal tables

Policies read the caller from transaction-local settings written by the
API on every request:

    app.current_user_id     identity provider subject
    app.current_role        member | moderator | admin
    app.current_chapter_id  chapter uuid, '' when the caller has none

Empty values are wrapped in NULLIF so casts see NULL instead of failing.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_USER = "NULLIF(current_setting('app.current_user_id', true), '')"
_ROLE = "NULLIF(current_setting('app.current_role', true), '')"
_CHAPTER = "NULLIF(current_setting('app.current_chapter_id', true), '')::uuid"

_ADMIN = f"{_ROLE} = 'admin'"
_MODERATOR = f"{_ROLE} = 'moderator'"

# table -> {policy action: (USING, WITH CHECK)}
_POLICIES: dict[str, dict[str, tuple[str | None, str | None]]] = {
    "users": {
        "select": (
            f"id = {_USER} OR {_ADMIN}"
            f" OR (profile_completed AND {_MODERATOR} AND chapter_id = {_CHAPTER})"
            f" OR (profile_completed AND {_ROLE} = 'member'"
            " AND membership_status = 'Active')",
            None,
        ),
        # Self-provisioning on first sign-in
        "insert": (None, f"id = {_USER} OR {_ADMIN}"),
        "update": (
            f"id = {_USER} OR {_ADMIN} OR ({_MODERATOR} AND chapter_id = {_CHAPTER})",
            f"id = {_USER} OR {_ADMIN} OR ({_MODERATOR} AND chapter_id = {_CHAPTER})"
            f" OR ({_MODERATOR} AND chapter_id IS NULL)",
        ),
        "delete": (_ADMIN, None),
    },
    "chapters": {
        "select": ("true", None),
        "insert": (None, _ADMIN),
        "update": (
            f"{_ADMIN} OR ({_MODERATOR} AND id = {_CHAPTER})",
            f"{_ADMIN} OR ({_MODERATOR} AND id = {_CHAPTER})",
        ),
        "delete": (_ADMIN, None),
    },
    "opportunities": {
        "select": (
            f"COALESCE(status, 'approved') = 'approved' OR created_by = {_USER} OR {_ADMIN}",
            None,
        ),
        "insert": (None, f"created_by = {_USER} AND status = 'pending'"),
        "update": (_ADMIN, _ADMIN),
        "delete": (f"created_by = {_USER} OR {_ADMIN}", None),
    },
    "resources": {
        "select": (
            f"category <> 'Chapter Development' OR {_ROLE} IN ('admin', 'moderator')",
            None,
        ),
        "insert": (None, _ADMIN),
        "update": (_ADMIN, _ADMIN),
        "delete": (f"uploaded_by = {_USER} OR {_ADMIN}", None),
    },
    "events": {
        "select": (f"chapter_id IS NULL OR chapter_id = {_CHAPTER} OR {_ADMIN}", None),
        "insert": (None, _ADMIN),
        "update": (_ADMIN, _ADMIN),
        "delete": (f"created_by = {_USER} OR {_ADMIN}", None),
    },
    "metadata": {
        "select": ("true", None),
        "insert": (None, _ADMIN),
        "update": (_ADMIN, _ADMIN),
    },
}


def upgrade() -> None:
    for table, policies in _POLICIES.items():
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
        for action, (using, check) in policies.items():
            clauses = []
            if using is not None:
                clauses.append(f"USING ({using})")
            if check is not None:
                clauses.append(f"WITH CHECK ({check})")
            op.execute(f"""
                CREATE POLICY portal_{action} ON {table}
                FOR {action.upper()}
                {' '.join(clauses)}
            """)


def downgrade() -> None:
    for table, policies in _POLICIES.items():
        for action in policies:
            op.execute(f"DROP POLICY IF EXISTS portal_{action} ON {table}")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
