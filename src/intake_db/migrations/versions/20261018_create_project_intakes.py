"""Create the users and project_intakes tables.

``users`` mirrors the profile table of the authentication layer so that
owner expansion works on a fresh database.
``project_intakes.owner_id`` has no foreign key.

Revision ID: 20261018_intakes
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID

revision = "20261018_intakes"
down_revision = None
branch_labels = None
depends_on = None

_STATUSES = (
    "submitted",
    "under_analysis",
    "analysis_sent",
    "waiting_validation",
    "approved_for_dev",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("email", sa.Text(), nullable=True, unique=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column(
            "is_admin", sa.Boolean(), nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    )

    op.create_table(
        "project_intakes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column(
            "status", sa.String(32), nullable=False,
            server_default=sa.text("'submitted'"),
        ),
        sa.Column("project_name", sa.Text(), nullable=False),
        sa.Column("short_title", sa.Text(), nullable=False),
        sa.Column("admin_summary", sa.Text(), nullable=True),
        sa.Column(
            "answers", JSONB(), nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        # --- Derived classification ---
        sa.Column("audience", ARRAY(sa.Text()), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("monetizations", ARRAY(sa.Text()), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("site_type", sa.Text(), nullable=True),
        sa.Column("usage_type", sa.Text(), nullable=True),
        sa.Column("need_account", sa.Text(), nullable=True),
        sa.Column("needs_db", sa.Boolean(), nullable=False),
        sa.Column("needs_ai", sa.Boolean(), nullable=False),
        sa.Column("needs_integrations", sa.Boolean(), nullable=False),
        sa.Column("needs_payment", sa.Boolean(), nullable=False),
        sa.Column("needs_admin_panel", sa.Boolean(), nullable=False),
        sa.Column("problem_frequency", sa.Text(), nullable=True),
        sa.Column("current_solution", sa.Text(), nullable=True),
        sa.Column("price_range", sa.Text(), nullable=True),
        sa.Column("competition_level", sa.Text(), nullable=True),
        sa.Column("return_reason", sa.Text(), nullable=True),
        sa.Column("design_references", sa.Text(), nullable=True),
        sa.Column("design_style", sa.Text(), nullable=True),
        sa.Column("homepage_focus", sa.Text(), nullable=True),
        sa.Column("final_output_type", sa.Text(), nullable=True),
        # --- Staff review ---
        sa.Column("analysis", sa.Text(), nullable=True),
        sa.Column("recommendation", sa.Text(), nullable=True),
        sa.Column("analysis_sent_at", TIMESTAMP(timezone=True), nullable=True),
        # --- Timestamps ---
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in _STATUSES) + ")",
            name="ck_intake_status",
        ),
        sa.CheckConstraint(
            "status != 'analysis_sent' OR analysis_sent_at IS NOT NULL",
            name="ck_analysis_sent_has_timestamp",
        ),
    )
    op.create_index("ix_project_intakes_owner_id", "project_intakes", ["owner_id"])
    op.create_index("ix_project_intakes_status", "project_intakes", ["status"])
    op.create_index(
        "ix_intake_owner_created", "project_intakes", ["owner_id", "created_at"]
    )
    op.create_index(
        "ix_intake_answers_gin", "project_intakes", ["answers"],
        postgresql_using="gin",
    )


def downgrade() -> None:
    op.drop_index("ix_intake_answers_gin", table_name="project_intakes")
    op.drop_index("ix_intake_owner_created", table_name="project_intakes")
    op.drop_index("ix_project_intakes_status", table_name="project_intakes")
    op.drop_index("ix_project_intakes_owner_id", table_name="project_intakes")
    op.drop_table("project_intakes")
    op.drop_table("users")
