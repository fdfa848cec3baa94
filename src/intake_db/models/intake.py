"""ProjectIntake ORM model: one row per submitted questionnaire.

The raw versioned answers are kept verbatim in a JSONB column (the ``v``
discriminator travels inside), while every derived field gets its own
column so staff listings can filter and sort without touching the JSON.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Index, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from intake_db.models.base import Base
from intake_db.models.enums import IntakeStatus
from intake_db.models.user import User

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in IntakeStatus)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectIntake(Base):
    """One submission and its staff review state."""

    __tablename__ = "project_intakes"

    # --- Primary key ---
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # --- Ownership / lifecycle ---
    owner_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=IntakeStatus.SUBMITTED.value,
        server_default=text(f"'{IntakeStatus.SUBMITTED.value}'"),
        index=True,
    )

    # --- Metadata ---
    project_name: Mapped[str] = mapped_column(Text, nullable=False)
    short_title: Mapped[str] = mapped_column(Text, nullable=False)
    admin_summary: Mapped[str | None] = mapped_column(Text, nullable=True)

    # --- Raw answers (V1 or V2) ---
    answers: Mapped[dict] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )

    # --- Derived classification ---
    audience: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default=text("'{}'")
    )
    monetizations: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default=text("'{}'")
    )
    site_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    usage_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    need_account: Mapped[str | None] = mapped_column(Text, nullable=True)
    needs_db: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    needs_ai: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    needs_integrations: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    needs_payment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    needs_admin_panel: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    problem_frequency: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_solution: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_range: Mapped[str | None] = mapped_column(Text, nullable=True)
    competition_level: Mapped[str | None] = mapped_column(Text, nullable=True)
    return_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    design_references: Mapped[str | None] = mapped_column(Text, nullable=True)
    design_style: Mapped[str | None] = mapped_column(Text, nullable=True)
    homepage_focus: Mapped[str | None] = mapped_column(Text, nullable=True)
    final_output_type: Mapped[str | None] = mapped_column(Text, nullable=True)

    # --- Staff review ---
    analysis: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommendation: Mapped[str | None] = mapped_column(Text, nullable=True)
    analysis_sent_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )

    # --- Timestamps ---
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    # Read-only join on the auth layer's table; there is no FK because the
    # user row may be created after the first submission.  Only loaded when
    # a query asks for it with ``selectinload``.
    owner: Mapped[User | None] = relationship(
        User,
        primaryjoin="foreign(ProjectIntake.owner_id) == User.id",
        viewonly=True,
        lazy="noload",
    )

    __table_args__ = (
        CheckConstraint(
            f"status IN ({_STATUS_VALUES})",
            name="ck_intake_status",
        ),
        # A sent analysis must be timestamped
        CheckConstraint(
            "status != 'analysis_sent' OR analysis_sent_at IS NOT NULL",
            name="ck_analysis_sent_has_timestamp",
        ),
        # Owner dashboard: newest first per owner
        Index("ix_intake_owner_created", "owner_id", "created_at"),
        Index("ix_intake_answers_gin", "answers", postgresql_using="gin"),
    )

    def __repr__(self) -> str:
        return (
            f"<ProjectIntake(id={self.id!s}, owner={self.owner_id!r}, "
            f"status={self.status!r}, title={self.short_title!r})>"
        )
