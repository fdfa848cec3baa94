"""Async CRUD repository for ProjectIntake.

Every method takes the ``AsyncSession`` explicitly and only flushes; the
caller (the request-scoped ``get_db`` dependency) owns the transaction.

No business rules live here: who may edit what, and when, is decided by
``intake_core.service``.  Structural invariants are enforced by the table
constraints.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from intake_db.models.enums import IntakeStatus
from intake_db.models.intake import ProjectIntake


class IntakeRepository:
    """Async read/write operations on the ``project_intakes`` table."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_intake(
        self,
        db: AsyncSession,
        *,
        owner_id: str,
        fields: dict[str, Any],
    ) -> ProjectIntake:
        """Insert a new submission built from payload column values."""
        intake = ProjectIntake(owner_id=owner_id, **fields)
        db.add(intake)
        await db.flush()  # Populate id and timestamps
        return intake

    # ------------------------------------------------------------------
    # Read: single row
    # ------------------------------------------------------------------

    async def get_by_id(
        self,
        db: AsyncSession,
        intake_id: uuid.UUID,
        *,
        expand_owner: bool = False,
    ) -> ProjectIntake | None:
        """Fetch a submission by primary key, optionally with its owner."""
        stmt = select(ProjectIntake).where(ProjectIntake.id == intake_id)
        if expand_owner:
            stmt = stmt.options(selectinload(ProjectIntake.owner))
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_owner(
        self, db: AsyncSession, intake_id: uuid.UUID, owner_id: str
    ) -> ProjectIntake | None:
        """Fetch a submission only if it belongs to ``owner_id``."""
        stmt = select(ProjectIntake).where(
            ProjectIntake.id == intake_id,
            ProjectIntake.owner_id == owner_id,
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Read: multiple rows
    # ------------------------------------------------------------------

    async def list_by_owner(
        self,
        db: AsyncSession,
        owner_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> list[ProjectIntake]:
        """List an owner's submissions, most recent first."""
        stmt = (
            select(ProjectIntake)
            .where(ProjectIntake.owner_id == owner_id)
            .order_by(ProjectIntake.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def list_all(
        self,
        db: AsyncSession,
        *,
        status: IntakeStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[ProjectIntake]:
        """List every submission (staff view) with owners expanded."""
        stmt = select(ProjectIntake).options(selectinload(ProjectIntake.owner))
        if status is not None:
            stmt = stmt.where(ProjectIntake.status == status.value)
        stmt = (
            stmt.order_by(ProjectIntake.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    async def count_by_owner(self, db: AsyncSession, owner_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(ProjectIntake)
            .where(ProjectIntake.owner_id == owner_id)
        )
        result = await db.execute(stmt)
        return result.scalar_one()

    async def count_all(
        self, db: AsyncSession, *, status: IntakeStatus | None = None
    ) -> int:
        stmt = select(func.count()).select_from(ProjectIntake)
        if status is not None:
            stmt = stmt.where(ProjectIntake.status == status.value)
        result = await db.execute(stmt)
        return result.scalar_one()

    async def count_by_status(self, db: AsyncSession) -> dict[str, int]:
        """Row count per status value (statuses with no rows are absent)."""
        stmt = select(ProjectIntake.status, func.count()).group_by(ProjectIntake.status)
        result = await db.execute(stmt)
        return {status: count for status, count in result.all()}

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def replace_submission(
        self,
        db: AsyncSession,
        intake: ProjectIntake,
        fields: dict[str, Any],
    ) -> ProjectIntake:
        """Overwrite answers, metadata and derived columns after an edit.

        ``status`` is left untouched even if present in ``fields``.
        """
        for name, value in fields.items():
            if name == "status":
                continue
            setattr(intake, name, value)
        intake.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return intake

    async def set_status(
        self,
        db: AsyncSession,
        intake: ProjectIntake,
        status: IntakeStatus,
    ) -> ProjectIntake:
        """Move a submission to ``status``.

        Entering ``analysis_sent`` without a prior send stamps
        ``analysis_sent_at`` (required by ``ck_analysis_sent_has_timestamp``).
        """
        now = datetime.now(timezone.utc)
        intake.status = status.value
        if status is IntakeStatus.ANALYSIS_SENT and intake.analysis_sent_at is None:
            intake.analysis_sent_at = now
        intake.updated_at = now
        await db.flush()
        return intake

    async def save_analysis(
        self,
        db: AsyncSession,
        intake: ProjectIntake,
        *,
        analysis: str | None,
        recommendation: str | None,
    ) -> ProjectIntake:
        """Store the staff analysis and mark it as sent to the owner."""
        now = datetime.now(timezone.utc)
        intake.analysis = analysis
        intake.recommendation = recommendation
        intake.status = IntakeStatus.ANALYSIS_SENT.value
        intake.analysis_sent_at = now
        intake.updated_at = now
        await db.flush()
        return intake
