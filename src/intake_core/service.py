"""IntakeService: orchestrates the pure intake pipeline and persistence.

Stateless: every call loads what it needs through the repository, applies
the pure core (build, validate, derive, assemble) and writes the result
back.  The caller passes the ``AsyncSession`` and owns the transaction.

Failures split two ways:
  - incomplete answers come back as data (``SubmissionResult.errors``)
  - lookups and disallowed transitions raise ``ValueError`` with a message
    the HTTP layer maps to a status code ("not found", "only valid ...",
    "at least one ...")
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from intake_core.converter import hydrate_form_state_from_answers_v2
from intake_core.models.answers import is_v2
from intake_core.models.form_state import FormState
from intake_core.models.intake import (
    IntakeInfo,
    IntakePage,
    StatusCounts,
    SubmissionResult,
)
from intake_core.payload import prepare_submission
from intake_db.models.enums import IntakeStatus
from intake_db.repository import IntakeRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from intake_db.models.intake import ProjectIntake

logger = logging.getLogger(__name__)


class IntakeService:
    """Submission, edit and staff-review operations on project intakes.

    Args:
        repo: repository override (tests pass an in-memory fake).
    """

    def __init__(self, repo: IntakeRepository | None = None) -> None:
        self._repo = repo if repo is not None else IntakeRepository()

    # ==================================================================
    # Owner operations
    # ==================================================================

    async def submit(
        self,
        db: AsyncSession,
        *,
        owner_id: str,
        form_state: FormState | Mapping[str, Any],
        now: datetime | None = None,
    ) -> SubmissionResult:
        """Create a submission from a wizard snapshot.

        Nothing is written when validation fails; the errors are returned
        in question order instead.
        """
        submission = prepare_submission(form_state, now=now)
        if not submission.ok:
            return SubmissionResult(errors=submission.errors)

        payload = submission.payload.model_copy(update={"owner": owner_id})
        row = await self._repo.create_intake(
            db, owner_id=payload.owner, fields=payload.record_fields(),
        )
        logger.info(
            "Intake created: id=%s owner=%s title=%r",
            row.id, owner_id, row.short_title,
        )
        return SubmissionResult(intake=self._to_intake_info(row))

    async def update_submission(
        self,
        db: AsyncSession,
        *,
        owner_id: str,
        intake_id: uuid.UUID,
        form_state: FormState | Mapping[str, Any],
        now: datetime | None = None,
    ) -> SubmissionResult:
        """Replace the answers of a submission that has not been picked up yet.

        The record is re-derived from scratch and saved as V2; its status
        stays ``submitted``.
        """
        row = await self._load_owned(db, intake_id, owner_id)
        self._require_v2(row, intake_id)
        if row.status != IntakeStatus.SUBMITTED.value:
            raise ValueError(
                f"Editing is only valid while status is 'submitted' "
                f"(intake {intake_id} is {row.status!r})"
            )

        submission = prepare_submission(form_state, now=now)
        if not submission.ok:
            return SubmissionResult(errors=submission.errors)

        row = await self._repo.replace_submission(
            db, row, submission.payload.record_fields(),
        )
        logger.info("Intake updated: id=%s owner=%s", row.id, owner_id)
        return SubmissionResult(intake=self._to_intake_info(row))

    async def get_intake(
        self,
        db: AsyncSession,
        *,
        intake_id: uuid.UUID,
        owner_id: str | None = None,
    ) -> IntakeInfo | None:
        """Fetch one submission.

        With ``owner_id`` the lookup is scoped to that owner; without it
        (staff view) the owner profile is expanded.
        """
        if owner_id is not None:
            row = await self._repo.get_for_owner(db, intake_id, owner_id)
        else:
            row = await self._repo.get_by_id(db, intake_id, expand_owner=True)
        if row is None:
            return None
        return self._to_intake_info(row)

    async def get_form_state(
        self,
        db: AsyncSession,
        *,
        owner_id: str,
        intake_id: uuid.UUID,
    ) -> FormState:
        """Rebuild the wizard snapshot of a stored submission (edit mode)."""
        row = await self._load_owned(db, intake_id, owner_id)
        self._require_v2(row, intake_id)
        return hydrate_form_state_from_answers_v2(row.answers)

    async def list_for_owner(
        self,
        db: AsyncSession,
        *,
        owner_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> IntakePage:
        """An owner's submissions, most recent first."""
        rows = await self._repo.list_by_owner(db, owner_id, limit=limit, offset=offset)
        total = await self._repo.count_by_owner(db, owner_id)
        return IntakePage(
            items=[self._to_intake_info(r) for r in rows],
            total=total,
            limit=limit,
            offset=offset,
        )

    # ==================================================================
    # Staff operations
    # ==================================================================

    async def list_all(
        self,
        db: AsyncSession,
        *,
        status: IntakeStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> IntakePage:
        """Every submission, optionally filtered by status, owners expanded."""
        rows = await self._repo.list_all(db, status=status, limit=limit, offset=offset)
        total = await self._repo.count_all(db, status=status)
        return IntakePage(
            items=[self._to_intake_info(r) for r in rows],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def status_counts(self, db: AsyncSession) -> StatusCounts:
        """Per-status totals for the staff dashboard."""
        counts = await self._repo.count_by_status(db)
        known = {s.value: counts.get(s.value, 0) for s in IntakeStatus}
        return StatusCounts(total=sum(counts.values()), **known)

    async def change_status(
        self,
        db: AsyncSession,
        *,
        intake_id: uuid.UUID,
        status: IntakeStatus,
    ) -> IntakeInfo:
        """Move a submission to any status of the review pipeline."""
        row = await self._load(db, intake_id)
        previous = row.status
        row = await self._repo.set_status(db, row, status)
        logger.info(
            "Intake status changed: id=%s %s -> %s", intake_id, previous, status.value,
        )
        return self._to_intake_info(row)

    async def send_analysis(
        self,
        db: AsyncSession,
        *,
        intake_id: uuid.UUID,
        analysis: str | None = None,
        recommendation: str | None = None,
    ) -> IntakeInfo:
        """Attach the staff analysis and mark it sent.

        Both texts are trimmed and blank ones are stored as NULL; at least
        one of them must carry content.
        """
        analysis = (analysis or "").strip() or None
        recommendation = (recommendation or "").strip() or None
        if analysis is None and recommendation is None:
            raise ValueError("At least one of analysis or recommendation is required")

        row = await self._load(db, intake_id)
        row = await self._repo.save_analysis(
            db, row, analysis=analysis, recommendation=recommendation,
        )
        logger.info("Analysis sent: id=%s owner=%s", intake_id, row.owner_id)
        return self._to_intake_info(row)

    # ==================================================================
    # Helpers
    # ==================================================================

    async def _load(self, db: AsyncSession, intake_id: uuid.UUID) -> ProjectIntake:
        row = await self._repo.get_by_id(db, intake_id)
        if row is None:
            raise ValueError(f"Intake not found: id={intake_id}")
        return row

    async def _load_owned(
        self, db: AsyncSession, intake_id: uuid.UUID, owner_id: str
    ) -> ProjectIntake:
        """Load a row owned by ``owner_id``; other owners' rows are 'not found'."""
        row = await self._repo.get_for_owner(db, intake_id, owner_id)
        if row is None:
            raise ValueError(f"Intake not found: id={intake_id}, owner_id={owner_id}")
        return row

    @staticmethod
    def _require_v2(row: ProjectIntake, intake_id: uuid.UUID) -> None:
        """Legacy records are read-only: no wizard load, no overwrite."""
        if not is_v2(row.answers):
            raise ValueError(
                f"Wizard editing is only valid for V2 answers (intake {intake_id})"
            )

    @staticmethod
    def _to_intake_info(row: ProjectIntake) -> IntakeInfo:
        """Convert an ORM row (owner relation included when loaded)."""
        return IntakeInfo.model_validate(row, from_attributes=True)
