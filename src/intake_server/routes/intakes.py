"""Owner endpoints: submit, list, read and edit one's own intakes.

All endpoints require the ``X-User-ID`` header.  Another owner's intake is
reported as not found.
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from intake_core.models.form_state import FormState
from intake_core.models.intake import IntakeInfo, IntakePage
from intake_core.service import IntakeService
from intake_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from intake_server.dependencies import get_db, get_service, get_user_id
from intake_server.routes.responses import validation_failed

router = APIRouter(prefix="/intakes", tags=["intakes"])


@router.post("", status_code=201)
async def submit_intake(
    body: FormState,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
) -> IntakeInfo:
    """Submit a completed wizard.

    Returns 201 with the stored intake, or 422 with the validation issues
    (nothing is stored in that case).
    """
    result = await service.submit(db, owner_id=user_id, form_state=body)
    if not result.ok:
        return validation_failed(result)
    return result.intake


@router.get("")
async def list_my_intakes(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> IntakePage:
    """List the caller's intakes, most recent first."""
    return await service.list_for_owner(
        db, owner_id=user_id, limit=limit, offset=offset,
    )


@router.get("/{intake_id}")
async def get_my_intake(
    intake_id: uuid.UUID,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
) -> IntakeInfo:
    """One of the caller's intakes, including the staff analysis once sent."""
    info = await service.get_intake(db, intake_id=intake_id, owner_id=user_id)
    if info is None:
        raise ValueError(f"Intake not found: id={intake_id}")
    return info


@router.get("/{intake_id}/form")
async def get_intake_form(
    intake_id: uuid.UUID,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
) -> FormState:
    """Wizard snapshot for edit mode (409 for legacy V1 records)."""
    return await service.get_form_state(db, owner_id=user_id, intake_id=intake_id)


@router.put("/{intake_id}")
async def update_intake(
    intake_id: uuid.UUID,
    body: FormState,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
) -> IntakeInfo:
    """Replace the answers of an intake still in ``submitted``.

    409 once staff has moved it along, 422 when the new answers are
    incomplete.
    """
    result = await service.update_submission(
        db, owner_id=user_id, intake_id=intake_id, form_state=body,
    )
    if not result.ok:
        return validation_failed(result)
    return result.intake
