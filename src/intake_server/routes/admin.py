"""Staff endpoints: review queue, statistics, status changes, analysis.

Protected by ``ADMIN_API_KEY``: every request must carry a matching
``X-Admin-Key`` header (401 if missing, 403 if wrong or not configured).
"""

import uuid

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from intake_core.models.intake import IntakeInfo, IntakePage, StatusCounts
from intake_core.service import IntakeService
from intake_db.models.enums import IntakeStatus
from intake_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from intake_server.dependencies import get_db, get_service, require_admin_key

router = APIRouter(
    prefix="/admin/intakes",
    tags=["admin"],
    dependencies=[Depends(require_admin_key)],
)


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class ChangeStatusRequest(BaseModel):
    """Body for PATCH /admin/intakes/{id}/status."""
    status: IntakeStatus


class SendAnalysisRequest(BaseModel):
    """Body for POST /admin/intakes/{id}/analysis."""
    analysis: str | None = None
    recommendation: str | None = None


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("")
async def list_intakes(
    status: IntakeStatus | None = Query(None),
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> IntakePage:
    """Every intake, newest first, optionally filtered by status."""
    return await service.list_all(db, status=status, limit=limit, offset=offset)


@router.get("/stats")
async def intake_stats(
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
) -> StatusCounts:
    """Intake counts per status plus the total."""
    return await service.status_counts(db)


@router.get("/{intake_id}")
async def get_intake(
    intake_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
) -> IntakeInfo:
    """Full intake with its owner expanded."""
    info = await service.get_intake(db, intake_id=intake_id)
    if info is None:
        raise ValueError(f"Intake not found: id={intake_id}")
    return info


@router.patch("/{intake_id}/status")
async def change_status(
    intake_id: uuid.UUID,
    body: ChangeStatusRequest,
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
) -> IntakeInfo:
    """Move an intake to any status of the review pipeline."""
    return await service.change_status(db, intake_id=intake_id, status=body.status)


@router.post("/{intake_id}/analysis")
async def send_analysis(
    intake_id: uuid.UUID,
    body: SendAnalysisRequest,
    db: AsyncSession = Depends(get_db),
    service: IntakeService = Depends(get_service),
) -> IntakeInfo:
    """Send the analysis / recommendation to the owner.

    400 when both texts are blank.
    """
    return await service.send_analysis(
        db,
        intake_id=intake_id,
        analysis=body.analysis,
        recommendation=body.recommendation,
    )
