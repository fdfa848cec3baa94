"""Intake views: the contract between the service and API callers.

These models are decoupled from the ORM models in ``intake_db`` so that
API consumers never see database internals.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from intake_core.models.validation import ValidationIssue


class OwnerInfo(BaseModel):
    """Expanded owner reference (from the ``users`` table)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    name: str | None = None


class IntakeInfo(BaseModel):
    """Public view of one stored submission."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: str
    status: str
    project_name: str
    short_title: str
    admin_summary: str | None = None
    answers: dict[str, Any]

    audience: list[str] = Field(default_factory=list)
    monetizations: list[str] = Field(default_factory=list)
    site_type: str | None = None
    usage_type: str | None = None
    need_account: str | None = None
    needs_db: bool = False
    needs_ai: bool = False
    needs_integrations: bool = False
    needs_payment: bool = False
    needs_admin_panel: bool = False
    problem_frequency: str | None = None
    current_solution: str | None = None
    price_range: str | None = None
    competition_level: str | None = None
    return_reason: str | None = None
    design_references: str | None = None
    design_style: str | None = None
    homepage_focus: str | None = None
    final_output_type: str | None = None

    # Staff review
    analysis: str | None = None
    recommendation: str | None = None
    analysis_sent_at: datetime | None = None

    created_at: datetime
    updated_at: datetime

    # Only populated when the owner relation was expanded
    owner: OwnerInfo | None = None


class IntakePage(BaseModel):
    """One page of a listing, most recent first."""

    items: list[IntakeInfo]
    total: int
    limit: int
    offset: int


class StatusCounts(BaseModel):
    """Number of submissions per lifecycle status, plus the grand total."""

    total: int = 0
    submitted: int = 0
    under_analysis: int = 0
    analysis_sent: int = 0
    waiting_validation: int = 0
    approved_for_dev: int = 0


class SubmissionResult(BaseModel):
    """Outcome of a submit / edit call.

    Either ``intake`` is set (stored) or ``errors`` is non-empty (blocked).
    """

    intake: IntakeInfo | None = None
    errors: list[ValidationIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def first_invalid_question(self) -> str | None:
        return self.errors[0].question if self.errors else None
