"""Persistence payload: the flat record written when a submission is created.

Combines project metadata, the raw versioned answers (as plain JSON) and
every derived field.  Assembly is pure; consistency is checked separately
by :func:`intake_core.payload.assert_payload_integrity`.
"""

from typing import Any

from pydantic import BaseModel, Field

from intake_core.models.answers import IntakeAnswersV2
from intake_core.models.validation import ValidationIssue
from intake_db.models.enums import IntakeStatus


class IntakePayload(BaseModel):
    """Row-shaped record handed to the repository."""

    status: str = IntakeStatus.SUBMITTED.value
    project_name: str
    short_title: str
    # Stored as-is; the ``v`` discriminator travels inside
    answers: dict[str, Any]
    admin_summary: str

    audience: list[str]
    monetizations: list[str]
    site_type: str
    usage_type: str
    need_account: str
    needs_db: bool
    needs_ai: bool
    needs_integrations: bool
    needs_payment: bool
    needs_admin_panel: bool
    problem_frequency: str
    current_solution: str
    price_range: str
    competition_level: str
    return_reason: str
    design_references: str
    design_style: str
    homepage_focus: str
    final_output_type: str

    # Injected by the service right before the record is created
    owner: str | None = None

    def record_fields(self) -> dict[str, Any]:
        """Column values for the repository (everything except ``owner``)."""
        return self.model_dump(exclude={"owner"})


class Submission(BaseModel):
    """Result of running a wizard snapshot through the whole pipeline.

    ``payload`` is only set when ``errors`` is empty.
    """

    answers: IntakeAnswersV2
    errors: list[ValidationIssue] = Field(default_factory=list)
    payload: IntakePayload | None = None

    @property
    def ok(self) -> bool:
        return not self.errors
