"""Public model re-exports for intake_core.

Consumers should import from ``intake_core.models`` rather than reaching
into sub-modules directly.
"""

# --- Answers ---
from intake_core.models.answers import (
    BusinessSection,
    DesignSection,
    FinalSection,
    IdentitySection,
    IntakeAnswers,
    IntakeAnswersV1,
    IntakeAnswersV2,
    ProductSection,
    TechSection,
    is_v2,
    parse_answers,
)

# --- Form state / derived / validation ---
from intake_core.models.derived import DerivedFields
from intake_core.models.form_state import FormState
from intake_core.models.validation import ValidationIssue

# --- Payload / views ---
from intake_core.models.intake import (
    IntakeInfo,
    IntakePage,
    OwnerInfo,
    StatusCounts,
    SubmissionResult,
)
from intake_core.models.payload import IntakePayload, Submission

__all__ = [
    # Answers
    "BusinessSection",
    "DesignSection",
    "FinalSection",
    "IdentitySection",
    "IntakeAnswers",
    "IntakeAnswersV1",
    "IntakeAnswersV2",
    "ProductSection",
    "TechSection",
    "is_v2",
    "parse_answers",
    # Form state / derived / validation
    "DerivedFields",
    "FormState",
    "ValidationIssue",
    # Payload / views
    "IntakeInfo",
    "IntakePage",
    "IntakePayload",
    "OwnerInfo",
    "Submission",
    "StatusCounts",
    "SubmissionResult",
]
