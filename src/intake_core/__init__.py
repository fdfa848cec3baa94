"""intake_core: project intake schema, versioning and derivation engine.

Public API:
    IntakeService        — submit / edit / staff-review orchestration
    prepare_submission   — form state → validated, derived, assembled payload
    SummaryRenderer      — Jinja2 renderer for the admin digest

Pure pipeline steps:
    build_answers_from_form_state       — wizard labels → V2 slugs
    hydrate_form_state_from_answers_v2  — V2 slugs → wizard labels
    compute_derived_fields              — answers → triage classification
    validate_answers                    — ordered completeness issues
    generate_short_title / generate_admin_summary
    build_intake_payload / assert_payload_integrity

Models:
    IntakeAnswersV1 / IntakeAnswersV2 — legacy and current answers records
    FormState                         — label-based wizard snapshot
    DerivedFields, IntakePayload, ValidationIssue
    IntakeInfo, IntakePage, StatusCounts, SubmissionResult
"""

from intake_core.converter import (
    build_answers_from_form_state,
    hydrate_form_state_from_answers_v2,
)
from intake_core.derivation import compute_derived_fields
from intake_core.mappings import (
    MAPPINGS,
    MAPPINGS_V1,
    get_label_from_slug,
    get_labels_from_slugs,
)
from intake_core.models import (
    DerivedFields,
    FormState,
    IntakeAnswers,
    IntakeAnswersV1,
    IntakeAnswersV2,
    IntakeInfo,
    IntakePage,
    IntakePayload,
    StatusCounts,
    Submission,
    SubmissionResult,
    ValidationIssue,
    is_v2,
    parse_answers,
)
from intake_core.payload import (
    PayloadIntegrityError,
    assert_payload_integrity,
    build_intake_payload,
    generate_admin_summary,
    generate_short_title,
    prepare_submission,
)
from intake_core.service import IntakeService
from intake_core.summary import SummaryRenderer
from intake_core.validation import first_invalid_question, validate_answers

__all__ = [
    # Service & pipeline
    "IntakeService",
    "SummaryRenderer",
    "prepare_submission",
    # Mappings
    "MAPPINGS",
    "MAPPINGS_V1",
    "get_label_from_slug",
    "get_labels_from_slugs",
    # Pure steps
    "build_answers_from_form_state",
    "hydrate_form_state_from_answers_v2",
    "compute_derived_fields",
    "validate_answers",
    "first_invalid_question",
    "generate_short_title",
    "generate_admin_summary",
    "build_intake_payload",
    "assert_payload_integrity",
    "PayloadIntegrityError",
    # Models
    "DerivedFields",
    "FormState",
    "IntakeAnswers",
    "IntakeAnswersV1",
    "IntakeAnswersV2",
    "IntakeInfo",
    "IntakePage",
    "IntakePayload",
    "StatusCounts",
    "Submission",
    "SubmissionResult",
    "ValidationIssue",
    "is_v2",
    "parse_answers",
]
