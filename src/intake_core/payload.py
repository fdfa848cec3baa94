"""Payload assembly: the last step before a submission is persisted.

Pipeline (``prepare_submission``)::

    FormState ──build──▶ IntakeAnswersV2 ──validate──▶ errors?
                                 │                       └─ yes: stop, return errors
                                 ▼
                          compute_derived_fields
                                 │
                    short title + admin summary
                                 │
                                 ▼
                     build_intake_payload ──▶ assert_payload_integrity

Everything here is pure except the integrity check, which reads the
development switch and logs the assembled payload at DEBUG.
"""

from __future__ import annotations

import functools
import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from intake_core.constants import (
    SHORT_TITLE_FALLBACK_PREFIX,
    SHORT_TITLE_MAX_WORDS,
    SHORT_TITLE_MIN_LENGTH,
    USAGE_TYPES,
    is_development,
)
from intake_core.converter import build_answers_from_form_state
from intake_core.derivation import compute_derived_fields
from intake_core.mappings import MAPPINGS, slug_set
from intake_core.models.answers import IntakeAnswersV1, IntakeAnswersV2, is_v2
from intake_core.models.derived import DerivedFields
from intake_core.models.form_state import FormState
from intake_core.models.payload import IntakePayload, Submission
from intake_core.summary import SummaryRenderer
from intake_core.validation import validate_answers

logger = logging.getLogger(__name__)


class PayloadIntegrityError(AssertionError):
    """A payload field does not hold what the slug tables allow.

    Signals drift between the mapping tables and the derivation logic.
    Only raised in development; never caught inside the core.
    """

    def __init__(self, field: str, value: Any, expected: str) -> None:
        self.field = field
        self.value = value
        super().__init__(
            f"Payload mismatch on {field!r}: expected {expected}, got {value!r}"
        )


# ---------------------------------------------------------------------------
# Short title
# ---------------------------------------------------------------------------

def _title_source(answers: IntakeAnswersV1 | IntakeAnswersV2) -> str:
    if is_v2(answers):
        candidates = (
            answers.identity.q0_project_name,
            answers.business.q1_problem,
            answers.final.q23_pitch,
        )
    else:
        candidates = (
            answers.q0_project_name,
            answers.q1_utility,
            answers.q18_full_description,
        )
    for candidate in candidates:
        if candidate.strip():
            return candidate.strip()
    return ""


def generate_short_title(
    answers: IntakeAnswersV1 | IntakeAnswersV2,
    *,
    now: datetime | None = None,
) -> str:
    """Short human-readable title, always at least 5 characters long.

    Uses the first non-blank of name / problem / pitch (legacy records:
    name / utility / full description), whitespace collapsed and cut to
    8 words.  A too-short result gets a ``-HHMM`` suffix; no source at all
    gives ``Projet-YYYYMMDDHHMM``.  Timestamps are UTC.

    Args:
        now: clock override, mostly for tests.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    date_str = now.strftime("%Y%m%d%H%M")

    words = _title_source(answers).split()[:SHORT_TITLE_MAX_WORDS]
    result = " ".join(words)

    if not result:
        return f"{SHORT_TITLE_FALLBACK_PREFIX}-{date_str}"
    if len(result) < SHORT_TITLE_MIN_LENGTH:
        return f"{result}-{date_str[-4:]}"
    return result


# ---------------------------------------------------------------------------
# Admin summary
# ---------------------------------------------------------------------------

@functools.lru_cache(maxsize=1)
def _default_renderer() -> SummaryRenderer:
    return SummaryRenderer()


def generate_admin_summary(
    answers: IntakeAnswersV1 | IntakeAnswersV2,
    derived: DerivedFields,
) -> str:
    """Multi-line digest for staff, in a fixed format per schema version."""
    return _default_renderer().render_admin_summary(answers, derived)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

def build_intake_payload(
    answers: IntakeAnswersV1 | IntakeAnswersV2,
    derived: DerivedFields,
    short_title: str,
    admin_summary: str,
) -> IntakePayload:
    """Combine answers, derived fields and generated strings into one record.

    The record always starts in ``submitted``; the owner is injected later
    by the service.
    """
    if is_v2(answers):
        project_name = answers.identity.q0_project_name.strip()
    else:
        project_name = answers.q0_project_name.strip()

    return IntakePayload(
        project_name=project_name,
        short_title=short_title,
        answers=answers.model_dump(mode="json"),
        admin_summary=admin_summary,
        **derived.model_dump(),
    )


# ---------------------------------------------------------------------------
# Integrity check (development only)
# ---------------------------------------------------------------------------

# Categorical payload fields and the slug set each must be drawn from.
_CATEGORICAL_FIELDS: dict[str, frozenset[str]] = {
    "site_type": slug_set(MAPPINGS["site_type"]),
    "usage_type": USAGE_TYPES,
    "need_account": slug_set(MAPPINGS["need_account"]),
    "problem_frequency": slug_set(MAPPINGS["frequency"]),
    "current_solution": slug_set(MAPPINGS["current_solution"]),
    "price_range": slug_set(MAPPINGS["price_range"]),
    "competition_level": slug_set(MAPPINGS["competition"]),
    "return_reason": slug_set(MAPPINGS["return_reason"]),
    "design_style": slug_set(MAPPINGS["design_style"]),
    "homepage_focus": slug_set(MAPPINGS["homepage_focus"]),
    "final_output_type": slug_set(MAPPINGS["output_type"]),
}

# Derived sequences and the slug set their members come from.
_SEQUENCE_FIELDS: dict[str, frozenset[str]] = {
    "audience": slug_set(MAPPINGS["target"]),
    "monetizations": slug_set(MAPPINGS["revenue_model"]),
}


def _expect_str(field: str, value: Any) -> None:
    if not isinstance(value, str):
        raise PayloadIntegrityError(field, value, "a single slug string")


def _expect_list(field: str, value: Any) -> None:
    if not isinstance(value, list):
        raise PayloadIntegrityError(field, value, "a list")


def _expect_slug(field: str, value: Any, allowed: frozenset[str]) -> None:
    if value not in allowed:
        raise PayloadIntegrityError(
            field, value, f"one of ({', '.join(sorted(allowed))})"
        )


def assert_payload_integrity(payload: IntakePayload) -> None:
    """Fail loudly on the first field that escaped its slug set.

    No-op unless ``INTAKE_ENV=development``.

    Raises:
        PayloadIntegrityError: naming the offending field and value.
    """
    if not is_development():
        return

    answers = payload.answers
    if is_v2(answers):
        business = answers.get("business") or {}
        _expect_str("answers.business.q2_target", business.get("q2_target"))
        _expect_str("answers.business.q7_revenue_model", business.get("q7_revenue_model"))

        for field, allowed in _SEQUENCE_FIELDS.items():
            values = getattr(payload, field)
            _expect_list(field, values)
            for value in values:
                _expect_slug(field, value, allowed)

        for field, allowed in _CATEGORICAL_FIELDS.items():
            _expect_slug(field, getattr(payload, field), allowed)
        version = 2
    else:
        _expect_list("answers.q2_audience", answers.get("q2_audience"))
        _expect_list("answers.q5_monetization", answers.get("q5_monetization"))
        version = 1

    logger.debug("Intake schema version: %d", version)
    logger.debug(
        "Intake payload: %s",
        json.dumps(payload.model_dump(mode="json"), indent=2, ensure_ascii=False),
    )


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------

def prepare_submission(
    form_state: FormState | Mapping[str, Any],
    *,
    now: datetime | None = None,
) -> Submission:
    """Run a wizard snapshot through build, validation, derivation and assembly.

    Validation failures are returned as data (``Submission.errors``); in that
    case no payload is built.
    """
    answers = build_answers_from_form_state(form_state)
    errors = validate_answers(answers)
    if errors:
        logger.info(
            "Submission blocked: %d issue(s), first at %s",
            len(errors), errors[0].question,
        )
        return Submission(answers=answers, errors=errors)

    derived = compute_derived_fields(answers)
    payload = build_intake_payload(
        answers,
        derived,
        generate_short_title(answers, now=now),
        generate_admin_summary(answers, derived),
    )
    assert_payload_integrity(payload)
    return Submission(answers=answers, payload=payload)
