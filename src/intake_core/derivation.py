"""Derived-field computation: answers → triage classification.

Pure and deterministic.  Branches once on the schema version:

  V2 rules:
    - needs_ai           = ai type != "none" OR site type == "intelligent"
    - needs_integrations = integrations non-empty
    - needs_payment      = "payment" integration OR payment-bearing revenue model
    - needs_db           = store-what != ["nothing"] OR account != "none"
                           OR return reason != "one_time"
    - usage_type         = "one_time" iff return reason == "one_time"
    - audience / monetizations are single-element lists
    - needs_admin_panel  = False (no such question in V2)
    - other categorical fields are slug passthroughs

  V1 rules are kept for legacy records only.

Inputs are assumed valid; nothing is re-validated here.
"""

from __future__ import annotations

from intake_core.constants import (
    NOTHING_SLUG,
    PAYMENT_MONETIZATIONS_V1,
    PAYMENT_REVENUE_MODELS,
)
from intake_core.models.answers import IntakeAnswersV1, IntakeAnswersV2, is_v2
from intake_core.models.derived import DerivedFields

# Legacy records have no business/design questions; these fill the gaps.
_V1_DEFAULTS = {
    "problem_frequency": "occasional",
    "current_solution": "diy",
    "price_range": "10_30",
    "competition_level": "medium",
    "design_references": "",
    "design_style": "simple",
    "homepage_focus": "other",
    "final_output_type": "other",
}


def compute_derived_fields(
    answers: IntakeAnswersV1 | IntakeAnswersV2,
) -> DerivedFields:
    """Compute the derived classification record for ``answers``."""
    if is_v2(answers):
        return _derive_v2(answers)
    return _derive_v1(answers)


def _derive_v2(a: IntakeAnswersV2) -> DerivedFields:
    business, product, tech, design = a.business, a.product, a.tech, a.design

    needs_ai = tech.q16_ai_type != "none" or tech.q18_site_type == "intelligent"
    needs_payment = (
        "payment" in tech.q17_integrations
        or business.q7_revenue_model in PAYMENT_REVENUE_MODELS
    )
    needs_db = (
        tech.q15_store_what != [NOTHING_SLUG]
        or product.q14_need_account != "none"
        or product.q12_return_reason != "one_time"
    )
    usage_type = "one_time" if product.q12_return_reason == "one_time" else "repeated"

    return DerivedFields(
        audience=[business.q2_target],
        monetizations=[business.q7_revenue_model],
        site_type=tech.q18_site_type,
        usage_type=usage_type,
        need_account=product.q14_need_account,
        needs_db=needs_db,
        needs_ai=needs_ai,
        needs_integrations=len(tech.q17_integrations) > 0,
        needs_payment=needs_payment,
        needs_admin_panel=False,
        problem_frequency=business.q3_frequency,
        current_solution=business.q4_current_solution,
        price_range=business.q6_price_range,
        competition_level=business.q8_competition,
        return_reason=product.q12_return_reason,
        design_references=design.q19_references,
        design_style=design.q20_style,
        homepage_focus=design.q21_home_focus,
        final_output_type=design.q22_output_type,
    )


def _derive_v1(a: IntakeAnswersV1) -> DerivedFields:
    needs_payment = "payment" in a.q12_integrations or any(
        m in PAYMENT_MONETIZATIONS_V1 for m in a.q5_monetization
    )
    needs_db = (
        NOTHING_SLUG not in a.q9_return_items
        or a.q10_personal_space != "none"
        or a.q8_usage_type == "repeated"
    )

    return DerivedFields(
        audience=list(a.q2_audience),
        monetizations=list(a.q5_monetization),
        site_type=a.q13_site_type,
        usage_type=a.q8_usage_type,
        need_account=a.q10_personal_space,
        needs_db=needs_db,
        needs_ai=len(a.q11_automation) > 0 or a.q13_site_type == "intelligent",
        needs_integrations=len(a.q12_integrations) > 0,
        needs_payment=needs_payment,
        needs_admin_panel=len(a.q14_admin_features) > 0,
        return_reason="sometimes" if a.q8_usage_type == "repeated" else "one_time",
        **_V1_DEFAULTS,
    )
