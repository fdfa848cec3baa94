"""Form state ⇄ answers conversion.

Two directions with deliberately different miss policies:

  - **build** (submit): labels → slugs.  An unknown label is passed through
    unchanged so nothing the user typed is lost on the way to storage.
  - **hydrate** (edit): slugs → labels.  Unknown slugs in a multi select are
    dropped so the wizard never shows a machine code as a choice.

Exclusive multi selects (Q13 return items, Q15 store what) collapse to
``["nothing"]`` whenever the "nothing" label was selected.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from intake_core.constants import EMPTY_LABEL, NOTHING_SLUG
from intake_core.mappings import (
    MAPPINGS,
    MappingTable,
    get_label_from_slug,
    get_labels_from_slugs,
)
from intake_core.models.answers import (
    BusinessSection,
    DesignSection,
    FinalSection,
    IdentitySection,
    IntakeAnswersV2,
    ProductSection,
    TechSection,
    is_v2,
)
from intake_core.models.form_state import FormState


# ---------------------------------------------------------------------------
# Build direction
# ---------------------------------------------------------------------------

def _to_slug(table: MappingTable, label: str) -> str:
    if not label:
        return ""
    return table.get(label, label)


def _to_slugs(table: MappingTable, labels: list[str]) -> list[str]:
    return [table.get(label, label) for label in labels]


def _to_exclusive_slugs(table: MappingTable, labels: list[str]) -> list[str]:
    """Map a selection where the "nothing" option clears everything else."""
    if not labels:
        return []
    nothing_label = get_label_from_slug(table, NOTHING_SLUG)
    if nothing_label in labels:
        return [NOTHING_SLUG]
    return _to_slugs(table, labels)


def build_answers_from_form_state(
    form_state: FormState | Mapping[str, Any],
) -> IntakeAnswersV2:
    """Translate a wizard snapshot into a well-formed V2 answers record."""
    if not isinstance(form_state, FormState):
        form_state = FormState.model_validate(form_state)
    f = form_state

    return IntakeAnswersV2(
        identity=IdentitySection(
            q0_project_name=f.project_name.strip(),
        ),
        business=BusinessSection(
            q1_problem=f.q1_problem,
            q2_target=_to_slug(MAPPINGS["target"], f.q2_target),
            q3_frequency=_to_slug(MAPPINGS["frequency"], f.q3_frequency),
            q4_current_solution=_to_slug(MAPPINGS["current_solution"], f.q4_current_solution),
            q5_interesting=f.q5_interesting,
            q6_price_range=_to_slug(MAPPINGS["price_range"], f.q6_price_range),
            q7_revenue_model=_to_slug(MAPPINGS["revenue_model"], f.q7_revenue_model),
            q8_competition=_to_slug(MAPPINGS["competition"], f.q8_competition),
            q9_uncertainty=f.q9_uncertainty,
        ),
        product=ProductSection(
            q10_first_action=_to_slug(MAPPINGS["first_action"], f.q10_first_action),
            q11_flow_steps=f.q11_flow_steps,
            q12_return_reason=_to_slug(MAPPINGS["return_reason"], f.q12_return_reason),
            q13_return_items=_to_exclusive_slugs(MAPPINGS["return_items"], f.q13_return_items),
            q14_need_account=_to_slug(MAPPINGS["need_account"], f.q14_need_account),
        ),
        tech=TechSection(
            q15_store_what=_to_exclusive_slugs(MAPPINGS["store_what"], f.q15_store_what),
            q16_ai_type=_to_slug(MAPPINGS["ai_type"], f.q16_ai_type),
            q17_integrations=_to_slugs(MAPPINGS["integrations"], f.q17_integrations),
            q18_site_type=_to_slug(MAPPINGS["site_type"], f.q18_site_type),
        ),
        design=DesignSection(
            q19_references=f.q19_references,
            q20_style=_to_slug(MAPPINGS["design_style"], f.q20_style),
            q21_home_focus=_to_slug(MAPPINGS["homepage_focus"], f.q21_home_focus),
            q22_output_type=_to_slug(MAPPINGS["output_type"], f.q22_output_type),
        ),
        final=FinalSection(
            q23_pitch=f.q23_pitch,
        ),
    )


# ---------------------------------------------------------------------------
# Hydrate direction
# ---------------------------------------------------------------------------

def _to_label(table: MappingTable, slug: str) -> str:
    label = get_label_from_slug(table, slug)
    # The empty placeholder is for read-only views, not for form inputs
    return "" if label == EMPTY_LABEL else label


def hydrate_form_state_from_answers_v2(
    answers: IntakeAnswersV2 | Mapping[str, Any],
) -> FormState:
    """Rebuild the wizard snapshot from stored V2 answers (edit mode).

    Raises:
        ValueError: if ``answers`` is not tagged as a V2 record.
    """
    if not is_v2(answers):
        raise ValueError("Only V2 answers can be loaded into the wizard")
    if not isinstance(answers, IntakeAnswersV2):
        answers = IntakeAnswersV2.model_validate(answers)
    a = answers

    return FormState(
        project_name=a.identity.q0_project_name,
        # Business
        q1_problem=a.business.q1_problem,
        q2_target=_to_label(MAPPINGS["target"], a.business.q2_target),
        q3_frequency=_to_label(MAPPINGS["frequency"], a.business.q3_frequency),
        q4_current_solution=_to_label(MAPPINGS["current_solution"], a.business.q4_current_solution),
        q5_interesting=a.business.q5_interesting,
        q6_price_range=_to_label(MAPPINGS["price_range"], a.business.q6_price_range),
        q7_revenue_model=_to_label(MAPPINGS["revenue_model"], a.business.q7_revenue_model),
        q8_competition=_to_label(MAPPINGS["competition"], a.business.q8_competition),
        q9_uncertainty=a.business.q9_uncertainty,
        # Product
        q10_first_action=_to_label(MAPPINGS["first_action"], a.product.q10_first_action),
        q11_flow_steps=a.product.q11_flow_steps,
        q12_return_reason=_to_label(MAPPINGS["return_reason"], a.product.q12_return_reason),
        q13_return_items=get_labels_from_slugs(MAPPINGS["return_items"], a.product.q13_return_items),
        q14_need_account=_to_label(MAPPINGS["need_account"], a.product.q14_need_account),
        # Tech
        q15_store_what=get_labels_from_slugs(MAPPINGS["store_what"], a.tech.q15_store_what),
        q16_ai_type=_to_label(MAPPINGS["ai_type"], a.tech.q16_ai_type),
        q17_integrations=get_labels_from_slugs(MAPPINGS["integrations"], a.tech.q17_integrations),
        q18_site_type=_to_label(MAPPINGS["site_type"], a.tech.q18_site_type),
        # Design
        q19_references=a.design.q19_references,
        q20_style=_to_label(MAPPINGS["design_style"], a.design.q20_style),
        q21_home_focus=_to_label(MAPPINGS["homepage_focus"], a.design.q21_home_focus),
        q22_output_type=_to_label(MAPPINGS["output_type"], a.design.q22_output_type),
        # Final
        q23_pitch=a.final.q23_pitch,
    )
