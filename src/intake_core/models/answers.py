"""Versioned answers models: the single source of truth for a submission.

Two shapes coexist:

  - ``IntakeAnswersV1``: legacy flat record (``q0`` … ``q18``), no version
    marker.  Read-only: new records are always written as V2.
  - ``IntakeAnswersV2``: nested by section (identity, business, product,
    tech, design, final) and tagged with ``v == 2``.

The ``IntakeAnswers`` union is discriminated by :func:`is_v2` alone; field
presence is never used to decide which shape a record has.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Discriminator, Field, Tag, TypeAdapter

from intake_core.constants import SCHEMA_VERSION_V2
from intake_core.models.base import IntakeModel


# --- Legacy shape ---

class IntakeAnswersV1(IntakeModel):
    """Legacy flat questionnaire.  Multi-selects are slug lists."""

    q0_project_name: str = ""
    q1_utility: str = ""
    q2_audience: list[str] = Field(default_factory=list)
    q3_problem_gain: str = ""
    q4_value_proposition: str = ""
    q5_monetization: list[str] = Field(default_factory=list)
    q6_main_action: str = ""
    q7_after_action: str = ""
    q8_usage_type: str = ""
    q9_return_items: list[str] = Field(default_factory=list)
    q10_personal_space: str = ""
    q11_automation: list[str] = Field(default_factory=list)
    q12_integrations: list[str] = Field(default_factory=list)
    q13_site_type: str = ""
    q14_admin_features: list[str] = Field(default_factory=list)
    q15_autonomy: str = ""
    q16_first_visitors: str = ""
    q17_adjustment: str = ""
    q18_full_description: str = ""


# --- Current shape, one model per section ---

class IdentitySection(IntakeModel):
    q0_project_name: str = ""


class BusinessSection(IntakeModel):
    q1_problem: str = ""
    q2_target: str = ""            # single slug
    q3_frequency: str = ""         # daily / weekly / occasional / rare
    q4_current_solution: str = ""  # diy / bad_tool / pay_someone / do_nothing
    q5_interesting: str = ""
    q6_price_range: str = ""       # lt10 / 10_30 / 30_100 / gt100
    q7_revenue_model: str = ""     # one_time / monthly / annual / pay_per_use / freemium
    q8_competition: str = ""       # high / medium / low / none
    q9_uncertainty: str = ""


class ProductSection(IntakeModel):
    q10_first_action: str = ""     # discover / provide_info / produce / pay
    q11_flow_steps: str = ""
    q12_return_reason: str = ""    # often / sometimes / one_time
    # history / created_content / purchases / settings / nothing (exclusive)
    q13_return_items: list[str] = Field(default_factory=list)
    q14_need_account: str = ""     # required / later / none


class TechSection(IntakeModel):
    # users / content / payments / files / history / nothing (exclusive)
    q15_store_what: list[str] = Field(default_factory=list)
    q16_ai_type: str = ""          # none / generate / analyze / recommend
    q17_integrations: list[str] = Field(default_factory=list)
    q18_site_type: str = ""        # static / interactive / intelligent


class DesignSection(IntakeModel):
    q19_references: str = ""
    q20_style: str = ""            # minimal / fun / dark / luxury / simple / other
    q21_home_focus: str = ""       # big_button / input_field / dashboard / feed / other
    q22_output_type: str = ""      # report / dashboard / file / ready_content / other


class FinalSection(IntakeModel):
    q23_pitch: str = ""


class IntakeAnswersV2(IntakeModel):
    """Current questionnaire, nested by section and tagged ``v = 2``.

    A section stored as ``null`` falls back to its empty defaults.
    """

    v: Literal[2] = SCHEMA_VERSION_V2
    identity: IdentitySection = Field(default_factory=IdentitySection)
    business: BusinessSection = Field(default_factory=BusinessSection)
    product: ProductSection = Field(default_factory=ProductSection)
    tech: TechSection = Field(default_factory=TechSection)
    design: DesignSection = Field(default_factory=DesignSection)
    final: FinalSection = Field(default_factory=FinalSection)


# --- Discriminator ---

def is_v2(answers: Any) -> bool:
    """True iff ``answers`` carries the discriminator ``v`` equal to int 2.

    ``"2"``, ``2.0`` and ``True`` are all rejected.  Accepts models and raw
    mappings; anything else is simply not V2.
    """
    if isinstance(answers, BaseModel):
        version = getattr(answers, "v", None)
    elif isinstance(answers, Mapping):
        version = answers.get("v")
    else:
        return False
    return type(version) is int and version == SCHEMA_VERSION_V2


def _answers_tag(value: Any) -> str:
    return "v2" if is_v2(value) else "v1"


IntakeAnswers = Annotated[
    Union[
        Annotated[IntakeAnswersV1, Tag("v1")],
        Annotated[IntakeAnswersV2, Tag("v2")],
    ],
    Discriminator(_answers_tag),
]

_answers_adapter: TypeAdapter[IntakeAnswersV1 | IntakeAnswersV2] = TypeAdapter(IntakeAnswers)


def parse_answers(raw: Any) -> IntakeAnswersV1 | IntakeAnswersV2:
    """Parse a stored answers object into the shape its discriminator names."""
    return _answers_adapter.validate_python(raw)
