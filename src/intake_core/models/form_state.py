"""Wizard form state: what the UI edits, label-based.

Single selects hold the label shown in the control, multi selects hold the
list of selected labels in selection order, free-text questions hold the
raw text.  The project name travels as ``projectName`` on the wire.
"""

from pydantic import ConfigDict, Field

from intake_core.models.base import IntakeModel


class FormState(IntakeModel):
    """Snapshot of the V2 wizard, one attribute per question."""

    model_config = ConfigDict(populate_by_name=True)

    project_name: str = Field("", alias="projectName")

    # Business
    q1_problem: str = ""
    q2_target: str = ""
    q3_frequency: str = ""
    q4_current_solution: str = ""
    q5_interesting: str = ""
    q6_price_range: str = ""
    q7_revenue_model: str = ""
    q8_competition: str = ""
    q9_uncertainty: str = ""

    # Product
    q10_first_action: str = ""
    q11_flow_steps: str = ""
    q12_return_reason: str = ""
    q13_return_items: list[str] = Field(default_factory=list)
    q14_need_account: str = ""

    # Tech
    q15_store_what: list[str] = Field(default_factory=list)
    q16_ai_type: str = ""
    q17_integrations: list[str] = Field(default_factory=list)
    q18_site_type: str = ""

    # Design
    q19_references: str = ""
    q20_style: str = ""
    q21_home_focus: str = ""
    q22_output_type: str = ""

    # Final
    q23_pitch: str = ""
