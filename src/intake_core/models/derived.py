"""Derived classification fields computed from answers.

Categorical fields are typed as plain ``str`` on purpose: derivation passes
slugs through untouched and the payload integrity checker is the one place
that compares them against their fixed slug sets.
"""

from pydantic import BaseModel


class DerivedFields(BaseModel):
    """Flat triage record used for filtering and admin review."""

    # Always lists, even though the V2 source questions are single select
    audience: list[str]
    monetizations: list[str]

    site_type: str        # static / interactive / intelligent
    usage_type: str       # one_time / repeated
    need_account: str     # required / later / none

    needs_db: bool
    needs_ai: bool
    needs_integrations: bool
    needs_payment: bool
    needs_admin_panel: bool

    problem_frequency: str   # daily / weekly / occasional / rare
    current_solution: str    # diy / bad_tool / pay_someone / do_nothing
    price_range: str         # lt10 / 10_30 / 30_100 / gt100
    competition_level: str   # high / medium / low / none
    return_reason: str       # often / sometimes / one_time

    design_references: str
    design_style: str        # minimal / fun / dark / luxury / simple / other
    homepage_focus: str      # big_button / input_field / dashboard / feed / other
    final_output_type: str   # report / dashboard / file / ready_content / other
