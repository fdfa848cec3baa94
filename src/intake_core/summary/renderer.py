"""SummaryRenderer: Jinja2-based renderer for the admin digest.

Loads templates from the ``template/`` directory and renders an answers
record plus its derived fields into the fixed-format multi-line summary
shown to staff.  Slugs are turned back into labels for readability.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from intake_core.constants import (
    NOT_SPECIFIED,
    SUMMARY_PROBLEM_MAX_CHARS,
    SUMMARY_UTILITY_MAX_CHARS,
)
from intake_core.mappings import MAPPINGS, get_label_from_slug
from intake_core.models.answers import IntakeAnswersV1, IntakeAnswersV2, is_v2
from intake_core.models.derived import DerivedFields

_TEMPLATE_V2 = "admin_summary_v2.jinja2"
_TEMPLATE_V1 = "admin_summary_v1.jinja2"


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


class SummaryRenderer:
    """Jinja2 renderer for admin summaries.

    Args:
        template_dir: optional override for the template directory.
            Defaults to ``template/`` sibling of this module.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "template"
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=jinja2.StrictUndefined,
        )

    def render(self, template_name: str, **context) -> str:
        """Render a named template with arbitrary context."""
        template = self._env.get_template(template_name)
        return template.render(**context)

    def render_admin_summary(
        self,
        answers: IntakeAnswersV1 | IntakeAnswersV2,
        derived: DerivedFields,
    ) -> str:
        """Render the digest for the version ``answers`` is tagged with."""
        if is_v2(answers):
            return self.render(_TEMPLATE_V2, **self._context_v2(answers))
        return self.render(_TEMPLATE_V1, **self._context_v1(answers, derived))

    # --- Context builders ---

    @staticmethod
    def _context_v2(a: IntakeAnswersV2) -> dict[str, str]:
        problem = a.business.q1_problem
        integrations = a.tech.q17_integrations

        if a.tech.q16_ai_type == "none":
            ai = "Aucune"
        else:
            ai = get_label_from_slug(MAPPINGS["ai_type"], a.tech.q16_ai_type)

        return {
            "problem": _truncate(problem, SUMMARY_PROBLEM_MAX_CHARS) if problem else NOT_SPECIFIED,
            "target": get_label_from_slug(MAPPINGS["target"], a.business.q2_target),
            "revenue": get_label_from_slug(MAPPINGS["revenue_model"], a.business.q7_revenue_model),
            "site_type": get_label_from_slug(MAPPINGS["site_type"], a.tech.q18_site_type),
            "ai": ai,
            "integrations": ", ".join(
                get_label_from_slug(MAPPINGS["integrations"], slug) for slug in integrations
            ) or "Aucune",
            "design_style": get_label_from_slug(MAPPINGS["design_style"], a.design.q20_style),
            "output_type": get_label_from_slug(MAPPINGS["output_type"], a.design.q22_output_type),
        }

    @staticmethod
    def _context_v1(a: IntakeAnswersV1, derived: DerivedFields) -> dict[str, str]:
        needs = [
            name
            for name, flag in (
                ("IA", derived.needs_ai),
                ("Base de données", derived.needs_db),
                ("Intégrations", derived.needs_integrations),
                ("Paiement", derived.needs_payment),
                ("Admin", derived.needs_admin_panel),
            )
            if flag
        ]
        utility = a.q1_utility
        return {
            "utility": _truncate(utility, SUMMARY_UTILITY_MAX_CHARS) if utility else "",
            "audience": ", ".join(derived.audience) or NOT_SPECIFIED,
            "monetizations": ", ".join(derived.monetizations) or NOT_SPECIFIED,
            "site_type": derived.site_type,
            "needs": ", ".join(needs) or "Aucun",
            "usage_type": derived.usage_type,
            "need_account": derived.need_account,
        }
