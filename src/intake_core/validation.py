"""Validation engine: per-version completeness rules.

Rules are declared as ordered tables; errors come out in question order so
the wizard can jump back to ``errors[0].question``.  Nothing here raises:
an empty list means the record is ready to submit.

Rule kinds:
  - ``name``:      trimmed text of at least PROJECT_NAME_MIN_LENGTH chars
  - ``text``:      non-empty after trim
  - ``choice``:    non-empty slug
  - ``multi``:     non-empty slug list
  - ``exclusive``: non-empty slug list where "nothing" must stand alone
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from intake_core.constants import (
    NOTHING_SLUG,
    PROJECT_NAME_MIN_LENGTH,
    SCHEMA_VERSION_V2,
)
from intake_core.models.answers import IntakeAnswersV1, IntakeAnswersV2, is_v2
from intake_core.models.validation import ValidationIssue

RuleKind = Literal["name", "text", "choice", "multi", "exclusive"]

_EXCLUSIVE_MESSAGE = (
    'Si "Rien" est sélectionné, aucun autre élément ne peut être sélectionné'
)


@dataclass(frozen=True)
class _Rule:
    question: str
    # Dotted path into the answers model, e.g. "business.q2_target"
    path: str
    kind: RuleKind
    message: str


# --- Current questionnaire: 19 required questions, in wizard order ---
_RULES_V2: tuple[_Rule, ...] = (
    _Rule("Q0", "identity.q0_project_name", "name",
          "Le nom du projet est requis (minimum 3 caractères)"),
    _Rule("Q1", "business.q1_problem", "text", "Le problème est requis"),
    _Rule("Q2", "business.q2_target", "choice", "La cible est requise"),
    _Rule("Q3", "business.q3_frequency", "choice", "La fréquence est requise"),
    _Rule("Q4", "business.q4_current_solution", "choice",
          "La solution actuelle est requise"),
    _Rule("Q6", "business.q6_price_range", "choice",
          "La fourchette de prix est requise"),
    _Rule("Q7", "business.q7_revenue_model", "choice",
          "Le modèle de revenu est requis"),
    _Rule("Q8", "business.q8_competition", "choice",
          "Le niveau de concurrence est requis"),
    _Rule("Q10", "product.q10_first_action", "choice",
          "L'action principale est requise"),
    _Rule("Q12", "product.q12_return_reason", "choice",
          "La raison de retour est requise"),
    _Rule("Q13", "product.q13_return_items", "exclusive",
          "Au moins un élément à retrouver doit être sélectionné"),
    _Rule("Q14", "product.q14_need_account", "choice",
          "La nécessité d'un compte est requise"),
    _Rule("Q15", "tech.q15_store_what", "exclusive",
          "Au moins un élément à stocker doit être sélectionné"),
    _Rule("Q16", "tech.q16_ai_type", "choice",
          "Le type d'intelligence artificielle est requis"),
    _Rule("Q18", "tech.q18_site_type", "choice", "Le type de site est requis"),
    _Rule("Q20", "design.q20_style", "choice", "Le style de design est requis"),
    _Rule("Q21", "design.q21_home_focus", "choice",
          "Le focus de la page d'accueil est requis"),
    _Rule("Q22", "design.q22_output_type", "choice",
          "Le type de sortie est requis"),
    _Rule("Q23", "final.q23_pitch", "text", "Le pitch final est requis"),
)

# --- Legacy questionnaire ---
_RULES_V1: tuple[_Rule, ...] = (
    _Rule("Q0", "q0_project_name", "text", "Le nom du projet est requis"),
    _Rule("Q1", "q1_utility", "text", "L'utilité principale est requise"),
    _Rule("Q2", "q2_audience", "multi",
          "Au moins un segment de clientèle doit être sélectionné"),
    _Rule("Q3", "q3_problem_gain", "text",
          "Le problème résolu ou bénéfice est requis"),
    _Rule("Q4", "q4_value_proposition", "text",
          "La proposition de valeur est requise"),
    _Rule("Q5", "q5_monetization", "multi",
          "Au moins un modèle de monétisation doit être sélectionné"),
    _Rule("Q6", "q6_main_action", "choice", "L'action principale est requise"),
    _Rule("Q8", "q8_usage_type", "choice", "Le type d'utilisation est requis"),
    _Rule("Q10", "q10_personal_space", "choice",
          "La nécessité d'un espace personnel est requise"),
    _Rule("Q13", "q13_site_type", "choice", "Le type de site est requis"),
    _Rule("Q15", "q15_autonomy", "choice", "Le niveau d'autonomie est requis"),
    _Rule("Q18", "q18_full_description", "text",
          "La description complète est requise"),
)


def _resolve(answers: Any, path: str) -> Any:
    value = answers
    for part in path.split("."):
        value = getattr(value, part, None)
    return value


def _check(rule: _Rule, value: Any) -> ValidationIssue | None:
    """Return the issue for ``rule`` or ``None`` when the value passes."""
    if rule.kind in ("multi", "exclusive"):
        items = value or []
        if len(items) == 0:
            return ValidationIssue(question=rule.question, message=rule.message)
        if rule.kind == "exclusive" and NOTHING_SLUG in items and len(items) > 1:
            return ValidationIssue(question=rule.question, message=_EXCLUSIVE_MESSAGE)
        return None

    text = (value or "").strip()
    if not text:
        return ValidationIssue(question=rule.question, message=rule.message)
    if rule.kind == "name" and len(text) < PROJECT_NAME_MIN_LENGTH:
        return ValidationIssue(question=rule.question, message=rule.message)
    return None


def validate_answers(
    answers: IntakeAnswersV1 | IntakeAnswersV2,
) -> list[ValidationIssue]:
    """Return every blocking issue, in question order (empty = valid)."""
    rules = _RULES_V2 if is_v2(answers) else _RULES_V1
    errors: list[ValidationIssue] = []
    for rule in rules:
        issue = _check(rule, _resolve(answers, rule.path))
        if issue is not None:
            errors.append(issue)
    return errors


def first_invalid_question(errors: list[ValidationIssue]) -> str | None:
    """The question the wizard should return to, or ``None`` if valid."""
    return errors[0].question if errors else None


def required_fields(version: int = SCHEMA_VERSION_V2) -> list[tuple[str, str]]:
    """``(question, dotted path)`` pairs checked for a schema version, in order."""
    rules = _RULES_V2 if version == SCHEMA_VERSION_V2 else _RULES_V1
    return [(rule.question, rule.path) for rule in rules]
