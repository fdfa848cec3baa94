"""Intake constants shared across the SDK.

These values are referenced by the converter, derivation, validation and
payload modules.  They mirror conventions of the questionnaire wizard.

The development switch is read at call time (not import time) so that the
integrity checks can be toggled per process or per test.
"""

import os

# Discriminator value carried by every current-shape answers record.
SCHEMA_VERSION_V2 = 2

# Slug of the mutually exclusive "nothing" option in exclusive multi-selects.
NOTHING_SLUG = "nothing"

# Placeholder returned by reverse lookups for an empty slug.
EMPTY_LABEL = "—"

# Revenue models that imply a payment flow (current questionnaire).
PAYMENT_REVENUE_MODELS: frozenset[str] = frozenset(
    {"one_time", "monthly", "annual", "pay_per_use", "freemium"}
)

# Legacy questionnaire also treated commissions and sponsoring as payments.
PAYMENT_MONETIZATIONS_V1: frozenset[str] = PAYMENT_REVENUE_MODELS | {
    "commission_marketplace",
    "sponsoring",
}

USAGE_TYPES: frozenset[str] = frozenset({"one_time", "repeated"})

# --- Validation ---
PROJECT_NAME_MIN_LENGTH = 3

# --- Short title ---
SHORT_TITLE_MAX_WORDS = 8
SHORT_TITLE_MIN_LENGTH = 5
SHORT_TITLE_FALLBACK_PREFIX = "Projet"

# --- Admin summary ---
SUMMARY_PROBLEM_MAX_CHARS = 60
SUMMARY_UTILITY_MAX_CHARS = 80
NOT_SPECIFIED = "Non spécifié"


def is_development() -> bool:
    """True when ``INTAKE_ENV`` selects a development build."""
    return os.getenv("INTAKE_ENV", "production").strip().lower() == "development"
