"""Reference data endpoints: wizard choices, statuses, required questions.

Read-only and unauthenticated: the wizard needs the option labels before
the user is known.
"""

from fastapi import APIRouter

from intake_core.constants import SCHEMA_VERSION_V2
from intake_core.mappings import MAPPINGS, MAPPINGS_V1
from intake_core.validation import required_fields
from intake_db.models.enums import STATUS_LABELS, STATUS_ORDER

router = APIRouter(prefix="/reference", tags=["reference"])


def _options(table: dict[str, str]) -> list[dict]:
    return [{"label": label, "slug": slug} for label, slug in table.items()]


@router.get("/mappings")
def list_mappings() -> dict[str, list[dict]]:
    """Label/slug options of every current wizard question, in display order."""
    return {name: _options(table) for name, table in MAPPINGS.items()}


@router.get("/mappings/legacy")
def list_legacy_mappings() -> dict[str, list[dict]]:
    """Label/slug options of the legacy questionnaire (read-only views)."""
    return {name: _options(table) for name, table in MAPPINGS_V1.items()}


@router.get("/mappings/{name}")
def get_mapping(name: str) -> list[dict]:
    """Options of a single current table (404 for an unknown name)."""
    return _options(MAPPINGS[name])


@router.get("/statuses")
def list_statuses() -> list[dict]:
    """Review pipeline statuses in order, with display labels."""
    return [
        {"value": status.value, "label": STATUS_LABELS[status]}
        for status in STATUS_ORDER
    ]


@router.get("/required-questions")
def list_required_questions() -> list[dict]:
    """Questions that must be answered before a current wizard can submit."""
    return [
        {"question": question, "field": path}
        for question, path in required_fields(SCHEMA_VERSION_V2)
    ]
