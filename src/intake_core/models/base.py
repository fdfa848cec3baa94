"""Shared pydantic base for intake records."""

from typing import Any

from pydantic import BaseModel, model_validator


class IntakeModel(BaseModel):
    """Base for answer sections and form state.

    Stored records and browser payloads use ``null`` for unanswered
    questions; nulls are dropped before validation so that every field
    falls back to its empty default (``""`` or ``[]``).
    """

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data
