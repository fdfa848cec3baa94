"""Validation issue: a field-level, user-facing error returned as data."""

from pydantic import BaseModel, ConfigDict


class ValidationIssue(BaseModel):
    """One blocking problem with a submission.

    ``question`` is the wizard question id (``"Q0"`` … ``"Q23"``) that the UI
    jumps back to; ``message`` is shown next to the field.
    """

    model_config = ConfigDict(frozen=True)

    question: str
    message: str
