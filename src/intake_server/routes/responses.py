"""Shared response helpers for intake routes."""

from fastapi.responses import JSONResponse

from intake_core.models.intake import SubmissionResult


def validation_failed(result: SubmissionResult) -> JSONResponse:
    """422 body listing every blocking issue and where the wizard should go."""
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Submission is incomplete",
            "errors": [e.model_dump() for e in result.errors],
            "first_invalid_question": result.first_invalid_question,
        },
    )
