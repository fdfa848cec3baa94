"""Database-level enumerations for project intakes."""

import enum


class IntakeStatus(str, enum.Enum):
    """Review pipeline for a submission, in display order.

    Records are created as ``submitted`` by their owner.  From there staff
    may move them to any status; the owner may edit answers only while the
    record is still ``submitted``.
    """

    SUBMITTED = "submitted"
    UNDER_ANALYSIS = "under_analysis"
    ANALYSIS_SENT = "analysis_sent"
    WAITING_VALIDATION = "waiting_validation"
    APPROVED_FOR_DEV = "approved_for_dev"


STATUS_ORDER: tuple[IntakeStatus, ...] = tuple(IntakeStatus)

# Labels shown to clients and staff.
STATUS_LABELS: dict[IntakeStatus, str] = {
    IntakeStatus.SUBMITTED: "Soumis",
    IntakeStatus.UNDER_ANALYSIS: "En analyse",
    IntakeStatus.ANALYSIS_SENT: "Analyse envoyée",
    IntakeStatus.WAITING_VALIDATION: "En attente de validation",
    IntakeStatus.APPROVED_FOR_DEV: "Approuvé pour développement",
}
