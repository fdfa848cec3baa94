"""ORM models for intake_db."""

from intake_db.models.base import Base
from intake_db.models.enums import STATUS_LABELS, STATUS_ORDER, IntakeStatus
from intake_db.models.intake import ProjectIntake
from intake_db.models.user import User

__all__ = [
    "Base",
    "IntakeStatus",
    "STATUS_LABELS",
    "STATUS_ORDER",
    "ProjectIntake",
    "User",
]
