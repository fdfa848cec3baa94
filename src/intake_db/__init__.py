"""intake_db: PostgreSQL persistence layer for project intakes.

This package provides the ORM models, async engine constructors, and repository
for storing submissions and the staff review data attached to them.  It is
consumed by the intake service and the FastAPI server.
"""

from intake_db.models.intake import ProjectIntake
from intake_db.models.enums import IntakeStatus
from intake_db.models.user import User
from intake_db.engine import create_engine, create_session_factory, dispose_engine
from intake_db.repository import IntakeRepository

__all__ = [
    "ProjectIntake",
    "IntakeStatus",
    "User",
    "create_engine",
    "create_session_factory",
    "dispose_engine",
    "IntakeRepository",
]
