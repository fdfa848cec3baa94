"""User ORM model: profile rows owned by the authentication layer.

This package never writes to ``users``; it only reads the row to expand
the owner of a submission in staff listings.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from intake_db.models.base import Base


class User(Base):
    __tablename__ = "users"

    # Same opaque identifier the gateway forwards in X-User-ID
    id: Mapped[str] = mapped_column(Text, primary_key=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, email={self.email!r})>"
