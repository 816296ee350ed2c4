"""EstimationSession ORM model - one flat document row per session.

Users, work packages and per-user estimates live in JSON columns so a
session can be read and rewritten as a single record without JOINs.  The
token is the primary key, so every existence check is an indexed point
lookup.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from delphi_db.models.base import Base
from delphi_db.tokens import DEFAULT_TOKEN_LENGTH


class EstimationSession(Base):
    """One row per estimation session."""

    __tablename__ = "sessions"

    # --- Identity ---
    token: Mapped[str] = mapped_column(
        String(DEFAULT_TOKEN_LENGTH), primary_key=True
    )

    # --- Documents ---
    # Member names in join order: ["Tigger", "Rabbit", ...]
    users: Mapped[list] = mapped_column(JSON, nullable=False, default=lambda: [])
    # [{"id", "summary", "effort", "standard_deviation"}, ...]
    work_packages: Mapped[list] = mapped_column(
        JSON, nullable=False, default=lambda: []
    )
    # [{"work_package_id", "user_name", "best_case", ...}, ...]
    estimates: Mapped[list] = mapped_column(
        JSON, nullable=False, default=lambda: []
    )

    # --- Timestamps ---
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return (
            f"<EstimationSession(token={self.token!r}, "
            f"users={len(self.users or [])}, "
            f"work_packages={len(self.work_packages or [])})>"
        )


# Core table used by the repository's statements.
sessions_table = EstimationSession.__table__
