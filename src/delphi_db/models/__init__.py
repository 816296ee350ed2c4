"""ORM models for delphi_db."""

from delphi_db.models.base import Base
from delphi_db.models.session import EstimationSession, sessions_table

__all__ = ["Base", "EstimationSession", "sessions_table"]
