"""delphi_db - embedded SQLite persistence layer for estimation sessions.

This package provides the ORM model, the async engine factory, the
``DocumentStore`` handle and the ``SessionRepository`` that enforces all
session invariants.  It is designed to be consumed by the FastAPI server.
"""

from delphi_db.engine import create_engine, dispose_engine
from delphi_db.models.session import EstimationSession
from delphi_db.repository import SessionRepository
from delphi_db.store import DocumentStore, SQLAlchemyDocumentStore
from delphi_db.tokens import DEFAULT_TOKEN_LENGTH, generate_token

__all__ = [
    "DEFAULT_TOKEN_LENGTH",
    "DocumentStore",
    "EstimationSession",
    "SQLAlchemyDocumentStore",
    "SessionRepository",
    "create_engine",
    "dispose_engine",
    "generate_token",
]
