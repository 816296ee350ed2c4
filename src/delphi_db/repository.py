"""Async CRUD repository for estimation sessions.

The repository owns a ``DocumentStore`` handle and enforces every session
invariant itself; the store only persists documents:

  - tokens must have the configured length (checked before any store access)
  - a session must exist before any sub-operation succeeds
  - user names, work package IDs and (work package, user) estimate keys are
    unique within a session
  - an estimate may only reference a user and a work package already in the
    session, and its three points must form a valid ``DelphiEstimate``

Mutations are read-modify-write sequences (read the document column, change
an in-memory copy, write the whole column back).  Each one runs under a
per-token ``asyncio.Lock`` so mutations on the same session are serialised.
Reads take no lock.  The locks live in this process only, so one repository
(and one server worker) must own the store.

Store failures (``SQLAlchemyError``) are wrapped in ``StoreError`` /
``PersistError`` and never retried.
"""

from __future__ import annotations

import asyncio
import logging
import math
import weakref
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable
from sqlalchemy.sql.base import Executable

from delphi_db.models.session import sessions_table
from delphi_db.store import DocumentStore
from delphi_db.tokens import DEFAULT_TOKEN_LENGTH, generate_token
from delphi_estimation.errors import (
    EstimateAlreadyExistsError,
    EstimateNotFoundError,
    InvalidEstimateError,
    InvalidParameterError,
    InvalidTokenError,
    PersistError,
    RandomSourceError,
    SessionNotFoundError,
    StoreError,
    StoreInitError,
    TokenGenerationError,
    UserAlreadyJoinedError,
    UserNotInSessionError,
    WorkPackageAlreadyExistsError,
    WorkPackageNotFoundError,
)
from delphi_estimation.estimator import DelphiEstimate
from delphi_estimation.models import Estimate, WorkPackage

logger = logging.getLogger(__name__)


class SessionRepository:
    """Read/write operations on the ``sessions`` document table."""

    def __init__(
        self, store: DocumentStore, *, token_length: int = DEFAULT_TOKEN_LENGTH
    ):
        self._store = store
        self._token_length = token_length
        # Entries disappear once no coroutine holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    async def create_tables(self) -> None:
        """Create the ``sessions`` table; an existing table is not an error."""
        try:
            await self._store.exec(CreateTable(sessions_table, if_not_exists=True))
        except SQLAlchemyError as exc:
            if "already exists" in str(exc).lower():
                logger.debug("Sessions table already exists")
                return
            logger.error("Unable to create sessions table: %s", exc)
            raise StoreInitError("Unable to create sessions table") from exc

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(self) -> str:
        """Insert an empty session and return its new token."""
        try:
            token = generate_token(self._token_length)
        except (InvalidParameterError, RandomSourceError) as exc:
            raise TokenGenerationError("Unable to create session token") from exc

        stmt = insert(sessions_table).values(
            token=token, users=[], work_packages=[], estimates=[]
        )
        await self._exec(stmt, "Unable to store session token")
        logger.info("Created session %s...", token[:8])
        return token

    async def remove_session(self, token: str) -> None:
        """Delete a session and everything it holds."""
        self._check_token(token)

        async with self._lock_for(token):
            await self._load(token, "token")
            stmt = delete(sessions_table).where(sessions_table.c.token == token)
            await self._exec(stmt, "Unable to remove session")
        logger.info("Removed session %s...", token[:8])

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def join_session(self, token: str, name: str) -> None:
        """Add ``name`` to the session's members."""
        self._check_token(token)
        self._check_not_empty(name, "User name")

        async with self._lock_for(token):
            users = list((await self._load(token, "users"))["users"])
            if name in users:
                raise UserAlreadyJoinedError(
                    f"User with name: {name} already part of session"
                )
            users.append(name)
            await self._save(token, users=users)
        logger.debug("User %r joined session %s...", name, token[:8])

    async def leave_session(self, token: str, name: str) -> None:
        """Remove ``name`` from the session's members.

        Estimates the user already submitted are kept.
        """
        self._check_token(token)
        self._check_not_empty(name, "User name")

        async with self._lock_for(token):
            users = list((await self._load(token, "users"))["users"])
            if name not in users:
                raise UserNotInSessionError(
                    f"User with name: {name} is not part of session"
                )
            users.remove(name)
            await self._save(token, users=users)
        logger.debug("User %r left session %s...", name, token[:8])

    async def get_users(self, token: str) -> list[str]:
        """Return member names in join order."""
        self._check_token(token)
        return list((await self._load(token, "users"))["users"])

    # ------------------------------------------------------------------
    # Work packages
    # ------------------------------------------------------------------

    async def add_work_package(
        self, token: str, work_package_id: str, summary: str = ""
    ) -> None:
        """Append a new work package with zeroed effort."""
        self._check_token(token)
        self._check_not_empty(work_package_id, "ID")

        async with self._lock_for(token):
            packages = await self._load_work_packages(token)
            if _find_work_package(packages, work_package_id) is not None:
                raise WorkPackageAlreadyExistsError(
                    f"Work package with ID: {work_package_id} already part of session"
                )
            packages.append(WorkPackage(id=work_package_id, summary=summary or ""))
            await self._save(token, work_packages=_dump(packages))
        logger.debug("Added work package %r to %s...", work_package_id, token[:8])

    async def remove_work_package(self, token: str, work_package_id: str) -> None:
        """Remove a work package.  Per-user estimates for it are kept."""
        self._check_token(token)
        self._check_not_empty(work_package_id, "ID")

        async with self._lock_for(token):
            packages = await self._load_work_packages(token)
            index = _find_work_package(packages, work_package_id)
            if index is None:
                raise WorkPackageNotFoundError(
                    f"Work package with ID: {work_package_id} is not part of session"
                )
            del packages[index]
            await self._save(token, work_packages=_dump(packages))
        logger.debug("Removed work package %r from %s...", work_package_id, token[:8])

    async def get_work_packages(self, token: str) -> list[WorkPackage]:
        """Return the session's work packages in insertion order."""
        self._check_token(token)
        return await self._load_work_packages(token)

    async def add_estimate_to_work_package(
        self,
        token: str,
        work_package_id: str,
        effort: float,
        standard_deviation: float,
    ) -> None:
        """Set the agreed aggregate effort of one work package."""
        self._check_token(token)
        self._check_not_empty(work_package_id, "ID")
        if not (math.isfinite(effort) and effort >= 0):
            raise InvalidEstimateError("Effort < 0 not allowed")
        if not (math.isfinite(standard_deviation) and standard_deviation >= 0):
            raise InvalidEstimateError("Standard deviation < 0 not allowed")

        await self._set_work_package_estimate(
            token, work_package_id, effort, standard_deviation
        )

    async def remove_estimate_from_work_package(
        self, token: str, work_package_id: str
    ) -> None:
        """Reset a work package's effort and standard deviation to 0."""
        self._check_token(token)
        self._check_not_empty(work_package_id, "ID")

        await self._set_work_package_estimate(token, work_package_id, 0.0, 0.0)

    # ------------------------------------------------------------------
    # Per-user estimates
    # ------------------------------------------------------------------

    async def add_estimate(self, token: str, estimate: Estimate) -> None:
        """Store one user's raw triple for one work package.

        The user and the work package must already be part of the session
        (checked in that order) and the key must not be taken yet.
        """
        self._check_token(token)
        self._check_not_empty(estimate.work_package_id, "Work package ID")
        self._check_not_empty(estimate.user_name, "User name")
        # Raises InvalidEstimateError for negative or out-of-order points
        DelphiEstimate(
            estimate.best_case, estimate.most_likely_case, estimate.worst_case
        )

        async with self._lock_for(token):
            doc = await self._load(token, "users", "work_packages", "estimates")
            if estimate.user_name not in doc["users"]:
                raise UserNotInSessionError(
                    f"User with name: {estimate.user_name} is not part of session"
                )
            packages = [WorkPackage.model_validate(d) for d in doc["work_packages"]]
            if _find_work_package(packages, estimate.work_package_id) is None:
                raise WorkPackageNotFoundError(
                    f"Work package with ID: {estimate.work_package_id} does not exist"
                )
            estimates = [Estimate.model_validate(d) for d in doc["estimates"]]
            if _find_estimate(
                estimates, estimate.work_package_id, estimate.user_name
            ) is not None:
                raise EstimateAlreadyExistsError(
                    f"Estimate of user: {estimate.user_name} for work package: "
                    f"{estimate.work_package_id} already part of session"
                )
            estimates.append(estimate)
            await self._save(token, estimates=_dump(estimates))
        logger.debug(
            "Added estimate (%r, %r) to %s...",
            estimate.work_package_id, estimate.user_name, token[:8],
        )

    async def remove_estimate(
        self, token: str, work_package_id: str, user_name: str
    ) -> None:
        """Remove the estimate keyed by ``(work_package_id, user_name)``."""
        self._check_token(token)
        self._check_not_empty(work_package_id, "Work package ID")
        self._check_not_empty(user_name, "User name")

        async with self._lock_for(token):
            estimates = await self._load_estimates(token)
            index = _find_estimate(estimates, work_package_id, user_name)
            if index is None:
                raise EstimateNotFoundError(
                    f"Estimate of user: {user_name} for work package: "
                    f"{work_package_id} is not part of session"
                )
            del estimates[index]
            await self._save(token, estimates=_dump(estimates))
        logger.debug(
            "Removed estimate (%r, %r) from %s...",
            work_package_id, user_name, token[:8],
        )

    async def get_estimates(self, token: str) -> list[Estimate]:
        """Return all per-user estimates in insertion order."""
        self._check_token(token)
        return await self._load_estimates(token)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_token(self, token: str) -> None:
        if len(token) != self._token_length:
            raise InvalidTokenError("Session token does not match desired length")

    @staticmethod
    def _check_not_empty(value: str, what: str) -> None:
        if not value:
            raise InvalidParameterError(f"{what} should not be empty")

    def _lock_for(self, token: str) -> asyncio.Lock:
        lock = self._locks.get(token)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[token] = lock
        return lock

    async def _query(self, stmt: Executable, reason: str) -> list[dict[str, Any]]:
        try:
            return await self._store.query(stmt)
        except SQLAlchemyError as exc:
            logger.warning("%s: %s", reason, exc)
            raise StoreError(reason) from exc

    async def _exec(self, stmt: Executable, reason: str) -> None:
        try:
            await self._store.exec(stmt)
        except SQLAlchemyError as exc:
            logger.warning("%s: %s", reason, exc)
            raise PersistError(reason) from exc

    async def _load(self, token: str, *columns: str) -> dict[str, Any]:
        """Point lookup of ``columns`` for one session by primary key."""
        stmt = select(*(sessions_table.c[name] for name in columns)).where(
            sessions_table.c.token == token
        )
        rows = await self._query(stmt, "Unable to read session")
        if not rows:
            raise SessionNotFoundError("Specified session does not exist")
        # NULL documents read as empty lists
        return {name: rows[0][name] or [] for name in columns}

    async def _load_work_packages(self, token: str) -> list[WorkPackage]:
        doc = await self._load(token, "work_packages")
        return [WorkPackage.model_validate(d) for d in doc["work_packages"]]

    async def _load_estimates(self, token: str) -> list[Estimate]:
        doc = await self._load(token, "estimates")
        return [Estimate.model_validate(d) for d in doc["estimates"]]

    async def _save(self, token: str, **documents: Any) -> None:
        stmt = (
            update(sessions_table)
            .where(sessions_table.c.token == token)
            .values(**documents)
        )
        await self._exec(stmt, "Unable to update session")

    async def _set_work_package_estimate(
        self,
        token: str,
        work_package_id: str,
        effort: float,
        standard_deviation: float,
    ) -> None:
        async with self._lock_for(token):
            packages = await self._load_work_packages(token)
            index = _find_work_package(packages, work_package_id)
            if index is None:
                raise WorkPackageNotFoundError(
                    f"Work package with ID: {work_package_id} does not exist"
                )
            packages[index] = packages[index].model_copy(
                update={
                    "effort": effort,
                    "standard_deviation": standard_deviation,
                }
            )
            await self._save(token, work_packages=_dump(packages))
        logger.debug(
            "Set estimate of work package %r in %s... to %g +/- %g",
            work_package_id, token[:8], effort, standard_deviation,
        )


# ------------------------------------------------------------------
# Module helpers
# ------------------------------------------------------------------

def _find_work_package(packages: list[WorkPackage], work_package_id: str) -> int | None:
    for i, wp in enumerate(packages):
        if wp.id == work_package_id:
            return i
    return None


def _find_estimate(
    estimates: list[Estimate], work_package_id: str, user_name: str
) -> int | None:
    for i, est in enumerate(estimates):
        if est.work_package_id == work_package_id and est.user_name == user_name:
            return i
    return None


def _dump(models: list[WorkPackage] | list[Estimate]) -> list[dict[str, Any]]:
    return [m.model_dump() for m in models]
