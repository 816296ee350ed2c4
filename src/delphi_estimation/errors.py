"""Domain exceptions shared by the estimation engine and the session store.

Every error raised by the core derives from ``DelphiError`` so callers can
catch the whole family in one place.  The intermediate classes describe the
*kind* of failure and are what the HTTP layer maps to status codes:

  - ``ValidationError``       - malformed input, caught before any store access
  - ``NotFoundError``         - a session, user, work package or estimate is missing
  - ``ConflictError``         - the key being created already exists
  - ``StoreError``            - the storage handle failed
  - ``InsufficientDataError`` - an aggregation had nothing to work on

``ValidationError`` also subclasses ``ValueError`` and ``NotFoundError``
subclasses ``LookupError`` so generic handlers keep working.
"""


class DelphiError(Exception):
    """Base class for all estimation and session store errors."""


# ------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------

class ValidationError(DelphiError, ValueError):
    """Input was rejected before touching the store."""


class InvalidParameterError(ValidationError):
    """An argument is empty or out of its allowed range."""


class InvalidTokenError(ValidationError):
    """A session token does not have the expected length."""


class InvalidEstimateError(ValidationError):
    """A numeric estimate is negative or its three points are out of order."""


# ------------------------------------------------------------------
# Not found
# ------------------------------------------------------------------

class NotFoundError(DelphiError, LookupError):
    """A referenced record does not exist."""


class SessionNotFoundError(NotFoundError):
    pass


class UserNotInSessionError(NotFoundError):
    pass


class WorkPackageNotFoundError(NotFoundError):
    pass


class EstimateNotFoundError(NotFoundError):
    pass


# ------------------------------------------------------------------
# Conflict
# ------------------------------------------------------------------

class ConflictError(DelphiError):
    """A record with the same key is already part of the session."""


class UserAlreadyJoinedError(ConflictError):
    pass


class WorkPackageAlreadyExistsError(ConflictError):
    pass


class EstimateAlreadyExistsError(ConflictError):
    pass


# ------------------------------------------------------------------
# Infrastructure
# ------------------------------------------------------------------

class StoreError(DelphiError):
    """The underlying storage handle failed to execute a statement."""


class StoreInitError(StoreError):
    """The sessions table could not be created."""


class PersistError(StoreError):
    """A session record could not be written."""


class RandomSourceError(DelphiError):
    """The operating system could not supply enough random bytes."""


class TokenGenerationError(DelphiError):
    """A new session token could not be generated."""


# ------------------------------------------------------------------
# Aggregation
# ------------------------------------------------------------------

class InsufficientDataError(DelphiError):
    """An aggregation was asked to operate on zero matching estimates."""
