"""Session content models - the contract between the store and its callers.

These models describe what the session repository stores and returns.  They
are intentionally decoupled from the ORM model in ``delphi_db`` so that API
consumers never see database internals; the repository dumps them into the
session's JSON document columns and validates them back on read.
"""

from pydantic import BaseModel, ConfigDict


class WorkPackage(BaseModel):
    """A unit of work to be estimated within one session.

    ``effort`` and ``standard_deviation`` hold the agreed aggregate once it
    has been set; both are 0 until then.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    summary: str = ""
    effort: float = 0.0
    standard_deviation: float = 0.0


class Estimate(BaseModel):
    """One user's three-point guess for one work package.

    ``(work_package_id, user_name)`` is the natural key inside a session.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    work_package_id: str
    user_name: str
    best_case: float
    most_likely_case: float
    worst_case: float


class UserEffort(BaseModel):
    """A user paired with the effort computed from their estimate."""

    user_name: str
    effort: float


class MaxDistance(BaseModel):
    """The users with the highest (``first``) and lowest (``last``) effort.

    ``last`` is empty when only one user estimated the work package.
    """

    first: str
    last: str = ""
