"""Aggregation and ranking over per-user estimates of one work package.

All helpers take the full estimate list of a session plus a work package
ID and first narrow the list down with
:func:`extract_estimates_for_work_package`:

  - an empty ID is a caller bug          -> ``InvalidParameterError``
  - no estimates, or none for the ID     -> ``InsufficientDataError``

Stored triples are turned back into :class:`DelphiEstimate` values, so
malformed stored data surfaces as ``InvalidEstimateError`` from the first
offending entry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from delphi_estimation.errors import InsufficientDataError, InvalidParameterError
from delphi_estimation.estimator import DelphiEstimate
from delphi_estimation.models import Estimate, MaxDistance, UserEffort

logger = logging.getLogger(__name__)


def extract_estimates_for_work_package(
    estimates: list[Estimate], work_package_id: str
) -> list[Estimate]:
    """Return the estimates for ``work_package_id`` in their stored order."""
    if not work_package_id:
        raise InvalidParameterError("Work package ID cannot be empty")
    if not estimates:
        raise InsufficientDataError("Not enough data to process")

    matching = [e for e in estimates if e.work_package_id == work_package_id]
    if not matching:
        raise InsufficientDataError(
            f"Work package with ID: {work_package_id} is not part of estimates"
        )
    return matching


def average_estimate(
    estimates: list[Estimate], work_package_id: str
) -> DelphiEstimate:
    """Average best/likely/worst case separately and build one estimate.

    Per-component means preserve ``b <= m <= w``, so the result is always a
    valid Delphi estimate.
    """
    matching = extract_estimates_for_work_package(estimates, work_package_id)
    n = len(matching)
    b = sum(e.best_case for e in matching) / n
    m = sum(e.most_likely_case for e in matching) / n
    w = sum(e.worst_case for e in matching) / n
    return DelphiEstimate(b, m, w)


def rank_by_effort(
    estimates: list[Estimate], work_package_id: str
) -> list[UserEffort]:
    """Rank users by computed effort, highest first.

    The sort is stable: users with identical effort keep the order in which
    their estimates were submitted.
    """
    matching = extract_estimates_for_work_package(estimates, work_package_id)
    ranked = [
        UserEffort(
            user_name=e.user_name,
            effort=DelphiEstimate(
                e.best_case, e.most_likely_case, e.worst_case
            ).effort,
        )
        for e in matching
    ]
    # sorted() with reverse=True is still stable for equal keys
    return sorted(ranked, key=lambda ue: ue.effort, reverse=True)


def users_with_max_distance(
    estimates: list[Estimate], work_package_id: str
) -> MaxDistance:
    """Return the two users whose efforts for the work package diverge most."""
    ranked = rank_by_effort(estimates, work_package_id)
    if len(ranked) == 1:
        return MaxDistance(first=ranked[0].user_name)
    logger.debug(
        "Max distance for %s: %s (%.3f) vs %s (%.3f)",
        work_package_id,
        ranked[0].user_name, ranked[0].effort,
        ranked[-1].user_name, ranked[-1].effort,
    )
    return MaxDistance(first=ranked[0].user_name, last=ranked[-1].user_name)


def missing_users(
    users: Iterable[str], estimates: list[Estimate]
) -> list[str]:
    """Session members (in join order) without an estimate in ``estimates``.

    Callers pass estimates already narrowed to one work package.
    """
    estimated = {e.user_name for e in estimates}
    return [u for u in users if u not in estimated]
