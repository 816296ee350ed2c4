"""delphi_estimation - Delphi (PERT three-point) estimation SDK.

Public API:
    DelphiEstimate    - validated (best, most likely, worst) triple with
                        effort / standard deviation
    Estimator         - ABC every estimation method implements
    WorkPackage       - unit of work held by a session
    Estimate          - one user's raw triple for one work package
    UserEffort        - user paired with their computed effort
    MaxDistance       - users with the highest and lowest effort

Aggregation helpers:
    extract_estimates_for_work_package, average_estimate, rank_by_effort,
    users_with_max_distance, missing_users
"""

from delphi_estimation.estimator import DelphiEstimate
from delphi_estimation.interfaces import Estimator
from delphi_estimation.models import Estimate, MaxDistance, UserEffort, WorkPackage
from delphi_estimation.ranking import (
    average_estimate,
    extract_estimates_for_work_package,
    missing_users,
    rank_by_effort,
    users_with_max_distance,
)

__all__ = [
    # Estimators
    "DelphiEstimate",
    "Estimator",
    # Data models
    "Estimate",
    "MaxDistance",
    "UserEffort",
    "WorkPackage",
    # Aggregation
    "average_estimate",
    "extract_estimates_for_work_package",
    "missing_users",
    "rank_by_effort",
    "users_with_max_distance",
]
