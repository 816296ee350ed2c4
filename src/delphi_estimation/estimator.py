"""DelphiEstimate - PERT three-point estimate.

A user supplies a best case ``b``, a most likely case ``m`` and a worst case
``w``.  The estimate is only valid when ``0 <= b <= m <= w`` and every point
is finite (NaN and infinity fail the ">= 0" rule of their point).  The
checks run in a fixed order so the first violated rule is the one reported:

  1. best case >= 0
  2. most likely >= 0
  3. most likely >= best case
  4. worst case >= 0
  5. worst case >= most likely

Derived statistics (plain IEEE-754 arithmetic, no rounding):

  - effort             = (b + 4m + w) / 6
  - standard deviation = (w - b) / 6
"""

import math
from dataclasses import dataclass

from delphi_estimation.errors import InvalidEstimateError
from delphi_estimation.interfaces import Estimator


@dataclass(frozen=True)
class DelphiEstimate(Estimator):
    """Immutable, validated three-point estimate."""

    best_case: float
    most_likely: float
    worst_case: float

    def __post_init__(self) -> None:
        b, m, w = self.best_case, self.most_likely, self.worst_case
        if not _non_negative(b):
            raise InvalidEstimateError(f"Best case must be >= 0, provided: {b:g}")
        if not _non_negative(m):
            raise InvalidEstimateError(f"Most likely must be >= 0, provided: {m:g}")
        if m < b:
            raise InvalidEstimateError("Most likely was smaller than best case")
        if not _non_negative(w):
            raise InvalidEstimateError(f"Worst case must be >= 0, provided: {w:g}")
        if w < m:
            raise InvalidEstimateError("Worst case was smaller than most likely")

    @property
    def effort(self) -> float:
        return (self.best_case + 4 * self.most_likely + self.worst_case) / 6

    @property
    def standard_deviation(self) -> float:
        return (self.worst_case - self.best_case) / 6


def _non_negative(value: float) -> bool:
    return math.isfinite(value) and value >= 0
