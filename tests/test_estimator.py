"""DelphiEstimate unit tests - validation order and PERT statistics.

Validation rules are checked in a fixed order; each test triggers exactly
one rule and asserts its message.  Statistics are compared with a 1e-3
tolerance.
"""

from dataclasses import FrozenInstanceError

import pytest

from delphi_estimation.errors import InvalidEstimateError, ValidationError
from delphi_estimation.estimator import DelphiEstimate
from delphi_estimation.interfaces import Estimator

TOLERANCE = 1e-3


# =====================================================================
# Validation
# =====================================================================


class TestValidation:
    """Each invalid triple fails with the rule it violates first."""

    def test_best_case_below_zero(self):
        with pytest.raises(InvalidEstimateError) as exc_info:
            DelphiEstimate(-0.1, 1, 2)
        assert str(exc_info.value) == "Best case must be >= 0, provided: -0.1"

    def test_most_likely_below_zero(self):
        with pytest.raises(InvalidEstimateError) as exc_info:
            DelphiEstimate(0, -0.5, 2)
        assert str(exc_info.value) == "Most likely must be >= 0, provided: -0.5"

    def test_most_likely_below_best_case(self):
        with pytest.raises(InvalidEstimateError) as exc_info:
            DelphiEstimate(2, 1, 3)
        assert str(exc_info.value) == "Most likely was smaller than best case"

    def test_worst_case_below_zero(self):
        with pytest.raises(InvalidEstimateError) as exc_info:
            DelphiEstimate(0, 0, -1.0)
        assert str(exc_info.value) == "Worst case must be >= 0, provided: -1"

    def test_worst_case_below_most_likely(self):
        with pytest.raises(InvalidEstimateError) as exc_info:
            DelphiEstimate(2, 3, 2.5)
        assert str(exc_info.value) == "Worst case was smaller than most likely"

    @pytest.mark.parametrize("b, m, w, message", [
        (float("nan"), 1.0, 2.0, "Best case must be >= 0, provided: nan"),
        (float("inf"), 1.0, 2.0, "Best case must be >= 0, provided: inf"),
        (0.0, float("nan"), 2.0, "Most likely must be >= 0, provided: nan"),
        (0.0, 1.0, float("nan"), "Worst case must be >= 0, provided: nan"),
        (0.0, 1.0, float("inf"), "Worst case must be >= 0, provided: inf"),
    ])
    def test_non_finite_points_rejected(self, b, m, w, message):
        """NaN and infinity fail the ">= 0" rule of the point carrying them."""
        with pytest.raises(InvalidEstimateError) as exc_info:
            DelphiEstimate(b, m, w)
        assert str(exc_info.value) == message

    @pytest.mark.parametrize("b, m, w", [
        (1e9, 1e9 - 1, 2e9),
        (0.0002, 0.0001, 1.0),
    ])
    def test_ordering_error_regardless_of_magnitude(self, b, m, w):
        """m < b fails with the ordering rule, however large or small."""
        with pytest.raises(InvalidEstimateError, match="smaller than best case"):
            DelphiEstimate(b, m, w)

    def test_is_a_validation_error(self):
        """InvalidEstimateError belongs to the validation kind (and ValueError)."""
        with pytest.raises(ValidationError):
            DelphiEstimate(3, 2, 1)
        with pytest.raises(ValueError):
            DelphiEstimate(3, 2, 1)


# =====================================================================
# Statistics
# =====================================================================


class TestStatistics:
    """Effort = (b + 4m + w) / 6, standard deviation = (w - b) / 6."""

    def test_effort(self):
        est = DelphiEstimate(10, 15, 20)
        assert abs(est.effort - 15.0) <= TOLERANCE

    def test_standard_deviation(self):
        est = DelphiEstimate(10, 15, 20)
        assert abs(est.standard_deviation - 1.666) <= TOLERANCE

    @pytest.mark.parametrize("b, m, w", [
        (0, 0, 0),
        (0.5, 1.0, 2.0),
        (1.0, 1.2, 2.0),
        (3, 3, 3),
        (0, 100, 1000),
    ])
    def test_formulas_hold(self, b, m, w):
        est = DelphiEstimate(b, m, w)
        assert abs(est.effort - (b + 4 * m + w) / 6) <= TOLERANCE
        assert abs(est.standard_deviation - (w - b) / 6) <= TOLERANCE

    def test_equal_points_have_no_uncertainty(self):
        assert DelphiEstimate(4, 4, 4).standard_deviation == 0


# =====================================================================
# Value semantics
# =====================================================================


class TestValueSemantics:

    def test_is_an_estimator(self):
        assert isinstance(DelphiEstimate(1, 2, 3), Estimator)

    def test_is_immutable(self):
        est = DelphiEstimate(1, 2, 3)
        with pytest.raises(FrozenInstanceError):
            est.best_case = 0

    def test_equal_inputs_compare_equal(self):
        assert DelphiEstimate(1, 2, 3) == DelphiEstimate(1, 2, 3)
