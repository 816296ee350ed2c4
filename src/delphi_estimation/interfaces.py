"""Abstract interface for effort estimators.

Any estimation method (Delphi/PERT today) exposes the same two statistics so
the aggregation and ranking helpers never depend on a concrete formula::

    est: Estimator = DelphiEstimate(1.0, 2.0, 4.0)
    est.effort               # expected effort
    est.standard_deviation   # uncertainty of that effort
"""

from abc import ABC, abstractmethod


class Estimator(ABC):
    """Interface for a single effort estimate."""

    @property
    @abstractmethod
    def effort(self) -> float:
        """Expected effort derived from the raw inputs."""
        ...

    @property
    @abstractmethod
    def standard_deviation(self) -> float:
        """Uncertainty of :attr:`effort`, in the same unit."""
        ...
