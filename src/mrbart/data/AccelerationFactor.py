"""Acceleration factor dataclass."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(slots=True)
class AccelerationFactor:
    """Acceleration Factor along the two phase encoding directions."""

    k1: float
    """Acceleration along E1."""

    k2: float = 1.0
    """Acceleration along E2."""

    def __post_init__(self) -> None:
        """Check that both factors are positive."""
        if self.k1 <= 0 or self.k2 <= 0:
            raise ValueError(f'Acceleration factors must be positive, got k1={self.k1}, k2={self.k2}.')

    @property
    def overall(self) -> float:
        return self.k1 * self.k2

    @classmethod
    def from_sequence(cls, factors: AccelerationFactor | Sequence[float]) -> AccelerationFactor:
        """Create an AccelerationFactor from a (k1, k2) pair."""
        if isinstance(factors, AccelerationFactor):
            return factors
        k1, k2 = factors
        return cls(float(k1), float(k2))
