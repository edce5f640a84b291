"""Sufficient statistics for one variant under test.

Each arm carries its impression and conversion counts together with the
parameters of its Beta posterior under a uniform Beta(1, 1) prior::

    alpha = conversions + 1
    beta  = impressions - conversions + 1

Selection policies only read arms.  The caller owns every update and is
responsible for serialising concurrent updates to the same arm.
"""

from __future__ import annotations

import math
import numbers
from typing import Any

from bandit_engine.core.exceptions import InvalidInputError


def _count(label: str, value: Any) -> int:
    """Validate an event count: a non-negative integer, never a truncated float."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidInputError(f"{label} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidInputError(f"{label} must be non-negative")
    return int(value)


class BanditArm:
    """One treatment variant and its Beta posterior.

    Parameters
    ----------
    variant_id : str
        Identifier, unique within an experiment.
    name : str
        Display label.
    alpha, beta : float
        Beta posterior parameters.  Both must be positive.
    impressions : int
        Number of times the variant was shown.
    conversions : int
        Number of conversions, never more than ``impressions``.
    """

    __slots__ = ("variant_id", "name", "alpha", "beta", "impressions", "conversions")

    def __init__(
        self,
        variant_id: str,
        name: str,
        alpha: float = 1.0,
        beta: float = 1.0,
        impressions: int = 0,
        conversions: int = 0,
    ) -> None:
        for label, value in (("alpha", alpha), ("beta", beta)):
            if not math.isfinite(value) or value <= 0:
                raise InvalidInputError(f"{label} must be positive and finite, got {value!r}")
        impressions = _count("impressions", impressions)
        conversions = _count("conversions", conversions)
        if conversions > impressions:
            raise InvalidInputError("conversions cannot exceed impressions")

        self.variant_id = variant_id
        self.name = name
        self.alpha = float(alpha)
        self.beta = float(beta)
        self.impressions = impressions
        self.conversions = conversions

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, variant_id: str, name: str) -> BanditArm:
        """Fresh arm with the uniform Beta(1, 1) prior and no data."""
        return cls(variant_id, name)

    @classmethod
    def from_counts(
        cls,
        variant_id: str,
        name: str,
        impressions: int,
        conversions: int,
    ) -> BanditArm:
        """Arm whose posterior is derived from observed counts."""
        impressions = _count("impressions", impressions)
        conversions = _count("conversions", conversions)
        if conversions > impressions:
            raise InvalidInputError("conversions cannot exceed impressions")
        return cls(
            variant_id,
            name,
            alpha=conversions + 1,
            beta=impressions - conversions + 1,
            impressions=impressions,
            conversions=conversions,
        )

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def record(self, converted: bool) -> None:
        """Apply one observed impression, in place."""
        self.impressions += 1
        if converted:
            self.conversions += 1
        self.alpha = self.conversions + 1.0
        self.beta = self.impressions - self.conversions + 1.0

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    @property
    def conversion_rate(self) -> float:
        """Empirical conversion rate, 0.0 before the first impression."""
        if self.impressions == 0:
            return 0.0
        return self.conversions / self.impressions

    def copy(self) -> BanditArm:
        return BanditArm(
            self.variant_id,
            self.name,
            alpha=self.alpha,
            beta=self.beta,
            impressions=self.impressions,
            conversions=self.conversions,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "variant_id": self.variant_id,
            "name": self.name,
            "alpha": self.alpha,
            "beta": self.beta,
            "impressions": self.impressions,
            "conversions": self.conversions,
            "conversion_rate": self.conversion_rate,
        }

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BanditArm):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"BanditArm(variant_id={self.variant_id!r}, alpha={self.alpha:.3f}, "
            f"beta={self.beta:.3f}, impressions={self.impressions}, "
            f"conversions={self.conversions})"
        )
