"""Offline replay of Thompson Sampling against known conversion rates.

The harness plays the role of live traffic: every round it asks the policy
which variant to show, flips a coin with that variant's true conversion
rate and records the outcome on the arm.  True rates are never shown to the
policy.  Rounds depend on every earlier outcome, so the loop is strictly
sequential.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

import numpy as np
from pydantic import BaseModel

from bandit_engine.core.config import Settings, settings as default_settings
from bandit_engine.core.exceptions import InvalidInputError
from bandit_engine.stats.arms import BanditArm
from bandit_engine.stats.decisions import Recommendation
from bandit_engine.stats.policies import thompson_sampling, thompson_select

logger = logging.getLogger(__name__)


class SimulationResult(BaseModel):
    arms: list[BanditArm]
    final_recommendation: Recommendation
    regret: float
    efficiency: Optional[float] = None
    total_impressions: int
    total_conversions: int

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


def _validate_variants(variants: Sequence[tuple[str, float]]) -> list[float]:
    if not variants:
        raise InvalidInputError("Must provide at least one variant")
    rates = []
    for name, rate in variants:
        if not math.isfinite(rate) or not 0.0 <= rate <= 1.0:
            raise InvalidInputError(f"true rate for {name!r} must be in [0, 1], got {rate!r}")
        rates.append(float(rate))
    return rates


def expected_uniform_regret(
    variants: Sequence[tuple[str, float]],
    total_impressions: int,
) -> float:
    """Expected regret of splitting traffic evenly across all variants.

    Useful as the baseline a bandit policy should beat::

        total_impressions * (max(rate) - mean(rate))
    """
    rates = _validate_variants(variants)
    if total_impressions < 0:
        raise InvalidInputError("total_impressions must be non-negative")
    return total_impressions * (max(rates) - sum(rates) / len(rates))


def simulate(
    variants: Sequence[tuple[str, float]],
    total_impressions: int,
    rng: np.random.Generator | None = None,
    settings: Settings | None = None,
) -> SimulationResult:
    """Run Thompson Sampling for ``total_impressions`` rounds.

    Parameters
    ----------
    variants : Sequence[tuple[str, float]]
        ``(name, true_conversion_rate)`` pairs.  Arms are created as
        ``variant-0``, ``variant-1``, ... with a Beta(1, 1) prior.
    total_impressions : int
        Number of sequential rounds, must be non-negative.  Zero rounds
        returns the untouched Beta(1, 1) arms with zero regret.
    rng : np.random.Generator | None
        Source of randomness for both the policy and the outcomes.
    settings : Settings | None
        Engine settings override.

    Returns
    -------
    SimulationResult
        Final arms, final recommendation, cumulative regret and efficiency
        (percentage of the conversions the best variant alone would have
        produced in expectation; ``None`` when every true rate is zero or
        no rounds were played).
    """
    settings = settings or default_settings
    true_rates = _validate_variants(variants)
    if total_impressions < 0:
        raise InvalidInputError("total_impressions must be non-negative")
    rng = rng if rng is not None else np.random.default_rng()

    logger.info(
        "Simulating A/B test with %d variants for %d impressions",
        len(variants),
        total_impressions,
    )

    arms = [BanditArm.new(f"variant-{i}", name) for i, (name, _) in enumerate(variants)]
    best_true_rate = max(true_rates)
    regret = 0.0

    for _ in range(total_impressions):
        # Only the selection step runs per round; the final recommendation
        # below carries the confidence estimate.
        index = thompson_select(arms, rng, settings)
        converted = float(rng.random()) < true_rates[index]
        arms[index].record(converted)
        regret += best_true_rate - true_rates[index]

    final_recommendation = thompson_sampling(arms, rng, settings)

    total_conversions = sum(arm.conversions for arm in arms)
    efficiency: float | None = None
    if best_true_rate > 0 and total_impressions > 0:
        efficiency = 100.0 * total_conversions / (total_impressions * best_true_rate)

    logger.info(
        "Simulation finished: regret=%.2f efficiency=%s best=%s",
        regret,
        "n/a" if efficiency is None else f"{efficiency:.1f}%",
        final_recommendation.current_best,
    )

    return SimulationResult(
        arms=arms,
        final_recommendation=final_recommendation,
        regret=regret,
        efficiency=efficiency,
        total_impressions=total_impressions,
        total_conversions=total_conversions,
    )
