"""Confidence estimation, stopping rule and recommendation assembly.

Both selection policies report the same decision summary alongside their
pick: which arm currently looks best, how sure we are that it really is
best, how much traffic is still being spent on the others, the lift over
the baseline arm and whether the experiment can be stopped.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
from pydantic import BaseModel

from bandit_engine.core.config import Settings, settings as default_settings
from bandit_engine.core.exceptions import InvalidInputError
from bandit_engine.stats.arms import BanditArm
from bandit_engine.stats.variates import sample_beta

logger = logging.getLogger(__name__)


class Recommendation(BaseModel):
    """Immutable output of a selection policy."""

    algorithm: str
    selected_variant: str
    current_best: str
    confidence: float
    exploration_rate: float
    improvement: Optional[float] = None
    should_stop: bool
    reason: Optional[str] = None

    model_config = {"frozen": True}


def require_arms(arms: Sequence[BanditArm]) -> None:
    if not arms:
        raise InvalidInputError("Must provide at least one arm")


def best_arm_index(arms: Sequence[BanditArm]) -> int:
    """Index of the arm with the highest empirical conversion rate.

    Ties go to the first arm in input order.
    """
    require_arms(arms)
    best = 0
    for i, arm in enumerate(arms):
        if arm.conversion_rate > arms[best].conversion_rate:
            best = i
    return best


# ======================================================================
# Confidence
# ======================================================================

def estimate_confidence(
    winner_index: int,
    arms: Sequence[BanditArm],
    rng: np.random.Generator,
    n_trials: int | None = None,
    settings: Settings | None = None,
) -> float:
    """Monte Carlo estimate of P(winner beats every other arm), in percent.

    Each trial draws one posterior sample for the winner and one for every
    other arm; the trial is a win when the winner's draw is strictly the
    largest.  The winner is excluded from its own comparison by position,
    so another arm with identical posterior parameters still competes.

    Parameters
    ----------
    winner_index : int
        Position of the candidate winner in ``arms``.
    arms : Sequence[BanditArm]
        All arms of the experiment.
    rng : np.random.Generator
        Source of randomness.
    n_trials : int | None
        Number of Monte Carlo trials.  Defaults to
        ``settings.CONFIDENCE_TRIALS`` (10,000).

    Returns
    -------
    float
        Confidence in [0, 100].  A single arm is trivially 100.
    """
    settings = settings or default_settings
    require_arms(arms)
    if not 0 <= winner_index < len(arms):
        raise InvalidInputError(f"winner_index {winner_index} out of range for {len(arms)} arms")
    if n_trials is None:
        n_trials = settings.CONFIDENCE_TRIALS
    if n_trials <= 0:
        raise InvalidInputError("n_trials must be positive")

    winner = arms[winner_index]
    others = [arm for i, arm in enumerate(arms) if i != winner_index]
    if not others:
        return 100.0

    threshold = settings.NORMAL_APPROX_THRESHOLD
    cap = settings.MAX_GAMMA_ITERATIONS
    wins = 0
    for _ in range(n_trials):
        winner_draw = sample_beta(rng, winner.alpha, winner.beta, threshold, cap)
        if all(winner_draw > sample_beta(rng, arm.alpha, arm.beta, threshold, cap) for arm in others):
            wins += 1

    return 100.0 * wins / n_trials


# ======================================================================
# Stopping rule and traffic summaries
# ======================================================================

def should_stop(
    arms: Sequence[BanditArm],
    confidence: float,
    settings: Settings | None = None,
) -> bool:
    """Decide whether the experiment has reached a decision.

    Two independent sufficiency conditions, either one is enough:

    1. confidence > 95 with every arm at >= 100 impressions and >= 1000
       impressions in total;
    2. confidence > 99 with >= 500 impressions in total.
    """
    settings = settings or default_settings
    require_arms(arms)
    min_impressions = min(arm.impressions for arm in arms)
    total_impressions = sum(arm.impressions for arm in arms)

    if (
        confidence > settings.STOP_CONFIDENCE
        and min_impressions >= settings.STOP_MIN_ARM_IMPRESSIONS
        and total_impressions >= settings.STOP_MIN_TOTAL_IMPRESSIONS
    ):
        return True

    if (
        confidence > settings.STOP_HIGH_CONFIDENCE
        and total_impressions >= settings.STOP_HIGH_CONFIDENCE_MIN_TOTAL
    ):
        return True

    return False


def exploration_rate(arms: Sequence[BanditArm], best_index: int) -> float:
    """Percentage of impressions spent on arms other than the current best."""
    require_arms(arms)
    total_impressions = sum(arm.impressions for arm in arms)
    if total_impressions == 0:
        return 100.0
    explored = sum(arm.impressions for i, arm in enumerate(arms) if i != best_index)
    return 100.0 * explored / total_impressions


def improvement(arms: Sequence[BanditArm], best_index: int) -> float | None:
    """Percentage lift of the best arm over the baseline ``arms[0]``.

    Returns 0.0 when the baseline is itself the best arm and ``None`` when
    the baseline has a zero conversion rate, since the relative lift is
    undefined there.
    """
    require_arms(arms)
    if best_index == 0:
        return 0.0
    baseline_rate = arms[0].conversion_rate
    if baseline_rate == 0:
        logger.debug("Baseline %s has zero conversion rate; lift is undefined", arms[0].variant_id)
        return None
    lift = (arms[best_index].conversion_rate - baseline_rate) / baseline_rate * 100
    return round(lift, 2)


# ======================================================================
# Recommendation assembly
# ======================================================================

def build_recommendation(
    algorithm: str,
    arms: Sequence[BanditArm],
    selected_index: int,
    rng: np.random.Generator,
    settings: Settings | None = None,
) -> Recommendation:
    """Combine a policy's pick with the shared decision summary."""
    settings = settings or default_settings
    require_arms(arms)

    best_index = best_arm_index(arms)
    best = arms[best_index]
    confidence = estimate_confidence(best_index, arms, rng, settings=settings)
    stop = should_stop(arms, confidence, settings)

    return Recommendation(
        algorithm=algorithm,
        selected_variant=arms[selected_index].variant_id,
        current_best=best.variant_id,
        confidence=confidence,
        exploration_rate=exploration_rate(arms, best_index),
        improvement=improvement(arms, best_index),
        should_stop=stop,
        reason=f"{best.name} is winner with {confidence:.1f}% confidence" if stop else None,
    )
