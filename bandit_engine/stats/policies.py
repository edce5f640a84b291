"""Selection policies: Thompson Sampling and UCB1.

Both policies read a list of ``BanditArm`` and return a ``Recommendation``
naming the variant to show next.  Neither mutates the arms.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from bandit_engine.core.config import Settings, settings as default_settings
from bandit_engine.core.exceptions import InvalidInputError
from bandit_engine.stats.arms import BanditArm
from bandit_engine.stats.decisions import Recommendation, build_recommendation, require_arms
from bandit_engine.stats.variates import sample_beta

logger = logging.getLogger(__name__)

THOMPSON_SAMPLING = "thompson_sampling"
UCB1 = "ucb1"


def _argmax_first(values: Sequence[float]) -> int:
    """Index of the strictly largest value; ties go to the earliest."""
    best = 0
    for i, value in enumerate(values):
        if value > values[best]:
            best = i
    return best


# ======================================================================
# Thompson Sampling
# ======================================================================

def thompson_select(
    arms: Sequence[BanditArm],
    rng: np.random.Generator,
    settings: Settings | None = None,
) -> int:
    """Draw one posterior sample per arm and return the index of the highest."""
    settings = settings or default_settings
    require_arms(arms)
    draws = [
        sample_beta(
            rng,
            arm.alpha,
            arm.beta,
            settings.NORMAL_APPROX_THRESHOLD,
            settings.MAX_GAMMA_ITERATIONS,
        )
        for arm in arms
    ]
    return _argmax_first(draws)


def thompson_sampling(
    arms: Sequence[BanditArm],
    rng: np.random.Generator | None = None,
    settings: Settings | None = None,
) -> Recommendation:
    """Select the next variant by Thompson Sampling.

    Parameters
    ----------
    arms : Sequence[BanditArm]
        Non-empty list of arms; ``arms[0]`` is the baseline for the lift.
    rng : np.random.Generator | None
        Source of randomness.  A fresh unseeded generator when omitted.
    settings : Settings | None
        Engine settings override.

    Returns
    -------
    Recommendation
    """
    settings = settings or default_settings
    require_arms(arms)
    rng = rng if rng is not None else np.random.default_rng()
    logger.debug("Running Thompson Sampling over %d arms", len(arms))

    selected = thompson_select(arms, rng, settings)
    return build_recommendation(THOMPSON_SAMPLING, arms, selected, rng, settings)


# ======================================================================
# Upper Confidence Bound
# ======================================================================

def ucb_scores(arms: Sequence[BanditArm], c: float = 2.0) -> list[float]:
    """UCB1 score per arm.

    score = conversion_rate + c * sqrt(ln(total_impressions) / impressions)

    Untried arms score ``inf`` so each one is picked at least once.  With no
    impressions at all the logarithm is undefined and every arm scores
    ``inf``.
    """
    require_arms(arms)
    if not math.isfinite(c) or c < 0:
        raise InvalidInputError(f"exploration constant must be non-negative and finite, got {c!r}")

    total_impressions = sum(arm.impressions for arm in arms)
    if total_impressions == 0:
        return [math.inf] * len(arms)

    log_total = math.log(total_impressions)
    scores = []
    for arm in arms:
        if arm.impressions == 0:
            scores.append(math.inf)
        else:
            scores.append(arm.conversion_rate + c * math.sqrt(log_total / arm.impressions))
    return scores


def ucb_select(arms: Sequence[BanditArm], c: float = 2.0) -> int:
    """Index of the arm with the highest UCB1 score."""
    return _argmax_first(ucb_scores(arms, c))


def upper_confidence_bound(
    arms: Sequence[BanditArm],
    c: float | None = None,
    rng: np.random.Generator | None = None,
    settings: Settings | None = None,
) -> Recommendation:
    """Select the next variant by UCB1.

    The selection itself is deterministic; ``rng`` only feeds the Monte
    Carlo confidence estimate in the returned recommendation.  ``c``
    defaults to ``settings.UCB_EXPLORATION`` (2.0).
    """
    settings = settings or default_settings
    require_arms(arms)
    rng = rng if rng is not None else np.random.default_rng()
    if c is None:
        c = settings.UCB_EXPLORATION
    logger.debug("Running UCB1 over %d arms (c=%s)", len(arms), c)

    selected = ucb_select(arms, c)
    return build_recommendation(UCB1, arms, selected, rng, settings)
