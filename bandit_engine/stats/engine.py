"""BanditEngine: one entry point bundling settings, randomness and policies.

Callers that do not want to thread a generator and settings through every
call hold one engine per experiment worker.  A ``numpy.random.Generator``
is not thread-safe, so an engine must not be shared between threads.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from bandit_engine.core.config import Settings, settings as default_settings
from bandit_engine.core.exceptions import InvalidInputError
from bandit_engine.stats.arms import BanditArm
from bandit_engine.stats.decisions import Recommendation
from bandit_engine.stats.policies import (
    THOMPSON_SAMPLING,
    UCB1,
    thompson_sampling,
    upper_confidence_bound,
)
from bandit_engine.stats.simulation import SimulationResult, simulate


class BanditEngine:
    """Orchestrates the selection policies and the simulation harness.

    Parameters
    ----------
    settings : Settings | None
        Engine settings.  Defaults to the module-level settings.
    seed : int | None
        Seed for the engine's generator.  ``None`` draws fresh entropy.
    """

    ALGORITHMS = (THOMPSON_SAMPLING, UCB1)

    def __init__(self, settings: Settings | None = None, seed: int | None = None) -> None:
        self.settings = settings or default_settings
        self.rng = np.random.default_rng(seed)

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    def thompson_sampling(self, arms: Sequence[BanditArm]) -> Recommendation:
        return thompson_sampling(arms, self.rng, self.settings)

    def upper_confidence_bound(
        self,
        arms: Sequence[BanditArm],
        c: float | None = None,
    ) -> Recommendation:
        return upper_confidence_bound(arms, c, self.rng, self.settings)

    def recommend(
        self,
        arms: Sequence[BanditArm],
        algorithm: str = THOMPSON_SAMPLING,
    ) -> Recommendation:
        """Run the named policy.

        Parameters
        ----------
        arms : Sequence[BanditArm]
            Current arm statistics.
        algorithm : str
            ``"thompson_sampling"`` or ``"ucb1"``.

        Returns
        -------
        Recommendation
        """
        if algorithm == THOMPSON_SAMPLING:
            return self.thompson_sampling(arms)
        if algorithm == UCB1:
            return self.upper_confidence_bound(arms)
        raise InvalidInputError(
            f"Unknown algorithm {algorithm!r}; expected one of {', '.join(self.ALGORITHMS)}"
        )

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def simulate(
        self,
        variants: Sequence[tuple[str, float]],
        total_impressions: int,
    ) -> SimulationResult:
        return simulate(variants, total_impressions, self.rng, self.settings)
