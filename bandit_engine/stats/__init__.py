"""Multi-armed bandit decision engine.

Public API:
- BanditArm: Per-variant counts and Beta posterior
- sample_normal / sample_gamma / sample_beta: Variate generators
- thompson_sampling: Thompson Sampling selector
- upper_confidence_bound: UCB1 selector
- estimate_confidence: Monte Carlo P(current best is truly best)
- should_stop: Stopping rule
- simulate: Offline replay against known conversion rates
- BanditEngine: Orchestrator that ties everything together
"""

from bandit_engine.stats.arms import BanditArm
from bandit_engine.stats.decisions import (
    Recommendation,
    estimate_confidence,
    exploration_rate,
    improvement,
    should_stop,
)
from bandit_engine.stats.engine import BanditEngine
from bandit_engine.stats.policies import (
    thompson_sampling,
    thompson_select,
    ucb_scores,
    upper_confidence_bound,
)
from bandit_engine.stats.simulation import SimulationResult, expected_uniform_regret, simulate
from bandit_engine.stats.variates import sample_beta, sample_gamma, sample_normal, sample_uniform

__all__ = [
    "BanditArm",
    "Recommendation",
    "estimate_confidence",
    "exploration_rate",
    "improvement",
    "should_stop",
    "BanditEngine",
    "thompson_sampling",
    "thompson_select",
    "ucb_scores",
    "upper_confidence_bound",
    "SimulationResult",
    "expected_uniform_regret",
    "simulate",
    "sample_beta",
    "sample_gamma",
    "sample_normal",
    "sample_uniform",
]
