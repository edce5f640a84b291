"""Tests for the BanditEngine facade and settings."""

import pytest

from bandit_engine.core.config import Settings
from bandit_engine.core.exceptions import BanditEngineError, InvalidInputError
from bandit_engine.stats.arms import BanditArm
from bandit_engine.stats.engine import BanditEngine


def sample_arms():
    return [
        BanditArm.from_counts("variant-a", "Control", 450, 50),
        BanditArm.from_counts("variant-b", "Variant B", 450, 70),
        BanditArm.from_counts("variant-c", "Variant C", 450, 60),
    ]


@pytest.fixture
def engine(fast_settings):
    return BanditEngine(settings=fast_settings, seed=42)


class TestBanditEngine:
    """Test algorithm dispatch, seeding and simulation through the engine."""

    def test_recommend_thompson(self, engine):
        rec = engine.recommend(sample_arms())
        assert rec.algorithm == "thompson_sampling"
        assert rec.current_best == "variant-b"
        assert rec.improvement == pytest.approx(40.0)

    def test_recommend_ucb(self, engine):
        rec = engine.recommend(sample_arms(), algorithm="ucb1")
        assert rec.algorithm == "ucb1"
        assert rec.selected_variant == "variant-b"

    def test_ucb_uses_configured_exploration(self):
        arms = [BanditArm.from_counts("a", "A", 1000, 120), BanditArm.from_counts("b", "B", 10, 1)]
        greedy = BanditEngine(settings=Settings(CONFIDENCE_TRIALS=500, UCB_EXPLORATION=0.0), seed=1)
        assert greedy.upper_confidence_bound(arms).selected_variant == "a"
        assert greedy.upper_confidence_bound(arms, c=2.0).selected_variant == "b"

    def test_unknown_algorithm(self, engine):
        with pytest.raises(InvalidInputError, match="Unknown algorithm"):
            engine.recommend(sample_arms(), algorithm="epsilon_greedy")

    def test_seeded_engines_agree(self, fast_settings):
        first = BanditEngine(settings=fast_settings, seed=3).thompson_sampling(sample_arms())
        second = BanditEngine(settings=fast_settings, seed=3).thompson_sampling(sample_arms())
        assert first == second

    def test_simulate(self, engine):
        result = engine.simulate([("A", 0.05), ("B", 0.15)], 1000)
        assert result.total_impressions == 1000
        assert result.final_recommendation.algorithm == "thompson_sampling"

    def test_errors_share_base_class(self, engine):
        with pytest.raises(BanditEngineError):
            engine.thompson_sampling([])


class TestSettings:
    """Test defaults and environment overrides."""

    def test_defaults(self):
        settings = Settings()
        assert settings.CONFIDENCE_TRIALS == 10_000
        assert settings.UCB_EXPLORATION == 2.0
        assert settings.MAX_GAMMA_ITERATIONS == 10_000
        assert settings.STOP_CONFIDENCE == 95.0
        assert settings.STOP_HIGH_CONFIDENCE_MIN_TOTAL == 500

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("BANDIT_UCB_EXPLORATION", "0.5")
        monkeypatch.setenv("BANDIT_CONFIDENCE_TRIALS", "2500")
        settings = Settings()
        assert settings.UCB_EXPLORATION == 0.5
        assert settings.CONFIDENCE_TRIALS == 2500
