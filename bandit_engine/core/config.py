from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Monte Carlo
    CONFIDENCE_TRIALS: int = 10_000

    # Selection policies
    UCB_EXPLORATION: float = 2.0

    # Variate generation
    NORMAL_APPROX_THRESHOLD: float = 100.0
    MAX_GAMMA_ITERATIONS: int = 10_000

    # Stopping rule
    STOP_CONFIDENCE: float = 95.0
    STOP_MIN_ARM_IMPRESSIONS: int = 100
    STOP_MIN_TOTAL_IMPRESSIONS: int = 1000
    STOP_HIGH_CONFIDENCE: float = 99.0
    STOP_HIGH_CONFIDENCE_MIN_TOTAL: int = 500

    model_config = {"env_prefix": "BANDIT_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
