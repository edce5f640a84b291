"""Random variate generators for the bandit engine.

Uniform -> Normal -> Gamma -> Beta.  Every function takes the source of
uniform draws as an explicit ``numpy.random.Generator`` so callers can seed
it for reproducible runs.  Only ``Generator.random()`` is used; the
transforms to the other distributions are implemented here.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from bandit_engine.core.config import settings
from bandit_engine.core.exceptions import (
    InvalidInputError,
    NumericDegeneracyError,
    SamplerNonTerminationError,
)

logger = logging.getLogger(__name__)


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"{name} must be positive and finite, got {value!r}")


def sample_uniform(rng: np.random.Generator) -> float:
    """Uniform draw on (0, 1].

    ``Generator.random()`` covers [0, 1); flipping it keeps ``log(u)``
    defined for every draw.
    """
    return 1.0 - float(rng.random())


def sample_normal(rng: np.random.Generator, mean: float, std_dev: float) -> float:
    """Box-Muller transform.

    Parameters
    ----------
    rng : np.random.Generator
        Source of uniform draws.
    mean : float
        Mean of the normal distribution.
    std_dev : float
        Standard deviation, must be non-negative.

    Returns
    -------
    float
        One draw from Normal(mean, std_dev^2).
    """
    if not math.isfinite(mean):
        raise InvalidInputError(f"mean must be finite, got {mean!r}")
    if not math.isfinite(std_dev) or std_dev < 0:
        raise InvalidInputError(f"std_dev must be non-negative and finite, got {std_dev!r}")

    u1 = sample_uniform(rng)
    u2 = float(rng.random())
    z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return mean + std_dev * z0


def sample_gamma(
    rng: np.random.Generator,
    shape: float,
    scale: float = 1.0,
    max_iterations: int | None = None,
) -> float:
    """Marsaglia-Tsang gamma sampler.

    For ``shape < 1`` a Gamma(shape + 1) draw is boosted by
    ``u ** (1 / shape)``.  Otherwise::

        d = shape - 1/3,  c = 1 / sqrt(9d)
        x ~ N(0, 1),  v = (1 + c*x)^3,  u ~ U(0, 1)
        accept d*v if u < 1 - 0.0331*x^4
                  or log(u) < x^2/2 + d*(1 - v + log(v))

    Parameters
    ----------
    rng : np.random.Generator
        Source of uniform draws.
    shape : float
        Shape parameter k > 0.
    scale : float
        Scale parameter theta > 0.
    max_iterations : int | None
        Safety cap on rejection attempts.  Defaults to
        ``settings.MAX_GAMMA_ITERATIONS``.

    Returns
    -------
    float
        One draw from Gamma(shape, scale).

    Raises
    ------
    SamplerNonTerminationError
        If no candidate is accepted within ``max_iterations`` attempts.
    """
    _require_positive("shape", shape)
    _require_positive("scale", scale)
    if max_iterations is None:
        max_iterations = settings.MAX_GAMMA_ITERATIONS

    if shape < 1:
        boost = sample_uniform(rng) ** (1.0 / shape)
        return sample_gamma(rng, shape + 1.0, scale, max_iterations) * boost

    d = shape - 1.0 / 3.0
    c = 1.0 / math.sqrt(9.0 * d)

    for _ in range(max_iterations):
        x = sample_normal(rng, 0.0, 1.0)
        v = (1.0 + c * x) ** 3
        if v <= 0:
            continue
        u = sample_uniform(rng)
        if u < 1.0 - 0.0331 * x ** 4 or math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
            return d * v * scale

    logger.error(
        "Gamma sampler rejected %d candidates in a row (shape=%r, scale=%r)",
        max_iterations,
        shape,
        scale,
    )
    raise SamplerNonTerminationError(
        f"Gamma sampler did not accept a draw within {max_iterations} attempts "
        f"(shape={shape!r}, scale={scale!r})"
    )


def _log_gamma_draw(
    rng: np.random.Generator,
    shape: float,
    max_iterations: int | None,
) -> float:
    """log of one Gamma(shape, 1) draw.

    Small shapes are boosted in log space, log G(shape + 1) + log(u) / shape,
    so the result stays finite where ``u ** (1 / shape)`` underflows.
    """
    if shape < 1:
        return _log_gamma_draw(rng, shape + 1.0, max_iterations) + math.log(sample_uniform(rng)) / shape
    draw = sample_gamma(rng, shape, 1.0, max_iterations)
    if draw <= 0:
        raise NumericDegeneracyError(f"Gamma({shape!r}) draw is not positive: {draw!r}")
    return math.log(draw)


def sample_beta(
    rng: np.random.Generator,
    alpha: float,
    beta: float,
    normal_threshold: float | None = None,
    max_iterations: int | None = None,
) -> float:
    """Draw from Beta(alpha, beta).

    When both parameters exceed ``normal_threshold`` the Beta is close to
    normal and is approximated by N(mean, variance) clamped to [0, 1].
    Otherwise the exact ratio-of-gammas construction is used::

        X ~ Gamma(alpha), Y ~ Gamma(beta)  =>  X / (X + Y) ~ Beta(alpha, beta)

    The gamma draws are carried as logarithms so shapes near zero do not
    underflow to 0 / 0.

    Parameters
    ----------
    rng : np.random.Generator
        Source of uniform draws.
    alpha, beta : float
        Positive shape parameters.
    normal_threshold : float | None
        Defaults to ``settings.NORMAL_APPROX_THRESHOLD``.
    max_iterations : int | None
        Gamma sampler safety cap, see ``sample_gamma``.

    Returns
    -------
    float
        A sample in [0, 1].
    """
    _require_positive("alpha", alpha)
    _require_positive("beta", beta)
    if normal_threshold is None:
        normal_threshold = settings.NORMAL_APPROX_THRESHOLD

    if alpha > normal_threshold and beta > normal_threshold:
        ab = alpha + beta
        mean = alpha / ab
        variance = (alpha * beta) / (ab * ab * (ab + 1.0))
        draw = sample_normal(rng, mean, math.sqrt(variance))
        return min(max(draw, 0.0), 1.0)

    # X / (X + Y) = 1 / (1 + exp(log Y - log X)), evaluated without overflow.
    log_alpha = _log_gamma_draw(rng, alpha, max_iterations)
    log_beta = _log_gamma_draw(rng, beta, max_iterations)
    diff = log_beta - log_alpha
    if diff >= 0:
        tail = math.exp(-diff)
        return tail / (1.0 + tail)
    return 1.0 / (1.0 + math.exp(diff))
