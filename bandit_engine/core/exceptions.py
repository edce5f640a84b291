"""Exceptions raised by the bandit engine.

Every failure is raised synchronously to the immediate caller.  Nothing is
retried and nothing falls back to a default value.
"""


class BanditEngineError(Exception):
    """Base class for all bandit engine errors."""


class InvalidInputError(BanditEngineError, ValueError):
    """Raised for empty arm lists, inconsistent counts or bad parameters."""


class NumericDegeneracyError(BanditEngineError, ArithmeticError):
    """Raised when a ratio or logarithm would be undefined."""


class SamplerNonTerminationError(BanditEngineError, RuntimeError):
    """Raised when the gamma rejection loop exceeds its safety cap."""
