"""
Exception hierarchy for maxentkit.

Every error raised deliberately by the package derives from MaxentError and
from the closest built-in exception, so callers may catch either.
"""


class MaxentError(Exception):
    """Base class for all maxentkit errors."""


class InvalidInputError(MaxentError, ValueError):
    """Training data is empty or degenerate."""


class ConfigurationError(MaxentError, ValueError):
    """Training parameters failed validation."""


class AlreadyRegisteredError(MaxentError, KeyError):
    """A trainer with the same name is already registered."""


class InvalidTrainerError(MaxentError, TypeError):
    """A trainer type does not implement the event trainer capabilities."""


class UnknownAlgorithmError(MaxentError, KeyError):
    """The configured algorithm name is not registered."""


class CorruptModelError(MaxentError, ValueError):
    """A persisted model could not be decoded."""


class UnimplementedError(MaxentError, NotImplementedError):
    """A declared capability has no executable path."""


class TrainingCancelledError(MaxentError):
    """Training was cancelled before any model could be produced."""
