"""Exception and warning types raised by TrialForge.

Configuration mistakes (unknown distribution or sequence types, unknown task
labels, missing direction fields) fail immediately. Gaps that have a
well-defined fallback only emit a :class:`DistributionFallbackWarning`.
"""


class TrialForgeError(Exception):
    """Base class for all TrialForge errors."""


class ConfigurationError(TrialForgeError, ValueError):
    """A block or trial configuration is malformed."""


class UnknownDistributionType(ConfigurationError):
    """A distribution spec names a type that is not registered."""


class UnknownSequenceType(ConfigurationError):
    """A block names a task-sequence scheme that is not registered."""


class UnknownTaskError(ConfigurationError):
    """A task label is neither ``'mov'`` nor ``'or'``."""


class MissingRequiredField(ConfigurationError):
    """A field needed to build an active pathway is absent."""


class InvariantViolation(TrialForgeError, AssertionError):
    """A generated parameter record breaks one of its output invariants."""


class DistributionFallbackWarning(UserWarning):
    """A distribution spec lacked params and fell back to its ``value``."""
