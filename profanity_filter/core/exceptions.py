# profanity_filter/core/exceptions.py

"""Custom exception hierarchy for the profanity filter.

Dictionary filtering never raises on string input; these types cover
configuration, classifier acquisition, and classifier runtime failures.
"""


class FilterError(Exception):
    """Base exception for all application-specific errors."""

    pass


class ConfigurationError(FilterError):
    """Raised when the lexicon or settings fail to load or validate."""

    pass


class InitializationError(FilterError):
    """Raised when service components fail to initialize."""

    pass


class ModelUnavailable(InitializationError):
    """Raised when the classifier backend cannot be acquired.

    Once raised by an adapter, enhanced filtering stays disabled for that
    adapter's lifetime.
    """

    pass


class ClassificationFailure(FilterError):
    """Raised when a single classification call fails at runtime."""

    pass


class ValidationError(FilterError):
    """Raised when input validation fails (e.g., non-string input)."""

    pass
