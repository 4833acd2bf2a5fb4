"""Exceptions raised by the deduplication engine."""

__all__ = [
    "ConfigurationError",
    "EmptyInputError",
]


class ConfigurationError(ValueError):
    """Raised when thresholds, strategy or blocker settings are invalid."""

    def __init__(self, message: str, option: str | None = None) -> None:
        """Initialize configuration error.

        Parameters
        ----------
        message : str
            Error message.
        option : str | None, optional
            Name of the offending option.
        """
        super().__init__(message)
        self.option = option


class EmptyInputError(ValueError):
    """Raised when a run is started with zero records."""
