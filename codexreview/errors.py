"""Exception types shared by the codexreview entry points."""


class ConfigurationError(ValueError):
    """Raised when configuration is invalid or missing."""
    pass


class ResultsNotFoundError(FileNotFoundError):
    """Raised when no local review results are available to publish."""
    pass
