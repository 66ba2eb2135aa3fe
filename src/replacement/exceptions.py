"""
Exception hierarchy for property replacement.

Evaluation failures and missing tokens are handled inside the pipeline and
never raised; only configuration problems surface to the caller.
"""


class ReplacementError(Exception):
    """Base class for property replacement errors."""


class ConfigurationError(ReplacementError, ValueError):
    """Raised when a replacement rule or rule file is invalid."""


class InvalidPatternError(ConfigurationError):
    """
    Raised when a regex-mode rule cannot be compiled or applied.

    Attributes:
        pattern: The offending token
    """

    def __init__(self, pattern: str, message: str):
        super().__init__(f"Invalid replacement pattern '{pattern}': {message}")
        self.pattern = pattern
