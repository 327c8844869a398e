"""Exception classes for tickmeter."""


class TickmeterError(Exception):
    """Base exception for tickmeter."""

    error_prefix: str = "Progress error"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the setting or argument at fault.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class ProgressConfigError(TickmeterError, ValueError):
    """Raised when a progress state is constructed with invalid options."""

    error_prefix = "Invalid progress configuration"


class GlyphSpecError(ProgressConfigError):
    """Raised when a bar glyph specification is malformed."""

    error_prefix = "Invalid glyph specification"


class SettingsError(TickmeterError):
    """Raised when the settings file holds values that cannot be parsed."""

    error_prefix = "Invalid settings"
