"""
Exception hierarchy for opencode-sync.

All project exceptions inherit from OpenCodeSyncError so the CLI can catch
them at a single boundary. Validation errors also derive from ValueError,
matching how the readers signal bad input.

Hierarchy:
    OpenCodeSyncError
    ├── ImportFormatError
    │   ├── UnsupportedFormatError
    │   └── ImportValidationError
    └── PathConfigurationError
"""


class OpenCodeSyncError(Exception):
    """Base class for all opencode-sync errors."""


class ImportFormatError(OpenCodeSyncError, ValueError):
    """Raised when an import format cannot be detected or used."""


class UnsupportedFormatError(ImportFormatError):
    """Raised when a format name is not registered."""

    def __init__(self, format_name: str, available=None):
        self.format_name = format_name
        self.available = list(available or [])
        message = f"Unsupported format: {format_name}"
        if self.available:
            message += f". Available formats: {', '.join(self.available)}"
        super().__init__(message)


class ImportValidationError(ImportFormatError):
    """Raised when a source path does not pass a strategy's format check."""

    def __init__(self, source_path, format_name: str):
        self.source_path = str(source_path)
        self.format_name = format_name
        super().__init__(
            f"Cannot import from {self.source_path} - format validation failed"
        )


class PathConfigurationError(OpenCodeSyncError, ValueError):
    """Raised when storage or sync paths cannot be resolved."""
