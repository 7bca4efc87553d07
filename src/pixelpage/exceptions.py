"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class DecodeError(PackageError):
    """Raised when an input artifact cannot be decoded."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class UnsupportedFormatError(DecodeError):
    """Raised when the mime type or byte signature is not a supported format."""


@dataclass(frozen=True)
class CorruptImageError(DecodeError):
    """Raised when image bytes of a known format cannot be decoded."""


@dataclass(frozen=True)
class CorruptDocumentError(DecodeError):
    """Raised when document bytes cannot be parsed."""


@dataclass(frozen=True)
class PasswordRequiredError(DecodeError):
    """Raised when a document is encrypted."""

    message: str = "Document is password protected"


@dataclass(frozen=True)
class EncodeError(PackageError):
    """Raised when a pixel buffer or document cannot be serialized."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class InvalidParameterError(PackageError):
    """Raised before any mutation when an operation parameter is out of range."""

    message: str
    field: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Invalid parameter '{self.field}': {self.message}" if self.field else self.message


@dataclass(frozen=True)
class IncompleteReorderError(PackageError):
    """Raised when a page permutation does not cover every page exactly once."""

    expected: int
    received: list[int]

    def __str__(self) -> str:
        """Return error message payload."""
        return (
            f"Reorder must be a permutation of {self.expected} pages, "
            f"got {len(self.received)} indices: {self.received}"
        )


@dataclass(frozen=True)
class InvalidGeometryError(PackageError):
    """Raised when layout dimensions are zero or negative."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class HistoryStoreError(PackageError):
    """Raised when the history file cannot be read or written."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
