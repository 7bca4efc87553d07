"""PixelPage package."""

from pixelpage.exceptions import (
    CorruptDocumentError,
    CorruptImageError,
    DecodeError,
    DependencyError,
    EncodeError,
    IncompleteReorderError,
    InvalidGeometryError,
    InvalidParameterError,
    PackageError,
    PasswordRequiredError,
    SettingsError,
    UnsupportedFormatError,
)
from pixelpage.logging import configure_logging, get_logger
from pixelpage.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("pixelpage")

__all__ = [
    "CorruptDocumentError",
    "CorruptImageError",
    "DecodeError",
    "DependencyError",
    "EncodeError",
    "IncompleteReorderError",
    "InvalidGeometryError",
    "InvalidParameterError",
    "PackageError",
    "PasswordRequiredError",
    "Settings",
    "SettingsError",
    "UnsupportedFormatError",
    "__version__",
    "configure_logging",
    "get_logger",
    "logger",
]
