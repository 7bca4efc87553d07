"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pixelpage.exceptions import SettingsError
from pixelpage.typing.enums import ImageFormat

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Package settings.

    Only the command-line shell and the ambient stack read these values.
    Core transforms always receive explicit parameters.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    results_dir: str = Field(
        default="results",
        validation_alias="RESULTS_DIR",
        description="Directory where produced artifacts are written.",
    )
    history_file: str | None = Field(
        default=None,
        validation_alias="HISTORY_FILE",
        description="JSON file backing the recent-items history. In-memory when unset.",
    )
    history_cap: int = Field(
        default=10,
        ge=1,
        validation_alias="HISTORY_CAP",
        description="Maximum number of history entries kept per tool.",
    )
    default_image_quality: float = Field(
        default=0.9,
        gt=0.0,
        le=1.0,
        validation_alias="DEFAULT_IMAGE_QUALITY",
        description="Encoder quality for lossy formats, in (0, 1].",
    )
    default_image_format: ImageFormat = Field(
        default=ImageFormat.JPEG,
        validation_alias="DEFAULT_IMAGE_FORMAT",
        description="Output format for image filters when none is requested.",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            ensure_env_file_exists()
            try:
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
