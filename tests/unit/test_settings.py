from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from pixelpage.exceptions import SettingsError
from pixelpage.settings import Settings, ensure_env_file_exists, get_settings
from pixelpage.typing.enums import ImageFormat

if TYPE_CHECKING:
    from pathlib import Path


def test_settings_load_from_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_payload = (
        f"LOG_LEVEL={'DEBUG'}\n"
        f"LOG_JSON={'false'}\n"
        f"RESULTS_DIR={'out'}\n"
        f"HISTORY_CAP={3}\n"
        f"DEFAULT_IMAGE_QUALITY={0.75}\n"
        f"DEFAULT_IMAGE_FORMAT={'png'}\n"
    )
    env_file.write_text(
        env_payload,
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.results_dir == "out"
    assert settings.history_cap == 3
    assert settings.default_image_quality == 0.75
    assert settings.default_image_format == ImageFormat.PNG


def test_settings_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.history_cap == 10
    assert settings.history_file is None
    assert settings.default_image_quality == 0.9
    assert settings.default_image_format == ImageFormat.JPEG


@pytest.mark.parametrize("quality", ["0", "1.5", "-0.1"])
def test_settings_reject_out_of_range_quality(monkeypatch, quality: str) -> None:
    monkeypatch.setenv("DEFAULT_IMAGE_QUALITY", quality)
    with pytest.raises(ValidationError):
        Settings()


def test_settings_reject_non_positive_history_cap(monkeypatch) -> None:
    monkeypatch.setenv("HISTORY_CAP", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_uses_environment(monkeypatch) -> None:
    get_settings.cache_clear()
    monkeypatch.setenv("RESULTS_DIR", "ci-results")

    settings = get_settings()
    assert settings.results_dir == "ci-results"

    get_settings.cache_clear()


def test_get_settings_retries_after_env_template_on_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    attempts = {"count": 0}

    class _DummySettings:
        results_dir = "ci-results"

    def _fake_settings():
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise ValueError("missing")
        return _DummySettings()

    copied = {"done": 0}

    def _mark_env_copied(**kwargs: object) -> None:
        _ = kwargs
        copied["done"] += 1

    monkeypatch.setattr("pixelpage.settings.Settings", _fake_settings)
    monkeypatch.setattr("pixelpage.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("pixelpage.settings.ensure_env_file_exists", _mark_env_copied)

    settings = get_settings()
    assert copied["done"] == 1
    assert attempts["count"] == 2
    assert settings.results_dir == "ci-results"

    get_settings.cache_clear()


def test_get_settings_wraps_retry_error_on_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    def _fake_settings():
        raise ValueError("missing")

    monkeypatch.setattr("pixelpage.settings.Settings", _fake_settings)
    monkeypatch.setattr("pixelpage.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("pixelpage.settings.ensure_env_file_exists", lambda **kwargs: None)

    with pytest.raises(SettingsError, match="missing"):
        get_settings()

    get_settings.cache_clear()


def test_get_settings_does_not_copy_env_on_non_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    def _raise_runtime_error():
        raise RuntimeError("boom")

    def _raise_assertion_error(**kwargs: object) -> None:
        _ = kwargs
        raise AssertionError("should not copy env")

    monkeypatch.setattr("pixelpage.settings.Settings", _raise_runtime_error)
    monkeypatch.setattr("pixelpage.settings._is_missing_settings_error", lambda exc: False)
    monkeypatch.setattr("pixelpage.settings.ensure_env_file_exists", _raise_assertion_error)

    with pytest.raises(SettingsError):
        get_settings()

    get_settings.cache_clear()


def test_ensure_env_file_exists_copies_template(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("RESULTS_DIR=exports\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.exists()
    assert "RESULTS_DIR" in env_file.read_text(encoding="utf-8")


def test_ensure_env_file_exists_keeps_existing_env(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("RESULTS_DIR=exports\n", encoding="utf-8")
    env_file.write_text("RESULTS_DIR=mine\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.read_text(encoding="utf-8") == "RESULTS_DIR=mine\n"


def test_settings_expose_only_consumed_fields() -> None:
    assert set(Settings.model_fields) == {
        "log_level",
        "log_json",
        "log_file",
        "results_dir",
        "history_file",
        "history_cap",
        "default_image_quality",
        "default_image_format",
    }
