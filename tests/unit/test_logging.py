from __future__ import annotations

import json

from pixelpage import logger as package_logger
from pixelpage.logging import _flatten_extra, _rename_event_key, configure_logging, get_logger
from pixelpage.settings import Settings


def test_stdlib_logger_is_configured(capsys) -> None:
    configure_logging(settings=Settings(log_json=False, log_level="INFO"), force=True)
    logger = get_logger("tests")
    logger.info("hello")

    captured = capsys.readouterr()
    assert "hello" in captured.err.lower()


def test_json_logger_merges_extra_context(capsys) -> None:
    configure_logging(settings=Settings(log_json=True, log_level="INFO"), force=True)
    logger = get_logger("tests.json")
    logger.info("Pages extracted", extra={"pages": 3})

    line = capsys.readouterr().err.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "Pages extracted"
    assert payload["pages"] == 3
    assert payload["level"] == "info"


def test_processors_rename_event_and_flatten_extra() -> None:
    event = {"event": "done", "extra": {"tool": "image-blur"}, "tool": "kept"}

    event = _flatten_extra(None, "info", event)  # type: ignore[arg-type]
    event = _rename_event_key(None, "info", event)  # type: ignore[arg-type]

    assert event == {"message": "done", "tool": "kept"}


def test_package_logger_created_on_import() -> None:
    assert callable(getattr(package_logger, "info", None))
