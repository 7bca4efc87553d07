from __future__ import annotations

import sys
from subprocess import run as subprocess_run  # noqa: S404

import pytest


def test_cli_help() -> None:
    result = subprocess_run(  # noqa: S603
        [sys.executable, "-m", "pixelpage.cli", "--help"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert result.returncode == 0
    assert "usage" in result.stdout.lower()


@pytest.mark.parametrize("group", ["image", "pdf"])
def test_cli_group_help(group: str) -> None:
    result = subprocess_run(  # noqa: S603
        [sys.executable, "-m", "pixelpage.cli", group, "--help"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert result.returncode == 0
    assert group in result.stdout.lower()
