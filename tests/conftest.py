"""Shared fixtures and marker auto-assignment by folder."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import pytest

from pixelpage import logger
from pixelpage.typing.models import InputArtifact, PixelBuffer


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = (Path(config.rootpath) / "tests" / marker).resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker")
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Build an in-memory PDF whose pages are told apart by their widths."""
    import fitz  # noqa: PLC0415

    def _make(widths: list[int], *, height: int = 500, **save_kwargs: object) -> bytes:
        doc = fitz.open()
        for width in widths:
            doc.new_page(width=width, height=height)
        data = doc.tobytes(**save_kwargs)
        doc.close()
        return data

    return _make


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Encode a solid-color image with Pillow."""
    from PIL import Image  # noqa: PLC0415

    def _make(
        size: tuple[int, int] = (8, 6),
        color: tuple[int, int, int, int] = (200, 100, 50, 255),
        image_format: str = "PNG",
    ) -> bytes:
        mode = "RGB" if image_format == "JPEG" else "RGBA"
        image = Image.new(mode, size, color[:3] if mode == "RGB" else color)
        output = io.BytesIO()
        image.save(output, format=image_format)
        return output.getvalue()

    return _make


@pytest.fixture
def pdf_artifact(make_pdf: Callable[..., bytes]) -> Callable[..., InputArtifact]:
    """Wrap `make_pdf` output as an uploaded artifact."""

    def _make(widths: list[int], filename: str = "doc.pdf") -> InputArtifact:
        return InputArtifact(data=make_pdf(widths), mime_type="application/pdf", filename=filename)

    return _make


@pytest.fixture
def checkerboard() -> PixelBuffer:
    """2x2 buffer with four distinct opaque pixels: A B / C D."""
    return PixelBuffer.from_rows(
        [
            [(10, 0, 0, 255), (20, 0, 0, 255)],
            [(30, 0, 0, 255), (40, 0, 0, 255)],
        ],
    )
