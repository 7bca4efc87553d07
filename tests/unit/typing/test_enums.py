from __future__ import annotations

import pytest

from pixelpage.typing.enums import FlipAxis, ImageFormat, PageSize, ToolStatus, WatermarkPosition


def test_flip_axis_from_str() -> None:
    assert FlipAxis.from_str(" Vertical ") == FlipAxis.VERTICAL


def test_from_str_raises_on_invalid_value() -> None:
    with pytest.raises(ValueError, match="Unsupported WatermarkPosition value"):
        WatermarkPosition.from_str("middle")


def test_page_size_round_trips_through_str() -> None:
    assert PageSize.from_str(PageSize.LETTER.to_str()) is PageSize.LETTER


@pytest.mark.parametrize("value", ["jpg", "JPEG", "image/jpeg", " image/jpg "])
def test_image_format_accepts_aliases(value: str) -> None:
    assert ImageFormat.from_str(value) is ImageFormat.JPEG


def test_image_format_metadata() -> None:
    assert ImageFormat.JPEG.mime_type == "image/jpeg"
    assert ImageFormat.JPEG.extension == "jpg"
    assert ImageFormat.WEBP.extension == "webp"
    assert ImageFormat.JPEG.is_lossy
    assert not ImageFormat.PNG.is_lossy


def test_image_format_rejects_unknown_type() -> None:
    with pytest.raises(ValueError, match="Unsupported ImageFormat value"):
        ImageFormat.from_str("image/tiff")


def test_tool_status_values() -> None:
    assert [status.value for status in ToolStatus] == ["idle", "processing", "complete", "failed"]


@pytest.mark.parametrize("value", ["image/x-ms-bmp", "image/x-bmp", "BMP"])
def test_image_format_accepts_legacy_bmp_names(value: str) -> None:
    assert ImageFormat.from_str(value) is ImageFormat.BMP
