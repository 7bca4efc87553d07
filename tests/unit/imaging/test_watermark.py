from __future__ import annotations

import pytest
from pydantic import ValidationError

from pixelpage.imaging import transforms
from pixelpage.imaging.watermark import EDGE_INSET_PX, measure_text, text_origin
from pixelpage.typing.enums import WatermarkPosition
from pixelpage.typing.models import PixelBuffer, WatermarkParams

WHITE = (255, 255, 255, 255)


def test_measure_text_uses_fixed_width_model() -> None:
    assert measure_text("Hi", 24) == (29, 24)
    assert measure_text("WATERMARK", 10) == (54, 10)


@pytest.mark.parametrize(
    ("position", "expected"),
    [
        (WatermarkPosition.TOP_LEFT, (EDGE_INSET_PX, EDGE_INSET_PX)),
        (WatermarkPosition.TOP_RIGHT, (150, EDGE_INSET_PX)),
        (WatermarkPosition.BOTTOM_LEFT, (EDGE_INSET_PX, 56)),
        (WatermarkPosition.BOTTOM_RIGHT, (150, 56)),
        (WatermarkPosition.CENTER, (85.0, 38.0)),
    ],
)
def test_text_origin_uses_uniform_inset(position: WatermarkPosition, expected: tuple[float, float]) -> None:
    assert text_origin(position, canvas_size=(200, 100), text_size=(30, 24)) == expected


def test_watermark_darkens_text_area_only() -> None:
    buffer = PixelBuffer.blank(200, 100, fill=WHITE)
    params = WatermarkParams(
        text="Hi",
        font_size_px=24,
        opacity=1.0,
        color="#000000",
        position=WatermarkPosition.TOP_LEFT,
    )

    transforms.apply(buffer, params)

    text_area = [buffer.get_pixel(x, y) for y in range(15, 50) for x in range(15, 55)]
    assert any(pixel[0] < 255 for pixel in text_area)
    assert buffer.get_pixel(199, 99) == WHITE
    assert buffer.get_pixel(150, 80) == WHITE


def test_watermark_preserves_alpha() -> None:
    buffer = PixelBuffer.blank(120, 60, fill=(255, 255, 255, 90))

    transforms.apply(buffer, WatermarkParams(text="AB", font_size_px=20, opacity=0.8, position="center"))

    assert {buffer.channels[idx] for idx in range(3, len(buffer.channels), 4)} == {90}


def test_zero_opacity_leaves_pixels_untouched() -> None:
    buffer = PixelBuffer.blank(120, 60, fill=(10, 20, 30, 255))
    original = buffer.copy()

    transforms.apply(buffer, WatermarkParams(text="AB", font_size_px=20, opacity=0.0))

    assert buffer == original


def test_half_opacity_blends_towards_color() -> None:
    buffer = PixelBuffer.blank(120, 60, fill=WHITE)

    transforms.apply(
        buffer,
        WatermarkParams(text="MMMM", font_size_px=30, opacity=0.5, color=(0, 0, 0), position="center"),
    )

    reds = {buffer.channels[idx] for idx in range(0, len(buffer.channels), 4)}
    assert min(reds) >= 127
    assert min(reds) < 255


def test_hex_color_is_parsed() -> None:
    assert WatermarkParams(color="#ff8000").color == (255, 128, 0)


def test_invalid_hex_color_is_rejected() -> None:
    with pytest.raises(ValidationError, match="rrggbb"):
        WatermarkParams(color="red")
