"""Text watermark compositing."""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw, ImageFont

from pixelpage.typing.enums import WatermarkPosition
from pixelpage.typing.models import CHANNELS_PER_PIXEL

if TYPE_CHECKING:
    from pixelpage.typing.models import PixelBuffer, WatermarkParams

EDGE_INSET_PX = 20
# Average advance of a proportional sans-serif glyph relative to the font size.
GLYPH_WIDTH_RATIO = 0.6


def measure_text(text: str, font_size_px: int) -> tuple[int, int]:
    """Return `(width, height)` of `text` under the fixed-width measurement model."""
    return round(len(text) * font_size_px * GLYPH_WIDTH_RATIO), font_size_px


def text_origin(
    position: WatermarkPosition,
    *,
    canvas_size: tuple[int, int],
    text_size: tuple[int, int],
) -> tuple[float, float]:
    """Return the top-left corner of the text box for an anchor position.

    Every edge uses the same inset.
    """
    canvas_width, canvas_height = canvas_size
    text_width, text_height = text_size
    right = canvas_width - text_width - EDGE_INSET_PX
    bottom = canvas_height - text_height - EDGE_INSET_PX
    origins = {
        WatermarkPosition.TOP_LEFT: (EDGE_INSET_PX, EDGE_INSET_PX),
        WatermarkPosition.TOP_RIGHT: (right, EDGE_INSET_PX),
        WatermarkPosition.BOTTOM_LEFT: (EDGE_INSET_PX, bottom),
        WatermarkPosition.BOTTOM_RIGHT: (right, bottom),
        WatermarkPosition.CENTER: ((canvas_width - text_width) / 2, (canvas_height - text_height) / 2),
    }
    return origins[position]


@lru_cache(maxsize=32)
def _load_font(font_size_px: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    return ImageFont.load_default(size=font_size_px)


def render_text_mask(params: WatermarkParams, canvas_size: tuple[int, int]) -> Image.Image:
    """Rasterize the watermark text into an 8-bit coverage mask of the canvas size."""
    text_size = measure_text(params.text, params.font_size_px)
    origin = text_origin(params.position, canvas_size=canvas_size, text_size=text_size)
    mask = Image.new("L", canvas_size, 0)
    draw = ImageDraw.Draw(mask)
    draw.text(origin, params.text, fill=255, font=_load_font(params.font_size_px))
    return mask


def apply_watermark(buffer: PixelBuffer, params: WatermarkParams) -> PixelBuffer:
    """Blend the watermark text over the buffer.

    Each covered pixel becomes `a * color + (1 - a) * existing` with
    `a = opacity * coverage / 255`. Alpha is left as it was.
    """
    mask = render_text_mask(params, buffer.size).tobytes()
    red, green, blue = params.color
    data = buffer.channels
    for pixel, coverage in enumerate(mask):
        if not coverage:
            continue
        alpha = params.opacity * coverage / 255
        if alpha <= 0:
            continue
        keep = 1.0 - alpha
        idx = pixel * CHANNELS_PER_PIXEL
        data[idx] = int(alpha * red + keep * data[idx] + 0.5)
        data[idx + 1] = int(alpha * green + keep * data[idx + 1] + 0.5)
        data[idx + 2] = int(alpha * blue + keep * data[idx + 2] + 0.5)
    return buffer
