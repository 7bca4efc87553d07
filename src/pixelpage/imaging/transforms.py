"""Pixel transform engine.

Every transform is a pure function of a `PixelBuffer` and one validated
parameter model. Parameters are validated before any pixel is touched, so a
failed call never leaves a partially mutated buffer behind. Same-size
transforms mutate the buffer in place and return it; transforms that change
the output size (rotate, crop, resize) return a new buffer.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from pixelpage.exceptions import InvalidParameterError
from pixelpage.imaging.watermark import apply_watermark
from pixelpage.logging import get_logger
from pixelpage.typing.enums import FlipAxis
from pixelpage.typing.models import (
    CHANNELS_PER_PIXEL,
    BlurParams,
    BrightnessContrastParams,
    CropParams,
    FlipParams,
    GrayscaleParams,
    PixelBuffer,
    ResizeParams,
    RotateParams,
    TransformParameters,
    WatermarkParams,
)

logger = get_logger(__name__)

_TRANSFORM_ADAPTER: TypeAdapter[TransformParameters] = TypeAdapter(TransformParameters)

LUMA_RED = 0.299
LUMA_GREEN = 0.587
LUMA_BLUE = 0.114


def _round_clamp(value: float) -> int:
    """Round half up and clamp into the 0..255 channel range."""
    if value <= 0:
        return 0
    if value >= 255:  # noqa: PLR2004
        return 255
    return int(value + 0.5)


def parse_transform(payload: TransformParameters | Mapping[str, Any]) -> TransformParameters:
    """Validate transform parameters from a model or a raw mapping.

    Models are re-validated as well, so instances built with
    `model_construct` cannot bypass the range checks.

    Args:
        payload: Parameter model or mapping with a `kind` discriminator.

    Raises:
        InvalidParameterError: If any field is missing or out of range.

    Returns:
        TransformParameters: Validated parameter model.
    """
    raw = payload.model_dump() if isinstance(payload, BaseModel) else dict(payload)
    try:
        return _TRANSFORM_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise InvalidParameterError(message=first.get("msg", "invalid value"), field=location or None) from exc


def grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """Replace RGB with BT.601 luma; alpha is untouched."""
    data = buffer.channels
    for idx in range(0, len(data), CHANNELS_PER_PIXEL):
        luma = _round_clamp(LUMA_RED * data[idx] + LUMA_GREEN * data[idx + 1] + LUMA_BLUE * data[idx + 2])
        data[idx] = luma
        data[idx + 1] = luma
        data[idx + 2] = luma
    return buffer


def contrast_factor(contrast: int) -> float:
    """Return the contrast stretch factor for `contrast` in [-255, 255]."""
    return (259 * (contrast + 255)) / (255 * (259 - contrast))


def brightness_contrast(buffer: PixelBuffer, params: BrightnessContrastParams) -> PixelBuffer:
    """Add brightness then stretch contrast around 128 on R, G and B."""
    factor = contrast_factor(params.contrast)
    lookup = bytes(
        _round_clamp(factor * (_round_clamp(value + params.brightness) - 128) + 128) for value in range(256)
    )
    data = buffer.channels
    for idx in range(0, len(data), CHANNELS_PER_PIXEL):
        data[idx] = lookup[data[idx]]
        data[idx + 1] = lookup[data[idx + 1]]
        data[idx + 2] = lookup[data[idx + 2]]
    return buffer


def _box_pass(
    source: bytearray | bytes,
    target: bytearray,
    *,
    lines: int,
    length: int,
    line_stride: int,
    step: int,
    radius: int,
) -> None:
    """Run a 1D box filter over every line of an RGBA raster.

    Taps falling outside a line reuse the nearest edge sample.

    Args:
        source: Input channels.
        target: Output channels (same size as `source`).
        lines: Number of independent lines (rows or columns).
        length: Samples per line.
        line_stride: Byte distance between the first samples of two lines.
        step: Byte distance between two neighbouring samples of a line.
        radius: Box radius; the kernel spans `2 * radius + 1` taps.
    """
    kernel_size = 2 * radius + 1
    last = length - 1
    for line in range(lines):
        base = line * line_stride
        for channel in range(CHANNELS_PER_PIXEL):
            origin = base + channel
            samples = [source[origin + pos * step] for pos in range(length)]
            window = sum(samples[min(max(tap, 0), last)] for tap in range(-radius, radius + 1))
            for pos in range(length):
                target[origin + pos * step] = (2 * window + kernel_size) // (2 * kernel_size)
                window += samples[min(pos + radius + 1, last)] - samples[max(pos - radius, 0)]


def box_blur(buffer: PixelBuffer, params: BlurParams) -> PixelBuffer:
    """Separable box blur with replicate-border taps on all four channels."""
    width, height = buffer.size
    row_stride = width * CHANNELS_PER_PIXEL
    original = bytes(buffer.channels)
    temp = bytearray(len(original))

    _box_pass(
        original,
        temp,
        lines=height,
        length=width,
        line_stride=row_stride,
        step=CHANNELS_PER_PIXEL,
        radius=params.radius,
    )
    _box_pass(
        temp,
        buffer.channels,
        lines=width,
        length=height,
        line_stride=CHANNELS_PER_PIXEL,
        step=row_stride,
        radius=params.radius,
    )
    return buffer


def flip(buffer: PixelBuffer, params: FlipParams) -> PixelBuffer:
    """Mirror columns, rows, or both by index remapping."""
    width, height = buffer.size
    row_stride = width * CHANNELS_PER_PIXEL
    source = bytes(buffer.channels)
    mirror_x = params.axis in {FlipAxis.HORIZONTAL, FlipAxis.BOTH}
    mirror_y = params.axis in {FlipAxis.VERTICAL, FlipAxis.BOTH}

    for y in range(height):
        src_y = height - 1 - y if mirror_y else y
        row = source[src_y * row_stride : (src_y + 1) * row_stride]
        if mirror_x:
            row = b"".join(
                row[x * CHANNELS_PER_PIXEL : (x + 1) * CHANNELS_PER_PIXEL] for x in range(width - 1, -1, -1)
            )
        buffer.channels[y * row_stride : (y + 1) * row_stride] = row
    return buffer


def _rotation_terms(degrees: float) -> tuple[float, float]:
    """Return `(cos, sin)`, exact for multiples of 90 degrees."""
    if math.isclose(degrees % 90, 0.0, abs_tol=1e-12) or math.isclose(degrees % 90, 90.0, abs_tol=1e-12):
        quarter = round(degrees / 90) % 4
        return ((1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0))[quarter]
    radians = math.radians(degrees)
    return math.cos(radians), math.sin(radians)


def rotated_size(width: int, height: int, degrees: float) -> tuple[int, int]:
    """Return the bounding-box size of a `width x height` rectangle rotated by `degrees`."""
    cos, sin = _rotation_terms(degrees)
    new_width = abs(width * cos) + abs(height * sin)
    new_height = abs(width * sin) + abs(height * cos)
    return max(1, math.floor(new_width + 0.5)), max(1, math.floor(new_height + 0.5))


def rotate(buffer: PixelBuffer, params: RotateParams) -> PixelBuffer:
    """Rotate clockwise about the image center onto a bounding-box canvas.

    Destination pixel centers are mapped back into the source; samples that
    land outside the source stay fully transparent.
    """
    width, height = buffer.size
    cos, sin = _rotation_terms(params.degrees)
    new_width, new_height = rotated_size(width, height, params.degrees)
    output = PixelBuffer.blank(new_width, new_height)

    source = buffer.channels
    target = output.channels
    half_src_w, half_src_h = width / 2, height / 2
    half_dst_w, half_dst_h = new_width / 2, new_height / 2

    for dst_y in range(new_height):
        rel_y = dst_y + 0.5 - half_dst_h
        for dst_x in range(new_width):
            rel_x = dst_x + 0.5 - half_dst_w
            src_x = math.floor(cos * rel_x + sin * rel_y + half_src_w)
            src_y = math.floor(-sin * rel_x + cos * rel_y + half_src_h)
            if 0 <= src_x < width and 0 <= src_y < height:
                src_idx = (src_y * width + src_x) * CHANNELS_PER_PIXEL
                dst_idx = (dst_y * new_width + dst_x) * CHANNELS_PER_PIXEL
                target[dst_idx : dst_idx + CHANNELS_PER_PIXEL] = source[src_idx : src_idx + CHANNELS_PER_PIXEL]
    return output


def crop(buffer: PixelBuffer, params: CropParams) -> PixelBuffer:
    """Cut out a rectangle that lies fully inside the buffer."""
    width, height = buffer.size
    if params.x + params.width > width or params.y + params.height > height:
        raise InvalidParameterError(
            message=(
                f"crop {params.width}x{params.height}+{params.x}+{params.y} "
                f"exceeds image bounds {width}x{height}"
            ),
            field="crop",
        )
    row_stride = width * CHANNELS_PER_PIXEL
    out = bytearray()
    for y in range(params.y, params.y + params.height):
        start = y * row_stride + params.x * CHANNELS_PER_PIXEL
        out.extend(buffer.channels[start : start + params.width * CHANNELS_PER_PIXEL])
    return PixelBuffer(width=params.width, height=params.height, channels=out)


def resize(buffer: PixelBuffer, params: ResizeParams) -> PixelBuffer:
    """Nearest-neighbour resample to the requested size."""
    width, height = buffer.size
    new_width, new_height = params.target_size(width, height)
    source_columns = [min(width - 1, int((x + 0.5) * width / new_width)) for x in range(new_width)]
    out = bytearray()
    for y in range(new_height):
        src_y = min(height - 1, int((y + 0.5) * height / new_height))
        row_base = src_y * width
        for src_x in source_columns:
            idx = (row_base + src_x) * CHANNELS_PER_PIXEL
            out.extend(buffer.channels[idx : idx + CHANNELS_PER_PIXEL])
    return PixelBuffer(width=new_width, height=new_height, channels=out)


_HANDLERS: dict[type[BaseModel], Callable[[PixelBuffer, Any], PixelBuffer]] = {
    GrayscaleParams: lambda buffer, _params: grayscale(buffer),
    BrightnessContrastParams: brightness_contrast,
    BlurParams: box_blur,
    FlipParams: flip,
    RotateParams: rotate,
    WatermarkParams: apply_watermark,
    CropParams: crop,
    ResizeParams: resize,
}


def apply(buffer: PixelBuffer, params: TransformParameters | Mapping[str, Any]) -> PixelBuffer:
    """Apply one transform to a pixel buffer.

    Args:
        buffer: Decoded pixels.
        params: Transform parameters (model or mapping with `kind`).

    Raises:
        InvalidParameterError: If parameters are out of range; the buffer is untouched.

    Returns:
        PixelBuffer: The mutated input buffer, or a new buffer when the size changes.
    """
    validated = parse_transform(params)
    handler = _HANDLERS[type(validated)]
    result = handler(buffer, validated)
    logger.info(
        "Transform applied",
        extra={
            "kind": validated.kind,
            "input_size": list(buffer.size),
            "output_size": list(result.size),
        },
    )
    return result
