"""Pixel buffer decoder/encoder backed by Pillow."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from pixelpage.exceptions import CorruptImageError, EncodeError, InvalidParameterError, UnsupportedFormatError
from pixelpage.logging import get_logger
from pixelpage.typing.enums import ImageFormat
from pixelpage.typing.models import PixelBuffer

logger = get_logger(__name__)

_PILLOW_FORMATS: dict[str, ImageFormat] = {
    "PNG": ImageFormat.PNG,
    "JPEG": ImageFormat.JPEG,
    "MPO": ImageFormat.JPEG,
    "WEBP": ImageFormat.WEBP,
    "BMP": ImageFormat.BMP,
    "GIF": ImageFormat.GIF,
}

DEFAULT_QUALITY = 0.9


def resolve_format(mime_hint: str | None) -> ImageFormat | None:
    """Map a mime type or extension hint to a supported format.

    Args:
        mime_hint: Mime type (`image/png`), bare format name, or empty.

    Raises:
        UnsupportedFormatError: If a non-empty hint names an unsupported format.

    Returns:
        ImageFormat | None: Parsed format, or None when no hint was given.
    """
    if not mime_hint:
        return None
    try:
        return ImageFormat.from_str(mime_hint)
    except ValueError as exc:
        raise UnsupportedFormatError(message=f"Unsupported image type: {mime_hint}") from exc


def detect_format(data: bytes) -> ImageFormat:
    """Identify the raster format from the byte signature.

    Raises:
        UnsupportedFormatError: If Pillow cannot identify a supported format.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            pillow_format = image.format or ""
    except (UnidentifiedImageError, OSError) as exc:
        raise UnsupportedFormatError(message="Unrecognized image signature") from exc
    if pillow_format not in _PILLOW_FORMATS:
        raise UnsupportedFormatError(message=f"Unsupported image type: {pillow_format or 'unknown'}")
    return _PILLOW_FORMATS[pillow_format]


def decode(data: bytes, mime_hint: str | None = None) -> PixelBuffer:
    """Decode image bytes into an RGBA pixel buffer.

    Args:
        data: Encoded image bytes.
        mime_hint: Optional mime type reported by the shell.

    Raises:
        UnsupportedFormatError: If the hint or signature is not a supported raster type.
        CorruptImageError: If the bytes look like a supported type but fail to decode.

    Returns:
        PixelBuffer: Decoded pixels.
    """
    resolve_format(mime_hint)
    detected = detect_format(data)

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            rgba = image.convert("RGBA")
    except (OSError, ValueError, SyntaxError) as exc:
        raise CorruptImageError(message=f"Failed to decode {detected.value} image") from exc

    width, height = rgba.size
    buffer = PixelBuffer(width=width, height=height, channels=bytearray(rgba.tobytes()))
    logger.debug("Image decoded", extra={"format": detected.value, "width": width, "height": height})
    return buffer


def encode(
    buffer: PixelBuffer,
    target_format: ImageFormat = ImageFormat.PNG,
    quality: float = DEFAULT_QUALITY,
) -> bytes:
    """Encode a pixel buffer into the requested format.

    Args:
        buffer: Pixels to encode.
        target_format: Output raster format.
        quality: Encoder quality in (0, 1]; used by lossy formats only.

    Raises:
        InvalidParameterError: If quality is outside (0, 1].
        EncodeError: If Pillow fails to write the image.

    Returns:
        bytes: Encoded image.
    """
    if not 0.0 < quality <= 1.0:
        raise InvalidParameterError(message=f"must be in (0, 1], got {quality}", field="quality")

    image = Image.frombytes("RGBA", buffer.size, bytes(buffer.channels))
    save_kwargs: dict[str, object] = {}
    if target_format is ImageFormat.JPEG:
        image = image.convert("RGB")
    if target_format.is_lossy:
        save_kwargs["quality"] = max(1, min(100, round(quality * 100)))

    output = io.BytesIO()
    try:
        image.save(output, format=target_format.value.upper(), **save_kwargs)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(message=f"Failed to encode {target_format.value} image") from exc
    return output.getvalue()
