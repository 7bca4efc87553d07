"""Mutable RGBA raster shared by the image codec and transforms."""

from __future__ import annotations

from dataclasses import dataclass, field

from pixelpage.exceptions import InvalidParameterError

CHANNELS_PER_PIXEL = 4

Rgba = tuple[int, int, int, int]


@dataclass(eq=True)
class PixelBuffer:
    """Row-major RGBA pixel grid, one byte per channel.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        channels: `width * height * 4` bytes, laid out as R, G, B, A per pixel.
    """

    width: int
    height: int
    channels: bytearray = field(repr=False)

    def __post_init__(self) -> None:
        """Validate dimensions and coerce the channel payload to a bytearray.

        Raises:
            InvalidParameterError: If dimensions or payload length are inconsistent.
        """
        if self.width < 1 or self.height < 1:
            raise InvalidParameterError(
                message=f"dimensions must be positive, got {self.width}x{self.height}",
                field="width/height",
            )
        if not isinstance(self.channels, bytearray):
            self.channels = bytearray(self.channels)
        expected = self.width * self.height * CHANNELS_PER_PIXEL
        if len(self.channels) != expected:
            raise InvalidParameterError(
                message=f"expected {expected} bytes, got {len(self.channels)}",
                field="channels",
            )

    @classmethod
    def blank(cls, width: int, height: int, fill: Rgba = (0, 0, 0, 0)) -> PixelBuffer:
        """Create a buffer where every pixel equals `fill`."""
        if width < 1 or height < 1:
            raise InvalidParameterError(
                message=f"dimensions must be positive, got {width}x{height}",
                field="width/height",
            )
        return cls(width=width, height=height, channels=bytearray(bytes(fill) * (width * height)))

    @classmethod
    def from_rows(cls, rows: list[list[Rgba]]) -> PixelBuffer:
        """Build a buffer from a list of rows of RGBA tuples."""
        if not rows or not rows[0]:
            raise InvalidParameterError(message="at least one pixel is required", field="rows")
        width = len(rows[0])
        payload = bytearray()
        for row in rows:
            if len(row) != width:
                raise InvalidParameterError(message="rows must have equal length", field="rows")
            for pixel in row:
                payload.extend(pixel)
        return cls(width=width, height=len(rows), channels=payload)

    @property
    def size(self) -> tuple[int, int]:
        """Return `(width, height)`."""
        return self.width, self.height

    def offset(self, x: int, y: int) -> int:
        """Return the byte offset of pixel `(x, y)`."""
        return (y * self.width + x) * CHANNELS_PER_PIXEL

    def get_pixel(self, x: int, y: int) -> Rgba:
        """Return the RGBA tuple at `(x, y)`."""
        idx = self.offset(x, y)
        data = self.channels
        return data[idx], data[idx + 1], data[idx + 2], data[idx + 3]

    def set_pixel(self, x: int, y: int, value: Rgba) -> None:
        """Overwrite the RGBA tuple at `(x, y)`."""
        idx = self.offset(x, y)
        self.channels[idx : idx + CHANNELS_PER_PIXEL] = bytes(value)

    def copy(self) -> PixelBuffer:
        """Return an independent copy."""
        return PixelBuffer(width=self.width, height=self.height, channels=bytearray(self.channels))
