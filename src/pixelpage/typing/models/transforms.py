"""Tagged union of pixel transform parameters."""

from __future__ import annotations

import math
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pixelpage.typing.enums import FlipAxis, WatermarkPosition

ChannelValue = Annotated[int, Field(ge=0, le=255)]
RgbColor = tuple[ChannelValue, ChannelValue, ChannelValue]


class _TransformParams(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class GrayscaleParams(_TransformParams):
    """BT.601 luma conversion; no parameters."""

    kind: Literal["grayscale"] = "grayscale"


class BrightnessContrastParams(_TransformParams):
    """Additive brightness followed by a contrast stretch around 128."""

    kind: Literal["brightness_contrast"] = "brightness_contrast"
    brightness: int = Field(default=0, ge=-255, le=255)
    contrast: int = Field(default=0, ge=-255, le=255)


class BlurParams(_TransformParams):
    """Separable box blur."""

    kind: Literal["blur"] = "blur"
    radius: int = Field(default=5, ge=1, le=20)


class FlipParams(_TransformParams):
    """Mirror along one or both axes."""

    kind: Literal["flip"] = "flip"
    axis: FlipAxis = FlipAxis.HORIZONTAL


class RotateParams(_TransformParams):
    """Rotation by an arbitrary angle in degrees, clockwise."""

    kind: Literal["rotate"] = "rotate"
    degrees: float = Field(default=0.0, allow_inf_nan=False)


class WatermarkParams(_TransformParams):
    """Text overlay blended over the existing pixels."""

    kind: Literal["watermark"] = "watermark"
    text: str = Field(default="WATERMARK", min_length=1)
    font_size_px: int = Field(default=24, ge=1, le=512)
    opacity: float = Field(default=0.5, ge=0.0, le=1.0)
    color: RgbColor = (0, 0, 0)
    position: WatermarkPosition = WatermarkPosition.BOTTOM_RIGHT

    @field_validator("color", mode="before")
    @classmethod
    def _parse_hex_color(cls, value: object) -> object:
        """Accept `#rrggbb` strings besides RGB tuples.

        Args:
            value: Raw color payload.

        Raises:
            ValueError: If a string is not a 6-digit hex color.

        Returns:
            object: Tuple for string input, untouched value otherwise.
        """
        if not isinstance(value, str):
            return value
        digits = value.strip().removeprefix("#")
        if len(digits) != 6:  # noqa: PLR2004
            raise ValueError(f"color must be '#rrggbb', got '{value}'")
        try:
            return tuple(int(digits[idx : idx + 2], 16) for idx in (0, 2, 4))
        except ValueError as exc:
            raise ValueError(f"color must be '#rrggbb', got '{value}'") from exc


class CropParams(_TransformParams):
    """Rectangular crop; the rectangle must fit inside the source."""

    kind: Literal["crop"] = "crop"
    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)
    width: int = Field(ge=1)
    height: int = Field(ge=1)


class ResizeParams(_TransformParams):
    """Nearest-neighbour resize."""

    kind: Literal["resize"] = "resize"
    width: int = Field(ge=1, le=10_000)
    height: int = Field(default=1, ge=1, le=10_000)
    keep_aspect_ratio: bool = False

    def target_size(self, source_width: int, source_height: int) -> tuple[int, int]:
        """Return the output size for a given source size."""
        if not self.keep_aspect_ratio:
            return self.width, self.height
        derived = max(1, math.floor(self.width * source_height / source_width + 0.5))
        return self.width, derived


TransformParameters = Annotated[
    GrayscaleParams
    | BrightnessContrastParams
    | BlurParams
    | FlipParams
    | RotateParams
    | WatermarkParams
    | CropParams
    | ResizeParams,
    Field(discriminator="kind"),
]
