"""Core domain model exports."""

from pixelpage.typing.models.artifacts import HistoryEntry, InputArtifact, OutputArtifact, ToolResult
from pixelpage.typing.models.documents import LayoutBox, PageHandle, PageRotation
from pixelpage.typing.models.pixel_buffer import CHANNELS_PER_PIXEL, PixelBuffer, Rgba
from pixelpage.typing.models.transforms import (
    BlurParams,
    BrightnessContrastParams,
    CropParams,
    FlipParams,
    GrayscaleParams,
    ResizeParams,
    RotateParams,
    TransformParameters,
    WatermarkParams,
)

__all__ = [
    "CHANNELS_PER_PIXEL",
    "BlurParams",
    "BrightnessContrastParams",
    "CropParams",
    "FlipParams",
    "GrayscaleParams",
    "HistoryEntry",
    "InputArtifact",
    "LayoutBox",
    "OutputArtifact",
    "PageHandle",
    "PageRotation",
    "PixelBuffer",
    "ResizeParams",
    "Rgba",
    "RotateParams",
    "ToolResult",
    "TransformParameters",
    "WatermarkParams",
]
