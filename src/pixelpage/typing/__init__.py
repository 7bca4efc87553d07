"""Typing-centric domain modules."""

from pixelpage.typing.enums import (
    FlipAxis,
    ImageFormat,
    MarginPreset,
    PageOrientation,
    PageSize,
    SplitMethod,
    ToolStatus,
    TransformKind,
    WatermarkPosition,
)
from pixelpage.typing.models import (
    HistoryEntry,
    InputArtifact,
    LayoutBox,
    OutputArtifact,
    PageHandle,
    PixelBuffer,
    ToolResult,
    TransformParameters,
)
from pixelpage.typing.protocol import HistoryStore

__all__ = [
    "FlipAxis",
    "HistoryEntry",
    "HistoryStore",
    "ImageFormat",
    "InputArtifact",
    "LayoutBox",
    "MarginPreset",
    "OutputArtifact",
    "PageHandle",
    "PageOrientation",
    "PageSize",
    "PixelBuffer",
    "SplitMethod",
    "ToolResult",
    "ToolStatus",
    "TransformKind",
    "TransformParameters",
    "WatermarkPosition",
]
