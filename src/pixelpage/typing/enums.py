"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class TransformKind(_EnumMixin):
    """Pixel transform discriminator."""

    GRAYSCALE = "grayscale"
    BRIGHTNESS_CONTRAST = "brightness_contrast"
    BLUR = "blur"
    FLIP = "flip"
    ROTATE = "rotate"
    WATERMARK = "watermark"
    CROP = "crop"
    RESIZE = "resize"


class FlipAxis(_EnumMixin):
    """Mirror axis for the flip transform."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


class WatermarkPosition(_EnumMixin):
    """Anchor for watermark text."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    CENTER = "center"


_FORMAT_ALIASES = {"jpg": "jpeg", "pjpeg": "jpeg", "x-ms-bmp": "bmp", "x-bmp": "bmp"}


class ImageFormat(_EnumMixin):
    """Raster formats supported by the pixel codec."""

    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    BMP = "bmp"
    GIF = "gif"

    @classmethod
    def from_str(cls, value: str) -> ImageFormat:
        """Parse a format name, accepting `jpg`, legacy aliases and mime types."""
        normalized = value.strip().lower().removeprefix("image/")
        normalized = _FORMAT_ALIASES.get(normalized, normalized)
        return super().from_str(normalized)  # type: ignore[return-value]

    @property
    def mime_type(self) -> str:
        """Return the mime type for this format."""
        return f"image/{self.value}"

    @property
    def extension(self) -> str:
        """Return the conventional file extension (without dot)."""
        return "jpg" if self is ImageFormat.JPEG else self.value

    @property
    def is_lossy(self) -> bool:
        """Return whether the encoder honours a quality setting."""
        return self in {ImageFormat.JPEG, ImageFormat.WEBP}


class PageSize(_EnumMixin):
    """Standard page sizes for image-to-PDF composition."""

    A3 = "a3"
    A4 = "a4"
    A5 = "a5"
    LETTER = "letter"
    LEGAL = "legal"


class PageOrientation(_EnumMixin):
    """Page orientation."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class MarginPreset(_EnumMixin):
    """Named page margins."""

    NONE = "none"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class SplitMethod(_EnumMixin):
    """Strategy used to split a document."""

    PAGES = "pages"
    INDIVIDUAL = "individual"
    CUSTOM = "custom"


class ToolStatus(_EnumMixin):
    """Lifecycle of a single tool invocation."""

    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"
