"""Page layout compositor and image-to-PDF composition."""

from __future__ import annotations

from typing import TYPE_CHECKING

import fitz

from pixelpage.documents.page_model import PDF_MIME_TYPE, DocumentHandle
from pixelpage.exceptions import InvalidGeometryError
from pixelpage.imaging import codec
from pixelpage.logging import get_logger
from pixelpage.typing.enums import ImageFormat, MarginPreset, PageOrientation, PageSize
from pixelpage.typing.models import LayoutBox, OutputArtifact

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pixelpage.typing.models import InputArtifact

logger = get_logger(__name__)

IMAGES_TO_PDF_FILENAME = "images-to-pdf.pdf"

PAGE_SIZES_PT: dict[PageSize, tuple[float, float]] = {
    PageSize.A3: (841.89, 1190.55),
    PageSize.A4: (595.28, 841.89),
    PageSize.A5: (419.53, 595.28),
    PageSize.LETTER: (612.0, 792.0),
    PageSize.LEGAL: (612.0, 1008.0),
}

MARGINS_PT: dict[MarginPreset, float] = {
    MarginPreset.NONE: 0.0,
    MarginPreset.SMALL: 20.0,
    MarginPreset.MEDIUM: 40.0,
    MarginPreset.LARGE: 60.0,
}

_EMBEDDABLE = {ImageFormat.PNG, ImageFormat.JPEG}


def page_dimensions(size: PageSize, orientation: PageOrientation = PageOrientation.PORTRAIT) -> tuple[float, float]:
    """Return `(width, height)` in points for a page size and orientation."""
    width, height = PAGE_SIZES_PT[size]
    if orientation is PageOrientation.LANDSCAPE:
        return height, width
    return width, height


def place(
    source_width: float,
    source_height: float,
    page_width: float,
    page_height: float,
    margin_pt: float = 0.0,
) -> LayoutBox:
    """Fit a source image inside the page margins and center it.

    The aspect ratio is preserved and the image is never upscaled.

    Args:
        source_width: Intrinsic image width.
        source_height: Intrinsic image height.
        page_width: Page width in points.
        page_height: Page height in points.
        margin_pt: Margin applied on every side.

    Raises:
        InvalidGeometryError: If any dimension is non-positive, the margin is
            negative, or the margins leave no printable area.

    Returns:
        LayoutBox: Placement with top-left origin.
    """
    if min(source_width, source_height, page_width, page_height) <= 0:
        raise InvalidGeometryError(
            message=(
                f"dimensions must be positive: source {source_width}x{source_height}, "
                f"page {page_width}x{page_height}"
            ),
        )
    if margin_pt < 0:
        raise InvalidGeometryError(message=f"margin must not be negative, got {margin_pt}")

    available_width = page_width - 2 * margin_pt
    available_height = page_height - 2 * margin_pt
    if available_width <= 0 or available_height <= 0:
        raise InvalidGeometryError(
            message=f"margin {margin_pt} leaves no printable area on a {page_width}x{page_height} page",
        )

    scale = min(available_width / source_width, available_height / source_height, 1.0)
    placed_width = source_width * scale
    placed_height = source_height * scale
    return LayoutBox(
        page_width=page_width,
        page_height=page_height,
        margin_pt=margin_pt,
        source_width=source_width,
        source_height=source_height,
        x=(page_width - placed_width) / 2,
        y=(page_height - placed_height) / 2,
        width=placed_width,
        height=placed_height,
        scale=scale,
    )


def _embeddable_bytes(image: InputArtifact) -> tuple[bytes, int, int]:
    """Decode an image and return bytes PyMuPDF can embed, plus its size."""
    buffer = codec.decode(image.data, image.mime_type or None)
    detected = codec.detect_format(image.data)
    payload = image.data if detected in _EMBEDDABLE else codec.encode(buffer, ImageFormat.PNG)
    return payload, buffer.width, buffer.height


def images_to_pdf(
    images: Sequence[InputArtifact],
    *,
    page_size: PageSize = PageSize.A4,
    orientation: PageOrientation = PageOrientation.PORTRAIT,
    margin: MarginPreset = MarginPreset.MEDIUM,
) -> OutputArtifact:
    """Compose one page per image, each fitted and centered.

    Images are processed strictly in order. A decode failure aborts the whole
    batch and no document is produced.

    Args:
        images: Input images.
        page_size: Target page size.
        orientation: Portrait or landscape.
        margin: Margin preset applied on every side.

    Raises:
        InvalidGeometryError: If no images are given.
        DecodeError: If any image cannot be decoded.

    Returns:
        OutputArtifact: The composed PDF.
    """
    if not images:
        raise InvalidGeometryError(message="at least one image is required")

    page_width, page_height = page_dimensions(page_size, orientation)
    margin_pt = MARGINS_PT[margin]

    with DocumentHandle(document=fitz.open(), name=IMAGES_TO_PDF_FILENAME) as target:
        for image in images:
            payload, width, height = _embeddable_bytes(image)
            box = place(width, height, page_width, page_height, margin_pt)
            page = target.document.new_page(width=page_width, height=page_height)
            page.insert_image(fitz.Rect(*box.rect), stream=payload, keep_proportion=True)
        data = target.to_bytes()

    logger.info(
        "Images composed into PDF",
        extra={"images": len(images), "page_size": page_size.value, "orientation": orientation.value},
    )
    return OutputArtifact(data=data, mime_type=PDF_MIME_TYPE, filename=IMAGES_TO_PDF_FILENAME)
