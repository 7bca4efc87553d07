"""Suggested filenames for produced artifacts."""

from __future__ import annotations

from pathlib import PurePath

from pixelpage.typing.enums import TransformKind

IMAGE_VERBS: dict[TransformKind, str] = {
    TransformKind.GRAYSCALE: "grayscale",
    TransformKind.BRIGHTNESS_CONTRAST: "adjusted",
    TransformKind.BLUR: "blurred",
    TransformKind.FLIP: "flipped",
    TransformKind.ROTATE: "rotated",
    TransformKind.WATERMARK: "watermarked",
    TransformKind.CROP: "cropped",
    TransformKind.RESIZE: "resized",
}


def output_filename(verb: str, original: str, extension: str | None = None) -> str:
    """Build `<verb>-<original-name>`, optionally swapping the extension.

    Args:
        verb: Past-tense action, e.g. `rotated`.
        original: Input filename; directories are dropped.
        extension: Extension (without dot) matching the produced format.

    Returns:
        str: Suggested filename.
    """
    name = PurePath(original).name or "file"
    if extension:
        name = f"{PurePath(name).stem or 'file'}.{extension}"
    return f"{verb}-{name}"


def part_filename(original: str, part_number: int) -> str:
    """Return `<stem>_part_<n>.pdf` for the n-th (1-based) split output."""
    stem = PurePath(original).stem or "document"
    return f"{stem}_part_{part_number}.pdf"
