"""CLI entry point for PixelPage."""

from __future__ import annotations

import argparse
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pixelpage import __version__, logger
from pixelpage.dependencies import ensure_image_dependencies, ensure_pdf_dependencies
from pixelpage.exceptions import PackageError
from pixelpage.history import InMemoryHistoryStore, JsonFileHistoryStore
from pixelpage.logging import configure_logging
from pixelpage.settings import Settings, get_settings
from pixelpage.typing.enums import (
    FlipAxis,
    ImageFormat,
    MarginPreset,
    PageOrientation,
    PageSize,
    SplitMethod,
    TransformKind,
    WatermarkPosition,
)
from pixelpage.typing.models import InputArtifact, OutputArtifact

if TYPE_CHECKING:
    from collections.abc import Callable

    from pixelpage.typing.protocol import HistoryStore

_IMAGE_OPERATIONS: dict[str, TransformKind | None] = {
    "grayscale": TransformKind.GRAYSCALE,
    "brightness": TransformKind.BRIGHTNESS_CONTRAST,
    "blur": TransformKind.BLUR,
    "flip": TransformKind.FLIP,
    "rotate": TransformKind.ROTATE,
    "watermark": TransformKind.WATERMARK,
    "crop": TransformKind.CROP,
    "resize": TransformKind.RESIZE,
    "convert": None,
}


def _enum_type[E](parser: Callable[[str], E]) -> Callable[[str], E]:
    """Wrap an enum `from_str` so argparse reports unsupported values."""

    def _convert(value: str) -> E:
        try:
            return parser(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return _convert


def _int_list(value: str) -> list[int]:
    """Parse `3,1,2` into a list of integers.

    Raises:
        argparse.ArgumentTypeError: If a token is not an integer.
    """
    try:
        return [int(token) for token in value.split(",") if token.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got '{value}'") from exc


def _add_common_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--output-dir", type=Path, default=None, dest="output_dir")


def _build_image_parser(subparsers: Any) -> None:
    image_parser = subparsers.add_parser("image", help="Apply a pixel transform to an image")
    operations = image_parser.add_subparsers(dest="operation", required=True)

    for name in _IMAGE_OPERATIONS:
        op_parser = operations.add_parser(name)
        op_parser.add_argument("--input", required=True, type=Path, dest="input_path")
        op_parser.add_argument("--format", type=_enum_type(ImageFormat.from_str), default=None, dest="output_format")
        op_parser.add_argument("--quality", type=float, default=None)
        _add_common_output_args(op_parser)

        if name == "brightness":
            op_parser.add_argument("--brightness", type=int, default=0)
            op_parser.add_argument("--contrast", type=int, default=0)
        elif name == "blur":
            op_parser.add_argument("--radius", type=int, default=5)
        elif name == "flip":
            op_parser.add_argument("--axis", type=_enum_type(FlipAxis.from_str), default=FlipAxis.HORIZONTAL)
        elif name == "rotate":
            op_parser.add_argument("--degrees", type=float, required=True)
        elif name == "watermark":
            op_parser.add_argument("--text", default="WATERMARK")
            op_parser.add_argument("--font-size", type=int, default=24, dest="font_size_px")
            op_parser.add_argument("--opacity", type=float, default=0.5)
            op_parser.add_argument("--color", default="#000000")
            op_parser.add_argument(
                "--position",
                type=_enum_type(WatermarkPosition.from_str),
                default=WatermarkPosition.BOTTOM_RIGHT,
            )
        elif name == "crop":
            op_parser.add_argument("--x", type=int, default=0)
            op_parser.add_argument("--y", type=int, default=0)
            op_parser.add_argument("--width", type=int, required=True)
            op_parser.add_argument("--height", type=int, required=True)
        elif name == "resize":
            op_parser.add_argument("--width", type=int, required=True)
            op_parser.add_argument("--height", type=int, default=1)
            op_parser.add_argument("--keep-aspect-ratio", action="store_true", dest="keep_aspect_ratio")


def _build_pdf_parser(subparsers: Any) -> None:
    pdf_parser = subparsers.add_parser("pdf", help="Split, reorder, rotate or compose PDF documents")
    operations = pdf_parser.add_subparsers(dest="operation", required=True)

    split_parser = operations.add_parser("split")
    split_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    split_parser.add_argument("--method", type=_enum_type(SplitMethod.from_str), default=SplitMethod.PAGES)
    split_parser.add_argument("--pages-per-file", type=int, default=1, dest="pages_per_file")
    split_parser.add_argument("--ranges", default="")

    extract_parser = operations.add_parser("extract")
    extract_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    extract_parser.add_argument("--pages", required=True)

    reorder_parser = operations.add_parser("reorder")
    reorder_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    reorder_parser.add_argument("--order", required=True, type=_int_list, help="1-based page order, e.g. 3,1,2")

    rotate_parser = operations.add_parser("rotate")
    rotate_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    rotate_parser.add_argument("--degrees", type=int, choices=[90, 180, 270, -90], default=90)
    rotate_parser.add_argument("--pages", default="all")

    merge_parser = operations.add_parser("merge")
    merge_parser.add_argument("--inputs", required=True, nargs="+", type=Path, dest="input_paths")

    images_parser = operations.add_parser("from-images")
    images_parser.add_argument("--inputs", required=True, nargs="+", type=Path, dest="input_paths")
    images_parser.add_argument("--page-size", type=_enum_type(PageSize.from_str), default=PageSize.A4, dest="page_size")
    images_parser.add_argument(
        "--orientation",
        type=_enum_type(PageOrientation.from_str),
        default=PageOrientation.PORTRAIT,
    )
    images_parser.add_argument("--margin", type=_enum_type(MarginPreset.from_str), default=MarginPreset.MEDIUM)

    for op_parser in (split_parser, extract_parser, reorder_parser, rotate_parser, merge_parser, images_parser):
        _add_common_output_args(op_parser)


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="pixelpage")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")
    _build_image_parser(subparsers)
    _build_pdf_parser(subparsers)
    return parser


def read_artifact(path: Path) -> InputArtifact:
    """Read a file the way the upload zone hands it over.

    Args:
        path (Path): File to read.

    Returns:
        InputArtifact: Bytes, guessed mime type and filename.
    """
    mime_type, _ = mimetypes.guess_type(path.name)
    return InputArtifact(data=path.read_bytes(), mime_type=mime_type or "", filename=path.name)


def write_outputs(outputs: list[OutputArtifact], output_dir: Path) -> list[Path]:
    """Write produced artifacts under `output_dir` using their suggested names."""
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for output in outputs:
        target = output_dir / output.filename
        target.write_bytes(output.data)
        written.append(target)
    return written


def _image_params(args: argparse.Namespace, kind: TransformKind) -> dict[str, Any]:
    """Collect transform parameters for an image operation from CLI arguments."""
    fields = {
        TransformKind.BRIGHTNESS_CONTRAST: ("brightness", "contrast"),
        TransformKind.BLUR: ("radius",),
        TransformKind.FLIP: ("axis",),
        TransformKind.ROTATE: ("degrees",),
        TransformKind.WATERMARK: ("text", "font_size_px", "opacity", "color", "position"),
        TransformKind.CROP: ("x", "y", "width", "height"),
        TransformKind.RESIZE: ("width", "height", "keep_aspect_ratio"),
    }.get(kind, ())
    return {"kind": kind.value, **{name: getattr(args, name) for name in fields}}


def _build_operation(args: argparse.Namespace, settings: Settings) -> tuple[str, Callable[..., Any], tuple[Any, ...]]:
    """Resolve the tool name, callable and positional inputs for parsed CLI arguments.

    Returns:
        tuple[str, Callable[..., Any], tuple[Any, ...]]: Tool name, operation and its arguments.
    """
    from pixelpage.documents import layout, operations  # noqa: PLC0415
    from pixelpage.tools import convert_image, process_image  # noqa: PLC0415

    tool = f"{args.command}-{args.operation}"

    if args.command == "image":
        source = read_artifact(args.input_path)
        quality = args.quality if args.quality is not None else settings.default_image_quality
        target = args.output_format or settings.default_image_format
        kind = _IMAGE_OPERATIONS[args.operation]
        if kind is None:
            return tool, lambda src: [convert_image(src, target, quality=quality)], (source,)
        params = _image_params(args, kind)
        return (
            tool,
            lambda src: [process_image(src, params, output_format=target, quality=quality)],
            (source,),
        )

    if args.operation == "split":
        return (
            tool,
            lambda src: operations.split_document(
                src,
                method=args.method,
                pages_per_file=args.pages_per_file,
                ranges=args.ranges,
            ),
            (read_artifact(args.input_path),),
        )
    if args.operation == "extract":
        return tool, lambda src: [operations.extract_pages(src, args.pages)], (read_artifact(args.input_path),)
    if args.operation == "reorder":
        permutation = [page - 1 for page in args.order]
        return tool, lambda src: [operations.reorder_pages(src, permutation)], (read_artifact(args.input_path),)
    if args.operation == "rotate":
        return (
            tool,
            lambda src: [operations.rotate_pages(src, args.degrees, args.pages)],
            (read_artifact(args.input_path),),
        )
    sources = [read_artifact(path) for path in args.input_paths]
    if args.operation == "merge":
        return tool, lambda srcs: [operations.merge_documents(srcs)], (sources,)
    return (
        tool,
        lambda srcs: [
            layout.images_to_pdf(srcs, page_size=args.page_size, orientation=args.orientation, margin=args.margin),
        ],
        (sources,),
    )


def _history_store(settings: Settings) -> HistoryStore:
    if settings.history_file:
        return JsonFileHistoryStore(path=Path(settings.history_file))
    return InMemoryHistoryStore()


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in {"image", "pdf"}:
        parser.print_help()
        return 0

    if args.command == "image":
        ensure_image_dependencies()
    else:
        ensure_pdf_dependencies()

    from pixelpage.tools import ToolInvocation  # noqa: PLC0415

    try:
        tool, operation, inputs = _build_operation(args, settings)
        invocation = ToolInvocation(
            tool,
            operation,
            history=_history_store(settings),
            history_cap=settings.history_cap,
        )
        result = invocation.run(*inputs)
    except PackageError:
        logger.exception("Tool failed")
        return 1
    except OSError:
        logger.exception("Cannot read input")
        return 1
    except KeyboardInterrupt:
        logger.info("Tool aborted by user")
        return 130

    if not result.ok or result.value is None:
        logger.error("Tool failed", extra={"tool": tool, "error": str(result.error)})
        return 1

    output_dir = args.output_dir or Path(settings.results_dir)
    written = write_outputs(result.value, output_dir)
    logger.info("Tool completed", extra={"tool": tool, "outputs": [str(path) for path in written]})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
