"""Tool invocation wrapper and image tool pipeline."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pixelpage.exceptions import PackageError
from pixelpage.imaging import codec, transforms
from pixelpage.logging import get_logger
from pixelpage.naming import IMAGE_VERBS, output_filename
from pixelpage.typing.enums import ImageFormat, ToolStatus, TransformKind
from pixelpage.typing.models import HistoryEntry, InputArtifact, OutputArtifact, ToolResult

if TYPE_CHECKING:
    from pixelpage.typing.models import TransformParameters
    from pixelpage.typing.protocol import HistoryStore

logger = get_logger(__name__)

DEFAULT_HISTORY_CAP = 10

StatusListener = Callable[[str, ToolStatus], None]


def _default_label(args: tuple[Any, ...], fallback: str) -> str:
    """Describe an invocation by its input file(s), as the recent-items list shows it."""
    for arg in args:
        if isinstance(arg, InputArtifact):
            return arg.filename
        if isinstance(arg, Sequence) and arg and all(isinstance(item, InputArtifact) for item in arg):
            return f"{len(arg)} files"
    return fallback


class ToolInvocation[**P, T]:
    """Run one tool operation and track its status.

    Status moves `IDLE -> PROCESSING -> COMPLETE | FAILED`. Package errors are
    returned inside the `ToolResult`; anything else propagates. A history store
    failure is logged and does not fail an operation that succeeded.
    """

    def __init__(
        self,
        name: str,
        operation: Callable[P, T],
        *,
        history: HistoryStore | None = None,
        history_cap: int = DEFAULT_HISTORY_CAP,
    ) -> None:
        self.name = name
        self._operation = operation
        self._history = history
        self._history_cap = history_cap
        self._listeners: list[StatusListener] = []
        self.status = ToolStatus.IDLE

    def subscribe(self, listener: StatusListener) -> None:
        """Register a callback receiving `(tool name, new status)` on every transition."""
        self._listeners.append(listener)

    def _transition(self, status: ToolStatus) -> None:
        self.status = status
        for listener in self._listeners:
            listener(self.name, status)

    def run(self, *args: P.args, **kwargs: P.kwargs) -> ToolResult[T]:
        """Invoke the operation.

        Returns:
            ToolResult[T]: Completed result with a value, or failed result with the error.
        """
        self._transition(ToolStatus.PROCESSING)
        try:
            value = self._operation(*args, **kwargs)
        except PackageError as exc:
            self._transition(ToolStatus.FAILED)
            logger.warning("Tool invocation failed", extra={"tool": self.name, "error": str(exc)})
            return ToolResult(status=ToolStatus.FAILED, error=exc)
        except Exception:
            self._transition(ToolStatus.FAILED)
            raise

        if self._history is not None:
            try:
                self._history.append(
                    HistoryEntry(tool=self.name, label=_default_label(args, self.name)),
                    self._history_cap,
                )
            except PackageError as exc:
                logger.warning("History not recorded", extra={"tool": self.name, "error": str(exc)})
        self._transition(ToolStatus.COMPLETE)
        return ToolResult(status=ToolStatus.COMPLETE, value=value)


def process_image(
    source: InputArtifact,
    params: TransformParameters | Mapping[str, Any],
    *,
    output_format: ImageFormat | None = None,
    quality: float = codec.DEFAULT_QUALITY,
) -> OutputArtifact:
    """Decode, transform and re-encode one image.

    Args:
        source: Input image.
        params: Transform parameters.
        output_format: Target format; the detected input format when None.
        quality: Encoder quality for lossy formats, in (0, 1].

    Returns:
        OutputArtifact: Encoded result named `<verb>-<original-name>`.
    """
    validated = transforms.parse_transform(params)
    buffer = codec.decode(source.data, source.mime_type or None)
    target_format = output_format or codec.detect_format(source.data)
    result = transforms.apply(buffer, validated)
    data = codec.encode(result, target_format, quality)
    verb = IMAGE_VERBS[TransformKind(validated.kind)]
    return OutputArtifact(
        data=data,
        mime_type=target_format.mime_type,
        filename=output_filename(verb, source.filename, target_format.extension),
    )


def convert_image(
    source: InputArtifact,
    target_format: ImageFormat,
    *,
    quality: float = codec.DEFAULT_QUALITY,
) -> OutputArtifact:
    """Re-encode an image into another format (or the same one, to compress)."""
    buffer = codec.decode(source.data, source.mime_type or None)
    data = codec.encode(buffer, target_format, quality)
    logger.info(
        "Image converted",
        extra={"image": source.filename, "format": target_format.value, "bytes": len(data)},
    )
    return OutputArtifact(
        data=data,
        mime_type=target_format.mime_type,
        filename=output_filename("converted", source.filename, target_format.extension),
    )
