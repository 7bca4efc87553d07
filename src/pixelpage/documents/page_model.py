"""Document page model over PyMuPDF.

A loaded document is never modified. Reordering, subsetting and rotation
operate on a `DocumentPageModel` view made of `PageHandle`s, and `derive`
materializes a view into a new in-memory document.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

import fitz
from pydantic import BaseModel, ConfigDict, Field, model_validator

from pixelpage.exceptions import (
    CorruptDocumentError,
    EncodeError,
    IncompleteReorderError,
    InvalidParameterError,
    PasswordRequiredError,
)
from pixelpage.logging import get_logger
from pixelpage.typing.models import PageHandle, PageRotation

if TYPE_CHECKING:
    from types import TracebackType

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"
ROTATION_DELTAS: frozenset[int] = frozenset({90, 180, 270, -90})


@dataclass
class DocumentHandle:
    """Open PDF document plus the name it was loaded under."""

    document: fitz.Document
    name: str = "document.pdf"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def page_count(self) -> int:
        """Return the number of pages."""
        return self.document.page_count

    def to_bytes(self) -> bytes:
        """Serialize the document.

        Raises:
            EncodeError: If PyMuPDF cannot write the document.
        """
        try:
            return self.document.tobytes(garbage=3, deflate=True)
        except Exception as exc:
            raise EncodeError(message=f"Failed to serialize {self.name}") from exc

    def close(self) -> None:
        """Release the underlying document."""
        if not self.document.is_closed:
            self.document.close()


def load(data: bytes, name: str = "document.pdf") -> DocumentHandle:
    """Open PDF bytes.

    Args:
        data: Raw PDF bytes.
        name: Filename used for logging and output naming.

    Raises:
        CorruptDocumentError: If the bytes are not a readable PDF or have no pages.
        PasswordRequiredError: If the document is encrypted.

    Returns:
        DocumentHandle: Open document.
    """
    if not data:
        raise CorruptDocumentError(message=f"Empty document: {name}")
    try:
        document = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise CorruptDocumentError(message=f"Failed to open document: {name}") from exc

    if document.needs_pass:
        document.close()
        raise PasswordRequiredError(message=f"Document is password protected: {name}")
    if document.page_count == 0:
        document.close()
        raise CorruptDocumentError(message=f"Document has no pages: {name}")

    logger.debug("Document loaded", extra={"document": name, "pages": document.page_count})
    return DocumentHandle(document=document, name=name)


def page_count(handle: DocumentHandle) -> int:
    """Return the page count of a loaded document."""
    return handle.page_count


def derive(handle: DocumentHandle, pages: Sequence[PageHandle], name: str | None = None) -> DocumentHandle:
    """Materialize an ordered page view into a new document.

    Args:
        handle: Source document; left unchanged.
        pages: Pages to copy, in output order. Duplicates are allowed.
        name: Optional name for the derived document.

    Raises:
        InvalidParameterError: If the view is empty or references a missing page.

    Returns:
        DocumentHandle: New in-memory document.
    """
    if not pages:
        raise InvalidParameterError(message="at least one page is required", field="pages")
    total = handle.page_count
    for page in pages:
        if page.source_index >= total:
            raise InvalidParameterError(
                message=f"page index {page.source_index} out of range for {total} pages",
                field="pages",
            )

    target = fitz.open()
    for page in pages:
        target.insert_pdf(handle.document, from_page=page.source_index, to_page=page.source_index)
        if page.rotation_degrees:
            copied = target[target.page_count - 1]
            copied.set_rotation((copied.rotation + page.rotation_degrees) % 360)
    return DocumentHandle(document=target, name=name or handle.name)


class DocumentPageModel(BaseModel):
    """Ordered, derivable view over a source document's pages."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_page_count: int = Field(ge=1)
    pages: tuple[PageHandle, ...]

    @model_validator(mode="after")
    def _check_source_indices(self) -> Self:
        for page in self.pages:
            if page.source_index >= self.source_page_count:
                raise ValueError(
                    f"page index {page.source_index} out of range for {self.source_page_count} pages",
                )
        return self

    @classmethod
    def identity(cls, source_page_count: int) -> DocumentPageModel:
        """Return the view listing every source page once, in order."""
        return cls(
            source_page_count=source_page_count,
            pages=tuple(PageHandle(source_index=idx) for idx in range(source_page_count)),
        )

    @classmethod
    def of(cls, handle: DocumentHandle) -> DocumentPageModel:
        """Return the identity view of a loaded document."""
        return cls.identity(handle.page_count)

    @property
    def source_indices(self) -> list[int]:
        """Return the source index of each page, in view order."""
        return [page.source_index for page in self.pages]

    def reorder(self, permutation: Sequence[int]) -> DocumentPageModel:
        """Return the view with pages arranged by a full permutation.

        Args:
            permutation: 0-based positions of the current view, in new order.

        Raises:
            IncompleteReorderError: If `permutation` is not a permutation of every page.
        """
        expected = len(self.pages)
        if len(permutation) != expected or sorted(permutation) != list(range(expected)):
            raise IncompleteReorderError(expected=expected, received=list(permutation))
        return self.model_copy(update={"pages": tuple(self.pages[idx] for idx in permutation)})

    def subset(self, positions: Iterable[int]) -> DocumentPageModel:
        """Return the view restricted to `positions` (0-based, in the given order).

        Raises:
            InvalidParameterError: If a position is outside the view or nothing is selected.
        """
        selected: list[PageHandle] = []
        for position in positions:
            if not 0 <= position < len(self.pages):
                raise InvalidParameterError(
                    message=f"page position {position} out of range for {len(self.pages)} pages",
                    field="pages",
                )
            selected.append(self.pages[position])
        if not selected:
            raise InvalidParameterError(message="No valid pages specified", field="pages")
        return self.model_copy(update={"pages": tuple(selected)})

    def rotate(self, degrees: int, positions: Iterable[int] | None = None) -> DocumentPageModel:
        """Return the view with an absolute rotation set on the selected pages.

        Re-applying replaces the previous value; rotations never accumulate.

        Args:
            degrees: One of 90, 180, 270 or -90.
            positions: 0-based view positions; every page when None.

        Raises:
            InvalidParameterError: If `degrees` or a position is invalid.
        """
        if degrees not in ROTATION_DELTAS:
            raise InvalidParameterError(
                message=f"rotation must be one of {sorted(ROTATION_DELTAS)}, got {degrees}",
                field="degrees",
            )
        targets = set(range(len(self.pages)) if positions is None else positions)
        for position in targets:
            if not 0 <= position < len(self.pages):
                raise InvalidParameterError(
                    message=f"page position {position} out of range for {len(self.pages)} pages",
                    field="pages",
                )
        rotation: PageRotation = degrees  # type: ignore[assignment]
        pages = tuple(
            page.model_copy(update={"rotation_degrees": rotation}) if idx in targets else page
            for idx, page in enumerate(self.pages)
        )
        return self.model_copy(update={"pages": pages})

    def chunks(self, size: int) -> list[DocumentPageModel]:
        """Split the view into consecutive views of `size` pages (last may be shorter)."""
        if size < 1:
            raise InvalidParameterError(message=f"must be >= 1, got {size}", field="pages_per_file")
        return [
            self.model_copy(update={"pages": self.pages[start : start + size]})
            for start in range(0, len(self.pages), size)
        ]
