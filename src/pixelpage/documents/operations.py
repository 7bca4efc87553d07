"""Document page-set pipelines: split, extract, reorder, rotate and merge."""

from __future__ import annotations

from typing import TYPE_CHECKING

import fitz

from pixelpage.documents.page_model import PDF_MIME_TYPE, DocumentHandle, DocumentPageModel, derive, load
from pixelpage.documents.page_ranges import parse_page_selection, parse_range_groups
from pixelpage.exceptions import InvalidParameterError
from pixelpage.logging import get_logger
from pixelpage.naming import output_filename, part_filename
from pixelpage.typing.enums import SplitMethod
from pixelpage.typing.models import InputArtifact, OutputArtifact

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

MERGED_FILENAME = "merged-pdfs.pdf"


def _materialize(handle: DocumentHandle, view: DocumentPageModel, filename: str) -> OutputArtifact:
    with derive(handle, view.pages, name=filename) as derived:
        return OutputArtifact(data=derived.to_bytes(), mime_type=PDF_MIME_TYPE, filename=filename)


def split_document(
    source: InputArtifact,
    *,
    method: SplitMethod = SplitMethod.PAGES,
    pages_per_file: int = 1,
    ranges: str = "",
) -> list[OutputArtifact]:
    """Split a document into several documents.

    Args:
        source: Input PDF.
        method: `pages` for fixed-size chunks, `individual` for one page per
            file, `custom` for explicit range groups.
        pages_per_file: Chunk size for the `pages` method.
        ranges: Range groups for the `custom` method, e.g. `"1-3,5"`.

    Raises:
        InvalidParameterError: If the chunk size is invalid or no range is valid.

    Returns:
        list[OutputArtifact]: One document per part, in order.
    """
    with load(source.data, source.filename) as handle:
        view = DocumentPageModel.of(handle)
        if method is SplitMethod.PAGES:
            parts = view.chunks(pages_per_file)
        elif method is SplitMethod.INDIVIDUAL:
            parts = view.chunks(1)
        else:
            parts = [view.subset(group) for group in parse_range_groups(ranges, handle.page_count)]

        outputs = [
            _materialize(handle, part, part_filename(source.filename, number))
            for number, part in enumerate(parts, start=1)
        ]

    logger.info(
        "Document split",
        extra={"document": source.filename, "method": method.value, "parts": len(outputs)},
    )
    return outputs


def extract_pages(source: InputArtifact, selection: str) -> OutputArtifact:
    """Copy the selected pages (sorted, de-duplicated) into a new document."""
    with load(source.data, source.filename) as handle:
        pages = parse_page_selection(selection, handle.page_count)
        view = DocumentPageModel.of(handle).subset(page - 1 for page in pages)
        output = _materialize(handle, view, output_filename("extracted", source.filename, "pdf"))

    logger.info("Pages extracted", extra={"document": source.filename, "pages": pages})
    return output


def reorder_pages(source: InputArtifact, permutation: Sequence[int]) -> OutputArtifact:
    """Rewrite a document with its pages in permuted order.

    Args:
        source: Input PDF.
        permutation: Full permutation of 0-based page indices.

    Raises:
        IncompleteReorderError: If `permutation` drops, repeats or invents pages.

    Returns:
        OutputArtifact: Reordered PDF.
    """
    with load(source.data, source.filename) as handle:
        view = DocumentPageModel.of(handle).reorder(permutation)
        output = _materialize(handle, view, output_filename("reordered", source.filename, "pdf"))

    logger.info("Pages reordered", extra={"document": source.filename, "order": list(permutation)})
    return output


def rotate_pages(source: InputArtifact, degrees: int, selection: str = "all") -> OutputArtifact:
    """Rotate the selected pages by `degrees` on top of their current rotation.

    Args:
        source: Input PDF.
        degrees: One of 90, 180, 270 or -90.
        selection: `all` or a page selection such as `"1-3,5"`.

    Returns:
        OutputArtifact: Rotated PDF with every page kept.
    """
    with load(source.data, source.filename) as handle:
        pages = parse_page_selection(selection, handle.page_count)
        view = DocumentPageModel.of(handle).rotate(degrees, [page - 1 for page in pages])
        output = _materialize(handle, view, output_filename("rotated", source.filename, "pdf"))

    logger.info("Pages rotated", extra={"document": source.filename, "pages": pages, "degrees": degrees})
    return output


def merge_documents(sources: Sequence[InputArtifact]) -> OutputArtifact:
    """Concatenate every page of two or more documents, in input order.

    Raises:
        InvalidParameterError: If fewer than two documents are given.
        DecodeError: If any input cannot be loaded; nothing is produced.
    """
    if len(sources) < 2:  # noqa: PLR2004
        raise InvalidParameterError(message="at least 2 documents are required", field="sources")

    with DocumentHandle(document=fitz.open(), name=MERGED_FILENAME) as merged:
        for source in sources:
            with load(source.data, source.filename) as handle:
                merged.document.insert_pdf(handle.document)
        data = merged.to_bytes()
        total_pages = merged.page_count

    logger.info("Documents merged", extra={"documents": len(sources), "pages": total_pages})
    return OutputArtifact(data=data, mime_type=PDF_MIME_TYPE, filename=MERGED_FILENAME)
