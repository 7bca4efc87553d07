"""PDF page-set pipeline: page model, range parsing, layout and operations."""
