"""Runtime dependency checks for CLI commands."""

from __future__ import annotations

import importlib.util

from pixelpage.exceptions import DependencyError


def _is_module_available(module_name: str) -> bool:
    """Check whether a module can be imported.

    Args:
        module_name (str): Python module name.

    Returns:
        bool: True if import spec exists.
    """
    return importlib.util.find_spec(module_name) is not None


def _collect_missing_dependencies(modules_by_package: dict[str, str]) -> list[str]:
    """Collect missing packages for a module mapping.

    Args:
        modules_by_package (Mapping[str, str]): Mapping of package name -> import module.

    Returns:
        list[str]: Missing package names.
    """
    return [package for package, module in modules_by_package.items() if not _is_module_available(module)]


def ensure_image_dependencies() -> None:
    """Validate the codec stack used by `pixelpage image`.

    Raises:
        DependencyError: If Pillow is missing.
    """
    missing = _collect_missing_dependencies({"pillow": "PIL"})
    if missing:
        raise DependencyError(missing_package=missing, message="image")


def ensure_pdf_dependencies() -> None:
    """Validate the document stack used by `pixelpage pdf`.

    Raises:
        DependencyError: If PyMuPDF or Pillow is missing.
    """
    missing = _collect_missing_dependencies({"pymupdf": "fitz", "pillow": "PIL"})
    if missing:
        raise DependencyError(missing_package=missing, message="pdf")
