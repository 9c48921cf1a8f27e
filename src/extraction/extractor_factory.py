# src/extraction/extractor_factory.py — v4
"""Resolve a contract file to the extractor that can read it.

Extensions are matched case-insensitively, with or without the leading dot.
Files without a usable extension are identified by the PDF signature; any
other content is treated as plain text only if it decodes as UTF-8.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

from lexassist.extraction.base_extractor import BaseExtractor
from lexassist.extraction.pdf_extractor import PdfExtractor
from lexassist.extraction.txt_extractor import TxtExtractor

logger = logging.getLogger(__name__)

_PDF_SIGNATURE = b"%PDF-"
_SNIFF_BYTES = 1024

_EXTRACTORS: dict[str, type[BaseExtractor]] = {
    ext: cls
    for cls in (TxtExtractor, PdfExtractor)
    for ext in cls().supported_extensions
}


class UnsupportedFormatError(ValueError):
    """No extractor can read the given contract format."""


def _normalize(extension: str) -> str:
    ext = extension.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def create_extractor(extension: str) -> BaseExtractor:
    """Extractor for a file extension (".pdf", "txt", ".MD").

    Raises:
        UnsupportedFormatError: If the extension is not registered.
    """
    ext = _normalize(extension)
    try:
        return _EXTRACTORS[ext]()
    except KeyError:
        raise UnsupportedFormatError(
            f"Unsupported contract format {ext!r}; expected one of "
            f"{', '.join(supported_extensions())}"
        ) from None


def extractor_for_path(path: Path) -> BaseExtractor:
    """Extractor chosen by suffix, or by content sniffing when there is none.

    Raises:
        UnsupportedFormatError: If the suffix is unknown, or the file has no
            suffix and is neither a PDF nor UTF-8 text.
    """
    if path.suffix:
        return create_extractor(path.suffix)

    with path.open("rb") as fh:
        head = fh.read(_SNIFF_BYTES)
    if head.startswith(_PDF_SIGNATURE):
        return PdfExtractor()
    try:
        # A multi-byte character may be cut at the sniff boundary.
        codecs.getincrementaldecoder("utf-8")().decode(head, final=False)
    except UnicodeDecodeError:
        raise UnsupportedFormatError(
            f"Cannot identify the format of {path.name!r} (no extension, not text)"
        ) from None
    return TxtExtractor()


async def extract_contract_text(path: Path | str) -> str:
    """Read a contract file into plain text."""
    path = Path(path)
    extractor = extractor_for_path(path)
    text = await extractor.extract(path)
    logger.debug("Extracted %d chars from %s with %s", len(text), path.name, type(extractor).__name__)
    return text


def register_extractor(extension: str, cls: type[BaseExtractor]) -> None:
    """Register an extractor class for an additional contract format."""
    _EXTRACTORS[_normalize(extension)] = cls


def supported_extensions() -> list[str]:
    return sorted(_EXTRACTORS)
