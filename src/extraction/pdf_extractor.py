# src/extraction/pdf_extractor.py — v2
"""PDF extractor using PyMuPDF (fitz).

Extracts the text layer page by page. Scanned PDFs without a text layer
yield little or no text; OCR is out of scope.
Requires the 'pymupdf' package.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from lexassist.extraction.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)


class PdfExtractor(BaseExtractor):
    """Extractor for PDF files using PyMuPDF."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    async def extract(self, content: bytes | str | Path) -> str:
        """Extract the text layer of a PDF document."""
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF extraction: pip install pymupdf"
            ) from e

        doc = self._open_document(content, fitz)
        try:
            pages = [doc[i].get_text("text") for i in range(len(doc))]
        finally:
            doc.close()

        text = "\n".join(pages)
        if not text.strip():
            logger.warning("PDF has no extractable text layer (%d pages)", len(pages))
        return text

    @staticmethod
    def _open_document(content: bytes | str | Path, fitz_module: Any) -> Any:
        """Open PDF from various input types."""
        if isinstance(content, Path):
            return fitz_module.open(str(content))
        if isinstance(content, str):
            return fitz_module.open(content)
        return fitz_module.open(stream=content, filetype="pdf")
