# src/extraction/txt_extractor.py — v3
"""Plain text extractor — passthrough with minimal processing."""

from __future__ import annotations

from pathlib import Path

from lexassist.extraction.base_extractor import BaseExtractor


class TxtExtractor(BaseExtractor):
    """Extractor for plain text and Markdown files."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".txt", ".md"]

    async def extract(self, content: bytes | str | Path) -> str:
        """Extract text from a plain text file, bytes or a literal string."""
        if isinstance(content, Path):
            return content.read_text(encoding="utf-8")
        if isinstance(content, bytes):
            return content.decode("utf-8", errors="replace")
        # str: check if it's a file path
        p = Path(content)
        if len(content) < 4096 and p.is_file():
            return p.read_text(encoding="utf-8")
        return content
