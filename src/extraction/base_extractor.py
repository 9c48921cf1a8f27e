# src/extraction/base_extractor.py — v2
"""Abstract extractor interface for contract document formats.

Extraction is best-effort: callers get plain text with no layout or
fidelity guarantees.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class BaseExtractor(ABC):
    """Unified interface for document-to-text extractors."""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions this extractor handles (e.g., ['.pdf'])."""

    @abstractmethod
    async def extract(self, content: bytes | str | Path) -> str:
        """Extract plain text from a document."""
