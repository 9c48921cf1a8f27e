# src/chunking/paragraph_chunker.py — v1
"""Paragraph-preserving text chunker.

Splits on blank-line boundaries and spreads paragraphs over a fixed number
of chunks. A paragraph is never split; order is preserved.
"""

from __future__ import annotations

import re

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def split_paragraphs(text: str) -> list[str]:
    """Split text into paragraphs, dropping whitespace-only ones."""
    return [p for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def chunk_text(text: str, max_chunks: int = 4) -> list[str]:
    """Group paragraphs into at most max_chunks contiguous chunks.

    With more paragraphs than max_chunks, chunk sizes (in paragraphs)
    differ by at most one and no chunk is empty.

    Raises:
        ValueError: If max_chunks < 1.
    """
    if max_chunks < 1:
        raise ValueError("max_chunks must be >= 1")

    paragraphs = split_paragraphs(text)
    if len(paragraphs) <= max_chunks:
        return paragraphs

    base, extra = divmod(len(paragraphs), max_chunks)
    chunks: list[str] = []
    start = 0
    for i in range(max_chunks):
        size = base + (1 if i < extra else 0)
        chunks.append("\n\n".join(paragraphs[start : start + size]))
        start += size
    return chunks
