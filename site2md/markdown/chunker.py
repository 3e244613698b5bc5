"""Word-bounded Markdown chunker for retrieval pipelines.

Strategy: split the document into coarse segments at heading lines and at
paragraph breaks, then greedily pack segments into chunks of roughly
*target_words* words.  When the next segment would overflow the current
chunk, the chunk is closed and the next one is seeded with the trailing
*overlap_words* words of the closed chunk so context carries across the
boundary.
"""

from __future__ import annotations

import re

from site2md.store.models import Chunk

# A newline followed by a heading marker, or a run of 2+ newlines.
_SEGMENT_BOUNDARY = re.compile(r"\n(?=#)|\n{2,}")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _word_count(text: str) -> int:
    return len(text.split())


def split_segments(markdown: str) -> list[str]:
    """Split *markdown* at heading starts and blank-line paragraph breaks."""
    return _SEGMENT_BOUNDARY.split(markdown)


def overlap_tail(text: str, overlap_words: int) -> str:
    """Return the last *overlap_words* words of *text* joined by single spaces."""
    if overlap_words <= 0:
        return ""
    return " ".join(text.split()[-overlap_words:])


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def chunk_markdown(
    markdown: str,
    target_words: int = 1000,
    overlap_words: int = 150,
) -> list[Chunk]:
    """Split *markdown* into ordered, overlapping chunks.

    Args:
        markdown: The document to chunk (frontmatter included).
        target_words: Soft upper bound on words per chunk.  A single segment
            larger than this still becomes one chunk.
        overlap_words: Words carried from the end of one chunk into the start
            of the next.  Callers cap this relative to *target_words*.

    Returns:
        Chunks numbered ``0..N-1``.  Blank input yields ``[]``; input shorter
        than *target_words* yields exactly one chunk.  ``approx_word_count``
        is the running count kept while packing, not a recount of the
        trimmed text.
    """
    chunks: list[Chunk] = []
    buf = ""
    buf_words = 0

    def emit() -> None:
        if buf.strip():
            chunks.append(
                Chunk(index=len(chunks), text=buf.strip(), approx_word_count=buf_words)
            )

    for segment in split_segments(markdown):
        words = _word_count(segment)
        if buf_words > 0 and buf_words + words > target_words:
            emit()
            tail = overlap_tail(buf, overlap_words)
            buf = f"{tail}\n\n{segment}" if tail else segment
            buf_words = _word_count(tail) + words
        else:
            buf = f"{buf}\n\n{segment}" if buf else segment
            buf_words += words

    emit()
    return chunks
