"""Markdown stage — conversion, frontmatter and chunking."""

from site2md.markdown.chunker import chunk_markdown
from site2md.markdown.converter import html_to_markdown
from site2md.markdown.frontmatter import compose

__all__ = ["chunk_markdown", "compose", "html_to_markdown"]
