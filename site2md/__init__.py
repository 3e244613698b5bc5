"""site2md — web page → Markdown → retrieval chunks."""

__version__ = "1.0.0"
