"""Output subsystem — exports the post index to disk."""

from inkwell.output.writer import IndexWriter

__all__ = [
    "IndexWriter",
]
