"""Loading posts from disk and browsing them as a collection."""

from inkwell.collection.index import PostIndex, PostPage
from inkwell.collection.loader import PostLoader
from inkwell.collection.models import LoadError, LoadReport, SkippedFile

__all__ = [
    "LoadError",
    "LoadReport",
    "PostIndex",
    "PostLoader",
    "PostPage",
    "SkippedFile",
]
