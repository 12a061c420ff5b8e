"""Search result iteration for AnnoRepo searches."""

from annorepo.search.results import AnnotationIterator, AsyncAnnotationIterator

__all__ = [
    "AnnotationIterator",
    "AsyncAnnotationIterator",
]
