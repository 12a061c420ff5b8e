"""Simple data models shared across the package."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping

from ..exceptions import MalformedAnnotationPage


@dataclass(frozen=True)
class SearchHandle:
    """A search created on the server.

    Attributes:
        search_id: Server-assigned identifier, the last path segment of ``location``.
        location: Canonical URL of the search resource.
    """

    search_id: str
    location: str


@dataclass(frozen=True)
class AnnotationPage:
    """Container for one page of search results."""

    items: List[Any]
    payload: Mapping[str, Any]

    @classmethod
    def from_json(cls, payload: Any) -> "AnnotationPage":
        """Validate a decoded page body.

        Raises:
            MalformedAnnotationPage: if ``items`` is missing or not a list.
        """
        items = payload.get("items") if isinstance(payload, Mapping) else None
        if not isinstance(items, list):
            raise MalformedAnnotationPage(payload)
        return cls(items=items, payload=payload)

    def is_empty(self) -> bool:
        return not self.items
