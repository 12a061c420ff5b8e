"""Lazy iteration over the annotations of a server-side search.

AnnoRepo pages search results: ``GET .../search/{id}?page=N`` returns one
page whose ``items`` hold the annotations, and the first empty page marks the
end of the result set. The iterators in this module turn that into a flat
stream of annotations, fetching the next page only when the current one has
been consumed.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, Optional

from .._core._models import AnnotationPage

logger = logging.getLogger(__name__)


class _PageCursor:
    """Cursor state shared by the blocking and the asyncio iterators."""

    def __init__(
        self, client: Any, container_name: str, search_id: str, start_page: int
    ) -> None:
        self.client = client
        self._container_name = container_name
        self._search_id = search_id
        self._start_page = start_page
        self._current_page: Optional[int] = None
        self._buffer: Deque[Any] = deque()
        self._exhausted = False

    @property
    def container_name(self) -> str:
        return self._container_name

    @property
    def search_id(self) -> str:
        return self._search_id

    @property
    def start_page(self) -> int:
        return self._start_page

    @property
    def current_page(self) -> Optional[int]:
        """Number of the most recently fetched page."""
        return self._current_page

    @property
    def exhausted(self) -> bool:
        """True once no further pages will be fetched."""
        return self._exhausted

    def _next_page_number(self) -> int:
        if self._current_page is None:
            return self._start_page
        return self._current_page + 1

    def _load(self, page_number: int, payload: Any) -> None:
        """Validate a fetched page and make its items the new buffer."""
        page = AnnotationPage.from_json(payload)
        self._buffer = deque(page.items)
        self._current_page = page_number
        if page.is_empty():
            logger.debug(
                "Search %s/%s ended at empty page %d",
                self._container_name,
                self._search_id,
                page_number,
            )
            self._exhausted = True

    def _pop(self) -> Any:
        return self._buffer.popleft()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(container={self._container_name!r}, "
            f"search_id={self._search_id!r}, page={self._current_page}, "
            f"buffered={len(self._buffer)}, exhausted={self._exhausted})"
        )


class AnnotationIterator(_PageCursor):
    """Iterate over every annotation of a search, one page at a time.

    The start page is fetched when the iterator is created, so a malformed
    page or a transport failure surfaces right away. Later pages are fetched
    when the buffered ones run out. Any error during such a fetch is raised
    from ``next()`` and ends the iteration; create a new iterator to start
    over.

    Examples:
        >>> handle = client.create_search({"body.type": "Page"})  # doctest: +SKIP
        >>> annotations = AnnotationIterator(
        ...     client, client.container, handle.search_id
        ... )  # doctest: +SKIP
        >>> for annotation in annotations:  # doctest: +SKIP
        ...     print(annotation["id"])
    """

    def __init__(
        self, client: Any, container_name: str, search_id: str, start_page: int = 0
    ) -> None:
        """Initialize the iterator and fetch ``start_page``.

        Parameters:
            client: An ``AnnoRepoClient`` (anything with ``read_search_result_page``).
            container_name: Container the search was created in.
            search_id: Server-assigned id of the search.
            start_page: First page to read.

        Raises:
            MalformedAnnotationPage: if the start page has no ``items`` list.
        """
        super().__init__(client, container_name, search_id, start_page)
        self._fetch()

    def _fetch(self) -> None:
        page_number = self._next_page_number()
        try:
            payload = self.client.read_search_result_page(
                self._container_name, self._search_id, page_number
            )
            self._load(page_number, payload)
        except BaseException:
            self._exhausted = True
            self._buffer.clear()
            raise

    def __iter__(self) -> "AnnotationIterator":
        return self

    def __next__(self) -> Any:
        while not self._buffer:
            if self._exhausted:
                raise StopIteration
            self._fetch()
        return self._pop()


class AsyncAnnotationIterator(_PageCursor):
    """Asynchronous counterpart of `AnnotationIterator`.

    Use ``await AsyncAnnotationIterator.create(...)`` so the start page is
    fetched before the iterator is handed out, then ``async for`` over it.
    A single consumer must drive an instance; at most one page request is in
    flight at any time.
    """

    @classmethod
    async def create(
        cls, client: Any, container_name: str, search_id: str, start_page: int = 0
    ) -> "AsyncAnnotationIterator":
        """Create the iterator and fetch ``start_page``.

        Raises:
            MalformedAnnotationPage: if the start page has no ``items`` list.
        """
        iterator = cls(client, container_name, search_id, start_page)
        await iterator._fetch()
        return iterator

    async def _fetch(self) -> None:
        page_number = self._next_page_number()
        try:
            payload = await self.client.read_search_result_page(
                self._container_name, self._search_id, page_number
            )
            self._load(page_number, payload)
        except BaseException:
            # Cancellation included.
            self._exhausted = True
            self._buffer.clear()
            raise

    def __aiter__(self) -> "AsyncAnnotationIterator":
        return self

    async def __anext__(self) -> Any:
        while not self._buffer:
            if self._exhausted:
                raise StopAsyncIteration
            await self._fetch()
        return self._pop()
