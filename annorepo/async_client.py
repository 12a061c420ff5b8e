"""Asynchronous AnnoRepo client built on ``httpx``.

Every network call is a coroutine that suspends the calling task until the
HTTP exchange completes. Nothing runs in the background: a search result
page is only requested while a caller awaits the next annotation.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Mapping, Optional

import httpx
from typing_extensions import Self

from ._core._models import SearchHandle
from ._core._request import (
    LOCATION_HEADER,
    RequestConfig,
    page_params,
    search_info_url,
    search_url,
    split_location,
)
from .config import DEFAULT_TIMEOUT, ClientConfig
from .search.results import AsyncAnnotationIterator

logger = logging.getLogger(__name__)


class AsyncAnnoRepoClient:
    """Asyncio counterpart of `annorepo.client.AnnoRepoClient`.

    Failures are raised as ``httpx`` exceptions: ``httpx.HTTPStatusError`` for
    a non-success status and other ``httpx.HTTPError`` subclasses for network
    problems and timeouts. A body that is not JSON raises ``json.JSONDecodeError``.

    Examples:
        >>> async with AsyncAnnoRepoClient(
        ...     "https://annorepo.example.com", "letters"
        ... ) as client:  # doctest: +SKIP
        ...     annotations = await client.search_annotations({"body.type": "Letter"})
        ...     async for annotation in annotations:
        ...         print(annotation["id"])
    """

    def __init__(
        self,
        base_url: str,
        container: str,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Create a client.

        Parameters:
            base_url: Root URL of the server.
            container: Name of the container to work with.
            timeout: Seconds to wait for each request, ``None`` to wait forever.
            http_client: ``httpx.AsyncClient`` to send requests with. When omitted
                the client creates one and closes it in `aclose`.
        """
        self._init(ClientConfig(base_url, container, timeout=timeout), http_client)

    @classmethod
    def from_config(
        cls, config: ClientConfig, http_client: Optional[httpx.AsyncClient] = None
    ) -> Self:
        client = cls.__new__(cls)
        client._init(config, http_client)
        return client

    def _init(
        self, config: ClientConfig, http_client: Optional[httpx.AsyncClient]
    ) -> None:
        self.config = config
        self._owns_http_client = http_client is None
        self.http_client = httpx.AsyncClient() if http_client is None else http_client

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def container(self) -> str:
        return self.config.container

    async def aclose(self) -> None:
        """Close the underlying ``httpx.AsyncClient`` if this client created it."""
        if self._owns_http_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return (
            f"AsyncAnnoRepoClient(base_url={self.base_url!r}, "
            f"container={self.container!r})"
        )

    async def _send(self, request: RequestConfig) -> httpx.Response:
        logger.debug("AnnoRepo request: %s", request.describe())
        response = await self.http_client.request(
            request.method,
            request.url,
            params=dict(request.params) or None,
            json=request.json,
            headers={**self.config.headers(), **request.headers},
            timeout=request.timeout,
            follow_redirects=request.follow_redirects,
        )
        # An unfollowed redirect carries its answer in the Location header.
        if request.follow_redirects or not response.is_redirect:
            response.raise_for_status()
        return response

    async def _get_json(
        self, url: str, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        request = RequestConfig(url=url, params=params or {}, timeout=self.config.timeout)
        response = await self._send(request)
        return response.json()

    async def get_about(self) -> Any:
        """Fetch the server description. This endpoint is not container scoped."""
        return await self._get_json(self.config.about_url())

    async def get_fields(self) -> Any:
        return await self._get_json(self.config.service_url("fields"))

    async def get_indexes(self) -> Any:
        return await self._get_json(self.config.service_url("indexes"))

    async def get_distinct_values(self, field: str) -> Any:
        return await self._get_json(self.config.service_url("distinct-values", field))

    async def create_search(self, query: Mapping[str, Any]) -> SearchHandle:
        """Create a search over the container.

        Raises:
            UrlNotFound: if the response carries no usable ``Location`` header.
            httpx.HTTPStatusError: if the server rejects the query.
        """
        request = RequestConfig(
            method="POST",
            url=self.config.service_url("search"),
            json=dict(query),
            timeout=self.config.timeout,
            follow_redirects=False,
        )
        response = await self._send(request)
        search_id, location = split_location(response.headers.get(LOCATION_HEADER))
        logger.info("Created search %s in container %s", search_id, self.container)
        return SearchHandle(search_id=search_id, location=location)

    async def read_search_info(self, container_name: str, search_id: str) -> Any:
        return await self._get_json(
            search_info_url(self.base_url, container_name, search_id)
        )

    async def read_search_result_page(
        self, container_name: str, search_id: str, page: Optional[int] = 0
    ) -> Any:
        """Fetch one raw page of search results, page ``0`` when omitted."""
        return await self._get_json(
            search_url(self.base_url, container_name, search_id), page_params(page)
        )

    async def read_search_result_annotations(
        self, container_name: str, search_id: str, start_page: Optional[int] = 0
    ) -> AsyncAnnotationIterator:
        """Iterate over all annotations of a search, starting at ``start_page``.

        The first page is fetched before the iterator is returned.

        Raises:
            MalformedAnnotationPage: if the first page has no ``items`` list.
        """
        return await AsyncAnnotationIterator.create(
            self, container_name, search_id, 0 if start_page is None else start_page
        )

    async def foreach_search_result_annotation(
        self,
        container_name: str,
        search_id: str,
        callback: Callable[[Any], Any],
        start_page: Optional[int] = 0,
    ) -> int:
        """Call ``callback`` with every annotation of a search.

        ``callback`` may be a plain function or a coroutine function; coroutine
        results are awaited before the next annotation is read.

        Returns:
            The number of annotations visited.
        """
        count = 0
        annotations = await self.read_search_result_annotations(
            container_name, search_id, start_page
        )
        async for annotation in annotations:
            result = callback(annotation)
            if inspect.isawaitable(result):
                await result
            count += 1
        return count

    async def search_annotations(
        self, query: Mapping[str, Any], start_page: int = 0
    ) -> AsyncAnnotationIterator:
        """Create a search in this client's container and iterate over its results."""
        handle = await self.create_search(query)
        return await self.read_search_result_annotations(
            self.container, handle.search_id, start_page
        )
