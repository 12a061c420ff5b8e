"""Blocking AnnoRepo client built on ``requests``."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

import requests
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
from .search.results import AnnotationIterator

logger = logging.getLogger(__name__)


class AnnoRepoClient:
    """Talk to one container of an AnnoRepo server.

    Every call maps onto a single HTTP request. Failures are raised as
    ``requests`` exceptions: ``requests.HTTPError`` for a non-success status,
    ``requests.RequestException`` subclasses for network problems and
    ``requests.JSONDecodeError`` for bodies that are not JSON.

    Examples:
        >>> with AnnoRepoClient("https://annorepo.example.com", "letters") as client:
        ...     handle = client.create_search({"body.type": "Letter"})  # doctest: +SKIP
        ...     for annotation in client.read_search_result_annotations(
        ...         client.container, handle.search_id
        ...     ):  # doctest: +SKIP
        ...         print(annotation["id"])
    """

    def __init__(
        self,
        base_url: str,
        container: str,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create a client.

        Parameters:
            base_url: Root URL of the server, e.g. ``https://annorepo.example.com``.
            container: Name of the container to work with.
            timeout: Seconds to wait for each request, ``None`` to wait forever.
            session: Session to send requests with. When omitted the client
                creates one and closes it in `close`.
        """
        self._init(ClientConfig(base_url, container, timeout=timeout), session)

    @classmethod
    def from_config(
        cls, config: ClientConfig, session: Optional[requests.Session] = None
    ) -> Self:
        client = cls.__new__(cls)
        client._init(config, session)
        return client

    def _init(self, config: ClientConfig, session: Optional[requests.Session]) -> None:
        self.config = config
        self._owns_session = session is None
        self.session = requests.Session() if session is None else session

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def container(self) -> str:
        return self.config.container

    def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"AnnoRepoClient(base_url={self.base_url!r}, container={self.container!r})"

    def _send(self, request: RequestConfig) -> requests.Response:
        logger.debug("AnnoRepo request: %s", request.describe())
        response = self.session.request(
            method=request.method,
            url=request.url,
            params=request.params or None,
            json=request.json,
            headers={**self.config.headers(), **request.headers},
            timeout=request.timeout,
            allow_redirects=request.follow_redirects,
        )
        response.raise_for_status()
        return response

    def _get_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        request = RequestConfig(url=url, params=params or {}, timeout=self.config.timeout)
        return self._send(request).json()

    def get_about(self) -> Any:
        """Fetch the server description. This endpoint is not container scoped."""
        return self._get_json(self.config.about_url())

    def get_fields(self) -> Any:
        """Fetch the annotation fields used in the container, with their counts."""
        return self._get_json(self.config.service_url("fields"))

    def get_indexes(self) -> Any:
        """Fetch the indexes defined on the container."""
        return self._get_json(self.config.service_url("indexes"))

    def get_distinct_values(self, field: str) -> Any:
        """Fetch the distinct values of ``field`` across the container."""
        return self._get_json(self.config.service_url("distinct-values", field))

    def create_search(self, query: Mapping[str, Any]) -> SearchHandle:
        """Create a search over the container.

        Parameters:
            query: The AnnoRepo query, sent as the JSON request body.

        Returns:
            The id and location of the created search.

        Raises:
            UrlNotFound: if the response carries no usable ``Location`` header.
            requests.HTTPError: if the server rejects the query.
        """
        request = RequestConfig(
            method="POST",
            url=self.config.service_url("search"),
            json=dict(query),
            timeout=self.config.timeout,
            follow_redirects=False,
        )
        response = self._send(request)
        search_id, location = split_location(response.headers.get(LOCATION_HEADER))
        logger.info("Created search %s in container %s", search_id, self.container)
        return SearchHandle(search_id=search_id, location=location)

    def read_search_info(self, container_name: str, search_id: str) -> Any:
        """Fetch the status information of a search."""
        return self._get_json(search_info_url(self.base_url, container_name, search_id))

    def read_search_result_page(
        self, container_name: str, search_id: str, page: Optional[int] = 0
    ) -> Any:
        """Fetch one raw page of search results.

        Parameters:
            container_name: Container the search was created in.
            search_id: Id of the search.
            page: Page number, ``0`` when omitted.

        Returns:
            The decoded page, expected to hold the annotations under ``items``.
        """
        return self._get_json(
            search_url(self.base_url, container_name, search_id), page_params(page)
        )

    def read_search_result_annotations(
        self, container_name: str, search_id: str, start_page: Optional[int] = 0
    ) -> AnnotationIterator:
        """Iterate over all annotations of a search, starting at ``start_page``.

        The first page is fetched before this method returns.

        Raises:
            MalformedAnnotationPage: if the first page has no ``items`` list.
        """
        return AnnotationIterator(
            self, container_name, search_id, 0 if start_page is None else start_page
        )

    def foreach_search_result_annotation(
        self,
        container_name: str,
        search_id: str,
        callback: Callable[[Any], Any],
        start_page: Optional[int] = 0,
    ) -> int:
        """Call ``callback`` with every annotation of a search.

        Returns:
            The number of annotations visited.
        """
        count = 0
        for annotation in self.read_search_result_annotations(
            container_name, search_id, start_page
        ):
            callback(annotation)
            count += 1
        return count

    def search_annotations(
        self, query: Mapping[str, Any], start_page: int = 0
    ) -> AnnotationIterator:
        """Create a search in this client's container and iterate over its results."""
        handle = self.create_search(query)
        return self.read_search_result_annotations(
            self.container, handle.search_id, start_page
        )
