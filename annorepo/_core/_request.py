"""Request plumbing shared by the blocking and the asyncio clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, MutableMapping, Optional
from urllib.parse import urlencode

from ..exceptions import UrlNotFound

LOCATION_HEADER = "Location"


@dataclass
class RequestConfig:
    """Configuration for a single request."""

    method: str = "GET"
    url: str = ""
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: MutableMapping[str, str] = field(default_factory=dict)
    json: Optional[Any] = None
    timeout: Optional[float] = 30.0
    follow_redirects: bool = True

    def describe(self) -> str:
        if self.params:
            return f"{self.method} {self.url}?{urlencode(self.params)}"
        return f"{self.method} {self.url}"


def about_url(base_url: str) -> str:
    """The service description lives outside of any container."""
    return f"{base_url}/about"


def service_url(
    base_url: str, container: str, endpoint: str, param: Optional[str] = None
) -> str:
    """Resolve ``{base}/services/{container}/{endpoint}[/{param}]``."""
    url = f"{base_url}/services/{container}/{endpoint}"
    if param is not None:
        url = f"{url}/{param}"
    return url


def search_url(base_url: str, container: str, search_id: str) -> str:
    return service_url(base_url, container, "search", search_id)


def search_info_url(base_url: str, container: str, search_id: str) -> str:
    return f"{search_url(base_url, container, search_id)}/info"


def page_params(page: Optional[int]) -> dict[str, int]:
    return {"page": 0 if page is None else page}


def split_location(location: Optional[str]) -> tuple[str, str]:
    """Return ``(search_id, location)`` for a ``Location`` header value.

    Parameters:
        location: The raw header value, or ``None`` when the header was absent.

    Returns:
        The final path segment of the location and the location itself.

    Raises:
        UrlNotFound: if the header is missing or has no final path segment.
    """
    if location is None:
        raise UrlNotFound()
    _, sep, search_id = location.rpartition("/")
    if not sep or not search_id:
        raise UrlNotFound(
            f"Cannot extract a search id from location {location!r}",
            location=location,
        )
    return search_id, location
