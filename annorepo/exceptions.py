"""Errors raised by the AnnoRepo client.

Transport failures (network errors, non-success HTTP statuses, undecodable
JSON bodies) are not wrapped: they surface as the HTTP library's own
exceptions.
"""

from typing import Any, Optional


class AnnoRepoError(Exception):
    """Base class for errors raised by this package."""

    pass


class UrlNotFound(AnnoRepoError):
    """Raised when a created search does not report a usable location."""

    def __init__(
        self, message: str = "URL not found", location: Optional[str] = None
    ):
        super().__init__(message)
        self.location = location


class MalformedAnnotationPage(AnnoRepoError):
    """Raised when a search result page has no ``items`` list.

    Attributes:
        payload: The decoded JSON body exactly as the server returned it.
    """

    def __init__(self, payload: Any):
        super().__init__(f"Malformed annotation page: {payload!r}")
        self.payload = payload


class ConfigurationError(AnnoRepoError, ValueError):
    """Raised when a client configuration is incomplete or invalid."""

    pass
