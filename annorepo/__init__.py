"""annorepo: a Python client for the AnnoRepo annotation repository.

Quick Start:
    ```python
    from annorepo import AnnoRepoClient

    with AnnoRepoClient("https://annorepo.example.com", "letters") as client:
        print(client.get_about())

        handle = client.create_search({"body.type": "Letter"})
        for annotation in client.read_search_result_annotations(
            client.container, handle.search_id
        ):
            print(annotation["id"])
    ```

The same operations are available as coroutines on `AsyncAnnoRepoClient`.
"""

import logging

from ._core._models import AnnotationPage, SearchHandle
from .async_client import AsyncAnnoRepoClient
from .client import AnnoRepoClient
from .config import USER_AGENT, ClientConfig, __version__
from .exceptions import (
    AnnoRepoError,
    ConfigurationError,
    MalformedAnnotationPage,
    UrlNotFound,
)
from .search import AnnotationIterator, AsyncAnnotationIterator

logger = logging.getLogger(__name__)

__all__ = [
    # client.py
    "AnnoRepoClient",
    # async_client.py
    "AsyncAnnoRepoClient",
    # config.py
    "ClientConfig",
    "USER_AGENT",
    # models
    "SearchHandle",
    "AnnotationPage",
    # search
    "AnnotationIterator",
    "AsyncAnnotationIterator",
    # exceptions.py
    "AnnoRepoError",
    "UrlNotFound",
    "MalformedAnnotationPage",
    "ConfigurationError",
]
