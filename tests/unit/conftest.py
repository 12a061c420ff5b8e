"""Pytest configuration and shared fixtures for unit tests."""

import httpx
import pytest
import pytest_asyncio

from annorepo import AnnoRepoClient, AsyncAnnoRepoClient
from tests.unit.fixtures import BASE_URL, CONTAINER, RecordingTransport


@pytest.fixture
def client():
    """A blocking client with its own ``requests`` session."""
    with AnnoRepoClient(BASE_URL, CONTAINER) as annorepo_client:
        yield annorepo_client


@pytest.fixture
def transport() -> RecordingTransport:
    """Canned-response handler backing ``async_client``."""
    return RecordingTransport()


@pytest_asyncio.fixture
async def async_client(transport):
    """An asyncio client whose requests are answered by ``transport``."""
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(transport)
    ) as http_client:
        yield AsyncAnnoRepoClient(BASE_URL, CONTAINER, http_client=http_client)
