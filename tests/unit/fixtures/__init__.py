"""Test fixture utilities for building AnnoRepo responses.

Usage:
    from tests.unit.fixtures import annotation, annotation_page

    def test_single_page(client):
        page = annotation_page([annotation("a"), annotation("b")])
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx

BASE_URL = "https://annorepo.example.com"
CONTAINER = "example-container-1.0a"
SEARCH_ID = "abc123"
SEARCH_URL = f"{BASE_URL}/services/{CONTAINER}/search/{SEARCH_ID}"


def annotation(identifier: str) -> Dict[str, Any]:
    """Build a minimal W3C web annotation."""
    return {
        "@context": "http://www.w3.org/ns/anno.jsonld",
        "type": "Annotation",
        "id": f"{BASE_URL}/w3c/{CONTAINER}/{identifier}",
        "body": {"type": "Letter", "value": identifier},
        "target": f"https://example.org/letters/{identifier}",
    }


def annotation_page(items: List[Any], page: int = 0) -> Dict[str, Any]:
    """Build a search result page the way AnnoRepo renders one."""
    return {
        "@context": "http://www.w3.org/ns/anno.jsonld",
        "id": f"{SEARCH_URL}?page={page}",
        "type": "AnnotationPage",
        "partOf": SEARCH_URL,
        "startIndex": page * 100,
        "items": items,
    }


class RecordingTransport:
    """``httpx.MockTransport`` handler serving canned responses by method and URL.

    Every request is recorded in ``requests`` so tests can assert on the exact
    sequence of calls. Unknown routes answer 404.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Tuple[int, bytes, Dict[str, str]]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        url: str,
        json_body: Any = None,
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> None:
        if content is None:
            content = b"" if json_body is None else json.dumps(json_body).encode()
        self.routes[(method, url)] = (
            status_code,
            content,
            {"Content-Type": "application/json", **(headers or {})},
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, str(request.url)))
        if route is None:
            return httpx.Response(404, json={"message": "not found"})
        status_code, content, headers = route
        return httpx.Response(status_code, content=content, headers=headers)

    def urls(self) -> List[str]:
        return [str(request.url) for request in self.requests]
