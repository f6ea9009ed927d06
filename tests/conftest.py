"""Shared test fixtures for bucketlist tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from bucketlist.authenticators import NoOpAuthenticator
from bucketlist.clients.http_client import HttpBucketListClient
from bucketlist.models import ClientConfig
from bucketlist.transport import build_async_client

BASE_URL = "https://git.example.com"
PRS_PATH = "/rest/api/1.0/projects/proj/repos/repo/pull-requests"

# 2015-06-24T23:29:29Z and 2015-06-25T18:06:19Z, in epoch millis as the server sends them
CREATED_MILLIS = 1435188569000
UPDATED_MILLIS = 1435255579000

Route = (
    dict[str, Any] | httpx.Response | Exception | Callable[[httpx.Request], Awaitable[httpx.Response]]
)


class FakeBitbucket:
    """Serves canned responses keyed on method, path and ``start``, and records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str, str | None], Route] = {}

    def add(
        self,
        path: str,
        route: Route,
        *,
        method: str = "GET",
        start: int | None = None,
    ) -> None:
        self.routes[(method, path, None if start is None else str(start))] = route

    def starts(self) -> list[str | None]:
        return [request.url.params.get("start") for request in self.requests]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        start = request.url.params.get("start")
        route = self.routes.get((request.method, request.url.path, start))
        if route is None:
            route = self.routes.get((request.method, request.url.path, None))
        if route is None:
            return httpx.Response(404, text=f"No route for {request.method} {request.url}")
        if isinstance(route, dict):
            return httpx.Response(200, json=route)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return route
        return await route(request)


@pytest.fixture
def fake_server() -> FakeBitbucket:
    """An in-memory Bitbucket Server."""
    return FakeBitbucket()


@pytest_asyncio.fixture
async def http_client(fake_server: FakeBitbucket) -> AsyncGenerator[httpx.AsyncClient]:
    """Shared transport routed to the fake server."""
    client = build_async_client(
        ClientConfig(url=BASE_URL), transport=httpx.MockTransport(fake_server.handle)
    )
    yield client
    await client.aclose()


@pytest.fixture
def client(http_client: httpx.AsyncClient) -> HttpBucketListClient:
    """Client without authentication."""
    return HttpBucketListClient(BASE_URL, NoOpAuthenticator(), http_client)


# Sample payloads, shaped like real Bitbucket Server responses (including fields we don't model)
@pytest.fixture
def user_payload() -> Callable[..., dict[str, Any]]:
    """Build a user payload."""

    def build(name: str = "joe", user_id: int = 1) -> dict[str, Any]:
        return {
            "name": name,
            "emailAddress": f"{name}@example.com",
            "id": user_id,
            "displayName": name.title(),
            "active": True,
            "slug": name,
            "type": "NORMAL",
        }

    return build


@pytest.fixture
def pr_payload(user_payload: Callable[..., dict[str, Any]]) -> Callable[..., dict[str, Any]]:
    """Build a pull request payload."""

    def build(pr_id: int = 2, created: int = CREATED_MILLIS) -> dict[str, Any]:
        return {
            "id": pr_id,
            "version": 0,
            "title": f"PR {pr_id}",
            "description": "Does a thing",
            "state": "OPEN",
            "open": True,
            "closed": False,
            "createdDate": created,
            "updatedDate": UPDATED_MILLIS,
            "fromRef": {"id": "refs/heads/feature", "displayId": "feature"},
            "toRef": {"id": "refs/heads/master", "displayId": "master"},
            "locked": False,
            "author": {"user": user_payload(), "role": "AUTHOR", "approved": False},
            "reviewers": [
                {"user": user_payload("jane", 2), "role": "REVIEWER", "approved": True},
            ],
            "participants": [],
            "links": {"self": [{"href": f"{BASE_URL}/projects/PROJ/repos/repo/pull-requests/{pr_id}"}]},
        }

    return build


@pytest.fixture
def page_payload() -> Callable[..., dict[str, Any]]:
    """Wrap values in a paged response envelope."""

    def build(
        values: list[dict[str, Any]],
        *,
        start: int = 0,
        limit: int = 25,
        is_last_page: bool = True,
        next_page_start: int | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "size": len(values),
            "limit": limit,
            "isLastPage": is_last_page,
            "start": start,
            "values": values,
        }
        if not is_last_page:
            payload["nextPageStart"] = (
                next_page_start if next_page_start is not None else start + len(values)
            )
        return payload

    return build


@pytest.fixture
def activity_page(
    user_payload: Callable[..., dict[str, Any]], page_payload: Callable[..., dict[str, Any]]
) -> dict[str, Any]:
    """One page of activity: a comment thread, an approval and the opening."""
    joe = user_payload()
    jane = user_payload("jane", 2)
    comment = {
        "id": 10,
        "version": 0,
        "text": "I'm a comment!",
        "author": joe,
        "createdDate": UPDATED_MILLIS,
        "updatedDate": UPDATED_MILLIS,
        "comments": [
            {
                "id": 11,
                "text": "I'm a reply",
                "author": jane,
                "createdDate": UPDATED_MILLIS,
                "comments": [
                    {"id": 12, "text": "Nested reply", "author": joe, "createdDate": UPDATED_MILLIS},
                ],
            }
        ],
        "tasks": [],
    }
    return page_payload(
        [
            {"id": 38473, "createdDate": UPDATED_MILLIS, "user": jane, "action": "APPROVED"},
            {"id": 38472, "createdDate": UPDATED_MILLIS, "user": jane, "action": "UPDATED"},
            {
                "id": 38471,
                "createdDate": UPDATED_MILLIS,
                "user": joe,
                "action": "COMMENTED",
                "commentAction": "ADDED",
                "comment": comment,
                "commentAnchor": {"line": 1, "path": "README.md"},
            },
            {"id": 38470, "createdDate": UPDATED_MILLIS, "user": joe, "action": "OPENED"},
        ]
    )


@pytest.fixture
def commits_page(page_payload: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    """One page of commits by two authors."""
    return page_payload(
        [
            {
                "id": "commit id 1",
                "displayId": "commit1",
                "author": {"name": "Joe", "emailAddress": "joe@example.com"},
                "authorTimestamp": CREATED_MILLIS,
                "message": "First",
                "parents": [],
            },
            {
                "id": "commit id 2",
                "displayId": "commit2",
                "author": {"name": "Jane", "emailAddress": "jane@example.com"},
                "authorTimestamp": UPDATED_MILLIS,
                "message": "Second",
                "parents": [{"id": "commit id 1"}],
            },
        ]
    )


@pytest.fixture
def diff_payload() -> dict[str, Any]:
    """A diff with one modified and one added file."""
    return {
        "fromHash": "16fb16e8afbe6c4087d39feddd68bdc881e302a2",
        "toHash": "1830d0529a30d3d7253935d918ee0e34e7680c64",
        "contextLines": 0,
        "whitespace": "IGNORE_ALL",
        "diffs": [
            {
                "source": {
                    "components": ["README.md"],
                    "parent": "",
                    "name": "README.md",
                    "extension": "md",
                    "toString": "README.md",
                },
                "destination": {
                    "components": ["README.md"],
                    "parent": "",
                    "name": "README.md",
                    "extension": "md",
                    "toString": "README.md",
                },
                "hunks": [
                    {
                        "sourceLine": 3,
                        "sourceSpan": 1,
                        "destinationLine": 3,
                        "destinationSpan": 2,
                        "segments": [],
                        "truncated": False,
                    }
                ],
                "truncated": False,
            },
            {
                "source": None,
                "destination": {
                    "components": ["Tests", "Controllers", "MyAwesomeControllerTests.swift"],
                    "parent": "Tests/Controllers",
                    "name": "MyAwesomeControllerTests.swift",
                    "extension": "swift",
                    "toString": "Tests/Controllers/MyAwesomeControllerTests.swift",
                },
                "hunks": [
                    {"sourceLine": 0, "sourceSpan": 0, "destinationLine": 1, "destinationSpan": 46},
                    {"sourceLine": 0, "sourceSpan": 0, "destinationLine": 48, "destinationSpan": 3},
                ],
                "truncated": False,
            },
        ],
    }
