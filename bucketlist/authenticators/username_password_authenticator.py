"""HTTP basic authentication."""

from __future__ import annotations

import base64

import httpx


class UsernamePasswordAuthenticator:
    """Adds an ``Authorization: Basic`` header built from a username and password."""

    def __init__(self, username: str, password: str):
        token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        self._header = f"Basic {token}"

    def authenticate(self, request: httpx.Request) -> httpx.Request:
        request.headers["Authorization"] = self._header
        return request
