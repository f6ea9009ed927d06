"""Pass-through authenticator."""

from __future__ import annotations

import httpx


class NoOpAuthenticator:
    """Leaves requests untouched, for pre-authenticated transports and tests."""

    def authenticate(self, request: httpx.Request) -> httpx.Request:
        return request
