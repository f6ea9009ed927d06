"""Authenticator capability."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx


@runtime_checkable
class Authenticator(Protocol):
    """Decorates an outgoing request with credentials.

    Implementations must not keep per-request state: the same authenticator is
    applied to every request of every stream, concurrently.
    """

    def authenticate(self, request: httpx.Request) -> httpx.Request: ...
