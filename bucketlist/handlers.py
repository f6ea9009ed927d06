"""Turn HTTP responses into stream events.

``ResponseHandler`` owns the envelope shared by every endpoint: send, check the
status, decode, emit. What happens after a value is emitted is decided by a
continuation strategy: ``SingleShot`` stops, ``Paginator`` requests the next
page until the server reports the last one. ``ResponseConsumer`` runs a
handler/continuation pair as a task and maps the outcome onto the stream's
terminal event.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from bucketlist.exceptions import (
    BadStatus,
    DecodeFailure,
    PageLimitExceeded,
    RequestFailure,
    StreamCancelled,
    TransportFailure,
)
from bucketlist.models import PagedResponse
from bucketlist.stream import ReplayStream

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResponseHandler(Generic[T]):
    """Sends a request and emits the decoded body to a stream."""

    def __init__(self, http_client: httpx.AsyncClient, target: Any, stream: ReplayStream[T]):
        self._http = http_client
        self._adapter: TypeAdapter[T] = TypeAdapter(target)
        self._target_name = getattr(target, "__name__", repr(target))
        self.stream = stream

    async def handle(self, request: httpx.Request) -> T:
        """Fetch one value and emit it. Raises a RequestFailure on any failure."""
        response = await self._send(request)
        value = self._decode(request, response)
        self.stream.emit(value)
        return value

    async def _send(self, request: httpx.Request) -> httpx.Response:
        logger.debug(f"{request.method} {request.url}")
        try:
            response = await self._http.send(request)
        except httpx.HTTPError as e:
            logger.warning(f"Request to {request.url} failed: {e}")
            raise TransportFailure(e) from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.warning(f"Bad status code {response.status_code} from {request.url}")
            raise BadStatus(response.status_code, response.text)
        return response

    def _decode(self, request: httpx.Request, response: httpx.Response) -> T:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Got response:\n{response.text}")
        try:
            return self._adapter.validate_json(response.content)
        except ValidationError as e:
            raise DecodeFailure(
                f"Could not decode {self._target_name} from {request.url}: {e}"
            ) from e


class Continuation(Protocol):
    """Decides which requests a handler issues."""

    async def run(self, handler: ResponseHandler[Any]) -> None: ...


class SingleShot:
    """Fetch exactly one value."""

    def __init__(self, request: httpx.Request):
        self.request = request

    async def run(self, handler: ResponseHandler[Any]) -> None:
        await handler.handle(self.request)
        logger.info(f"Fetched {self.request.method} {self.request.url}")


class Paginator:
    """Fetch pages until the server reports the last one.

    The next request is built from the ``nextPageStart`` of the page just
    decoded, and is only sent after that page was emitted, so there is never
    more than one request in flight and pages come out in fetch order.
    """

    def __init__(self, request_for: Callable[[int], httpx.Request], max_pages: int | None = None):
        self.request_for = request_for
        self.max_pages = max_pages

    async def run(self, handler: ResponseHandler[Any]) -> None:
        start = 0
        pages = 0
        while True:
            request = self.request_for(start)
            page: PagedResponse[Any] = await handler.handle(request)
            pages += 1
            if page.is_last_page:
                endpoint = request.url.copy_remove_param("start")
                logger.info(f"Fetched {pages} page(s) from {endpoint}")
                return
            if self.max_pages is not None and pages >= self.max_pages:
                raise PageLimitExceeded(self.max_pages)
            if page.next_page_start is None:
                raise DecodeFailure(f"Page from {request.url} has no nextPageStart")
            start = page.next_page_start


class ResponseConsumer(Generic[T]):
    """Runs a continuation in the background and terminates its stream exactly once."""

    def __init__(self, handler: ResponseHandler[T], continuation: Continuation):
        self.handler = handler
        self.continuation = continuation

    @property
    def stream(self) -> ReplayStream[T]:
        return self.handler.stream

    def start(self) -> ReplayStream[T]:
        """Schedule the producer on the running loop and return its stream."""
        task = asyncio.get_running_loop().create_task(self._drive())
        task.add_done_callback(self._on_done)
        self.stream.attach(task)
        return self.stream

    async def _drive(self) -> None:
        try:
            await self.continuation.run(self.handler)
        except RequestFailure as e:
            self.stream.fail(e)
        except Exception as e:
            logger.exception(f"Unexpected error while producing stream: {e}")
            self.stream.fail(e)
        else:
            self.stream.complete()

    def _on_done(self, task: asyncio.Task[None]) -> None:
        # a task cancelled before or during _drive never reaches a terminal event
        if task.cancelled() and not self.stream.done:
            logger.debug("Stream producer cancelled")
            self.stream.fail(StreamCancelled("Stream cancelled"))
