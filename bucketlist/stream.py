"""Replayable asynchronous sequences.

A ``ReplayStream`` is an append-only log of values followed by exactly one
terminal event: completion or an error. Each ``async for`` over the stream gets
its own cursor that starts at the first value. A consumer that attaches late
still sees everything emitted so far, then waits for the rest.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

from bucketlist.exceptions import StreamCancelled

T = TypeVar("T")


class ReplayStream(Generic[T]):
    """An in-memory event log with independent read cursors."""

    def __init__(self) -> None:
        self._values: list[T] = []
        self._done = False
        self._error: BaseException | None = None
        self._changed = asyncio.Event()
        self._producer: asyncio.Task[None] | None = None

    @property
    def done(self) -> bool:
        return self._done

    @property
    def error(self) -> BaseException | None:
        return self._error

    @property
    def values(self) -> list[T]:
        """Snapshot of everything emitted so far."""
        return list(self._values)

    def emit(self, value: T) -> None:
        if self._done:
            raise RuntimeError("Cannot emit to a stream that has already terminated")
        self._values.append(value)
        self._notify()

    def complete(self) -> None:
        self._terminate(None)

    def fail(self, error: BaseException) -> None:
        self._terminate(error)

    def _terminate(self, error: BaseException | None) -> None:
        if self._done:
            raise RuntimeError("Stream has already terminated")
        self._done = True
        self._error = error
        self._notify()

    def _notify(self) -> None:
        # wake every waiting cursor, then arm a fresh event for the next change
        self._changed.set()
        self._changed = asyncio.Event()

    def attach(self, producer: asyncio.Task[None]) -> None:
        """Keep a reference to the task feeding this stream so it can be cancelled."""
        self._producer = producer

    def cancel(self) -> None:
        """Stop the producer. The stream ends with StreamCancelled if it was still running."""
        if self._producer is not None and not self._producer.done():
            self._producer.cancel()
        elif not self._done:
            self.fail(StreamCancelled("Stream cancelled"))

    async def __aiter__(self) -> AsyncIterator[T]:
        index = 0
        while True:
            if index < len(self._values):
                yield self._values[index]
                index += 1
                continue
            if self._done:
                if self._error is not None:
                    raise self._error
                return
            await self._changed.wait()

    async def wait(self) -> None:
        """Wait for the terminal event, raising the stream's error if there was one."""
        while not self._done:
            await self._changed.wait()
        if self._error is not None:
            raise self._error

    async def to_list(self) -> list[T]:
        """Collect every value once the stream completes."""
        return [value async for value in self]

    async def first(self) -> T:
        """Return the first value, without waiting for the stream to finish."""
        async for value in self:
            return value
        raise LookupError("Stream completed without emitting a value")
