"""Errors raised by bucketlist streams."""

from __future__ import annotations


class BucketListError(Exception):
    """Base class for bucketlist errors."""


class RequestFailure(BucketListError):
    """A request did not produce a usable value."""


class TransportFailure(RequestFailure):
    """The request never produced an HTTP response."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Request failed: {cause}")
        self.cause = cause


class BadStatus(RequestFailure):
    """The server answered with a status outside [200, 300)."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Bad status code: {status_code} with body {body}")
        self.status_code = status_code
        self.body = body


class DecodeFailure(RequestFailure):
    """The response body did not match the expected shape."""


class PageLimitExceeded(RequestFailure):
    """The server kept reporting more pages after max_pages were fetched."""

    def __init__(self, max_pages: int):
        super().__init__(f"Gave up after {max_pages} pages without reaching the last page")
        self.max_pages = max_pages


class StreamCancelled(BucketListError):
    """The stream was cancelled before it finished."""
