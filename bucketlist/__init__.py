"""Asynchronous client for the Bitbucket Server pull-request API."""

from bucketlist.clients import AbstractBucketListClient, HttpBucketListClient
from bucketlist.config import get_client, load_config
from bucketlist.models import ClientConfig, PagedResponse, PullRequest
from bucketlist.stream import ReplayStream

__version__ = "0.1.0"
__all__ = [
    "AbstractBucketListClient",
    "ClientConfig",
    "HttpBucketListClient",
    "PagedResponse",
    "PullRequest",
    "ReplayStream",
    "get_client",
    "load_config",
]
