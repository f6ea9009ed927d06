"""Pull-request API clients."""

from bucketlist.clients.abstract_client import AbstractBucketListClient
from bucketlist.clients.http_client import HttpBucketListClient

__all__ = ["AbstractBucketListClient", "HttpBucketListClient"]
