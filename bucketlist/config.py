"""Configuration management."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import httpx
import yaml

from bucketlist.authenticators import (
    Authenticator,
    NoOpAuthenticator,
    UsernamePasswordAuthenticator,
)
from bucketlist.clients.http_client import HttpBucketListClient
from bucketlist.models import ClientConfig
from bucketlist.transport import build_async_client

logger = logging.getLogger(__name__)


def load_config(config_path: Path) -> ClientConfig:
    """Load connection settings from a YAML file.

    Keeping the password in a file (or the environment) keeps it out of shell
    history and process listings. ``BUCKETLIST_USERNAME`` and
    ``BUCKETLIST_PASSWORD`` fill in credentials the file leaves out.
    """
    with open(config_path) as f:
        config_data = yaml.safe_load(f) or {}

    if not isinstance(config_data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping of settings")

    if not config_data.get("username") and os.getenv("BUCKETLIST_USERNAME"):
        config_data["username"] = os.getenv("BUCKETLIST_USERNAME")
    if config_data.get("password") is None and os.getenv("BUCKETLIST_PASSWORD") is not None:
        config_data["password"] = os.getenv("BUCKETLIST_PASSWORD")

    return ClientConfig(**config_data)


def get_authenticator(config: ClientConfig) -> Authenticator:
    """Basic auth when the config carries credentials, pass-through otherwise."""
    if config.username and config.password is not None:
        return UsernamePasswordAuthenticator(config.username, config.password)
    logger.debug(f"No credentials configured for {config.url}, sending unauthenticated requests")
    return NoOpAuthenticator()


def get_client(
    config: ClientConfig, http_client: httpx.AsyncClient | None = None
) -> HttpBucketListClient:
    """Build a client for the configured server.

    The caller owns the returned client's ``http_client`` and should close it
    (``await client.http_client.aclose()``) when done.
    """
    return HttpBucketListClient(
        config.url,
        get_authenticator(config),
        http_client or build_async_client(config),
        max_pages=config.max_pages,
    )
