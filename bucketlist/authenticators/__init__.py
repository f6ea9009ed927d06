"""Request authenticators."""

from bucketlist.authenticators.abstract_authenticator import Authenticator
from bucketlist.authenticators.noop_authenticator import NoOpAuthenticator
from bucketlist.authenticators.username_password_authenticator import (
    UsernamePasswordAuthenticator,
)

__all__ = ["Authenticator", "NoOpAuthenticator", "UsernamePasswordAuthenticator"]
