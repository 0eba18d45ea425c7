"""Errors raised by opensearch-sigv4.

Network and HTTP status failures are not wrapped: they surface as the
opensearch-py exceptions the client already raises, re-exported here so
callers can import everything from one place.
"""

from opensearchpy.exceptions import (
    AuthorizationException,
    ConnectionError,
    ConnectionTimeout,
    SSLError,
    TransportError,
)

__all__ = [
    "SigV4Error",
    "CredentialResolutionError",
    "SigningError",
    "ConfigurationError",
    "AuthorizationException",
    "ConnectionError",
    "ConnectionTimeout",
    "SSLError",
    "TransportError",
]


class SigV4Error(Exception):
    """Base class for errors raised by this package."""


class CredentialResolutionError(SigV4Error):
    """No provider in the AWS credential chain yielded usable credentials."""


class SigningError(SigV4Error, ValueError):
    """A request could not be canonicalized for signing."""


class ConfigurationError(SigV4Error, ValueError):
    """The client or connection was configured inconsistently."""
