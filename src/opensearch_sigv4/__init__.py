"""SigV4 request signing for opensearch-py.

Lets an ``OpenSearch`` client talk to an IAM-authenticated Amazon
OpenSearch Service domain as if it were a plain endpoint.
"""

from opensearch_sigv4.client import build_client, connect
from opensearch_sigv4.config import ClientConfig
from opensearch_sigv4.connection import SignedConnection
from opensearch_sigv4.credentials import Credentials, CredentialSource
from opensearch_sigv4.exceptions import (
    ConfigurationError,
    CredentialResolutionError,
    SigningError,
    SigV4Error,
)
from opensearch_sigv4.signer import OutboundRequest, SignedRequest, sign

__all__ = [
    # Setup
    "connect",
    "build_client",
    "ClientConfig",
    # Credentials
    "Credentials",
    "CredentialSource",
    # Signing
    "sign",
    "OutboundRequest",
    "SignedRequest",
    "SignedConnection",
    # Errors
    "SigV4Error",
    "CredentialResolutionError",
    "SigningError",
    "ConfigurationError",
]
