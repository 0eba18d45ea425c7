"""Client factory for plain and SigV4-signed OpenSearch clients.

``build_client()`` is the single place where the signing decision is made.
With signing off it returns an ordinary ``OpenSearch`` client. With signing
on it resolves AWS credentials once, then wires ``SignedConnection`` in as
the client's connection class so every request is signed without the
caller doing anything:

    # Local, unauthenticated
    client = connect("http://localhost:9200")

    # Amazon OpenSearch Service, IAM auth
    client = connect(
        "https://search-mydomain-abc123.us-east-1.es.amazonaws.com",
        auth="sigv4",
    )
    client.index(index="people", body={"name": "John", "body": "Hello world"})
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from opensearchpy import OpenSearch, RequestsHttpConnection

from opensearch_sigv4.config import ClientConfig, endpoint_hostname
from opensearch_sigv4.connection import SignedConnection
from opensearch_sigv4.credentials import CredentialSource
from opensearch_sigv4.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:9200"

# search-<domain>-<id>.<region>.es.amazonaws.com, <id>.<region>.aoss.amazonaws.com
_REGION_IN_HOST = re.compile(r"\.([a-z]{2}(?:-[a-z]+)+-\d+)\.(?:es|aoss)\.amazonaws\.com$")


def connect(
    endpoint: Optional[str] = None,
    *,
    auth: str = "none",
    region: Optional[str] = None,
    credential_source: Optional[CredentialSource] = None,
    **options: Any,
) -> OpenSearch:
    """Build an OpenSearch client from keyword arguments.

    Args:
        endpoint: Cluster URL. Defaults to http://localhost:9200.
        auth: "none", "sigv4" or "auto" (sign only AWS-hosted endpoints).
        region: AWS region for signing. Auto-detected if not provided.
        credential_source: Where to resolve AWS credentials from. Defaults
            to botocore's credential chain.
        **options: Passed through to ``OpenSearch``.

    Returns:
        The configured client.
    """
    config = ClientConfig(auth=auth, region=region, options=options)
    return build_client(endpoint, config, credential_source=credential_source)


def build_client(
    endpoint: Optional[str] = None,
    config: Optional[ClientConfig] = None,
    *,
    credential_source: Optional[CredentialSource] = None,
) -> OpenSearch:
    """Build an OpenSearch client, signed or not depending on ``config``.

    Raises:
        CredentialResolutionError: Signing is on and no credentials could
            be resolved. No request is sent.
        ConfigurationError: Signing is on and no region could be found, or
            ``connection_class`` was passed alongside signing.
    """
    endpoint = endpoint or DEFAULT_ENDPOINT
    config = config or ClientConfig()

    if not config.signing_enabled(endpoint):
        options = {"connection_class": RequestsHttpConnection, **config.options}
        logger.info("OpenSearch client initialized: endpoint=%s auth=none", endpoint)
        return OpenSearch(hosts=[endpoint], **options)

    if "connection_class" in config.options:
        raise ConfigurationError("connection_class cannot be combined with SigV4 signing")

    credential_source = credential_source or CredentialSource()
    region = _resolve_region(endpoint, config, credential_source)
    credentials = credential_source.resolve()

    logger.info(
        "OpenSearch client initialized: endpoint=%s auth=sigv4 region=%s",
        endpoint,
        region,
    )
    return OpenSearch(
        hosts=[endpoint],
        connection_class=SignedConnection,
        aws_credentials=credentials,
        aws_region=region,
        **config.options,
    )


def region_from_endpoint(endpoint: str) -> Optional[str]:
    """Extract the region from an AWS OpenSearch endpoint hostname."""
    match = _REGION_IN_HOST.search(endpoint_hostname(endpoint))
    return match.group(1) if match else None


def _resolve_region(endpoint: str, config: ClientConfig, credential_source: CredentialSource) -> str:
    region = config.region or region_from_endpoint(endpoint) or credential_source.region()
    if not region:
        raise ConfigurationError(
            "No AWS region found. Set the region via the 'region' parameter, "
            "AWS_DEFAULT_REGION environment variable, or ~/.aws/config."
        )
    return region
