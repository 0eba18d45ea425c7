"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from opensearch_sigv4.exceptions import ConfigurationError

AUTH_MODES = ("none", "sigv4", "auto")

# Hostname fragments of AWS-managed OpenSearch endpoints.
_AWS_HOST_PATTERNS = (".amazonaws.com", ".es.", ".aoss.")


def endpoint_hostname(endpoint: str) -> str:
    """Return the hostname of an endpoint given with or without a scheme."""
    if "://" not in endpoint:
        endpoint = f"//{endpoint}"
    return urlparse(endpoint).hostname or ""


def is_aws_endpoint(endpoint: str) -> bool:
    """Detect if an endpoint is an AWS-hosted OpenSearch domain."""
    hostname = endpoint_hostname(endpoint)
    return any(pattern in hostname for pattern in _AWS_HOST_PATTERNS)


@dataclass(frozen=True)
class ClientConfig:
    """How ``build_client`` should wire the client.

    Attributes:
        auth: "none" for a plain client, "sigv4" to always sign, "auto" to
            sign only for AWS-hosted endpoints.
        region: AWS region for signing. Looked up from the AWS config or
            the endpoint hostname when omitted.
        options: Keyword arguments passed through to ``OpenSearch``.
    """

    auth: str = "none"
    region: Optional[str] = None
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.auth not in AUTH_MODES:
            raise ConfigurationError(
                f"Unknown auth mode {self.auth!r}; expected one of {', '.join(AUTH_MODES)}"
            )
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def signing_enabled(self, endpoint: str) -> bool:
        if self.auth == "auto":
            return is_aws_endpoint(endpoint)
        return self.auth == "sigv4"
