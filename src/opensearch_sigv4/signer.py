"""SigV4 request signing.

``sign()`` takes a fully formed ``OutboundRequest`` and returns a
``SignedRequest`` carrying the ``Authorization``, ``X-Amz-Date`` and (for
temporary credentials) ``X-Amz-Security-Token`` headers. Canonicalization
and the HMAC chain are botocore's ``SigV4Auth``; the only thing added here
is an injectable clock so signatures can be reproduced in tests.

Every call signs from scratch. A signature is bound to one method, URL,
header set, body and timestamp, so nothing is cached between requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Mapping, Optional

from botocore.auth import SIGV4_TIMESTAMP, SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.exceptions import NoCredentialsError

from opensearch_sigv4.exceptions import SigningError

AUTH_HEADERS = ("Authorization", "X-Amz-Date", "X-Amz-Security-Token")

_DEFAULT_PORTS = {"https": 443, "http": 80}

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OutboundRequest:
    """Everything about an HTTP request that goes into its signature.

    Attributes:
        method: HTTP verb, e.g. "GET" or "POST".
        host: Hostname without scheme or port.
        path: Absolute, already percent-encoded URL path.
        port: TCP port. Omitted from ``url`` when it is the scheme default.
        query: Already encoded query string, without the leading "?".
        headers: Headers to send and sign.
        body: Raw request body, or None.
        scheme: URL scheme.
    """

    method: str
    host: str
    path: str
    port: int = 443
    query: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    scheme: str = "https"

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", dict(self.headers or {}))

    @property
    def url(self) -> str:
        netloc = self.host
        if self.port and self.port != _DEFAULT_PORTS.get(self.scheme):
            netloc = f"{netloc}:{self.port}"
        url = f"{self.scheme}://{netloc}{self.path}"
        if self.query:
            url = f"{url}?{self.query}"
        return url


@dataclass(frozen=True)
class SignedRequest:
    """An ``OutboundRequest`` plus the SigV4 headers computed for it."""

    request: OutboundRequest
    auth_headers: Mapping[str, str]

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def url(self) -> str:
        return self.request.url

    @property
    def body(self) -> Optional[bytes]:
        return self.request.body

    @property
    def headers(self) -> Dict[str, str]:
        """The request's headers with stale auth headers replaced."""
        replaced = {name.lower() for name in self.auth_headers}
        merged = {
            name: value
            for name, value in self.request.headers.items()
            if name.lower() not in replaced
        }
        merged.update(self.auth_headers)
        return merged


class _ClockedSigV4Auth(SigV4Auth):
    """``SigV4Auth`` that reads the signing time from a supplied clock."""

    def __init__(self, credentials, service_name: str, region_name: str, clock: Clock) -> None:
        super().__init__(credentials, service_name, region_name)
        self._clock = clock

    def add_auth(self, request: AWSRequest) -> None:
        if self.credentials is None:
            raise NoCredentialsError()
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        request.context["timestamp"] = now.strftime(SIGV4_TIMESTAMP)
        self._modify_request_before_signing(request)
        canonical_request = self.canonical_request(request)
        string_to_sign = self.string_to_sign(request, canonical_request)
        signature = self.signature(string_to_sign, request)
        self._inject_signature_to_request(request, signature)


def _validate(request: OutboundRequest, credentials) -> None:
    if credentials is None:
        raise SigningError("Cannot sign a request without credentials")
    if not request.method:
        raise SigningError("Cannot sign a request without an HTTP method")
    if not request.host:
        raise SigningError("Cannot sign a request without a host")
    if not request.path or not request.path.startswith("/"):
        raise SigningError(f"Cannot sign a request with path {request.path!r}; expected an absolute path")


def sign(
    request: OutboundRequest,
    credentials,
    service: str,
    region: str,
    *,
    clock: Optional[Clock] = None,
) -> SignedRequest:
    """Sign ``request`` with SigV4 for ``service`` in ``region``.

    Args:
        request: The request to sign. It is not modified.
        credentials: Any object with ``access_key``, ``secret_key`` and
            ``token`` attributes, such as ``Credentials``.
        service: Signing service name, e.g. "es".
        region: AWS region, e.g. "us-east-1".
        clock: Returns the signing instant. Naive datetimes are taken as
            UTC. Defaults to the current time.

    Returns:
        The signed request.

    Raises:
        SigningError: No credentials were given, or the request is missing
            its method, host or path.
    """
    _validate(request, credentials)

    aws_request = AWSRequest(
        method=request.method.upper(),
        url=request.url,
        headers=dict(request.headers),
        data=request.body,
    )
    _ClockedSigV4Auth(credentials, service, region, clock or _utcnow).add_auth(aws_request)

    auth_headers = {}
    for name in AUTH_HEADERS:
        value = aws_request.headers.get(name)
        if value:
            auth_headers[name] = value
    return SignedRequest(request=request, auth_headers=auth_headers)
