"""opensearch-py connection class that signs every request with SigV4.

``SignedConnection`` is handed to ``OpenSearch`` as ``connection_class``.
opensearch-py's ``Transport`` instantiates it once per host and forwards
the client's extra keyword arguments, which is how the resolved
credentials and region arrive here:

    OpenSearch(
        hosts=[{"host": "search-x.us-east-1.es.amazonaws.com"}],
        connection_class=SignedConnection,
        aws_credentials=credentials,
        aws_region="us-east-1",
    )

Each ``perform_request()`` call builds an ``OutboundRequest``, signs it,
sends exactly what was signed with ``requests`` and returns the raw
response tuple. Retries, dead-node handling and response deserialization
stay with the ``Transport``.
"""

from __future__ import annotations

import logging
from typing import Any, Collection, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode

import requests
from opensearchpy.connection import Connection
from opensearchpy.exceptions import ConnectionError, ConnectionTimeout, SSLError

from opensearch_sigv4.exceptions import ConfigurationError
from opensearch_sigv4.signer import OutboundRequest, sign

logger = logging.getLogger(__name__)

SERVICE_NAME = "es"
SIGNED_PORT = 443


class SignedConnection(Connection):
    """A connection to an IAM-authenticated OpenSearch domain.

    The endpoint is always reached over https on port 443; the scheme and
    port of the host entry are ignored.

    Args:
        host: Domain hostname.
        port: Ignored, see above.
        aws_credentials: Resolved ``Credentials`` shared by all requests.
        aws_region: Region used in the signing scope.
        verify_certs: Whether to verify the server certificate.
        ca_certs: Path to a CA bundle, overrides ``verify_certs``.
        client_cert: Path to a client certificate.
        client_key: Path to the client certificate's key.
        **kwargs: Passed to ``opensearchpy.Connection`` (``headers``,
            ``http_compress``, ``url_prefix``, ``timeout``, ...).
    """

    def __init__(
        self,
        host: str = "localhost",
        port: Optional[int] = None,
        aws_credentials: Any = None,
        aws_region: Optional[str] = None,
        verify_certs: bool = True,
        ca_certs: Optional[str] = None,
        client_cert: Optional[str] = None,
        client_key: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        if aws_credentials is None:
            raise ConfigurationError("SignedConnection requires aws_credentials")
        if not aws_region:
            raise ConfigurationError("SignedConnection requires aws_region")

        kwargs.pop("use_ssl", None)
        kwargs.pop("scheme", None)
        super().__init__(host=host, port=SIGNED_PORT, use_ssl=True, scheme="https", **kwargs)

        self.aws_credentials = aws_credentials
        self.aws_region = aws_region

        self.session = requests.Session()
        self.session.verify = ca_certs or verify_certs
        if client_cert:
            self.session.cert = (client_cert, client_key) if client_key else client_cert

        logger.debug(
            "SignedConnection created for %s (requested port=%s, region=%s)",
            self.host,
            port,
            aws_region,
        )

    def _build_request(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]],
        body: Any,
        headers: Optional[Mapping[str, str]],
    ) -> OutboundRequest:
        request_headers = dict(self.headers)
        if headers:
            request_headers.update((name.lower(), value) for name, value in headers.items())

        if isinstance(body, str):
            body = body.encode("utf-8", "surrogatepass")
        if self.http_compress and body:
            body = self._gzip_compress(body)
            request_headers["content-encoding"] = "gzip"

        return OutboundRequest(
            method=method,
            host=self.hostname,
            port=SIGNED_PORT,
            path=f"{self.url_prefix}{url}",
            # SigV4 wants %20 for spaces, not the "+" of quote_plus.
            query=urlencode(params, quote_via=quote) if params else "",
            headers=request_headers,
            body=body,
        )

    def perform_request(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        timeout: Optional[float] = None,
        allow_redirects: bool = True,
        ignore: Collection[int] = (),
        headers: Optional[Mapping[str, str]] = None,
    ) -> Tuple[int, Mapping[str, str], str]:
        signed = sign(
            self._build_request(method, url, params, body, headers),
            self.aws_credentials,
            SERVICE_NAME,
            self.aws_region,
        )

        prepared = self.session.prepare_request(
            requests.Request(
                method=signed.method,
                url=signed.url,
                headers=signed.headers,
                data=signed.body,
            )
        )
        send_kwargs = {
            "timeout": timeout or self.timeout,
            "allow_redirects": allow_redirects,
        }
        send_kwargs.update(self.session.merge_environment_settings(prepared.url, {}, None, None, None))

        try:
            response = self.session.send(prepared, **send_kwargs)
            raw_data = response.content.decode("utf-8", "surrogatepass")
        except requests.exceptions.SSLError as exc:
            raise SSLError("N/A", str(exc), exc) from exc
        except requests.Timeout as exc:
            raise ConnectionTimeout("TIMEOUT", str(exc), exc) from exc
        except requests.RequestException as exc:
            raise ConnectionError("N/A", str(exc), exc) from exc

        if not (200 <= response.status_code < 300) and response.status_code not in ignore:
            self._raise_error(response.status_code, raw_data, response.headers.get("Content-Type"))

        return response.status_code, response.headers, raw_data

    def close(self) -> None:
        self.session.close()
