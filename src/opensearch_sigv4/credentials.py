"""AWS credential resolution.

Credentials are looked up through botocore's default provider chain
(env vars, ~/.aws/credentials and ~/.aws/config, container and instance
metadata, assumed roles) and frozen into an immutable ``Credentials``
value. The value is resolved once per client and never refreshed: when
temporary credentials expire, requests start failing with 403 and a new
client has to be built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import botocore.session
from botocore.credentials import RefreshableCredentials
from botocore.exceptions import BotoCoreError, ClientError

from opensearch_sigv4.exceptions import CredentialResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """An immutable snapshot of AWS credentials.

    Attribute names match botocore's ``ReadOnlyCredentials`` so an instance
    can be passed directly to ``botocore.auth.SigV4Auth``.

    Attributes:
        access_key: The AWS access key id.
        secret_key: The AWS secret access key.
        token: Session token for temporary (STS) credentials.
        expiration: When temporary credentials stop being valid, if known.
    """

    access_key: str
    secret_key: str = field(repr=False)
    token: Optional[str] = field(default=None, repr=False)
    expiration: Optional[datetime] = None

    @property
    def is_temporary(self) -> bool:
        return bool(self.token)


class CredentialSource:
    """Resolves credentials from botocore's default credential chain.

    Args:
        session: A botocore session to resolve from. A new one is created
            when omitted.
        profile: Named profile from the shared AWS config files. Ignored
            when ``session`` is given.
    """

    def __init__(
        self,
        session: Optional[botocore.session.Session] = None,
        profile: Optional[str] = None,
    ) -> None:
        self._session = session
        self._profile = profile

    @property
    def session(self) -> botocore.session.Session:
        if self._session is None:
            if self._profile:
                self._session = botocore.session.Session(profile=self._profile)
            else:
                self._session = botocore.session.get_session()
        return self._session

    def resolve(self) -> Credentials:
        """Look up credentials once and return a frozen copy.

        Raises:
            CredentialResolutionError: No provider yielded credentials, or
                a provider failed while being consulted.
        """
        try:
            resolved = self.session.get_credentials()
            frozen = resolved.get_frozen_credentials() if resolved else None
        except (BotoCoreError, ClientError) as exc:
            raise CredentialResolutionError(f"AWS credential lookup failed: {exc}") from exc

        if frozen is None or not frozen.access_key or not frozen.secret_key:
            raise CredentialResolutionError(
                "No AWS credentials found. Configure credentials via environment "
                "variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY), "
                "~/.aws/credentials, or an IAM role."
            )

        # Best effort: botocore only exposes the expiry of refreshable credentials privately.
        expiration = None
        if isinstance(resolved, RefreshableCredentials):
            expiration = getattr(resolved, "_expiry_time", None)

        logger.info("Resolved AWS credentials (method=%s)", getattr(resolved, "method", None))
        return Credentials(
            access_key=frozen.access_key,
            secret_key=frozen.secret_key,
            token=frozen.token or None,
            expiration=expiration,
        )

    def region(self) -> Optional[str]:
        """Return the region configured for this session, if any.

        Raises:
            CredentialResolutionError: The session's profile or config
                files could not be read.
        """
        try:
            return self.session.get_config_variable("region") or None
        except BotoCoreError as exc:
            raise CredentialResolutionError(f"AWS region lookup failed: {exc}") from exc
