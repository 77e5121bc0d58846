"""
Authentication context resolver.

Turns the raw ``Authorization`` header into an ``AuthenticationResult``.
Bad, missing or rejected credentials never raise: they come back as an
explicit unauthenticated result so callers can tell "who are you?" apart
from "you may not".
"""

import base64
import binascii
from typing import Iterable, Mapping, Optional

from fastapi.concurrency import run_in_threadpool

from shared.errors import AuthenticationError, MalformedCredentialsError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..principal.models import expand_roles
from .context import ANONYMOUS, AuthenticationResult
from .provider import AuthenticationProvider, BasicCredentials

BASIC_SCHEME = "basic"


def parse_basic_authorization(header: str) -> BasicCredentials:
    """Parse ``Basic base64(username:password)``."""
    scheme, _, param = header.strip().partition(" ")
    if scheme.lower() != BASIC_SCHEME:
        raise MalformedCredentialsError("Unsupported authorization scheme")

    try:
        token = param.strip().encode("ascii")
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except (UnicodeEncodeError, binascii.Error, UnicodeDecodeError) as e:
        raise MalformedCredentialsError("Invalid basic authentication token") from e

    username, separator, password = decoded.partition(":")
    if not separator or not username:
        raise MalformedCredentialsError("Invalid basic authentication token")

    return BasicCredentials(username=username, password=password)


class AuthenticationContextResolver:
    """Resolve a principal per request. Nothing is cached between requests."""

    def __init__(self, provider: AuthenticationProvider,
                 role_hierarchy: Optional[Mapping[str, Iterable[str]]] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.provider = provider
        self.role_hierarchy = role_hierarchy or {}
        self.metrics = metrics
        self.logger = get_logger("authz.auth_resolver")

    def resolve(self, authorization: Optional[str]) -> AuthenticationResult:
        """Resolve the ``Authorization`` header value. May block on the provider."""
        if not authorization:
            self._record("absent")
            return ANONYMOUS

        try:
            credentials = parse_basic_authorization(authorization)
        except MalformedCredentialsError as e:
            self.logger.warning("Malformed credentials", error=e.message)
            self._record("malformed")
            return AuthenticationResult.unauthenticated(e.message)

        try:
            principal = self.provider.verify(credentials)
        except AuthenticationError as e:
            self.logger.warning("Authentication failed", username=credentials.username, error=e.message)
            self._record("failure")
            return AuthenticationResult.unauthenticated(e.message)

        if self.role_hierarchy:
            principal = principal.with_roles(expand_roles(principal.roles, self.role_hierarchy))

        self.logger.info("Request authenticated", user_id=principal.identifier, roles=sorted(principal.roles))
        self._record("success")
        return AuthenticationResult.authenticated(principal)

    async def resolve_async(self, authorization: Optional[str]) -> AuthenticationResult:
        """Resolve in the threadpool."""
        return await run_in_threadpool(self.resolve, authorization)

    def _record(self, outcome: str):
        if self.metrics:
            self.metrics.record_authentication(outcome)
