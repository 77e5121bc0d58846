"""
Per-request security context.

The route filter binds the resolved authentication for the duration of
dispatch; the method interceptor reads it back. Context variables keep
concurrent requests apart without any shared mutable state.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional

from ..principal.models import Principal


@dataclass(frozen=True)
class AuthenticationResult:
    """Resolved principal, or the explicit absence of one."""
    principal: Optional[Principal] = None
    failure_reason: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    @classmethod
    def authenticated(cls, principal: Principal) -> "AuthenticationResult":
        return cls(principal=principal)

    @classmethod
    def unauthenticated(cls, reason: str) -> "AuthenticationResult":
        return cls(failure_reason=reason)


ANONYMOUS = AuthenticationResult.unauthenticated("No credentials")

_current_authentication: ContextVar[AuthenticationResult] = ContextVar(
    "current_authentication", default=ANONYMOUS
)


def get_current_authentication() -> AuthenticationResult:
    return _current_authentication.get()


@contextmanager
def security_context(authentication: AuthenticationResult) -> Iterator[AuthenticationResult]:
    """Bind ``authentication`` as the current one until the block exits."""
    token = _current_authentication.set(authentication)
    try:
        yield authentication
    finally:
        _current_authentication.reset(token)
