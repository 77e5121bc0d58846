"""
Authentication package.

Resolves the acting principal from inbound credentials through a pluggable
authentication provider, and carries the result through the request in a
context variable.
"""

from .context import (
    ANONYMOUS,
    AuthenticationResult,
    get_current_authentication,
    security_context,
)
from .provider import (
    AuthenticationProvider,
    BasicCredentials,
    InMemoryAuthenticationProvider,
    load_user_directory,
)
from .resolver import AuthenticationContextResolver, parse_basic_authorization

__all__ = [
    "ANONYMOUS",
    "AuthenticationContextResolver",
    "AuthenticationProvider",
    "AuthenticationResult",
    "BasicCredentials",
    "InMemoryAuthenticationProvider",
    "get_current_authentication",
    "load_user_directory",
    "parse_basic_authorization",
    "security_context",
]
