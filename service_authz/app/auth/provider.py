"""
Authentication providers.

The engine only needs the ``verify`` capability; where credentials live is
up to the provider. The in-memory provider backs the reference deployment
and tests.
"""

import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from shared.errors import AuthenticationError, PolicyConfigurationError
from shared.logging import get_logger
from ..policy.defaults import DEFAULT_USERS
from ..policy.loader import read_yaml_document
from ..principal.models import Principal, validate_role_name


@dataclass(frozen=True)
class BasicCredentials:
    """Username and secret from a basic challenge-response header."""
    username: str
    password: str = field(repr=False)


class AuthenticationProvider(ABC):
    """External capability that turns credentials into a principal."""

    @abstractmethod
    def verify(self, credentials: BasicCredentials) -> Principal:
        """Return the principal for ``credentials`` or raise ``AuthenticationError``.

        Implementations may block (for example on a credential store); callers
        run them off the event loop.
        """


class UserRecord(BaseModel):
    """A user entry in the in-memory directory."""
    username: str = Field(..., min_length=1)
    password: str
    roles: List[str] = Field(..., min_length=1)

    @field_validator("roles")
    @classmethod
    def check_roles(cls, roles: List[str]) -> List[str]:
        return [validate_role_name(role) for role in roles]


class UserDirectory(BaseModel):
    users: List[UserRecord] = Field(default_factory=list)


class InMemoryAuthenticationProvider(AuthenticationProvider):
    """Verify credentials against a static user directory."""

    # Compared against when the username is unknown so both paths do the same work.
    _UNKNOWN_USER_SECRET = b"\x00" * 32

    def __init__(self, users: Iterable[UserRecord]):
        self.logger = get_logger("authz.auth_provider")
        self._users: Dict[str, UserRecord] = {}
        for user in users:
            if user.username in self._users:
                raise PolicyConfigurationError(f"Duplicate user {user.username!r}")
            self._users[user.username] = user

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "InMemoryAuthenticationProvider":
        try:
            directory = UserDirectory.model_validate(document)
        except PydanticValidationError as e:
            raise PolicyConfigurationError(f"Invalid user directory: {e}") from e
        return cls(directory.users)

    @property
    def usernames(self) -> List[str]:
        return sorted(self._users)

    def verify(self, credentials: BasicCredentials) -> Principal:
        user = self._users.get(credentials.username)
        expected = user.password.encode("utf-8") if user else self._UNKNOWN_USER_SECRET
        matches = hmac.compare_digest(expected, credentials.password.encode("utf-8"))

        if user is None or not matches:
            raise AuthenticationError("Bad credentials", details={"username": credentials.username})

        return Principal(user.username, frozenset(user.roles))


def load_user_directory(users_file: Optional[str] = None) -> InMemoryAuthenticationProvider:
    """Build the in-memory provider from ``users_file`` or the built-in users."""
    document = read_yaml_document(users_file) if users_file else DEFAULT_USERS
    return InMemoryAuthenticationProvider.from_document(document)
