"""
Principal and role model.

Roles are flat, case-sensitive tags. Holding ``ADMIN`` says nothing about
``USER``; deployments that want implied roles declare them explicitly and
expand them with :func:`expand_roles` before any authorization check.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Mapping


def validate_role_name(role: str) -> str:
    """Return ``role`` unchanged if it is a usable role name."""
    if not isinstance(role, str) or not role.strip():
        raise ValueError(f"Role names must be non-empty strings, got {role!r}")
    return role


@dataclass(frozen=True)
class Principal:
    """An authenticated actor, created once per request and never persisted."""

    identifier: str
    roles: FrozenSet[str] = field(default_factory=frozenset, compare=False)

    def __post_init__(self):
        if not self.identifier:
            raise ValueError("Principal identifier must be a non-empty string")
        object.__setattr__(
            self, "roles", frozenset(validate_role_name(role) for role in self.roles)
        )

    def has_role(self, role_name: str) -> bool:
        return role_name in self.roles

    def with_roles(self, roles: Iterable[str]) -> "Principal":
        return Principal(self.identifier, frozenset(roles))


def has_role(principal: Principal, role_name: str) -> bool:
    """True iff ``role_name`` is in the principal's role set (exact match)."""
    return principal.has_role(role_name)


def expand_roles(roles: Iterable[str], hierarchy: Mapping[str, Iterable[str]]) -> FrozenSet[str]:
    """Close ``roles`` over the implied-role mapping.

    ``hierarchy`` maps a role to the roles it implies; expansion is
    transitive and tolerates cycles.
    """
    expanded = set(roles)
    pending = list(expanded)
    while pending:
        role = pending.pop()
        for implied in hierarchy.get(role, ()):
            if implied not in expanded:
                expanded.add(implied)
                pending.append(implied)
    return frozenset(expanded)
