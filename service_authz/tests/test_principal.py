"""
Unit tests for the principal and role model.
"""

import pytest

from service_authz.app.principal.models import Principal, has_role, expand_roles


class TestPrincipal:
    """Test cases for Principal."""

    def test_has_role_exact_match(self):
        """Role checks are exact and case-sensitive."""
        principal = Principal("alice", frozenset({"USER"}))

        assert has_role(principal, "USER") is True
        assert has_role(principal, "user") is False
        assert has_role(principal, "USE") is False

    def test_roles_are_flat(self):
        """ADMIN does not imply USER."""
        principal = Principal("root", frozenset({"ADMIN"}))

        assert principal.has_role("ADMIN")
        assert not principal.has_role("USER")

    def test_equality_by_identifier(self):
        """Principals with the same identifier are equal regardless of roles."""
        first = Principal("alice", frozenset({"USER"}))
        second = Principal("alice", frozenset({"USER", "ADMIN"}))

        assert first == second
        assert hash(first) == hash(second)
        assert first != Principal("bob", frozenset({"USER"}))

    def test_roles_coerced_to_frozenset(self):
        """Any iterable of role names is accepted."""
        principal = Principal("alice", ["USER", "USER", "ADMIN"])

        assert principal.roles == frozenset({"USER", "ADMIN"})

    def test_empty_role_set_allowed(self):
        """The model itself accepts an empty role set."""
        principal = Principal("alice")

        assert principal.roles == frozenset()
        assert not principal.has_role("USER")

    @pytest.mark.parametrize("role", ["", "   ", None])
    def test_invalid_role_names_rejected(self, role):
        """Role names must be non-empty strings."""
        with pytest.raises(ValueError):
            Principal("alice", [role])

    def test_empty_identifier_rejected(self):
        """Identifier is required."""
        with pytest.raises(ValueError):
            Principal("", frozenset({"USER"}))

    def test_with_roles_keeps_identifier(self):
        """with_roles returns a new principal."""
        principal = Principal("alice", frozenset({"USER"}))
        widened = principal.with_roles({"USER", "ADMIN"})

        assert widened.identifier == "alice"
        assert widened.roles == frozenset({"USER", "ADMIN"})
        assert principal.roles == frozenset({"USER"})


class TestExpandRoles:
    """Test cases for explicit role expansion."""

    def test_no_hierarchy_is_identity(self):
        assert expand_roles({"ADMIN"}, {}) == frozenset({"ADMIN"})

    def test_transitive_expansion(self):
        hierarchy = {"ADMIN": ["MANAGER"], "MANAGER": ["USER"]}

        assert expand_roles({"ADMIN"}, hierarchy) == frozenset({"ADMIN", "MANAGER", "USER"})

    def test_cycles_terminate(self):
        hierarchy = {"A": ["B"], "B": ["A"]}

        assert expand_roles({"A"}, hierarchy) == frozenset({"A", "B"})
