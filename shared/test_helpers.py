"""
Test helper functions and factory methods for the Access Authorization Service.
"""

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TestUser:
    """Test user data."""
    __test__ = False

    username: str
    roles: List[str] = field(default_factory=list)
    password: str = "password123"

    def to_directory_entry(self) -> Dict[str, Any]:
        return {"username": self.username, "password": self.password, "roles": list(self.roles)}


class TestDataFactory:
    """Factory for creating test data."""
    __test__ = False

    @staticmethod
    def create_test_users() -> List[TestUser]:
        """Create test users."""
        return [
            TestUser(username="john.doe", roles=["USER"]),
            TestUser(username="jane.smith", roles=["USER", "ADMIN"]),
            TestUser(username="auditor", roles=["AUDITOR"]),
        ]

    @staticmethod
    def create_user_directory(users: Optional[List[TestUser]] = None) -> Dict[str, Any]:
        """User directory document for the in-memory provider."""
        users = users if users is not None else TestDataFactory.create_test_users()
        return {"users": [user.to_directory_entry() for user in users]}

    @staticmethod
    def create_test_policy() -> Dict[str, Any]:
        """Policy document mirroring the reference deployment."""
        return {
            "rules": [
                {"scope": "route", "pattern": "/employees", "http_method": "POST", "required_role": "ADMIN"},
                {"scope": "route", "pattern": "/employees/**", "http_method": "PUT", "required_role": "ADMIN"},
                {"scope": "route", "pattern": "/employees/**", "http_method": "PATCH", "required_role": "ADMIN"},
                {"scope": "route", "pattern": "/items/**", "required_role": "USER"},
                {"scope": "method", "resource_type": "items", "required_role": "USER"},
                {"scope": "method", "resource_type": "items", "operation": "create", "required_role": "ADMIN"},
                {"scope": "method", "resource_type": "items", "operation": "update", "required_role": "ADMIN"},
                {"scope": "method", "resource_type": "items", "operation": "delete", "required_role": "ADMIN"},
            ]
        }

    @staticmethod
    def create_test_employee() -> Dict[str, Any]:
        return {"firstName": "Frodo", "lastName": "Baggins", "description": "ring bearer"}

    @staticmethod
    def create_test_item() -> Dict[str, Any]:
        return {"name": "Sting", "description": "Elven short sword"}


def basic_auth_header(username: str, password: str) -> Dict[str, str]:
    """Authorization header for basic authentication."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


def assert_error_body(body: Dict[str, Any], status: int, error: str, message: str, path: str):
    """Check the shape shared by all authorization error responses."""
    assert set(body) == {"timestamp", "status", "error", "message", "path"}
    assert body["status"] == status
    assert body["error"] == error
    assert body["message"] == message
    assert body["path"] == path
    assert body["timestamp"]
