"""
Unit tests for the structlog processors used by the service.
"""

import pytest

from shared.logging import (
    REDACTED, add_component_context, add_principal_context, clear_context,
    redact_credentials, set_request_id, set_user_context
)


class TestLoggingProcessors:
    """Test cases for the shared logging processors."""

    @pytest.fixture(autouse=True)
    def reset_context(self):
        yield
        clear_context()

    def test_component_context(self):
        event = add_component_context(None, "info", {"logger": "authz.route_filter"})

        assert event["service"] == "authz"
        assert event["component"] == "route_filter"

    def test_component_context_plain_logger(self):
        event = add_component_context(None, "info", {"logger": "authz"})

        assert "component" not in event

    def test_principal_context(self):
        set_request_id("req-7")
        set_user_context("jane.smith", frozenset({"USER", "ADMIN"}))

        event = add_principal_context(None, "info", {"event": "Authorization decision"})

        assert event["request_id"] == "req-7"
        assert event["user_id"] == "jane.smith"
        assert event["roles"] == ["ADMIN", "USER"]

    def test_anonymous_request_has_no_principal_fields(self):
        set_request_id("req-8")

        event = add_principal_context(None, "info", {"event": "Request rejected"})

        assert event["request_id"] == "req-8"
        assert "user_id" not in event
        assert "roles" not in event

    def test_explicit_fields_win(self):
        set_user_context("jane.smith", ["USER"])

        event = add_principal_context(None, "info", {"user_id": "other"})

        assert event["user_id"] == "other"

    def test_clear_context(self):
        set_request_id("req-9")
        set_user_context("jane.smith", ["USER"])

        clear_context()

        assert add_principal_context(None, "info", {}) == {}

    def test_credentials_redacted(self):
        event = redact_credentials(None, "warning", {
            "event": "Authentication failed",
            "username": "john.doe",
            "password": "hunter2",
            "Authorization": "Basic am9objpodW50ZXIy",
        })

        assert event["password"] == REDACTED
        assert event["Authorization"] == REDACTED
        assert event["username"] == "john.doe"
