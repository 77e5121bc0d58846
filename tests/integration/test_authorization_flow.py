"""
Integration tests for route and method authorization working together.
"""

import pytest
from fastapi.testclient import TestClient

from service_authz.app.main import create_app
from shared.test_helpers import TestDataFactory, assert_error_body, basic_auth_header

UNAUTHORIZED_MESSAGE = "Full authentication is required to access this resource"


class TestAuthorizationFlow:
    """End-to-end scenarios against the reference deployment."""

    @pytest.fixture
    def client(self):
        return TestClient(create_app())

    @pytest.fixture
    def user(self):
        return basic_auth_header("user", "password")

    @pytest.fixture
    def admin(self):
        return basic_auth_header("admin", "password")

    @pytest.fixture
    def item_id(self, client, admin):
        response = client.post("/items", json=TestDataFactory.create_test_item(), headers=admin)
        assert response.status_code == 201
        return int(response.headers["Location"].rsplit("/", 1)[1])

    def test_scenario_unguarded_list_permitted(self, client):
        """No rule matches GET /employees: permitted without credentials."""
        response = client.get("/employees")

        assert response.status_code == 200
        assert response.json() == []

    def test_scenario_anonymous_create_employee(self, client):
        response = client.post("/employees", json=TestDataFactory.create_test_employee())

        assert response.status_code == 401
        assert_error_body(response.json(), 401, "Unauthorized", UNAUTHORIZED_MESSAGE, "/employees")

    def test_scenario_user_create_employee_denied(self, client, user):
        response = client.post("/employees", json=TestDataFactory.create_test_employee(), headers=user)

        assert response.status_code == 403
        assert_error_body(response.json(), 403, "Forbidden", "Access is denied", "/employees")

    def test_scenario_admin_create_employee(self, client, admin):
        response = client.post("/employees", json=TestDataFactory.create_test_employee(), headers=admin)

        assert response.status_code == 201
        assert response.headers["Location"].endswith("/employees/1")
        assert response.content == b""

    def test_scenario_anonymous_list_items(self, client):
        response = client.get("/items")

        assert response.status_code == 401
        assert_error_body(response.json(), 401, "Unauthorized", UNAUTHORIZED_MESSAGE, "/items")

    def test_scenario_user_delete_item_denied_by_method_layer(self, client, user, item_id):
        """Route layer admits USER to /items; the method layer still needs ADMIN."""
        route_result = client.app.state.authz_service.route_filter.check(
            "DELETE", f"/items/{item_id}",
            client.app.state.authz_service.resolver.resolve(user["Authorization"]),
        )
        assert route_result.allowed

        response = client.delete(f"/items/{item_id}", headers=user)

        assert response.status_code == 403
        assert_error_body(response.json(), 403, "Forbidden", "Access is denied", f"/items/{item_id}")
        assert client.get(f"/items/{item_id}", headers=user).status_code == 200

    def test_user_create_item_denied_by_method_layer(self, client, user):
        response = client.post("/items", json=TestDataFactory.create_test_item(), headers=user)

        assert response.status_code == 403
        assert client.get("/items", headers=user).json() == []

    def test_user_reads_items(self, client, user, item_id):
        response = client.get("/items", headers=user)

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [item_id]

    def test_admin_full_item_lifecycle(self, client, admin, item_id):
        assert client.put(f"/items/{item_id}", json={"name": "Anduril"}, headers=admin).status_code == 200
        assert client.patch(f"/items/{item_id}", json={"owner": "Aragorn"}, headers=admin).json() == {
            "id": item_id, "name": "Anduril", "owner": "Aragorn"
        }
        assert client.delete(f"/items/{item_id}", headers=admin).status_code == 204
        assert client.get(f"/items/{item_id}", headers=admin).status_code == 404

    @pytest.mark.parametrize("method,path", [
        ("POST", "/employees"),
        ("PUT", "/employees/1"),
        ("PATCH", "/employees/1"),
        ("GET", "/items"),
        ("GET", "/items/1"),
        ("POST", "/items"),
        ("DELETE", "/items/1"),
    ])
    def test_guarded_surfaces_without_credentials_are_401(self, client, method, path):
        response = client.request(method, path, json={"name": "x"})

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    @pytest.mark.parametrize("method,path", [
        ("POST", "/employees"),
        ("PUT", "/employees/1"),
        ("PATCH", "/employees/1"),
        ("POST", "/items"),
        ("PUT", "/items/1"),
        ("DELETE", "/items/1"),
    ])
    def test_valid_credentials_missing_role_are_403(self, client, user, method, path):
        response = client.request(method, path, json={"name": "x"}, headers=user)

        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"

    def test_non_ascii_basic_token_is_401(self, client):
        response = client.get("/items", headers={"Authorization": "Basic été".encode("latin-1")})

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == 'Basic realm="Realm"'
        assert_error_body(response.json(), 401, "Unauthorized", UNAUTHORIZED_MESSAGE, "/items")

    def test_denied_bodies_do_not_reveal_existence(self, client, user, item_id):
        existing = client.delete(f"/items/{item_id}", headers=user).json()
        missing = client.delete("/items/999", headers=user).json()

        for body in (existing, missing):
            body.pop("timestamp")
            body.pop("path")
        assert existing == missing

    def test_normalized_paths_cannot_bypass_route_rules(self, client):
        for path in ("/employees/", "/employees/.", "/items/../employees"):
            response = client.post(path, json=TestDataFactory.create_test_employee())
            assert response.status_code == 401, path

    def test_repeated_requests_same_outcome(self, client, user):
        statuses = {client.post("/employees", json={}, headers=user).status_code for _ in range(3)}

        assert statuses == {403}
