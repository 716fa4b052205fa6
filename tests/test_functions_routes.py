"""Tests for the /functions/v1 privileged procedures."""

from tests.conftest import ADMIN_ID


def _operator_body(**overrides):
    body = {"email": "op@example.com", "password": "pw", "first_name": "Dana", "last_name": "Levi"}
    body.update(overrides)
    return body


class TestFunctionEndpoints:
    """create-/update-/delete-<entity>"""

    def test_create_operator(self, client, fake_supabase, admin_headers) -> None:
        response = client.post("/functions/v1/create-operator", json=_operator_body(), headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Operator created successfully"
        assert data["operator"]["first_name"] == "Dana"
        assert data["operator"]["created_by"] == ADMIN_ID
        [role] = fake_supabase.rows("user_roles", user_id=data["operator"]["user_id"])
        assert role["role"] == "operator"

    def test_field_operator_answers_under_operator_key(self, client, admin_headers) -> None:
        response = client.post(
            "/functions/v1/create-field-operator", json=_operator_body(domain="electric"), headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["operator"]["domain"] == "electric"

    def test_update_service_provider(self, client, fake_supabase, admin_headers) -> None:
        fake_supabase.add_row("service_providers", {"id": "P1", "user_id": "U1", "first_name": "Eli", "status": "inactive"})
        response = client.post(
            "/functions/v1/update-service-provider",
            json={"id": "P1", "status": "active", "service_type_ids": ["st-1"]},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Service provider updated successfully"
        assert data["provider"]["status"] == "active"
        assert data["provider"]["first_name"] == "Eli"
        assert len(fake_supabase.rows("service_provider_types", provider_id="P1")) == 1

    def test_delete_store(self, client, fake_supabase, admin_headers) -> None:
        fake_supabase.auth.add_session("store-token", "U9", "deli@example.com")
        fake_supabase.add_row("stores", {"id": "S1", "user_id": "U9", "name": "Deli"})
        response = client.post("/functions/v1/delete-store", json={"id": "S1"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Store deleted successfully"}
        assert fake_supabase.rows("stores") == []
        assert "U9" not in fake_supabase.auth.admin.users

    def test_unknown_function(self, client, admin_headers) -> None:
        response = client.post("/functions/v1/create-widget", json={}, headers=admin_headers)
        assert response.status_code == 404
        assert "error" in response.json()

    def test_missing_token(self, client) -> None:
        response = client.post("/functions/v1/create-operator", json=_operator_body())
        assert response.status_code == 401
        assert response.json() == {"error": "Missing bearer token"}

    def test_invalid_token(self, client) -> None:
        response = client.post(
            "/functions/v1/create-operator", json=_operator_body(), headers={"Authorization": "Bearer bogus"}
        )
        assert response.status_code == 401

    def test_operator_cannot_delete(self, client, operator_headers) -> None:
        response = client.post("/functions/v1/delete-operator", json={"id": "x"}, headers=operator_headers)
        assert response.status_code == 403
        assert "can_delete" in response.json()["error"]

    def test_invalid_payload(self, client, admin_headers) -> None:
        response = client.post(
            "/functions/v1/create-operator", json=_operator_body(email="not-an-email"), headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid payload: email"}

    def test_duplicate_email(self, client, admin_headers) -> None:
        client.post("/functions/v1/create-operator", json=_operator_body(), headers=admin_headers)
        response = client.post("/functions/v1/create-operator", json=_operator_body(), headers=admin_headers)
        assert response.status_code == 409
        assert "already been registered" in response.json()["error"]

    def test_datastore_failure_is_reported_as_bad_request(self, client, fake_supabase, admin_headers) -> None:
        fake_supabase.fail("insert", "operators")
        response = client.post("/functions/v1/create-operator", json=_operator_body(), headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "insert on operators failed"
        assert fake_supabase.rows("user_roles") == []

    def test_delete_without_id(self, client, admin_headers) -> None:
        response = client.post("/functions/v1/delete-store", json={}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid payload: id"}

    def test_delete_missing_entity(self, client, admin_headers) -> None:
        response = client.post("/functions/v1/delete-operator", json={"id": "nope"}, headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Operator not found"}
