"""
Integration tests for the events and items endpoints.

Tests authentication, field validation, CRUD and per-user scoping.
"""

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

from planner.errors import StoreError

RESOURCES = ["/api/events", "/api/items"]


@pytest.fixture(params=RESOURCES)
def resource(request) -> str:
    return request.param


class TestAuthRequired:
    """Every resource route rejects unauthenticated callers."""

    @pytest.mark.api
    @pytest.mark.parametrize("method,suffix", [
        ("get", ""),
        ("post", ""),
        ("get", "/abc"),
        ("put", "/abc"),
        ("delete", "/abc"),
    ])
    def test_no_token(self, api_client, resource, method, suffix):
        response = getattr(api_client, method)(f"{resource}{suffix}")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    @pytest.mark.api
    def test_expired_token(self, api_client, resource, expired_token):
        """Test an expired token is rejected."""
        response = api_client.get(resource, headers={"Authorization": f"Bearer {expired_token}"})

        assert response.status_code == 401

    @pytest.mark.api
    def test_malformed_header(self, api_client, resource):
        """Test a non-Bearer Authorization header is rejected."""
        response = api_client.get(resource, headers={"Authorization": "Basic YWxpY2U6cGFzcw=="})

        assert response.status_code == 401


class TestCrud:
    """Tests for create, read, update and delete."""

    @pytest.mark.api
    def test_create(self, api_client, auth_headers, signed_up_user, resource):
        """Test a record is created for the caller."""
        response = api_client.post(resource, headers=auth_headers, json={
            "title": "Launch",
            "date": "2030-05-01",
            "notes": "bring snacks",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["user"] == signed_up_user["id"]
        assert data["title"] == "Launch"
        assert data["notes"] == "bring snacks"

    @pytest.mark.api
    def test_create_missing_fields(self, api_client, auth_headers, resource):
        """Test every missing required field is listed."""
        response = api_client.post(resource, headers=auth_headers, json={"notes": "n"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Bad Request: Missing the following fields from the request body: title, date",
            "missing": ["title", "date"],
        }

    @pytest.mark.api
    def test_create_without_body(self, api_client, auth_headers, resource):
        response = api_client.post(resource, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["missing"] == ["title", "date"]

    @pytest.mark.api
    def test_list_in_creation_order(self, api_client, auth_headers, resource):
        """Test list returns the caller's records oldest first."""
        for title in ("first", "second", "third"):
            api_client.post(resource, headers=auth_headers, json={"title": title, "date": "d"})

        response = api_client.get(resource, headers=auth_headers)

        assert response.status_code == 200
        assert [r["title"] for r in response.json()] == ["first", "second", "third"]

    @pytest.mark.api
    def test_get_update_delete(self, api_client, auth_headers, resource):
        """Test the by-id routes on an owned record."""
        created = api_client.post(resource, headers=auth_headers, json={"title": "a", "date": "d"}).json()
        url = f"{resource}/{created['id']}"

        assert api_client.get(url, headers=auth_headers).json() == created

        updated = api_client.put(url, headers=auth_headers, json={"title": "b", "date": "d2"})
        assert updated.status_code == 200
        assert updated.json()["title"] == "b"
        assert updated.json()["id"] == created["id"]

        deleted = api_client.delete(url, headers=auth_headers)
        assert deleted.status_code == 204
        assert deleted.content == b""

        missing = api_client.get(url, headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json() == {"error": "Not found"}

    @pytest.mark.api
    def test_update_missing_fields(self, api_client, auth_headers, resource):
        """Test update applies the same missing-field rule as create."""
        created = api_client.post(resource, headers=auth_headers, json={"title": "a", "date": "d"}).json()

        response = api_client.put(f"{resource}/{created['id']}", headers=auth_headers, json={"title": "b"})

        assert response.status_code == 400
        assert response.json()["missing"] == ["date"]

    @pytest.mark.api
    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_unknown_id(self, api_client, auth_headers, resource, method):
        kwargs = {"json": {"title": "a", "date": "d"}} if method == "put" else {}

        response = getattr(api_client, method)(f"{resource}/does-not-exist", headers=auth_headers, **kwargs)

        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}


class TestOwnership:
    """Records are invisible to everyone but their owner."""

    @pytest.mark.api
    def test_other_users_records_are_hidden(self, api_client, auth_headers, make_user_headers, resource):
        """Test another user cannot list, read, change or delete a record."""
        created = api_client.post(resource, headers=auth_headers, json={"title": "mine", "date": "d"}).json()
        url = f"{resource}/{created['id']}"
        bob = make_user_headers("bob")

        assert api_client.get(resource, headers=bob).json() == []
        assert api_client.get(url, headers=bob).status_code == 404
        assert api_client.put(url, headers=bob, json={"title": "x", "date": "x"}).status_code == 404
        assert api_client.delete(url, headers=bob).status_code == 404

        assert api_client.get(url, headers=auth_headers).json()["title"] == "mine"

    @pytest.mark.api
    def test_owner_cannot_be_overridden(self, api_client, auth_headers, signed_up_user, resource):
        """Test a user field in the body is ignored."""
        response = api_client.post(resource, headers=auth_headers, json={
            "title": "t",
            "date": "d",
            "user": "someone-else",
        })

        assert response.json()["user"] == signed_up_user["id"]


class TestFullFlow:
    """End-to-end walk through signup, login and item CRUD."""

    @pytest.mark.api
    def test_signup_login_and_manage_items(self, api_client):
        signup = api_client.post("/api/users", json={"username": "alice", "password": "password123"})
        assert signup.status_code == 201

        login = api_client.post("/api/auth/login", json={"username": "alice", "password": "password123"})
        headers = {"Authorization": f"Bearer {login.json()['authToken']}"}

        created = api_client.post("/api/items", headers=headers, json={"title": "Milk", "date": "2030-01-01"})
        assert created.status_code == 201

        listing = api_client.get("/api/items", headers=headers)
        assert [i["title"] for i in listing.json()] == ["Milk"]

        assert api_client.get("/api/events", headers=headers).json() == []


class TestServerErrors:
    """Unexpected failures surface as a generic 500."""

    @pytest.mark.api
    def test_store_failure(self, api_app, auth_headers):
        """Test a store failure becomes 500 without leaking details."""
        collection = api_app.state.services.items.collection
        client = TestClient(api_app, raise_server_exceptions=False)

        with patch.object(collection, "find", side_effect=StoreError("disk unavailable")):
            response = client.get("/api/items", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
