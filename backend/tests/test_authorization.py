"""
Authorization tests.

Verifies:
- Unauthenticated requests return 401
- Manager role denied catalog writes and user administration (403)
- Admin role can perform privileged operations
- Public endpoints stay public
"""

import pytest


# =============================================================================
# UNAUTHENTICATED ACCESS - 401
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/api/transactions/purchase"),
            ("POST", "/api/transactions/sell"),
            ("POST", "/api/transactions/return"),
            ("GET", "/api/transactions"),
            ("GET", "/api/transactions/all"),
            ("GET", "/api/transactions/1"),
            ("GET", "/api/transactions/by-month-year"),
            ("PUT", "/api/transactions/1"),
            ("PUT", "/api/transactions/update/1"),
            ("GET", "/api/users/all"),
            ("GET", "/api/users/current"),
            ("PUT", "/api/users/update/1"),
            ("DELETE", "/api/users/delete/1"),
            ("GET", "/api/users/transactions/1"),
            ("POST", "/api/categories/add"),
            ("GET", "/api/categories/all"),
            ("GET", "/api/suppliers/all"),
            ("DELETE", "/api/suppliers/delete/1"),
            ("GET", "/api/products/all"),
            ("PUT", "/api/products/update/1"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        body = resp.get_json()
        assert body["status"] == 401
        assert "timestamp" in body


# =============================================================================
# MANAGER DENIED ADMIN OPERATIONS - 403
# =============================================================================


class TestManagerDeniedAdminOperations:
    """Manager role cannot perform privileged operations."""

    def test_cannot_list_users(self, client, manager_headers):
        resp = client.get("/api/users/all", headers=manager_headers)
        assert resp.status_code == 403
        assert resp.get_json()["status"] == 403

    def test_cannot_delete_user(self, client, manager_headers, admin_user):
        resp = client.delete(f"/api/users/delete/{admin_user.id}", headers=manager_headers)
        assert resp.status_code == 403

    def test_cannot_create_category(self, client, manager_headers):
        resp = client.post("/api/categories/add", json={"name": "Snacks"}, headers=manager_headers)
        assert resp.status_code == 403

    def test_cannot_create_supplier(self, client, manager_headers):
        resp = client.post("/api/suppliers/add", json={"name": "Evil Vendor"}, headers=manager_headers)
        assert resp.status_code == 403

    def test_cannot_create_product(self, client, manager_headers):
        resp = client.post(
            "/api/products/add",
            json={"sku": "X-1", "name": "X", "price": "1.00"},
            headers=manager_headers,
        )
        assert resp.status_code == 403

    def test_cannot_edit_product(self, client, manager_headers, product):
        resp = client.put(f"/api/products/update/{product.id}", json={"price": "0.01"}, headers=manager_headers)
        assert resp.status_code == 403

    def test_cannot_delete_product(self, client, manager_headers, product):
        resp = client.delete(f"/api/products/delete/{product.id}", headers=manager_headers)
        assert resp.status_code == 403

    def test_cannot_edit_another_user(self, client, manager_headers, admin_user):
        resp = client.put(f"/api/users/update/{admin_user.id}", json={"name": "pwned"}, headers=manager_headers)
        assert resp.status_code == 403

    def test_cannot_promote_self(self, client, manager_headers, manager_user):
        resp = client.put(f"/api/users/update/{manager_user.id}", json={"role": "ADMIN"}, headers=manager_headers)
        assert resp.status_code == 403


class TestManagerAllowed:

    def test_can_read_catalog(self, client, manager_headers, product):
        assert client.get("/api/products/all", headers=manager_headers).status_code == 200
        assert client.get("/api/categories/all", headers=manager_headers).status_code == 200
        assert client.get("/api/suppliers/all", headers=manager_headers).status_code == 200

    def test_can_edit_self(self, client, manager_headers, manager_user):
        resp = client.put(
            f"/api/users/update/{manager_user.id}",
            json={"name": "Maxine Manager", "phoneNumber": "555-0199"},
            headers=manager_headers,
        )
        assert resp.status_code == 200
        user = resp.get_json()["user"]
        assert user["name"] == "Maxine Manager"
        assert user["phoneNumber"] == "555-0199"
        assert user["role"] == "MANAGER"


# =============================================================================
# ADMIN CAN PERFORM PRIVILEGED OPERATIONS - 200
# =============================================================================


class TestAdminAccess:
    """Admin role can perform privileged operations."""

    def test_can_list_users(self, client, admin_headers, manager_user):
        resp = client.get("/api/users/all", headers=admin_headers)
        assert resp.status_code == 200
        emails = {u["email"] for u in resp.get_json()["users"]}
        assert emails == {"admin@example.com", "manager@example.com"}

    def test_can_create_category(self, client, admin_headers):
        resp = client.post("/api/categories/add", json={"name": "Snacks"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["category"]["name"] == "Snacks"

    def test_can_promote_user(self, client, admin_headers, manager_user):
        resp = client.put(f"/api/users/update/{manager_user.id}", json={"role": "ADMIN"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["user"]["role"] == "ADMIN"


class TestPublicEndpoints:

    def test_health(self, client, db_session):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.get_json()["database"]["status"] == "healthy"

    def test_unknown_route_uses_envelope(self, client, db_session):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.get_json()["status"] == 404
