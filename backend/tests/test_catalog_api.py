"""
Catalog endpoint tests: categories, suppliers and products.
"""

from stockledger.models import Category, Product, Supplier


class TestCategories:

    def test_crud(self, client, db_session, admin_headers):
        created = client.post("/api/categories/add", json={"name": "Dairy"}, headers=admin_headers)
        assert created.status_code == 200
        cat_id = created.get_json()["category"]["id"]

        updated = client.put(f"/api/categories/update/{cat_id}", json={"name": "Dairy & Eggs"}, headers=admin_headers)
        assert updated.get_json()["category"]["name"] == "Dairy & Eggs"

        fetched = client.get(f"/api/categories/{cat_id}", headers=admin_headers)
        assert fetched.get_json()["category"]["products"] == []

        deleted = client.delete(f"/api/categories/delete/{cat_id}", headers=admin_headers)
        assert deleted.status_code == 200
        assert db_session.get(Category, cat_id) is None

    def test_duplicate_name(self, client, db_session, admin_headers, category):
        resp = client.post("/api/categories/add", json={"name": "beverages"}, headers=admin_headers)
        assert resp.status_code == 409

    def test_missing_name(self, client, db_session, admin_headers):
        resp = client.post("/api/categories/add", json={}, headers=admin_headers)
        assert resp.status_code == 400

    def test_delete_with_products(self, client, db_session, admin_headers, product):
        resp = client.delete(f"/api/categories/delete/{product.category_id}", headers=admin_headers)
        assert resp.status_code == 409

    def test_get_missing(self, client, db_session, admin_headers):
        resp = client.get("/api/categories/999", headers=admin_headers)
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Category Not Found"


class TestSuppliers:

    def test_crud(self, client, db_session, admin_headers):
        created = client.post(
            "/api/suppliers/add",
            json={"name": "Fresh Farms", "address": "12 Orchard Lane"},
            headers=admin_headers,
        )
        assert created.status_code == 200
        sup_id = created.get_json()["supplier"]["id"]

        updated = client.put(f"/api/suppliers/update/{sup_id}", json={"address": "14 Orchard Lane"}, headers=admin_headers)
        body = updated.get_json()["supplier"]
        assert body["name"] == "Fresh Farms"
        assert body["address"] == "14 Orchard Lane"

        listed = client.get("/api/suppliers/all", headers=admin_headers)
        assert [s["id"] for s in listed.get_json()["suppliers"]] == [sup_id]

        assert client.delete(f"/api/suppliers/delete/{sup_id}", headers=admin_headers).status_code == 200
        assert db_session.get(Supplier, sup_id) is None

    def test_delete_supplier_with_ledger_rows(self, client, db_session, admin_headers, product, supplier):
        client.post(
            "/api/transactions/purchase",
            json={"productId": product.id, "quantity": 1, "supplierId": supplier.id},
            headers=admin_headers,
        )

        resp = client.delete(f"/api/suppliers/delete/{supplier.id}", headers=admin_headers)
        assert resp.status_code == 409

    def test_blank_name(self, client, db_session, admin_headers):
        resp = client.post("/api/suppliers/add", json={"name": "   "}, headers=admin_headers)
        assert resp.status_code == 400


class TestProducts:

    def test_create(self, client, db_session, admin_headers, category):
        resp = client.post(
            "/api/products/add",
            json={
                "sku": "SNK-100",
                "name": "Salted Chips",
                "price": "1.99",
                "stockQuantity": 12,
                "categoryId": category.id,
                "expiryDate": "2027-03-01T00:00:00Z",
            },
            headers=admin_headers,
        )

        assert resp.status_code == 200
        product = resp.get_json()["product"]
        assert product["price"] == "1.99"
        assert product["stockQuantity"] == 12
        assert product["categoryId"] == category.id
        assert product["expiryDate"] == "2027-03-01T00:00:00Z"

    def test_duplicate_sku(self, client, db_session, admin_headers, product):
        resp = client.post(
            "/api/products/add",
            json={"sku": product.sku, "name": "Clone", "price": "1.00"},
            headers=admin_headers,
        )
        assert resp.status_code == 409

    def test_negative_price(self, client, db_session, admin_headers):
        resp = client.post(
            "/api/products/add",
            json={"sku": "NEG-1", "name": "Bad", "price": "-1.00"},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    def test_stock_quantity_above_integer_column(self, client, db_session, admin_headers):
        resp = client.post(
            "/api/products/add",
            json={"sku": "BIG-1", "name": "Too Many", "price": "1.00", "stockQuantity": 2**31},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert db_session.query(Product).filter_by(sku="BIG-1").count() == 0

    def test_unknown_category(self, client, db_session, admin_headers):
        resp = client.post(
            "/api/products/add",
            json={"sku": "ORP-1", "name": "Orphan", "price": "1.00", "categoryId": 999},
            headers=admin_headers,
        )
        assert resp.status_code == 404

    def test_update_bumps_version(self, client, db_session, admin_headers, product):
        before = product.version_id

        resp = client.put(
            f"/api/products/update/{product.id}",
            json={"price": "3.25", "description": "now in glass"},
            headers=admin_headers,
        )

        assert resp.status_code == 200
        body = resp.get_json()["product"]
        assert body["price"] == "3.25"
        assert body["description"] == "now in glass"
        assert body["versionId"] == before + 1
        assert body["updatedAt"] is not None

    def test_update_rejects_unknown_field(self, client, db_session, admin_headers, product):
        resp = client.put(f"/api/products/update/{product.id}", json={"versionId": 1}, headers=admin_headers)
        assert resp.status_code == 400

    def test_delete_product_with_ledger_rows(self, client, db_session, admin_headers, product):
        client.post(
            "/api/transactions/sell",
            json={"productId": product.id, "quantity": 1},
            headers=admin_headers,
        )

        resp = client.delete(f"/api/products/delete/{product.id}", headers=admin_headers)
        assert resp.status_code == 409

    def test_delete_product(self, client, db_session, admin_headers, product):
        product_id = product.id
        resp = client.delete(f"/api/products/delete/{product_id}", headers=admin_headers)

        assert resp.status_code == 200
        assert db_session.get(Product, product_id) is None

    def test_list_newest_first(self, client, db_session, admin_headers, product):
        client.post(
            "/api/products/add",
            json={"sku": "SNK-200", "name": "Popcorn", "price": "2.00"},
            headers=admin_headers,
        )

        resp = client.get("/api/products/all", headers=admin_headers)
        skus = [p["sku"] for p in resp.get_json()["products"]]
        assert skus == ["SNK-200", "BEV-001"]
