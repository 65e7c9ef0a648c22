from src.api.models import Category


def test_admin_routes_need_a_token(client):
    assert client.get("/admin/categories").status_code == 401


class TestAdminCategories:
    def test_create_child_category(self, client, category, admin_headers, cache):
        cache.set("categories", [{"stale": True}])

        response = client.post(
            "/admin/categories",
            json={"name": "Linen Shirts", "parentId": category.id},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["slug"] == "linen-shirts"
        assert cache.get("categories") is None

        tree = client.get("/categories").json()["data"]
        assert tree[0]["children"][0]["name"] == "Linen Shirts"

    def test_slug_is_unique(self, client, category, admin_headers):
        response = client.post("/admin/categories", json={"name": "Shirts"}, headers=admin_headers)

        assert response.json()["data"]["slug"] == "shirts-1"

    def test_cannot_be_own_parent(self, client, category, admin_headers):
        response = client.put(
            f"/admin/categories/{category.id}",
            json={"parentId": category.id},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "A category cannot be its own parent"

    def test_delete_guards(self, client, session, category, product, admin_headers):
        response = client.delete(f"/admin/categories/{category.id}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete category with products"

        empty = Category(name="Empty", slug="empty")
        session.add(empty)
        session.commit()
        assert client.delete(f"/admin/categories/{empty.id}", headers=admin_headers).status_code == 200

    def test_counts(self, client, category, product, admin_headers):
        data = client.get(f"/admin/categories/{category.id}", headers=admin_headers).json()["data"]

        assert data["productCount"] == 1
        assert data["childrenCount"] == 0


class TestAdminCustomers:
    def test_list_only_customers(self, client, customer, admin_headers):
        body = client.get("/admin/customers", headers=admin_headers).json()

        assert [c["email"] for c in body["data"]] == ["customer@example.com"]
        assert body["data"][0]["orderCount"] == 0
        assert body["data"][0]["totalSpent"] == 0

    def test_detail(self, client, customer, address, admin, admin_headers):
        data = client.get(f"/admin/customers/{customer.id}", headers=admin_headers).json()["data"]

        assert data["addresses"][0]["city"] == "Ho Chi Minh"
        assert data["recentOrders"] == []
        assert client.get(f"/admin/customers/{admin.id}", headers=admin_headers).status_code == 404
