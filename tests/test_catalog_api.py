from decimal import Decimal

from src.api.models import Product, ProductVariant
from src.api.services import catalog_service

LIST_KEY = "products:list:limit:12|order:desc|page:1|sort:createdAt"


def add_product(session, category, name, price, **kwargs):
    values = {
        "name": name,
        "slug": name.lower().replace(" ", "-"),
        "price": Decimal(price),
        "quantity": 3,
        "category_id": category.id,
    }
    values.update(kwargs)
    product = Product(**values)
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def test_list_products_is_camel_case_and_paginated(client, product):
    response = client.get("/products")

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {
        "page": 1,
        "limit": 12,
        "total": 1,
        "totalPages": 1,
        "hasNext": False,
        "hasPrev": False,
    }
    item = body["data"][0]
    assert item["name"] == "Linen Shirt"
    assert item["price"] == 500000
    assert item["categoryId"] == product.category_id
    assert item["averageRating"] == 0
    assert {v["size"] for v in item["variants"]} == {"M", "L"}


def test_list_is_cached_until_admin_write(client, session, cache, product, admin_headers, monkeypatch):
    client.get("/products")
    assert cache.get(LIST_KEY) is not None

    calls = []
    original = catalog_service.build_product_statement

    def counting(*args, **kwargs):
        calls.append(1)
        return original(*args, **kwargs)

    monkeypatch.setattr(catalog_service, "build_product_statement", counting)
    client.get("/products")
    assert calls == []

    response = client.put(f"/admin/products/{product.id}", json={"price": 450000}, headers=admin_headers)
    assert response.status_code == 200
    assert cache.get(LIST_KEY) is None

    body = client.get("/products").json()
    assert len(calls) == 1
    assert body["data"][0]["price"] == 450000


def test_unpublished_products_are_hidden(client, session, category, product):
    add_product(session, category, "Draft Dress", "900000", published=False)

    names = [p["name"] for p in client.get("/products").json()["data"]]

    assert names == ["Linen Shirt"]


def test_filters(client, session, category, product):
    add_product(
        session,
        category,
        "Wool Coat",
        "2000000",
        brand="Nord",
        variants=[ProductVariant(name="S", size="S", color="Grey", quantity=1)],
    )

    def names(params):
        return sorted(p["name"] for p in client.get("/products", params=params).json()["data"])

    assert names({"maxPrice": 600000}) == ["Linen Shirt"]
    assert names({"brands": "Nord,Other"}) == ["Wool Coat"]
    assert names({"sizes": "M"}) == ["Linen Shirt"]
    assert names({"category": "shirts"}) == ["Linen Shirt", "Wool Coat"]
    assert names({"sort": "price", "order": "asc"}) == ["Linen Shirt", "Wool Coat"]


def test_sort_order(client, session, category, product):
    add_product(session, category, "Wool Coat", "2000000")

    data = client.get("/products", params={"sort": "price", "order": "desc"}).json()["data"]

    assert [p["name"] for p in data] == ["Wool Coat", "Linen Shirt"]


def test_invalid_sort_is_a_validation_error(client):
    response = client.get("/products", params={"sort": "popularity"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["detail"] == "Validation error"
    assert body["errors"][0]["field"] == "query.sort"


def test_product_detail_and_cache_key(client, cache, product):
    response = client.get(f"/products/{product.id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["reviews"] == []
    assert data["category"]["slug"] == "shirts"
    assert cache.get(f"product:{product.id}") == data


def test_missing_product(client):
    response = client.get("/products/999")

    assert response.status_code == 404
    assert response.json() == {"success": False, "detail": "Product not found"}


def test_search_ranks_name_prefix_first(client, session, category, product):
    add_product(session, category, "Shirt Dress", "700000")
    add_product(session, category, "Belt", "100000", description="Goes with any shirt")

    data = client.get("/products/search", params={"q": "shirt"}).json()["data"]

    assert [p["name"] for p in data] == ["Shirt Dress", "Linen Shirt", "Belt"]


def test_empty_search(client):
    body = client.get("/products/search", params={"q": "  "}).json()

    assert body["data"] == []
    assert body["total"] == 0


def test_filter_options(client, product):
    data = client.get("/products/filter-options").json()["data"]

    assert data["brands"] == ["Acme"]
    assert data["sizes"] == ["L", "M"]
    assert data["colors"] == ["Black", "White"]
    assert data["minPrice"] == 500000
    assert data["categories"][0]["slug"] == "shirts"


def test_category_tree_counts(client, session, category, product):
    data = client.get("/categories").json()["data"]

    assert data[0]["slug"] == "shirts"
    assert data[0]["productCount"] == 1
    assert data[0]["children"] == []


def test_category_products(client, category, product):
    response = client.get(f"/categories/{category.id}/products")

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["category"]["name"] == "Shirts"
    assert [p["id"] for p in body["data"]["products"]] == [product.id]


def test_missing_category_products(client):
    assert client.get("/categories/42/products").status_code == 404


def test_admin_create_product_with_variants(client, category, admin_headers, cache):
    cache.set(LIST_KEY, {"stale": True})

    response = client.post(
        "/admin/products",
        json={
            "name": "Silk Scarf",
            "price": 250000,
            "categoryId": category.id,
            "variants": [{"name": "Red", "color": "Red", "quantity": 4}],
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["slug"] == "silk-scarf"
    assert data["variants"][0]["color"] == "Red"
    assert cache.get(LIST_KEY) is None


def test_admin_rejects_duplicate_variant_skus(client, admin_headers):
    response = client.post(
        "/admin/products",
        json={
            "name": "Socks",
            "price": 50000,
            "variants": [{"name": "A", "sku": "SK-1"}, {"name": "B", "sku": "SK-1"}],
        },
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Duplicate variant SKUs: SK-1"


def test_admin_delete_product(client, session, product, admin_headers):
    response = client.delete(f"/admin/products/{product.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["detail"] == "Product Linen Shirt deleted successfully"
    assert client.get(f"/products/{product.id}").status_code == 404
