"""
==============================================================================
API Integration Tests
==============================================================================

Tests for REST API endpoints.

==============================================================================
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from app.services.product_service import ProductService


PIZZA_VARIABLES = [
    {
        "id": 5,
        "name": "Size",
        "required": "1",
        "quantity": 1,
        "maximum": "0",
        "quantityMaximum": 1,
        "components": [
            {"id": 9, "name": "Cheese", "unitPrice": 2, "unit": "kg", "enabled": "1"},
            {"id": 8, "name": "Basil", "unitPrice": 0.5, "unit": "g", "enabled": "0", "href": "/basil"},
        ],
    },
    {
        "id": 6,
        "name": "Crust",
        "required": "0",
        "quantity": 0,
        "maximum": "1",
        "quantityMaximum": 2,
        "components": [],
    },
]


def _without_timestamps(record: dict) -> dict:
    return {k: v for k, v in record.items() if k not in ("createdAt", "updatedAt")}


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient):
        """Test liveness returns OK."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "OK"

    def test_readiness_probe(self, client: TestClient):
        """Test readiness reports the database."""
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json() == {"ready": True, "database": "healthy"}

    def test_root(self, client: TestClient):
        """Test root lists entry points."""
        data = client.get("/").json()
        assert data["endpoints"] == {"health": "/health", "products": "/api/products"}


class TestCreateAndFetch:
    """POST and GET by id."""

    def test_create_product(self, client: TestClient, product_payload):
        response = client.post("/api/products", json=product_payload(variables=PIZZA_VARIABLES))

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Product created successfully"
        assert data["data"]["id"] == 1
        assert data["data"]["barcode"] == ""
        assert "createdAt" in data["data"]
        assert "updatedAt" in data["data"]

    def test_round_trip(self, client: TestClient, product_payload):
        payload = product_payload(
            detail="Wood fired",
            salesgroup=3,
            groupId=11,
            lastCost=4.2,
            highlighted="1",
            variables=PIZZA_VARIABLES,
        )
        created = client.post("/api/products", json=payload).json()["data"]

        fetched = client.get("/api/products/1")
        assert fetched.status_code == 200
        assert fetched.json()["success"] is True
        assert _without_timestamps(fetched.json()["data"]) == _without_timestamps(created)

        stored = fetched.json()["data"]
        assert [v["name"] for v in stored["variables"]] == ["Size", "Crust"]
        assert [c["name"] for c in stored["variables"][0]["components"]] == ["Cheese", "Basil"]
        assert stored["variables"][0]["components"][0]["detail"] == ""
        assert stored["variables"][0]["components"][1]["href"] == "/basil"
        assert stored["groupId"] == 11
        assert "type" not in stored
        assert "productResale" not in stored

    def test_null_text_fields_become_empty(self, client: TestClient, product_payload):
        response = client.post("/api/products", json=product_payload(barcode=None, href=None))
        data = response.json()["data"]
        assert data["barcode"] == ""
        assert data["href"] == ""

    def test_duplicate_id_conflict(self, client: TestClient, product_payload):
        client.post("/api/products", json=product_payload(name="Original"))

        response = client.post("/api/products", json=product_payload(name="Impostor"))
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Product with this ID already exists"}

        assert client.get("/api/products/1").json()["data"]["name"] == "Original"

    @pytest.mark.parametrize("missing", ["id", "name", "unitPrice", "unit", "enabled"])
    def test_create_missing_required_field(self, client: TestClient, product_payload, missing):
        payload = product_payload()
        del payload[missing]

        response = client.post("/api/products", json=payload)
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_create_invalid_variable(self, client: TestClient, product_payload):
        variable = dict(PIZZA_VARIABLES[0])
        del variable["quantityMaximum"]

        response = client.post("/api/products", json=product_payload(variables=[variable]))
        assert response.status_code == 400
        assert "quantityMaximum" in response.json()["error"]

    def test_get_missing_product(self, client: TestClient):
        response = client.get("/api/products/404")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Product not found"}

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_non_numeric_id_is_not_found(self, client: TestClient, method):
        kwargs = {"json": {"name": "Ghost"}} if method == "put" else {}

        response = client.request(method.upper(), "/api/products/abc", **kwargs)
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Product not found"}

    def test_id_with_trailing_text_uses_leading_digits(
        self, client: TestClient, create_products, product_payload
    ):
        create_products([product_payload(7, "Soup")])

        response = client.get("/api/products/7abc")
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Soup"

    def test_out_of_range_id_is_not_found(self, client: TestClient):
        response = client.get("/api/products/" + "9" * 30)
        assert response.status_code == 404

    def test_whole_numbers_stay_integers(self, client: TestClient, product_payload):
        client.post("/api/products", json=product_payload(lastCost=3, variables=PIZZA_VARIABLES))

        data = client.get("/api/products/1").json()["data"]
        assert type(data["unitPrice"]) is int
        assert type(data["lastCost"]) is int
        variable = data["variables"][0]
        assert type(variable["quantity"]) is int
        assert type(variable["quantityMaximum"]) is int
        assert type(variable["components"][0]["unitPrice"]) is int
        assert variable["components"][1]["unitPrice"] == 0.5

    def test_timestamps_are_utc(self, client: TestClient, product_payload):
        created = client.post("/api/products", json=product_payload()).json()["data"]
        fetched = client.get("/api/products/1").json()["data"]

        for record in (created, fetched):
            assert record["createdAt"].endswith("Z")
            assert record["updatedAt"].endswith("Z")


class TestListing:
    """GET /api/products with and without pagination."""

    def test_default_pagination(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(i, f"Product {i}") for i in range(1, 13)])

        data = client.get("/api/products").json()
        assert data["success"] is True
        assert len(data["products"]) == 10
        assert data["pagination"] == {
            "currentPage": 1,
            "totalPages": 2,
            "totalItems": 12,
            "itemsPerPage": 10,
        }

    def test_second_page(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(i, f"Product {i}") for i in range(1, 6)])

        data = client.get("/api/products", params={"page": 2, "limit": 2}).json()
        assert [p["id"] for p in data["products"]] == [3, 2]
        assert data["pagination"]["totalPages"] == 3

    def test_newest_first(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(i, f"Product {i}") for i in (1, 2, 3)])

        ids = [p["id"] for p in client.get("/api/products").json()["products"]]
        assert ids == [3, 2, 1]

    def test_no_paginate(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(i, f"Product {i}") for i in range(1, 13)])

        data = client.get("/api/products", params={"no_paginate": "true"}).json()
        assert len(data["products"]) == 12
        assert "pagination" not in data

    def test_empty_collection(self, client: TestClient):
        data = client.get("/api/products").json()
        assert data["products"] == []
        assert data["pagination"]["totalPages"] == 0

    @pytest.mark.parametrize("params", [
        {"page": 0},
        {"page": "abc"},
        {"page": "-3"},
        {"limit": 0},
        {"limit": "abc"},
        {"page": "", "limit": ""},
    ])
    def test_unreadable_pagination_falls_back_to_defaults(
        self, client: TestClient, create_products, product_payload, params
    ):
        create_products([product_payload(i, f"Product {i}") for i in range(1, 13)])

        response = client.get("/api/products", params=params)
        assert response.status_code == 200
        data = response.json()
        assert len(data["products"]) == 10
        assert data["pagination"]["currentPage"] == 1
        assert data["pagination"]["itemsPerPage"] == 10

    def test_leading_digits_are_used(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(i, f"Product {i}") for i in range(1, 6)])

        data = client.get("/api/products", params={"page": "2nd", "limit": "2 per page"}).json()
        assert [p["id"] for p in data["products"]] == [3, 2]

    def test_large_limit_is_capped(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(i, f"Product {i}") for i in range(1, 4)])

        response = client.get("/api/products", params={"limit": 500})
        assert response.status_code == 200
        data = response.json()
        assert len(data["products"]) == 3
        assert data["pagination"]["itemsPerPage"] == 100

    def test_huge_page_is_empty(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "Tea")])

        response = client.get("/api/products", params={"page": "9" * 30})
        assert response.status_code == 200
        assert response.json()["products"] == []

    def test_search_pagination_falls_back_to_defaults(
        self, client: TestClient, create_products, product_payload
    ):
        create_products([product_payload(1, "Tea")])

        data = client.get("/api/products/search", params={"q": "tea", "page": "x", "limit": "0"}).json()
        assert [p["id"] for p in data["data"]] == [1]
        assert data["pagination"]["currentPage"] == 1
        assert data["pagination"]["itemsPerPage"] == 10

    def test_short_data(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "Pizza", detail="Hot", variables=PIZZA_VARIABLES)])

        data = client.get("/api/products/short-data/all").json()
        assert data == {
            "success": True,
            "products": [{"id": 1, "name": "Pizza", "detail": "Hot", "unitPrice": 10}],
        }


class TestSearch:
    """GET /api/products/search"""

    def test_matches_name_and_detail_case_insensitively(
        self, client: TestClient, create_products, product_payload
    ):
        create_products([
            product_payload(1, "Cheese Pizza"),
            product_payload(2, "Burger", detail="Extra CHEESE on top"),
            product_payload(3, "Salad", detail="Fresh"),
        ])

        data = client.get("/api/products/search", params={"q": "cheese"}).json()
        assert data["success"] is True
        assert sorted(p["id"] for p in data["data"]) == [1, 2]
        assert data["pagination"]["totalItems"] == 2

    def test_wildcards_are_literal(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "100% Juice"), product_payload(2, "Water")])

        data = client.get("/api/products/search", params={"q": "%"}).json()
        assert [p["id"] for p in data["data"]] == [1]

    def test_search_paginates(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(i, f"Tea {i}") for i in range(1, 6)])

        data = client.get("/api/products/search", params={"q": "tea", "limit": 2, "page": 3}).json()
        assert [p["id"] for p in data["data"]] == [1]
        assert data["pagination"] == {
            "currentPage": 3,
            "totalPages": 3,
            "totalItems": 5,
            "itemsPerPage": 2,
        }

    @pytest.mark.parametrize("params", [{}, {"q": ""}])
    def test_query_required(self, client: TestClient, params):
        response = client.get("/api/products/search", params=params)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Search query is required"}


class TestUpdate:
    """PUT /api/products/{id}"""

    def test_partial_update(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "Pizza", detail="Thin", variables=PIZZA_VARIABLES)])
        before = client.get("/api/products/1").json()["data"]

        response = client.put("/api/products/1", json={"name": "Pizza XL", "unitPrice": 14.5})
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Product updated successfully"
        assert data["data"]["name"] == "Pizza XL"
        assert data["data"]["unitPrice"] == 14.5
        assert data["data"]["detail"] == "Thin"
        assert data["data"]["variables"] == before["variables"]
        assert data["data"]["createdAt"] == before["createdAt"]

    def test_replace_variables(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "Pizza", variables=PIZZA_VARIABLES)])

        response = client.put("/api/products/1", json={"variables": [PIZZA_VARIABLES[1]]})
        variables = response.json()["data"]["variables"]
        assert [v["name"] for v in variables] == ["Crust"]

    def test_id_and_timestamps_are_ignored(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "Pizza")])
        before = client.get("/api/products/1").json()["data"]

        response = client.put(
            "/api/products/1",
            json={"id": 77, "createdAt": "2000-01-01T00:00:00", "unit": "box"},
        )
        data = response.json()["data"]
        assert data["id"] == 1
        assert data["unit"] == "box"
        assert data["createdAt"] == before["createdAt"]
        assert client.get("/api/products/77").status_code == 404

    def test_clearing_required_field_is_rejected(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "Pizza")])

        response = client.put("/api/products/1", json={"name": None})
        assert response.status_code == 400
        assert client.get("/api/products/1").json()["data"]["name"] == "Pizza"

    def test_wrong_type_is_rejected(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "Pizza")])

        response = client.put("/api/products/1", json={"unitPrice": "free"})
        assert response.status_code == 400

    def test_update_missing_product(self, client: TestClient):
        response = client.put("/api/products/5", json={"name": "Ghost"})
        assert response.status_code == 404
        assert response.json()["error"] == "Product not found"


class TestDelete:
    """DELETE endpoints."""

    def test_delete_product(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "Pizza", variables=PIZZA_VARIABLES)])

        response = client.delete("/api/products/1")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Product deleted successfully"}
        assert client.get("/api/products/1").status_code == 404

    def test_delete_missing_product(self, client: TestClient):
        response = client.delete("/api/products/1")
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_delete_all_twice(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(i, f"P{i}") for i in (1, 2, 3)])

        for _ in range(2):
            response = client.delete("/api/products/delete/all")
            assert response.status_code == 200
            assert response.json()["success"] is True
            assert client.get("/api/products").json()["pagination"]["totalItems"] == 0

    def test_recreate_after_delete(self, client: TestClient, create_products, product_payload):
        create_products([product_payload(1, "Pizza")])
        client.delete("/api/products/1")

        response = client.post("/api/products", json=product_payload(1, "Pizza again"))
        assert response.status_code == 201


class TestErrorHandling:
    """Uniform error responses."""

    def test_route_not_found(self, client: TestClient):
        response = client.get("/api/unknown")
        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_store_failure_is_reported(self, client: TestClient, monkeypatch):
        def broken(self, *args, **kwargs):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(ProductService, "list_products", broken)

        response = client.get("/api/products")
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to fetch products"}

    def test_unexpected_failure(self, lenient_client: TestClient, monkeypatch):
        def broken(self, *args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(ProductService, "get_by_id", broken)

        response = lenient_client.get("/api/products/1")
        assert response.status_code == 500
        assert response.json() == {"error": "Something went wrong!"}

    @pytest.mark.parametrize("method, path", [
        ("GET", "/api/products/delete/all"),
        ("POST", "/api/products/5"),
        ("PATCH", "/api/products"),
    ])
    def test_unregistered_method_is_route_not_found(self, client: TestClient, method, path):
        response = client.request(method, path)
        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}
