"""Tests for product API endpoints."""

from uuid import uuid4

from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import RecordingMediaResolver, make_product_fields

from catalog_admin.api.dependencies import get_media_resolver
from catalog_admin.infrastructure.media import CloudinaryMediaResolver

IMAGE = {"image": ("carrot.png", b"\x89PNG", "image/png")}


def create_category(client: TestClient, name: str = "vegetables") -> str:
    """Create a category and return its ID."""
    response = client.post("/api/categories", json={"name": name})
    assert response.status_code == 201
    return response.json()["id"]


def create_product(client: TestClient, category_id: str, files=None, **overrides) -> dict:
    """Create a product from form fields and return it."""
    response = client.post(
        "/api/products",
        data=make_product_fields(category_id, **overrides),
        files=files,
    )
    assert response.status_code == 201, response.text
    return response.json()["product"]


class TestCreateProduct:
    """Tests for POST /api/products."""

    def test_carrot_scenario(self, client: TestClient, media: RecordingMediaResolver) -> None:
        """Should coerce form input, upload the image and join the category on read."""
        category_id = create_category(client)

        response = client.post(
            "/api/products",
            data=make_product_fields(
                category_id,
                subcategory=" Root ",
                price="40",
                stock="10",
                displayInLatest="true",
                customQuantityOptions='[{"amount":"500","unit":"g","price":22,"stock":5}]',
            ),
            files=IMAGE,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Product added successfully"
        product = data["product"]
        assert product["price"] == 40
        assert product["stock"] == 10
        assert product["subcategory"] == "root"
        assert product["displayInLatest"] is True
        assert product["displayInBestSelling"] is False
        assert product["category"] == category_id
        assert product["customQuantityOptions"] == [
            {"amount": "500", "unit": "g", "price": 22, "stock": 5}
        ]
        assert product["imageUrl"].startswith("https://res.cloudinary.com/")
        assert media.uploads == [("carrot.png", "product-images")]

        fetched = client.get(f"/api/products/{product['id']}").json()
        assert fetched["category"] == {"id": category_id, "name": "vegetables"}

        latest = client.get("/api/products/latest").json()
        assert [p["id"] for p in latest["products"]] == [product["id"]]

    def test_create_from_json(self, client: TestClient) -> None:
        """Should accept a JSON body with native types."""
        category_id = create_category(client)

        response = client.post(
            "/api/products",
            json={
                "name": "Carrot",
                "category": category_id,
                "price": 40,
                "onSale": True,
                "salePrice": 35.5,
                "customQuantityOptions": [{"amount": "500", "unit": "g", "price": 22}],
            },
        )

        assert response.status_code == 201
        product = response.json()["product"]
        assert product["onSale"] is True
        assert product["salePrice"] == 35.5
        assert product["customQuantityOptions"][0]["stock"] == 0

    def test_missing_price(self, client: TestClient) -> None:
        """Should reject a product without a price."""
        category_id = create_category(client)
        fields = make_product_fields(category_id)
        del fields["price"]

        response = client.post("/api/products", data=fields)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "price is required"}

    def test_out_of_range_stock(self, client: TestClient) -> None:
        """Should reject stock beyond the storable range with 400."""
        category_id = create_category(client)

        response = client.post(
            "/api/products",
            json={"name": "X", "category": category_id, "price": 1, "stock": 1e30},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "stock must not exceed 2147483647"
        assert client.get("/api/products").json()["products"] == []

    def test_missing_category(self, client: TestClient) -> None:
        """Should reject a product without a category."""
        response = client.post("/api/products", data={"name": "Carrot", "price": "1"})

        assert response.status_code == 400
        assert response.json()["error"] == "Category is required"

    def test_unsupported_image_rejected_by_resolver(
        self, client: TestClient, app: FastAPI
    ) -> None:
        """Should surface resolver validation errors as 400."""
        app.dependency_overrides[get_media_resolver] = lambda: CloudinaryMediaResolver(
            cloud_name="demo", api_key="key", api_secret="secret"
        )
        category_id = create_category(client)

        response = client.post(
            "/api/products",
            data=make_product_fields(category_id),
            files={"image": ("anim.gif", b"GIF89a", "image/gif")},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Unsupported image format"

    def test_upload_failure(self, client: TestClient, media: RecordingMediaResolver) -> None:
        """Should return 500 when the media host fails."""
        category_id = create_category(client)
        media.fail_uploads = True

        response = client.post(
            "/api/products", data=make_product_fields(category_id), files=IMAGE
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Media host request failed"
        assert client.get("/api/products").json()["products"] == []


class TestReadProducts:
    """Tests for product read endpoints."""

    def test_list_all_newest_first(self, client: TestClient) -> None:
        """Should list every product with the success envelope."""
        category_id = create_category(client)
        first = create_product(client, category_id, name="First")
        second = create_product(client, category_id, name="Second")

        response = client.get("/api/products")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [p["id"] for p in data["products"]] == [second["id"], first["id"]]

    def test_best_selling_filter(self, client: TestClient) -> None:
        """Should list only best-selling products."""
        category_id = create_category(client)
        best = create_product(client, category_id, name="Best", displayInBestSelling="true")
        create_product(client, category_id, name="Plain")

        products = client.get("/api/products/bestselling").json()["products"]

        assert [p["id"] for p in products] == [best["id"]]
        assert products[0]["category"]["name"] == "vegetables"

    def test_get_malformed_id(self, client: TestClient) -> None:
        """Should reject malformed IDs with 400."""
        response = client.get("/api/products/123")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid product ID format"}

    def test_get_unknown(self, client: TestClient) -> None:
        """Should return 404 for an unknown product."""
        response = client.get(f"/api/products/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "Product not found"

    def test_similar(self, client: TestClient) -> None:
        """Should return up to four other products from the same category."""
        vegetables = create_category(client, "vegetables")
        fruits = create_category(client, "fruits")
        subject = create_product(client, vegetables, name="Subject")
        for i in range(5):
            create_product(client, vegetables, name=f"Veg {i}")
        create_product(client, fruits, name="Apple")

        response = client.get(f"/api/products/similar/{subject['id']}")

        assert response.status_code == 200
        similar = response.json()
        assert isinstance(similar, list)
        assert len(similar) == 4
        assert subject["id"] not in {p["id"] for p in similar}
        assert {p["category"]["id"] for p in similar} == {vegetables}

    def test_deleted_category_reads_as_null(self, client: TestClient) -> None:
        """Should keep products whose category was deleted, with category null."""
        category_id = create_category(client)
        product = create_product(client, category_id)

        assert client.delete(f"/api/categories/{category_id}").status_code == 204

        fetched = client.get(f"/api/products/{product['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["category"] is None


class TestUpdateDeleteProduct:
    """Tests for product update and delete endpoints."""

    def test_update_replaces_fields(self, client: TestClient) -> None:
        """Should replace editable fields and keep createdAt and the image."""
        category_id = create_category(client)
        product = create_product(client, category_id, files=IMAGE, onSale="true", salePrice="30")

        response = client.put(
            f"/api/products/{product['id']}",
            data=make_product_fields(category_id, name="Baby Carrot", price="45"),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Product updated successfully"
        updated = data["product"]
        assert updated["name"] == "Baby Carrot"
        assert updated["price"] == 45
        assert updated["onSale"] is False
        assert updated["createdAt"] == product["createdAt"]
        assert updated["imageUrl"] == product["imageUrl"]

    def test_update_unknown(self, client: TestClient) -> None:
        """Should return 404 for an unknown product."""
        category_id = create_category(client)

        response = client.put(f"/api/products/{uuid4()}", data=make_product_fields(category_id))

        assert response.status_code == 404

    def test_delete(self, client: TestClient, media: RecordingMediaResolver) -> None:
        """Should delete the product and its hosted image."""
        category_id = create_category(client)
        product = create_product(client, category_id, files=IMAGE)

        response = client.delete(f"/api/products/{product['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Product deleted"}
        assert media.deleted == [(product["imageUrl"], "product-images")]
        assert client.get(f"/api/products/{product['id']}").status_code == 404

    def test_delete_tolerates_media_failure(
        self, client: TestClient, media: RecordingMediaResolver
    ) -> None:
        """Should delete the product even if the image cannot be removed."""
        category_id = create_category(client)
        product = create_product(client, category_id, files=IMAGE)
        media.fail_deletes = True

        response = client.delete(f"/api/products/{product['id']}")

        assert response.status_code == 200
