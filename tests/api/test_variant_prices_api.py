"""Tests for variant price endpoints."""

from decimal import Decimal

from fastapi.testclient import TestClient

from leazr.domain.entities import Product


def create_variant(
    client: TestClient,
    product_id: str,
    attributes: dict[str, str],
    price: str = "999.00",
    purchase_price: str = "720.00",
    **extra,
):
    """Post one variant price."""
    return client.post(
        f"/products/{product_id}/variant-prices",
        json={
            "attributes": attributes,
            "price": price,
            "purchase_price": purchase_price,
            **extra,
        },
    )


GRIS_256 = {"Couleur": "Gris", "Stockage": "256 Go"}


class TestCreateVariantPrice:
    """Tests for POST /products/{id}/variant-prices."""

    def test_create(self, auth_client: TestClient, laptop: Product) -> None:
        """A complete combination is priced."""
        response = create_variant(
            auth_client, laptop.id, GRIS_256, monthly_price="39.90", stock=3
        )
        assert response.status_code == 201
        data = response.json()
        assert data["attributes"] == GRIS_256
        assert Decimal(data["price"]) == Decimal("999.00")
        assert Decimal(data["purchase_price"]) == Decimal("720.00")
        assert Decimal(data["monthly_price"]) == Decimal("39.90")
        assert data["stock"] == 3

    def test_incomplete_combination(
        self, auth_client: TestClient, laptop: Product
    ) -> None:
        """Every attribute needs a value."""
        response = create_variant(auth_client, laptop.id, {"Couleur": "Gris"})
        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"]["missing"] == ["Stockage"]

    def test_value_not_allowed(self, auth_client: TestClient, laptop: Product) -> None:
        """A value outside the declared ones is rejected."""
        response = create_variant(
            auth_client, laptop.id, {"Couleur": "Rose", "Stockage": "256 Go"}
        )
        assert response.status_code == 422
        assert response.json()["details"]["invalid"] == {"Couleur": "Rose"}

    def test_missing_price(self, auth_client: TestClient, laptop: Product) -> None:
        """Sale and purchase prices are required."""
        response = auth_client.post(
            f"/products/{laptop.id}/variant-prices",
            json={"attributes": GRIS_256, "purchase_price": "720"},
        )
        assert response.status_code == 422
        assert response.json()["details"]["field"] == "price"

    def test_non_positive_price(self, auth_client: TestClient, laptop: Product) -> None:
        """Prices must be above zero."""
        response = create_variant(auth_client, laptop.id, GRIS_256, price="0")
        assert response.status_code == 422

    def test_duplicate_ignoring_case(
        self, auth_client: TestClient, laptop: Product
    ) -> None:
        """The same combination with different casing is a duplicate."""
        assert create_variant(auth_client, laptop.id, GRIS_256).status_code == 201
        response = create_variant(
            auth_client, laptop.id, {"Couleur": "GRIS", "Stockage": "256 go"}
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_COMBINATION"

    def test_not_parent(self, auth_client: TestClient, store) -> None:
        """Only parent products carry variant prices."""
        product = store.add_product(attributes={"Couleur": ["Noir"]}, is_parent=False)
        response = create_variant(auth_client, product.id, {"Couleur": "Noir"})
        assert response.status_code == 422
        assert response.json()["details"]["product_id"] == product.id

    def test_unknown_product(self, auth_client: TestClient) -> None:
        """Unknown product returns 404."""
        response = create_variant(auth_client, "missing", GRIS_256)
        assert response.status_code == 404


class TestListAndLookup:
    """Tests for listing and looking up variant prices."""

    def test_list(self, auth_client: TestClient, laptop: Product) -> None:
        """Created variant prices are listed."""
        create_variant(auth_client, laptop.id, GRIS_256)
        response = auth_client.get(f"/products/{laptop.id}/variant-prices")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["attributes"] == GRIS_256

    def test_lookup_found(self, auth_client: TestClient, laptop: Product) -> None:
        """Lookup matches the selected values ignoring case."""
        created = create_variant(auth_client, laptop.id, GRIS_256).json()
        response = auth_client.post(
            f"/products/{laptop.id}/variant-prices/lookup",
            json={"attributes": {"Couleur": "gris", "Stockage": "256 GO"}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["found"] is True
        assert data["variant_price"]["id"] == created["id"]

    def test_lookup_not_found(self, auth_client: TestClient, laptop: Product) -> None:
        """No match returns found=false."""
        create_variant(auth_client, laptop.id, GRIS_256)
        response = auth_client.post(
            f"/products/{laptop.id}/variant-prices/lookup",
            json={"attributes": {"Couleur": "Argent", "Stockage": "256 Go"}},
        )
        assert response.json() == {"found": False, "variant_price": None}


class TestUpdateDelete:
    """Tests for PATCH and DELETE /variant-prices/{id}."""

    def test_update_price_only(self, auth_client: TestClient, laptop: Product) -> None:
        """Only provided fields change."""
        created = create_variant(auth_client, laptop.id, GRIS_256, stock=2).json()
        response = auth_client.patch(
            f"/variant-prices/{created['id']}", json={"price": "949.50"}
        )
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["price"]) == Decimal("949.50")
        assert Decimal(data["purchase_price"]) == Decimal("720.00")
        assert data["stock"] == 2

    def test_update_rejects_negative_price(
        self, auth_client: TestClient, laptop: Product
    ) -> None:
        """Negative prices are rejected."""
        created = create_variant(auth_client, laptop.id, GRIS_256).json()
        response = auth_client.patch(
            f"/variant-prices/{created['id']}", json={"purchase_price": "-5"}
        )
        assert response.status_code == 422

    def test_update_unknown(self, auth_client: TestClient) -> None:
        """Unknown variant price returns 404."""
        response = auth_client.patch("/variant-prices/missing", json={"price": "10"})
        assert response.status_code == 404

    def test_delete(self, auth_client: TestClient, laptop: Product) -> None:
        """Deleted variant prices disappear from the list."""
        created = create_variant(auth_client, laptop.id, GRIS_256).json()
        response = auth_client.delete(f"/variant-prices/{created['id']}")
        assert response.status_code == 204
        listing = auth_client.get(f"/products/{laptop.id}/variant-prices").json()
        assert listing["total"] == 0

    def test_delete_unknown(self, auth_client: TestClient) -> None:
        """Deleting an unknown variant price returns 404."""
        response = auth_client.delete("/variant-prices/missing")
        assert response.status_code == 404


class TestGenerate:
    """Tests for POST /products/{id}/variant-prices/generate."""

    def test_generate_all(self, auth_client: TestClient, laptop: Product) -> None:
        """Every combination gets a price around the base prices."""
        response = auth_client.post(
            f"/products/{laptop.id}/variant-prices/generate",
            json={"base_price": "100", "base_purchase_price": "50", "base_stock": 10},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert (data["total"], data["created"], data["failed"], data["skipped"]) == (
            4,
            4,
            0,
            0,
        )
        for item in data["items"]:
            assert Decimal("75") <= Decimal(item["price"]) <= Decimal("125")
            assert Decimal("40") <= Decimal(item["purchase_price"]) <= Decimal("60")
            assert item["stock"] == 10

    def test_generate_only_missing(
        self, auth_client: TestClient, laptop: Product
    ) -> None:
        """Combinations priced by hand are skipped."""
        create_variant(auth_client, laptop.id, GRIS_256)
        data = auth_client.post(
            f"/products/{laptop.id}/variant-prices/generate",
            json={"base_price": 100, "base_purchase_price": 50},
        ).json()
        assert data["created"] == 3
        assert data["skipped"] == 1

    def test_generate_twice(self, auth_client: TestClient, laptop: Product) -> None:
        """A second run has nothing to generate."""
        url = f"/products/{laptop.id}/variant-prices/generate"
        body = {"base_price": 100, "base_purchase_price": 50}
        auth_client.post(url, json=body)
        data = auth_client.post(url, json=body).json()
        assert data["status"] == "nothing_to_generate"
        assert data["created"] == 0

    def test_generate_without_base_price(
        self, auth_client: TestClient, laptop: Product, store
    ) -> None:
        """Missing base prices are rejected before anything is created."""
        response = auth_client.post(
            f"/products/{laptop.id}/variant-prices/generate",
            json={"base_purchase_price": 50},
        )
        assert response.status_code == 422
        assert response.json()["details"]["field"] == "price"
        assert store.create_calls == []

    def test_generate_reports_failures(
        self, auth_client: TestClient, laptop: Product, store
    ) -> None:
        """Failed creations are reported without failing the request."""
        store.fail_on = {1}
        data = auth_client.post(
            f"/products/{laptop.id}/variant-prices/generate",
            json={"base_price": 100, "base_purchase_price": 50},
        ).json()
        assert data["created"] == 3
        assert data["failed"] == 1
        assert data["failures"][0]["attributes"] == {
            "Couleur": "Gris",
            "Stockage": "512 Go",
        }
