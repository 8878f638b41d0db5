"""
API tests for /api/v1/products

Author: TM3
Date: 2025-08-12
"""
from app.api.products import get_product_repository


class TestProductReads:

    def test_list(self, client, login, override, comercial_user, product_factory):
        login(comercial_user)
        repo = override(get_product_repository)
        repo.find_all.return_value = [product_factory(stock=0)]

        response = client.get("/api/v1/products/?categoria=Embalaje&activo=true")

        assert response.status_code == 200
        assert response.json()["data"][0]["is_out_of_stock"] is True
        repo.find_all.assert_called_once_with(search=None, categoria="Embalaje", activo=True)

    def test_missing_product(self, client, login, override, comercial_user):
        login(comercial_user)
        override(get_product_repository).find_by_id.return_value = None

        assert client.get("/api/v1/products/p9").status_code == 404

    def test_categories(self, client):
        assert client.get("/api/v1/products/categories").json()["data"][0] == "Embalaje"


class TestProductWrites:

    def test_commercial_cannot_create(self, client, login, override, comercial_user):
        login(comercial_user)
        repo = override(get_product_repository)

        response = client.post("/api/v1/products/", json={"nombre": "Envase"})

        assert response.status_code == 403
        repo.create.assert_not_called()

    def test_admin_creates(self, client, login, override, admin_user, product_factory):
        login(admin_user)
        repo = override(get_product_repository)
        repo.create.return_value = product_factory()

        response = client.post("/api/v1/products/", json={"nombre": "Envase PET 500ml", "precio": 2.5})

        assert response.status_code == 201
        repo.find_by_sku.assert_not_called()

    def test_duplicate_sku(self, client, login, override, admin_user, product_factory):
        login(admin_user)
        repo = override(get_product_repository)
        repo.find_by_sku.return_value = product_factory()

        response = client.post("/api/v1/products/", json={"nombre": "Envase", "sku": "PRD-123456ABC"})

        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_invalid_category(self, client, login, override, admin_user):
        login(admin_user)
        override(get_product_repository)

        assert client.post("/api/v1/products/", json={"nombre": "X", "categoria": "Juguetes"}).status_code == 422

    def test_update_missing(self, client, login, override, admin_user):
        login(admin_user)
        override(get_product_repository).update.return_value = None

        assert client.put("/api/v1/products/p9", json={"precio": 3}).status_code == 404

    def test_delete(self, client, login, override, admin_user):
        login(admin_user)
        override(get_product_repository).delete.return_value = True

        assert client.delete("/api/v1/products/p1").status_code == 200

    def test_update_with_null_required_fields(self, client, login, override, admin_user):
        login(admin_user)
        repo = override(get_product_repository)

        response = client.put("/api/v1/products/p1", json={"sku": None, "nombre": None, "precio": None})

        assert response.status_code == 422
        repo.update.assert_not_called()

    def test_update_to_sku_of_another_product(self, client, login, override, admin_user, product_factory):
        login(admin_user)
        repo = override(get_product_repository)
        repo.find_by_sku.return_value = product_factory(producto_id="p2", sku="PRD-999999XYZ")

        response = client.put("/api/v1/products/p1", json={"sku": "PRD-999999XYZ"})

        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]
        repo.update.assert_not_called()

    def test_update_keeping_own_sku(self, client, login, override, admin_user, product_factory):
        login(admin_user)
        repo = override(get_product_repository)
        repo.find_by_sku.return_value = product_factory(producto_id="p1")
        repo.update.return_value = product_factory(producto_id="p1", nombre="Envase PET 1L")

        response = client.put("/api/v1/products/p1", json={"sku": "PRD-123456ABC", "nombre": "Envase PET 1L"})

        assert response.status_code == 200
        assert response.json()["data"]["nombre"] == "Envase PET 1L"
