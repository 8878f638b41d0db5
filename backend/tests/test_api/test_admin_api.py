"""
API tests for the admin-only endpoints: commercials and admin dashboard

Author: TM3
Date: 2025-08-12
"""
from app.api.comerciales import get_comercial_repository, get_comercial_service
from app.api.dashboard import get_dashboard_service
from app.core.auth import TokenUser
from app.core.config import settings
from app.domain.comercial import Comercial


def _comercial(**extra):
    return Comercial(id="com-7", nombre="Luis Pérez", email="luis@barplas.com", **extra)


class TestComerciales:

    def test_commercials_cannot_list(self, client, login, override, comercial_user):
        login(comercial_user)
        override(get_comercial_repository)

        response = client.get("/api/v1/comerciales/")

        assert response.status_code == 403
        assert "Required role: admin" in response.json()["detail"]

    def test_list(self, client, login, override, admin_user):
        login(admin_user)
        override(get_comercial_repository).find_all.return_value = [_comercial(clientes_count=4)]

        response = client.get("/api/v1/comerciales/")

        assert response.json()["data"][0]["clientes_count"] == 4

    def test_create_returns_temporary_password(self, client, login, override, admin_user):
        login(admin_user)
        service = override(get_comercial_service)
        service.create_comercial.return_value = _comercial()

        response = client.post("/api/v1/comerciales/", json={"nombre": "Luis Pérez", "email": "luis@barplas.com"})

        assert response.status_code == 201
        assert response.json()["temporary_password"] == settings.DEFAULT_COMERCIAL_PASSWORD
        assert service.create_comercial.call_args.args[0].role == "comercial"

    def test_create_with_unknown_role(self, client, login, override, admin_user):
        login(admin_user)
        override(get_comercial_service)

        response = client.post("/api/v1/comerciales/", json={
            "nombre": "Luis", "email": "luis@barplas.com", "role": "root",
        })

        assert response.status_code == 422

    def test_deactivate(self, client, login, override, admin_user):
        login(admin_user)
        repo = override(get_comercial_repository)
        repo.update.return_value = _comercial(activo=False)

        response = client.put("/api/v1/comerciales/com-7", json={"activo": False})

        assert response.json()["data"]["activo"] is False

    def test_admin_cannot_delete_self(self, client, login, override, admin_user):
        login(admin_user)
        repo = override(get_comercial_repository)

        response = client.delete(f"/api/v1/comerciales/{admin_user.id}")

        assert response.status_code == 400
        repo.delete.assert_not_called()

    def test_delete_missing(self, client, login, override, admin_user):
        login(admin_user)
        override(get_comercial_repository).delete.return_value = False

        assert client.delete("/api/v1/comerciales/com-9").status_code == 404


class TestDashboards:

    def test_commercial_dashboard_uses_caller_id(self, client, login, override, comercial_user):
        login(comercial_user)
        service = override(get_dashboard_service)
        service.commercial_dashboard.return_value = {"stats": {}, "recent_orders": []}

        response = client.get("/api/v1/dashboard/")

        assert response.status_code == 200
        service.commercial_dashboard.assert_called_once_with(comercial_user.id)

    def test_commercial_dashboard_needs_a_portal_role(self, client, login, override):
        login(TokenUser(id="u-9", email="invitado@barplas.com", role="invitado"))
        service = override(get_dashboard_service)

        assert client.get("/api/v1/dashboard/").status_code == 403
        service.commercial_dashboard.assert_not_called()

    def test_admin_dashboard_requires_admin(self, client, login, override, comercial_user):
        login(comercial_user)
        service = override(get_dashboard_service)

        assert client.get("/api/v1/dashboard/admin").status_code == 403
        service.admin_dashboard.assert_not_called()

    def test_admin_dashboard(self, client, login, override, admin_user):
        login(admin_user)
        override(get_dashboard_service).admin_dashboard.return_value = {"stats": {"total_comerciales": 3}}

        assert client.get("/api/v1/dashboard/admin").json()["data"]["stats"]["total_comerciales"] == 3
