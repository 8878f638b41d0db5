"""
Unit tests for DashboardService

Author: TM3
Date: 2025-08-12
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

from app.domain.comercial import Comercial
from app.services.dashboard_service import (
    DashboardService,
    admin_stats,
    commercial_stats,
    most_active_client,
)

NOW = datetime(2025, 8, 15, 12, 0)


class TestCommercialStats:

    def test_counts_month_orders_and_total_sales(self, order_factory):
        orders = [
            order_factory("o1", total="100.00", fecha=datetime(2025, 8, 1), cliente_nombre="A"),
            order_factory("o2", total="50.00", fecha=datetime(2025, 8, 10), cliente_nombre="B"),
            order_factory("o3", total="25.00", fecha=datetime(2025, 7, 31, 23, 59), cliente_nombre="A"),
        ]

        stats = commercial_stats(orders, active_clients=4, now=NOW)

        assert stats == {
            "total_clientes": 4,
            "pedidos_mes": 2,
            "ventas_total": 175.0,
            "cliente_mas_activo": "A",
        }

    def test_timezone_aware_dates(self, order_factory):
        orders = [order_factory(fecha=datetime(2025, 8, 1, 8, 0, tzinfo=timezone.utc))]
        assert commercial_stats(orders, 1, NOW)["pedidos_mes"] == 1

    def test_no_orders(self):
        assert most_active_client([]) == "Sin datos"


class TestAdminStats:

    def test_admin_kpis(self, order_factory, client_factory, product_factory):
        comerciales = [
            Comercial(id="a", nombre="Admin", email="a@barplas.com", role="admin"),
            Comercial(id="b", nombre="Ana", email="b@barplas.com", activo=False),
        ]
        clients = [client_factory("c1"), client_factory("c2")]
        products = [product_factory("p1"), product_factory("p2", activo=False), product_factory("p3")]
        orders = [
            order_factory("o1", estado="recibido"),
            order_factory("o2", estado="revision"),
            order_factory("o3", estado="preparacion"),
            order_factory("o4", estado="entregado", total="300.00", created_at=datetime(2025, 8, 3)),
            order_factory("o5", estado="entregado", total="700.00", created_at=datetime(2025, 7, 3)),
            order_factory("o6", estado="enviado", total="50.00", created_at=datetime(2025, 8, 4)),
        ]

        stats = admin_stats(comerciales, clients, products, orders, NOW)

        assert stats == {
            "total_comerciales": 2,
            "comerciales_activos": 1,
            "total_clientes": 2,
            "total_productos": 3,
            "productos_activos": 2,
            "pedidos_pendientes": 2,
            "ventas_mes": 300.0,
        }


class TestDashboardService:

    def _service(self):
        repos = {name: MagicMock() for name in ("order_repo", "client_repo", "product_repo", "comercial_repo")}
        return DashboardService(**repos), repos

    def test_commercial_dashboard(self, order_factory, client_factory):
        service, repos = self._service()
        repos["client_repo"].find_all.return_value = [client_factory()]
        repos["order_repo"].find_for_period.return_value = [order_factory(fecha=datetime(2025, 8, 2))]
        repos["order_repo"].find_recent.return_value = [order_factory()]

        result = service.commercial_dashboard("com-1", now=NOW)

        repos["client_repo"].find_all.assert_called_once_with(comercial_id="com-1", activo=True)
        repos["order_repo"].find_recent.assert_called_once_with(comercial_id="com-1", limit=10)
        assert result["stats"]["total_clientes"] == 1
        assert result["stats"]["pedidos_mes"] == 1
        assert len(result["recent_orders"]) == 1

    def test_admin_dashboard_lists_five_recent_orders(self):
        service, repos = self._service()
        for repo in repos.values():
            repo.find_all.return_value = []
        repos["order_repo"].find_for_period.return_value = []
        repos["order_repo"].find_recent.return_value = []

        result = service.admin_dashboard(now=NOW)

        repos["order_repo"].find_recent.assert_called_once_with(limit=5)
        assert result["stats"]["ventas_mes"] == 0
        assert result["recent_orders"] == []
