"""
Dashboard Service

KPIs for the commercial's home dashboard and the admin dashboard. Rows are
loaded for the caller's scope and aggregated in memory.

Author: TM3
Date: 2025-08-10
"""
import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional

from app.domain.order import Order
from app.domain.order_workflow import OrderStatus, PENDING_ORDER_STATUSES
from app.repositories.client_repository import ClientRepository
from app.repositories.comercial_repository import ComercialRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

NO_DATA = "Sin datos"


def start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _naive(value: datetime) -> datetime:
    # Rows come back timezone aware; compare on wall-clock values
    return value.replace(tzinfo=None) if value.tzinfo else value


def most_active_client(orders: Iterable[Order]) -> str:
    """Name of the client with most orders ("Sin datos" when there are none)"""
    counts = Counter(order.cliente_nombre for order in orders if order.cliente_nombre)
    if not counts:
        return NO_DATA
    return counts.most_common(1)[0][0]


def commercial_stats(orders: List[Order], active_clients: int, now: datetime) -> dict:
    month_start = start_of_month(now)
    return {
        "total_clientes": active_clients,
        "pedidos_mes": sum(1 for o in orders if _naive(o.fecha_pedido) >= month_start),
        "ventas_total": sum(float(o.total) for o in orders),
        "cliente_mas_activo": most_active_client(orders),
    }


def admin_stats(comerciales, clients, products, orders: List[Order], now: datetime) -> dict:
    """
    Admin KPIs

    ventas_mes only counts delivered orders created this month.
    """
    month_start = start_of_month(now)
    return {
        "total_comerciales": len(comerciales),
        "comerciales_activos": sum(1 for c in comerciales if c.activo),
        "total_clientes": len(clients),
        "total_productos": len(products),
        "productos_activos": sum(1 for p in products if p.activo),
        "pedidos_pendientes": sum(1 for o in orders if o.estado in PENDING_ORDER_STATUSES),
        "ventas_mes": sum(
            float(o.total) for o in orders
            if o.estado == OrderStatus.ENTREGADO.value
            and o.created_at is not None
            and _naive(o.created_at) >= month_start
        ),
    }


class DashboardService:
    def __init__(
        self,
        order_repo: Optional[OrderRepository] = None,
        client_repo: Optional[ClientRepository] = None,
        product_repo: Optional[ProductRepository] = None,
        comercial_repo: Optional[ComercialRepository] = None,
    ):
        self.order_repo = order_repo or OrderRepository()
        self.client_repo = client_repo or ClientRepository()
        self.product_repo = product_repo or ProductRepository()
        self.comercial_repo = comercial_repo or ComercialRepository()

    def commercial_dashboard(self, comercial_id: str, now: Optional[datetime] = None) -> dict:
        """Home dashboard of one commercial (own clients and orders only)"""
        now = now or datetime.now()

        clients = self.client_repo.find_all(comercial_id=comercial_id, activo=True)
        orders = self.order_repo.find_for_period(comercial_id=comercial_id)
        recent = self.order_repo.find_recent(comercial_id=comercial_id, limit=10)

        return {
            "stats": commercial_stats(orders, len(clients), now),
            "recent_orders": [order.to_dict() for order in recent],
        }

    def admin_dashboard(self, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now()

        comerciales = self.comercial_repo.find_all()
        clients = self.client_repo.find_all()
        products = self.product_repo.find_all()
        orders = self.order_repo.find_for_period()
        recent = self.order_repo.find_recent(limit=5)

        logger.debug(f"Admin dashboard over {len(orders)} orders")

        return {
            "stats": admin_stats(comerciales, clients, products, orders, now),
            "recent_orders": [order.to_dict() for order in recent],
        }
