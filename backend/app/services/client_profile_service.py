"""
Client Profile Service

Purchase history summary shown on a client's profile card.

Author: TM3
Date: 2025-08-11
"""
from typing import Iterable, List, Optional

from app.domain.errors import NotFoundError
from app.domain.order import Order
from app.repositories.client_repository import ClientRepository
from app.repositories.order_repository import OrderRepository
from app.services.analytics_service import segment_for


def favorite_products(orders: Iterable[Order], limit: int = 3) -> List[str]:
    """Product names ordered most (by quantity)"""
    counts = {}
    for order in orders:
        for item in order.items:
            if item.producto_nombre:
                counts[item.producto_nombre] = counts.get(item.producto_nombre, 0) + item.cantidad
    ranked = sorted(counts.items(), key=lambda pair: pair[1], reverse=True)
    return [name for name, _ in ranked[:limit]]


def client_stats(orders: List[Order]) -> dict:
    """
    Totals for one client's orders

    Returns:
        total_orders, total_spent, average_order_value, last_order_date,
        favorite_products and segment
    """
    total_orders = len(orders)
    total_spent = sum(float(order.total) for order in orders)
    last_order = max((order.fecha_pedido for order in orders), default=None)
    segment = segment_for(total_spent)

    return {
        "total_orders": total_orders,
        "total_spent": total_spent,
        "average_order_value": total_spent / total_orders if total_orders else 0.0,
        "last_order_date": last_order.isoformat() if last_order else None,
        "favorite_products": favorite_products(orders),
        "segment": segment["name"],
    }


class ClientProfileService:
    def __init__(self, client_repo: Optional[ClientRepository] = None, order_repo: Optional[OrderRepository] = None):
        self.client_repo = client_repo or ClientRepository()
        self.order_repo = order_repo or OrderRepository()

    def get_profile(self, cliente_id: str, comercial_id: Optional[str] = None) -> dict:
        client = self.client_repo.find_by_id(cliente_id, comercial_id=comercial_id)
        if not client:
            raise NotFoundError("Client", cliente_id)

        orders = self.order_repo.find_for_period(comercial_id=comercial_id, cliente_id=cliente_id)

        return {
            "client": client.to_dict(),
            "stats": client_stats(orders),
        }
