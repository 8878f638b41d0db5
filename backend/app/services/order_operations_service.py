"""
Order Operations Service

Operational actions on orders: partial item confirmation, item status
changes, stock checks, delivery scheduling and manual status changes.

Every action first checks that the order is visible to the caller
(comercial_id = None means admin scope).

Author: TM3
Date: 2025-08-10
"""
import logging
from datetime import datetime
from typing import List, Optional

from app.domain.errors import NotFoundError
from app.domain.order import Order, OrderCreate, ItemSelection
from app.domain.order_workflow import (
    OrderStatus,
    next_order_status,
    validate_item_status,
    validate_order_status,
)
from app.domain.product import StockAvailability
from app.repositories.client_repository import ClientRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class OrderOperationsService:
    def __init__(
        self,
        order_repo: Optional[OrderRepository] = None,
        product_repo: Optional[ProductRepository] = None,
        client_repo: Optional[ClientRepository] = None,
    ):
        self.order_repo = order_repo or OrderRepository()
        self.product_repo = product_repo or ProductRepository()
        self.client_repo = client_repo or ClientRepository()

    def get_order(self, pedido_id: str, comercial_id: Optional[str] = None) -> Order:
        order = self.order_repo.find_by_id(pedido_id, comercial_id=comercial_id)
        if not order:
            raise NotFoundError("Order", pedido_id)
        return order

    def create_order(self, order: OrderCreate, comercial_id: Optional[str] = None) -> Order:
        """
        Register a new order for a client of the caller

        Lines without precio_unitario take the current product price.
        """
        if not self.client_repo.find_by_id(order.cliente_id, comercial_id=comercial_id):
            raise NotFoundError("Client", order.cliente_id)

        missing_prices = [i.producto_id for i in order.items if i.precio_unitario is None]
        prices = self.product_repo.find_prices(missing_prices) if missing_prices else {}

        return self.order_repo.create(order, prices)

    def confirm_partial_order(
        self,
        pedido_id: str,
        selections: List[ItemSelection],
        notas_operativas: Optional[str] = None,
        comercial_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Order:
        """
        Confirm / reject a subset of the order's items

        Raises:
            ValueError: empty selection or items of another order
        """
        if not selections:
            raise ValueError("At least one item must be selected")

        self.get_order(pedido_id, comercial_id)
        estado = self.order_repo.confirm_items(pedido_id, selections, notas_operativas, now=now)

        confirmed = sum(1 for s in selections if s.confirmed)
        logger.info(
            f"Order {pedido_id}: {confirmed} confirmed / {len(selections) - confirmed} rejected -> {estado}"
        )
        return self.get_order(pedido_id, comercial_id)

    def update_item_status(
        self,
        item_id: str,
        estado: str,
        notes: Optional[str] = None,
        comercial_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Order:
        estado = validate_item_status(estado)

        item = self.order_repo.find_item(item_id)
        if not item:
            raise NotFoundError("Order item", item_id)
        self.get_order(item.pedido_id, comercial_id)

        self.order_repo.update_item_status(item_id, estado, notes, now=now)
        return self.get_order(item.pedido_id, comercial_id)

    def check_stock_availability(self, product_ids: List[str]) -> List[StockAvailability]:
        """Current stock of the given products"""
        return self.product_repo.find_stock(product_ids)

    def schedule_delivery(
        self,
        pedido_id: str,
        delivery_date: datetime,
        comercial_id: Optional[str] = None,
    ) -> Order:
        """Set the estimated delivery date and mark the order as shipped"""
        self.get_order(pedido_id, comercial_id)

        self.order_repo.update_fields(
            pedido_id,
            fecha_entrega_estimada=delivery_date,
            estado=OrderStatus.ENVIADO.value,
        )
        logger.info(f"Order {pedido_id} scheduled for delivery on {delivery_date.isoformat()}")
        return self.get_order(pedido_id, comercial_id)

    def update_order_status(
        self,
        pedido_id: str,
        estado: str,
        notes: Optional[str] = None,
        comercial_id: Optional[str] = None,
    ) -> Order:
        estado = validate_order_status(estado)
        order = self.get_order(pedido_id, comercial_id)

        fields = {"estado": estado}
        if notes is not None:
            fields["notas_operativas"] = notes

        self.order_repo.update_fields(pedido_id, **fields)
        logger.info(f"Order {order.numero_pedido}: {order.estado} -> {estado}")
        return self.get_order(pedido_id, comercial_id)

    def advance_order(self, pedido_id: str, comercial_id: Optional[str] = None) -> Order:
        """
        Move the order one step forward in the workflow

        Raises:
            ValueError: order is already entregado / cancelado
        """
        order = self.get_order(pedido_id, comercial_id)
        target = next_order_status(order.estado)
        if target is None:
            raise ValueError(f"Order {order.numero_pedido} is {order.estado} and cannot advance")

        self.order_repo.update_fields(pedido_id, estado=target)
        logger.info(f"Order {order.numero_pedido} advanced: {order.estado} -> {target}")
        return self.get_order(pedido_id, comercial_id)
