"""
Orders API Endpoints
Order registration, listing and the operational workflow actions

Author: TM3
Date: 2025-08-09
Updated: 2025-08-10 (operational workflow: confirm items, delivery, advance)
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.api.errors import to_http_exception
from app.core.auth import TokenUser, get_current_user
from app.domain.errors import NotFoundError
from app.domain.order import (
    DeliverySchedule,
    ItemStatusUpdate,
    OrderCreate,
    OrderStatusUpdate,
    PartialConfirmation,
    StockCheckRequest,
)
from app.domain.order_workflow import ORDER_STATUSES, ITEM_STATUSES, status_config_list
from app.repositories.order_repository import OrderRepository
from app.services.order_operations_service import OrderOperationsService

router = APIRouter()


def get_order_repository() -> OrderRepository:
    return OrderRepository()


def get_order_service() -> OrderOperationsService:
    return OrderOperationsService()


@router.get("/")
async def get_orders(
    estado: Optional[str] = Query(None, description="Filter by order status"),
    cliente_id: Optional[str] = Query(None, description="Filter by client"),
    from_date: Optional[str] = Query(None, description="Filter orders from this date (ISO format)"),
    to_date: Optional[str] = Query(None, description="Filter orders until this date (ISO format)"),
    search: Optional[str] = Query(None, description="Search by order number, client name or notes"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    user: TokenUser = Depends(get_current_user),
    repo: OrderRepository = Depends(get_order_repository),
):
    """
    Get the caller's orders with optional filters (admins see all)

    Returns orders with client and item information
    """
    try:
        if estado and estado not in ORDER_STATUSES:
            raise ValueError(f"Invalid order status '{estado}'")

        orders, total = repo.find_all(
            comercial_id=user.scope,
            estado=estado,
            cliente_id=cliente_id,
            from_date=from_date,
            to_date=to_date,
            search=search,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise to_http_exception(e, "fetching orders")


@router.get("/status-config")
async def get_status_config():
    """Order status table (label, color, progress) and the item statuses"""
    return {
        "status": "success",
        "data": {
            "order_statuses": status_config_list(),
            "item_statuses": ITEM_STATUSES,
        }
    }


@router.post("/stock-availability")
async def check_stock_availability(
    request: StockCheckRequest,
    user: TokenUser = Depends(get_current_user),
    service: OrderOperationsService = Depends(get_order_service),
):
    """Current stock, name and price of the requested products"""
    try:
        rows = service.check_stock_availability(request.product_ids)
        return {
            "status": "success",
            "count": len(rows),
            "data": [{**row.model_dump(), "precio": float(row.precio)} for row in rows]
        }

    except Exception as e:
        raise to_http_exception(e, "checking stock")


@router.patch("/items/{item_id}/status")
async def update_item_status(
    item_id: str,
    update: ItemStatusUpdate,
    user: TokenUser = Depends(get_current_user),
    service: OrderOperationsService = Depends(get_order_service),
):
    """Change one item's status; the order status is recomputed"""
    try:
        order = service.update_item_status(item_id, update.estado, update.notes, comercial_id=user.scope)
        return {"status": "success", "data": order.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "updating item status")


@router.get("/{pedido_id}")
async def get_order(
    pedido_id: str,
    user: TokenUser = Depends(get_current_user),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Get a single order with client and items"""
    try:
        order = repo.find_by_id(pedido_id, comercial_id=user.scope)
        if not order:
            raise NotFoundError("Order", pedido_id)

        return {"status": "success", "data": order.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "fetching order")


@router.post("/", status_code=201)
async def create_order(
    order: OrderCreate,
    user: TokenUser = Depends(get_current_user),
    service: OrderOperationsService = Depends(get_order_service),
):
    """Register an order for one of the caller's clients"""
    try:
        created = service.create_order(order, comercial_id=user.scope)
        return {"status": "success", "data": created.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "creating order")


@router.post("/{pedido_id}/confirm-items")
async def confirm_items(
    pedido_id: str,
    confirmation: PartialConfirmation,
    user: TokenUser = Depends(get_current_user),
    service: OrderOperationsService = Depends(get_order_service),
):
    """Confirm or reject a subset of the order's items"""
    try:
        order = service.confirm_partial_order(
            pedido_id,
            confirmation.items,
            confirmation.notas_operativas,
            comercial_id=user.scope,
        )
        return {"status": "success", "data": order.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "confirming items")


@router.post("/{pedido_id}/schedule-delivery")
async def schedule_delivery(
    pedido_id: str,
    schedule: DeliverySchedule,
    user: TokenUser = Depends(get_current_user),
    service: OrderOperationsService = Depends(get_order_service),
):
    """Set the estimated delivery date (order becomes enviado)"""
    try:
        order = service.schedule_delivery(pedido_id, schedule.fecha_entrega_estimada, comercial_id=user.scope)
        return {"status": "success", "data": order.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "scheduling delivery")


@router.patch("/{pedido_id}/status")
async def update_order_status(
    pedido_id: str,
    update: OrderStatusUpdate,
    user: TokenUser = Depends(get_current_user),
    service: OrderOperationsService = Depends(get_order_service),
):
    try:
        order = service.update_order_status(pedido_id, update.estado, update.notes, comercial_id=user.scope)
        return {"status": "success", "data": order.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "updating order status")


@router.post("/{pedido_id}/advance")
async def advance_order(
    pedido_id: str,
    user: TokenUser = Depends(get_current_user),
    service: OrderOperationsService = Depends(get_order_service),
):
    """Move the order to the next workflow status"""
    try:
        order = service.advance_order(pedido_id, comercial_id=user.scope)
        return {"status": "success", "data": order.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "advancing order")
