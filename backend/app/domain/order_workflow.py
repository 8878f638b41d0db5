"""
Operational Order Workflow

Order status vocabulary, its display table and the recomputation applied to an
order whenever one of its items changes status.

Author: TM3
Date: 2025-08-10
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterable, Optional

from app.domain.errors import InvalidStatusError


class OrderStatus(str, Enum):
    RECIBIDO = "recibido"
    REVISION = "revision"
    CONFIRMADO_PARCIAL = "confirmado_parcial"
    PREPARACION = "preparacion"
    ENVIADO = "enviado"
    ENTREGADO = "entregado"
    CANCELADO = "cancelado"


class ItemStatus(str, Enum):
    PENDIENTE = "pendiente"
    CONFIRMADO = "confirmado"
    NO_CONFIRMADO = "no_confirmado"
    SIN_STOCK = "sin_stock"
    PREPARANDO = "preparando"
    ENVIADO = "enviado"


ORDER_STATUSES = [s.value for s in OrderStatus]
ITEM_STATUSES = [s.value for s in ItemStatus]

DEFAULT_ORDER_STATUS = OrderStatus.RECIBIDO.value
DEFAULT_ITEM_STATUS = ItemStatus.PENDIENTE.value

# Display table: label / color / progress (%)
ORDER_STATUS_CONFIG: Dict[str, Dict] = {
    "recibido": {"label": "Recibido", "color": "bg-blue-500", "progress": 10},
    "revision": {"label": "En Revisión", "color": "bg-yellow-500", "progress": 25},
    "confirmado_parcial": {"label": "Confirmado Parcial", "color": "bg-orange-500", "progress": 50},
    "preparacion": {"label": "En Preparación", "color": "bg-purple-500", "progress": 75},
    "enviado": {"label": "Enviado", "color": "bg-green-500", "progress": 90},
    "entregado": {"label": "Entregado", "color": "bg-green-600", "progress": 100},
    "cancelado": {"label": "Cancelado", "color": "bg-red-500", "progress": 0},
}

# Forward flow used by the "advance" action
_NEXT_STATUS: Dict[str, Optional[str]] = {
    "recibido": "revision",
    "revision": "preparacion",
    "confirmado_parcial": "preparacion",
    "preparacion": "enviado",
    "enviado": "entregado",
    "entregado": None,
    "cancelado": None,
}

# Orders still waiting for operational review
PENDING_ORDER_STATUSES = ("recibido", "revision")

_BADGE_SUCCESS = {"activo", "active", "confirmado", "entregado", "success"}
_BADGE_ERROR = {"inactivo", "inactive", "cancelado", "error"}
_BADGE_WARNING = {"pendiente", "pending", "revision", "preparacion"}


def is_valid_order_status(value) -> bool:
    return value in ORDER_STATUSES


def is_valid_item_status(value) -> bool:
    return value in ITEM_STATUSES


def validate_order_status(value) -> str:
    """Return the value unchanged or raise InvalidStatusError"""
    if isinstance(value, OrderStatus):
        return value.value
    if not is_valid_order_status(value):
        raise InvalidStatusError("order", value, ORDER_STATUSES)
    return value


def validate_item_status(value) -> str:
    if isinstance(value, ItemStatus):
        return value.value
    if not is_valid_item_status(value):
        raise InvalidStatusError("item", value, ITEM_STATUSES)
    return value


def order_progress(status: str) -> int:
    """Progress percentage for a status, 0 for unknown values"""
    config = ORDER_STATUS_CONFIG.get(status)
    return config["progress"] if config else 0


def derive_order_status(current: str, item_statuses: Iterable[str]) -> str:
    """
    Recompute an order's status from its items.

    - every item confirmado                    -> preparacion
    - at least one confirmado / no_confirmado  -> confirmado_parcial
    - otherwise                                -> unchanged

    An order with no items keeps its current status.
    """
    statuses = list(item_statuses)
    if not statuses:
        return current

    confirmed = sum(1 for s in statuses if s == ItemStatus.CONFIRMADO.value)
    if confirmed == len(statuses):
        return OrderStatus.PREPARACION.value

    reviewed = sum(
        1 for s in statuses
        if s in (ItemStatus.CONFIRMADO.value, ItemStatus.NO_CONFIRMADO.value)
    )
    if reviewed > 0:
        return OrderStatus.CONFIRMADO_PARCIAL.value

    return current


def next_order_status(current: str) -> Optional[str]:
    """Next status in the forward flow, None for terminal states"""
    validate_order_status(current)
    return _NEXT_STATUS[current]


def item_confirmation_timestamp(status: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """fecha_confirmacion is only set when an item becomes confirmado"""
    if status == ItemStatus.CONFIRMADO.value:
        return now or datetime.now(timezone.utc)
    return None


def badge_variant(status: str) -> str:
    """Badge variant (success / error / warning / default) for any status label"""
    normalized = (status or "").lower()
    if normalized in _BADGE_SUCCESS:
        return "success"
    if normalized in _BADGE_ERROR:
        return "error"
    if normalized in _BADGE_WARNING:
        return "warning"
    return "default"


def status_config_list():
    """ORDER_STATUS_CONFIG as an ordered list (API payload)"""
    return [
        {"value": value, **config}
        for value, config in ORDER_STATUS_CONFIG.items()
    ]
