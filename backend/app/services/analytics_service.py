"""
Advanced Analytics Service

In-memory aggregations over orders and clients: sales evolution by month,
top products, client segmentation by lifetime revenue and the current vs
previous month comparison.

Author: TM3
Date: 2025-08-11
"""
import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from app.domain.client import Client
from app.domain.order import Order
from app.repositories.client_repository import ClientRepository
from app.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


# Lifetime revenue thresholds, highest first
SEGMENTS = [
    {"name": "VIP", "min": 1000, "color": "#009E40"},
    {"name": "Premium", "min": 500, "color": "#1863DC"},
    {"name": "Estándar", "min": 100, "color": "#FFA500"},
    {"name": "Nuevo", "min": 0, "color": "#808080"},
]

SPANISH_MONTHS = [
    "ene", "feb", "mar", "abr", "may", "jun",
    "jul", "ago", "sept", "oct", "nov", "dic",
]

UNKNOWN_PRODUCT = "Producto desconocido"


def month_key(value) -> str:
    """YYYY-MM of a date / datetime"""
    return f"{value.year}-{value.month:02d}"


def month_label(key: str) -> str:
    """Short Spanish month name for a YYYY-MM key"""
    return SPANISH_MONTHS[int(key.split("-")[1]) - 1]


def growth_percentage(current: float, previous: float) -> int:
    """Rounded % change, 0 when there is no previous value"""
    if not previous:
        return 0
    return round((current - previous) / previous * 100)


def segment_for(total_spent: float) -> dict:
    """Segment of a client given its lifetime revenue"""
    for segment in SEGMENTS:
        if total_spent >= segment["min"]:
            return segment
    return SEGMENTS[-1]


def sales_evolution(orders: Iterable[Order], months: int = 6) -> List[dict]:
    """
    Sales per month (last `months` months with orders, chronological)

    Returns:
        [{"month": "2025-07", "label": "jul", "sales": 0.0, "orders": 0, "growth": 0}]
    """
    monthly: Dict[str, dict] = {}
    for order in orders:
        key = month_key(order.fecha_pedido)
        bucket = monthly.setdefault(key, {"sales": 0.0, "orders": 0})
        bucket["sales"] += float(order.total)
        bucket["orders"] += 1

    keys = sorted(monthly)[-months:] if months > 0 else []

    result = []
    previous = None
    for key in keys:
        data = monthly[key]
        result.append({
            "month": key,
            "label": month_label(key),
            "sales": data["sales"],
            "orders": data["orders"],
            "growth": growth_percentage(data["sales"], previous["sales"]) if previous else 0,
        })
        previous = data

    return result


def product_stats(orders: Iterable[Order]) -> "OrderedDict[str, dict]":
    """Per product name: quantity, revenue (cantidad x precio_unitario) and line count"""
    stats: "OrderedDict[str, dict]" = OrderedDict()
    for order in orders:
        for item in order.items:
            name = item.producto_nombre or UNKNOWN_PRODUCT
            current = stats.setdefault(name, {"quantity": 0, "revenue": 0.0, "sales": 0})
            current["quantity"] += item.cantidad
            current["revenue"] += float(item.line_total)
            current["sales"] += 1
    return stats


def top_products(orders: Iterable[Order], limit: int = 5) -> List[dict]:
    """Best selling products by revenue"""
    rows = [{"name": name, **stats} for name, stats in product_stats(orders).items()]
    rows.sort(key=lambda row: row["revenue"], reverse=True)
    return rows[:limit]


def client_totals(orders: Iterable[Order]) -> Dict[str, float]:
    """cliente_id -> lifetime revenue"""
    totals: Dict[str, float] = {}
    for order in orders:
        if order.cliente_id:
            totals[order.cliente_id] = totals.get(order.cliente_id, 0.0) + float(order.total)
    return totals


def client_segmentation(clients: Iterable[Client], orders: Iterable[Order]) -> List[dict]:
    """
    Count clients (and their revenue) per segment

    Clients without orders fall in "Nuevo". Empty segments are omitted.
    """
    totals = client_totals(orders)
    segments = [
        {"segment": s["name"], "clients": 0, "revenue": 0.0, "color": s["color"]}
        for s in SEGMENTS
    ]

    for client in clients:
        revenue = totals.get(client.id, 0.0)
        index = SEGMENTS.index(segment_for(revenue))
        segments[index]["clients"] += 1
        segments[index]["revenue"] += revenue

    return [s for s in segments if s["clients"] > 0]


def monthly_comparison(orders: Iterable[Order], today: Optional[date] = None) -> dict:
    """Current calendar month vs the previous one"""
    today = today or date.today()
    previous_month = today - relativedelta(months=1)

    current_total = 0.0
    previous_total = 0.0
    for order in orders:
        fecha = order.fecha_pedido
        if (fecha.year, fecha.month) == (today.year, today.month):
            current_total += float(order.total)
        elif (fecha.year, fecha.month) == (previous_month.year, previous_month.month):
            previous_total += float(order.total)

    growth = growth_percentage(current_total, previous_total)

    return {
        "current_month": current_total,
        "previous_month": previous_total,
        "growth": growth,
        "trend": "up" if growth >= 0 else "down",
    }


class AnalyticsService:
    """
    Builds the advanced analytics payload for a scope

    Args:
        comercial_id: Restrict to this commercial's clients (None = everything)
    """

    def __init__(self, order_repo: Optional[OrderRepository] = None, client_repo: Optional[ClientRepository] = None):
        self.order_repo = order_repo or OrderRepository()
        self.client_repo = client_repo or ClientRepository()

    def get_analytics(self, comercial_id: Optional[str] = None, months: int = 6, today: Optional[date] = None) -> dict:
        orders = self.order_repo.find_for_period(comercial_id=comercial_id)
        clients = self.client_repo.find_all(comercial_id=comercial_id)

        logger.debug(f"Analytics over {len(orders)} orders / {len(clients)} clients")

        return {
            "sales_evolution": sales_evolution(orders, months=months),
            "top_products": top_products(orders),
            "client_segmentation": client_segmentation(clients, orders),
            "monthly_comparison": monthly_comparison(orders, today=today),
            "generated_at": datetime.now().isoformat(),
        }
