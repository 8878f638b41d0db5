"""
Report Service

Sales and commission reports over a date range. Generated reports are stored
in `reportes_operativos` so they can be listed later.

Author: TM3
Date: 2025-08-12
"""
import logging
from datetime import date, datetime, time
from typing import Iterable, List, Optional

from app.core.config import settings
from app.domain.order import Order
from app.domain.order_workflow import OrderStatus
from app.domain.report import Report
from app.repositories.order_repository import OrderRepository
from app.repositories.report_repository import ReportRepository
from app.services.analytics_service import month_key, product_stats

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "Cliente desconocido"


def period_bounds(start: date, end: date):
    """[start 00:00:00, end 23:59:59] as datetimes"""
    if start > end:
        raise ValueError("start_date must be on or before end_date")
    return datetime.combine(start, time.min), datetime.combine(end, time(23, 59, 59))


def sales_summary(orders: List[Order]) -> dict:
    total_sales = sum(float(o.total) for o in orders)
    total_orders = len(orders)
    return {
        "total_sales": total_sales,
        "total_orders": total_orders,
        "total_clients": len({o.cliente_id for o in orders}),
        "avg_order_value": total_sales / total_orders if total_orders else 0.0,
    }


def report_top_products(orders: Iterable[Order], limit: int = 10) -> List[dict]:
    rows = [
        {"name": name, "sales": stats["revenue"], "quantity": stats["quantity"]}
        for name, stats in product_stats(orders).items()
    ]
    rows.sort(key=lambda row: row["sales"], reverse=True)
    return rows[:limit]


def client_sales(orders: Iterable[Order]) -> List[dict]:
    """Sales per client name, highest first"""
    stats = {}
    for order in orders:
        name = order.cliente_nombre or UNKNOWN_CLIENT
        current = stats.setdefault(name, {"total_sales": 0.0, "order_count": 0})
        current["total_sales"] += float(order.total)
        current["order_count"] += 1

    rows = [{"client_name": name, **data} for name, data in stats.items()]
    rows.sort(key=lambda row: row["total_sales"], reverse=True)
    return rows


def monthly_sales(orders: Iterable[Order]) -> List[dict]:
    """Sales per YYYY-MM, chronological"""
    stats = {}
    for order in orders:
        current = stats.setdefault(month_key(order.fecha_pedido), {"sales": 0.0, "orders": 0})
        current["sales"] += float(order.total)
        current["orders"] += 1
    return [{"month": key, **stats[key]} for key in sorted(stats)]


def build_sales_report(orders: List[Order]) -> dict:
    return {
        "summary": sales_summary(orders),
        "top_products": report_top_products(orders),
        "client_sales": client_sales(orders),
        "monthly_sales": monthly_sales(orders),
    }


def build_commission_report(orders: List[Order], start: date, end: date, rate: float) -> dict:
    """
    Commission over delivered orders

    Args:
        orders: Orders of the period (non delivered ones are ignored)
        rate: Commission rate (0.05 = 5%)
    """
    delivered = [o for o in orders if o.estado == OrderStatus.ENTREGADO.value]
    total_ventas = sum(float(o.total) for o in delivered)

    return {
        "periodo": {"inicio": start.isoformat(), "fin": end.isoformat()},
        "total_ventas": total_ventas,
        "comision_percentage": round(rate * 100, 2),
        "comision_total": total_ventas * rate,
        "pedidos_count": len(delivered),
        "clientes_atendidos": len({o.cliente_nombre for o in delivered if o.cliente_nombre}),
        "detalles": [
            {
                "pedido_numero": o.numero_pedido,
                "cliente": o.cliente_nombre or UNKNOWN_CLIENT,
                "fecha": o.fecha_pedido.isoformat(),
                "total": float(o.total),
                "comision": float(o.total) * rate,
                "estado": o.estado,
            }
            for o in delivered
        ],
    }


class ReportService:
    def __init__(self, order_repo: Optional[OrderRepository] = None, report_repo: Optional[ReportRepository] = None):
        self.order_repo = order_repo or OrderRepository()
        self.report_repo = report_repo or ReportRepository()

    def sales_report(self, start: date, end: date, comercial_id: Optional[str] = None, save: bool = True) -> dict:
        from_dt, to_dt = period_bounds(start, end)
        orders = self.order_repo.find_for_period(comercial_id=comercial_id, from_date=from_dt, to_date=to_dt)

        data = build_sales_report(orders)
        return self._store('ventas', comercial_id, start, end, data, save)

    def commission_report(self, start: date, end: date, comercial_id: Optional[str] = None, save: bool = True) -> dict:
        from_dt, to_dt = period_bounds(start, end)
        orders = self.order_repo.find_for_period(
            comercial_id=comercial_id,
            from_date=from_dt,
            to_date=to_dt,
            estado=OrderStatus.ENTREGADO.value,
        )

        data = build_commission_report(orders, start, end, settings.COMMISSION_RATE)
        return self._store('comisiones', comercial_id, start, end, data, save)

    def list_reports(self, comercial_id: Optional[str] = None, tipo: Optional[str] = None) -> List[Report]:
        return self.report_repo.find_all(comercial_id=comercial_id, tipo=tipo)

    def _store(self, tipo: str, comercial_id, start: date, end: date, data: dict, save: bool) -> dict:
        if not save:
            return {"report": None, "data": data}

        report = self.report_repo.create(
            tipo=tipo,
            comercial_id=comercial_id,
            periodo_inicio=start,
            periodo_fin=end,
            filtros={"start_date": start.isoformat(), "end_date": end.isoformat()},
            datos=data,
        )
        logger.info(f"{tipo} report {report.numero_reporte} generated for {comercial_id or 'all commercials'}")
        return {"report": report.to_dict(), "data": data}
