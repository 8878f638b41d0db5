"""
Dashboard API Endpoints
KPIs for the commercial home page and the admin dashboard

Author: TM3
Date: 2025-08-10
"""
from fastapi import APIRouter, Depends

from app.api.errors import to_http_exception
from app.core.auth import TokenUser, require_admin, require_comercial
from app.services.dashboard_service import DashboardService

router = APIRouter()


def get_dashboard_service() -> DashboardService:
    return DashboardService()


@router.get("/")
async def get_commercial_dashboard(
    user: TokenUser = Depends(require_comercial),
    service: DashboardService = Depends(get_dashboard_service),
):
    """
    Caller's dashboard

    Returns:
    - total_clientes (active)
    - pedidos_mes (orders since the 1st of the month)
    - ventas_total
    - cliente_mas_activo
    - 10 most recent orders
    """
    try:
        return {"status": "success", "data": service.commercial_dashboard(user.id)}

    except Exception as e:
        raise to_http_exception(e, "fetching dashboard")


@router.get("/admin")
async def get_admin_dashboard(
    user: TokenUser = Depends(require_admin),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Global KPIs and the 5 most recent orders"""
    try:
        return {"status": "success", "data": service.admin_dashboard()}

    except Exception as e:
        raise to_http_exception(e, "fetching admin dashboard")
