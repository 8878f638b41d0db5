"""
Analytics API Endpoints
Sales evolution, top products, client segmentation and month comparison

Author: TM3
Date: 2025-08-11
"""
from fastapi import APIRouter, Depends, Query

from app.api.errors import to_http_exception
from app.core.auth import TokenUser, get_current_user
from app.services.analytics_service import AnalyticsService

router = APIRouter()


def get_analytics_service() -> AnalyticsService:
    return AnalyticsService()


@router.get("/")
async def get_analytics(
    months: int = Query(6, ge=1, le=24, description="Months of sales evolution"),
    user: TokenUser = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    try:
        return {
            "status": "success",
            "data": service.get_analytics(comercial_id=user.scope, months=months)
        }

    except Exception as e:
        raise to_http_exception(e, "fetching analytics")
