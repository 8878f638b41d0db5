"""
Reports API Endpoints
Sales and commission reports; generated reports are stored and listed

Author: TM3
Date: 2025-08-12
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.api.errors import to_http_exception
from app.core.auth import TokenUser, get_current_user
from app.domain.errors import NotFoundError, PermissionDeniedError
from app.domain.report import REPORT_TYPES, ReportPeriod
from app.repositories.report_repository import ReportRepository
from app.services.report_service import ReportService

router = APIRouter()


def get_report_service() -> ReportService:
    return ReportService()


def get_report_repository() -> ReportRepository:
    return ReportRepository()


def _report_scope(user: TokenUser, requested: Optional[str]) -> Optional[str]:
    """
    Commercial a report is computed for

    Commercials always get their own; admins get everything unless they ask
    for a specific commercial.
    """
    if user.is_admin:
        return requested
    if requested and requested != user.id:
        raise PermissionDeniedError("Only admins can build reports for another commercial")
    return user.id


@router.get("/")
async def list_reports(
    tipo: Optional[str] = Query(None, description="comisiones, ventas, stock or entregas"),
    user: TokenUser = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Stored reports of the caller (admins: all)"""
    try:
        if tipo and tipo not in REPORT_TYPES:
            raise ValueError(f"tipo must be one of: {', '.join(REPORT_TYPES)}")

        reports = service.list_reports(comercial_id=user.scope, tipo=tipo)
        return {
            "status": "success",
            "count": len(reports),
            "data": [report.to_dict() for report in reports]
        }

    except Exception as e:
        raise to_http_exception(e, "fetching reports")


@router.post("/sales")
async def generate_sales_report(
    period: ReportPeriod,
    save: bool = Query(True, description="Store the report"),
    user: TokenUser = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """
    Sales report for a date range

    Returns summary, top products, sales per client and per month.
    """
    try:
        result = service.sales_report(
            period.start_date,
            period.end_date,
            comercial_id=_report_scope(user, period.comercial_id),
            save=save,
        )
        return {"status": "success", **result}

    except Exception as e:
        raise to_http_exception(e, "generating sales report")


@router.post("/commissions")
async def generate_commission_report(
    period: ReportPeriod,
    save: bool = Query(True, description="Store the report"),
    user: TokenUser = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Commission over delivered orders of the period"""
    try:
        result = service.commission_report(
            period.start_date,
            period.end_date,
            comercial_id=_report_scope(user, period.comercial_id),
            save=save,
        )
        return {"status": "success", **result}

    except Exception as e:
        raise to_http_exception(e, "generating commission report")


@router.get("/{report_id}")
async def get_report(
    report_id: str,
    user: TokenUser = Depends(get_current_user),
    repo: ReportRepository = Depends(get_report_repository),
):
    try:
        report = repo.find_by_id(report_id, comercial_id=user.scope)
        if not report:
            raise NotFoundError("Report", report_id)
        return {"status": "success", "data": report.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "fetching report")
