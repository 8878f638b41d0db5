"""
Business Tools API Endpoints
Quote calculator and commercial email templates

Author: TM3
Date: 2025-08-11
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.api.errors import to_http_exception
from app.core.auth import TokenUser, get_current_user
from app.services.quote_service import (
    EMAIL_TEMPLATES,
    QuoteRequest,
    QuoteService,
    get_template,
    render_template,
)

router = APIRouter()


def get_quote_service() -> QuoteService:
    return QuoteService()


@router.post("/quote")
async def calculate_quote(
    request: QuoteRequest,
    user: TokenUser = Depends(get_current_user),
    service: QuoteService = Depends(get_quote_service),
):
    """Price a quote with current prices and per-line discounts (0-100%)"""
    try:
        quote = service.build_quote(request)
        return {"status": "success", "data": quote.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "calculating quote")


@router.get("/email-templates")
async def get_email_templates(user: TokenUser = Depends(get_current_user)):
    return {
        "status": "success",
        "data": [template.to_dict() for template in EMAIL_TEMPLATES]
    }


@router.post("/email-templates/{template_id}/render")
async def render_email_template(
    template_id: str,
    values: Dict[str, Any],
    user: TokenUser = Depends(get_current_user),
):
    """Fill a template's {{placeholders}}"""
    try:
        return {"status": "success", "data": render_template(get_template(template_id), values)}

    except Exception as e:
        raise to_http_exception(e, "rendering template")
