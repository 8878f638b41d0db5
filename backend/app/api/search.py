"""
Global Search API Endpoint
"""
from fastapi import APIRouter, Depends, Query

from app.api.errors import to_http_exception
from app.core.auth import TokenUser, get_current_user
from app.services.search_service import SearchFilters, SearchService

router = APIRouter()


def get_search_service() -> SearchService:
    return SearchService()


@router.get("/")
async def search(
    q: str = Query("", description="Search term"),
    type: str = Query("all", description="all, clients, products or orders"),
    status: str = Query("all", description="Order status, activo or inactivo"),
    min_amount: float = Query(0, ge=0),
    max_amount: float = Query(10000, ge=0),
    user: TokenUser = Depends(get_current_user),
    service: SearchService = Depends(get_search_service),
):
    """Search clients, products and orders ranked by relevance"""
    try:
        filters = SearchFilters(type=type, status=status, min_amount=min_amount, max_amount=max_amount)
        results = service.search(q, filters, comercial_id=user.scope)
        return {
            "status": "success",
            "query": q,
            "count": len(results),
            "data": results
        }

    except Exception as e:
        raise to_http_exception(e, "searching")
