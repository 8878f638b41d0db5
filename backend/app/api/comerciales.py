"""
Comerciales API Endpoints (admin only)
Portal user management: the Supabase auth user plus the `comerciales` profile

Author: TM3
Date: 2025-08-09
"""
from fastapi import APIRouter, Depends
from supabase import Client

from app.api.errors import to_http_exception
from app.core.auth import TokenUser, require_admin
from app.core.config import settings
from app.core.database import get_supabase
from app.domain.comercial import ComercialCreate, ComercialUpdate
from app.domain.errors import NotFoundError
from app.repositories.comercial_repository import ComercialRepository
from app.services.comercial_service import ComercialService

router = APIRouter()


def get_comercial_repository() -> ComercialRepository:
    return ComercialRepository()


def get_comercial_service(sb: Client = Depends(get_supabase)) -> ComercialService:
    return ComercialService(sb)


@router.get("/")
async def get_comerciales(
    user: TokenUser = Depends(require_admin),
    repo: ComercialRepository = Depends(get_comercial_repository),
):
    """All commercials with their number of clients"""
    try:
        comerciales = repo.find_all()
        return {
            "status": "success",
            "count": len(comerciales),
            "data": [c.to_dict() for c in comerciales]
        }

    except Exception as e:
        raise to_http_exception(e, "fetching commercials")


@router.get("/active")
async def get_active_comerciales(
    user: TokenUser = Depends(require_admin),
    repo: ComercialRepository = Depends(get_comercial_repository),
):
    try:
        return {"status": "success", "data": [c.to_dict() for c in repo.find_active()]}

    except Exception as e:
        raise to_http_exception(e, "fetching commercials")


@router.get("/{comercial_id}")
async def get_comercial(
    comercial_id: str,
    user: TokenUser = Depends(require_admin),
    repo: ComercialRepository = Depends(get_comercial_repository),
):
    try:
        comercial = repo.find_by_id(comercial_id)
        if not comercial:
            raise NotFoundError("Commercial", comercial_id)
        return {"status": "success", "data": comercial.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "fetching commercial")


@router.post("/", status_code=201)
async def create_comercial(
    data: ComercialCreate,
    user: TokenUser = Depends(require_admin),
    service: ComercialService = Depends(get_comercial_service),
):
    """
    Create a commercial

    The auth user gets the temporary password, which must be changed on
    first login.
    """
    try:
        comercial = service.create_comercial(data)
        return {
            "status": "success",
            "data": comercial.to_dict(),
            "temporary_password": settings.DEFAULT_COMERCIAL_PASSWORD
        }

    except Exception as e:
        raise to_http_exception(e, "creating commercial")


@router.put("/{comercial_id}")
async def update_comercial(
    comercial_id: str,
    changes: ComercialUpdate,
    user: TokenUser = Depends(require_admin),
    repo: ComercialRepository = Depends(get_comercial_repository),
):
    try:
        updated = repo.update(comercial_id, changes)
        if not updated:
            raise NotFoundError("Commercial", comercial_id)
        return {"status": "success", "data": updated.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "updating commercial")


@router.delete("/{comercial_id}")
async def delete_comercial(
    comercial_id: str,
    user: TokenUser = Depends(require_admin),
    repo: ComercialRepository = Depends(get_comercial_repository),
):
    try:
        if comercial_id == user.id:
            raise ValueError("You cannot delete your own user")
        if not repo.delete(comercial_id):
            raise NotFoundError("Commercial", comercial_id)
        return {"status": "success", "message": f"Commercial {comercial_id} deleted"}

    except Exception as e:
        raise to_http_exception(e, "deleting commercial")
