"""
Clients API Endpoints
Client management, client profile and per-client catalog visibility

Author: TM3
Date: 2025-08-09
Updated: 2025-08-11 (profile card and catalog endpoints)
"""
from fastapi import APIRouter, Depends, Query

from app.api.errors import to_http_exception
from app.core.auth import TokenUser, get_current_user
from app.domain.catalog import CatalogBulkUpdate
from app.domain.client import CLIENT_TYPES, CLIENT_STATUS_FILTERS, ClientCreate, ClientUpdate
from app.domain.errors import NotFoundError, PermissionDeniedError
from app.repositories.client_repository import ClientRepository
from app.services.catalog_service import CatalogService
from app.services.client_profile_service import ClientProfileService

router = APIRouter()


def get_client_repository() -> ClientRepository:
    return ClientRepository()


def get_profile_service() -> ClientProfileService:
    return ClientProfileService()


def get_catalog_service() -> CatalogService:
    return CatalogService()


def _status_to_activo(status: str):
    if status not in CLIENT_STATUS_FILTERS:
        raise ValueError(f"status must be one of: {', '.join(CLIENT_STATUS_FILTERS)}")
    return None if status == 'all' else status == 'activo'


@router.get("/")
async def get_clients(
    search: str = Query(None, description="Search by name, email or phone"),
    status: str = Query("all", description="activo, inactivo or all"),
    user: TokenUser = Depends(get_current_user),
    repo: ClientRepository = Depends(get_client_repository),
):
    """
    List the caller's clients (admins see all)

    Each client includes its commercial's name and number of orders.
    """
    try:
        clients = repo.find_all(
            comercial_id=user.scope,
            search=search,
            activo=_status_to_activo(status),
        )
        return {
            "status": "success",
            "count": len(clients),
            "data": [client.to_dict() for client in clients]
        }

    except Exception as e:
        raise to_http_exception(e, "fetching clients")


@router.get("/types")
async def get_client_types():
    return {"status": "success", "data": CLIENT_TYPES}


@router.get("/{cliente_id}")
async def get_client(
    cliente_id: str,
    user: TokenUser = Depends(get_current_user),
    repo: ClientRepository = Depends(get_client_repository),
):
    try:
        client = repo.find_by_id(cliente_id, comercial_id=user.scope)
        if not client:
            raise NotFoundError("Client", cliente_id)
        return {"status": "success", "data": client.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "fetching client")


@router.post("/", status_code=201)
async def create_client(
    client: ClientCreate,
    user: TokenUser = Depends(get_current_user),
    repo: ClientRepository = Depends(get_client_repository),
):
    """
    Create a client

    The client belongs to the caller unless an admin assigns another commercial.
    """
    try:
        if client.comercial_id and client.comercial_id != user.id and not user.is_admin:
            raise PermissionDeniedError("Only admins can assign clients to another commercial")
        if not client.comercial_id:
            client = client.model_copy(update={"comercial_id": user.id})

        created = repo.create(client)
        return {"status": "success", "data": created.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "creating client")


@router.put("/{cliente_id}")
async def update_client(
    cliente_id: str,
    changes: ClientUpdate,
    user: TokenUser = Depends(get_current_user),
    repo: ClientRepository = Depends(get_client_repository),
):
    try:
        if not repo.find_by_id(cliente_id, comercial_id=user.scope):
            raise NotFoundError("Client", cliente_id)
        if 'comercial_id' in changes.model_fields_set and not user.is_admin:
            raise PermissionDeniedError("Only admins can reassign clients")

        updated = repo.update(cliente_id, changes)
        if not updated:
            raise NotFoundError("Client", cliente_id)
        return {"status": "success", "data": updated.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "updating client")


@router.delete("/{cliente_id}")
async def delete_client(
    cliente_id: str,
    user: TokenUser = Depends(get_current_user),
    repo: ClientRepository = Depends(get_client_repository),
):
    try:
        if not repo.find_by_id(cliente_id, comercial_id=user.scope):
            raise NotFoundError("Client", cliente_id)

        repo.delete(cliente_id)
        return {"status": "success", "message": f"Client {cliente_id} deleted"}

    except Exception as e:
        raise to_http_exception(e, "deleting client")


@router.get("/{cliente_id}/profile")
async def get_client_profile(
    cliente_id: str,
    user: TokenUser = Depends(get_current_user),
    service: ClientProfileService = Depends(get_profile_service),
):
    """Client data plus purchase stats (totals, favorites, segment)"""
    try:
        return {"status": "success", "data": service.get_profile(cliente_id, comercial_id=user.scope)}

    except Exception as e:
        raise to_http_exception(e, "fetching client profile")


# ============================================
# Catalog visibility
# ============================================

@router.get("/{cliente_id}/catalog")
async def get_client_catalog(
    cliente_id: str,
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Active products with an in_catalog flag for this client"""
    try:
        return {"status": "success", "data": service.get_catalog(cliente_id, comercial_id=user.scope)}

    except Exception as e:
        raise to_http_exception(e, "fetching catalog")


@router.post("/{cliente_id}/catalog/{producto_id}/toggle")
async def toggle_catalog_product(
    cliente_id: str,
    producto_id: str,
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        entry = service.toggle_product(cliente_id, producto_id, comercial_id=user.scope)
        return {"status": "success", "data": entry.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "updating catalog")


@router.post("/{cliente_id}/catalog/bulk")
async def bulk_update_catalog(
    cliente_id: str,
    update: CatalogBulkUpdate,
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Enable or disable several products at once"""
    try:
        count = service.bulk_update(cliente_id, update.product_ids, update.enable, comercial_id=user.scope)
        return {"status": "success", "updated": count}

    except Exception as e:
        raise to_http_exception(e, "updating catalog")
