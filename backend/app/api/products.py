"""
Products API Endpoints
Product catalog: reads for every user, writes for admins

Author: TM3
Date: 2025-08-09
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.api.errors import to_http_exception
from app.core.auth import TokenUser, get_current_user, require_admin
from app.domain.errors import NotFoundError
from app.domain.product import PRODUCT_CATEGORIES, ProductCreate, ProductUpdate
from app.repositories.product_repository import ProductRepository

router = APIRouter()


def get_product_repository() -> ProductRepository:
    return ProductRepository()


@router.get("/")
async def get_products(
    search: Optional[str] = Query(None, description="Search by name, SKU or description"),
    categoria: Optional[str] = Query(None, description="Filter by category"),
    activo: Optional[bool] = Query(None, description="Filter by active status"),
    user: TokenUser = Depends(get_current_user),
    repo: ProductRepository = Depends(get_product_repository),
):
    """
    Get all products with optional filters
    """
    try:
        products = repo.find_all(search=search, categoria=categoria, activo=activo)
        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise to_http_exception(e, "fetching products")


@router.get("/categories")
async def get_categories():
    return {"status": "success", "data": PRODUCT_CATEGORIES}


@router.get("/{producto_id}")
async def get_product(
    producto_id: str,
    user: TokenUser = Depends(get_current_user),
    repo: ProductRepository = Depends(get_product_repository),
):
    try:
        product = repo.find_by_id(producto_id)
        if not product:
            raise NotFoundError("Product", producto_id)
        return {"status": "success", "data": product.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "fetching product")


@router.post("/", status_code=201)
async def create_product(
    product: ProductCreate,
    user: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Create a product (SKU generated when omitted)"""
    try:
        if product.sku and repo.find_by_sku(product.sku):
            raise ValueError(f"SKU {product.sku} already exists")

        created = repo.create(product)
        return {"status": "success", "data": created.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "creating product")


@router.put("/{producto_id}")
async def update_product(
    producto_id: str,
    changes: ProductUpdate,
    user: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository),
):
    try:
        if changes.sku:
            existing = repo.find_by_sku(changes.sku)
            if existing and existing.id != producto_id:
                raise ValueError(f"SKU {changes.sku} already exists")

        updated = repo.update(producto_id, changes)
        if not updated:
            raise NotFoundError("Product", producto_id)
        return {"status": "success", "data": updated.to_dict()}

    except Exception as e:
        raise to_http_exception(e, "updating product")


@router.delete("/{producto_id}")
async def delete_product(
    producto_id: str,
    user: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository),
):
    try:
        if not repo.delete(producto_id):
            raise NotFoundError("Product", producto_id)
        return {"status": "success", "message": f"Product {producto_id} deleted"}

    except Exception as e:
        raise to_http_exception(e, "deleting product")
