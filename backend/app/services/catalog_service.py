"""
Client Catalog Service

Which products a client can see, and toggling them on and off.

Author: TM3
Date: 2025-08-11
"""
import logging
from typing import List, Optional

from app.domain.catalog import CatalogEntry, build_catalog_view, toggled_visibility
from app.domain.errors import NotFoundError
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.client_repository import ClientRepository
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(
        self,
        catalog_repo: Optional[CatalogRepository] = None,
        client_repo: Optional[ClientRepository] = None,
        product_repo: Optional[ProductRepository] = None,
    ):
        self.catalog_repo = catalog_repo or CatalogRepository()
        self.client_repo = client_repo or ClientRepository()
        self.product_repo = product_repo or ProductRepository()

    def _check_client(self, cliente_id: str, comercial_id: Optional[str]) -> None:
        if not self.client_repo.find_by_id(cliente_id, comercial_id=comercial_id):
            raise NotFoundError("Client", cliente_id)

    def get_catalog(self, cliente_id: str, comercial_id: Optional[str] = None) -> dict:
        self._check_client(cliente_id, comercial_id)

        products = self.product_repo.find_all(activo=True)
        entries = self.catalog_repo.find_by_client(cliente_id)
        return build_catalog_view(products, entries)

    def toggle_product(self, cliente_id: str, producto_id: str, comercial_id: Optional[str] = None) -> CatalogEntry:
        """Flip the visibility of one product for the client"""
        self._check_client(cliente_id, comercial_id)
        if not self.product_repo.find_by_id(producto_id):
            raise NotFoundError("Product", producto_id)

        activo = toggled_visibility(self.catalog_repo.find_by_client(cliente_id), producto_id)
        entry = self.catalog_repo.set_visibility(cliente_id, producto_id, activo)
        logger.info(f"Product {producto_id} {'shown to' if activo else 'hidden from'} client {cliente_id}")
        return entry

    def bulk_update(
        self,
        cliente_id: str,
        product_ids: List[str],
        enable: bool,
        comercial_id: Optional[str] = None,
    ) -> int:
        self._check_client(cliente_id, comercial_id)
        return self.catalog_repo.set_visibility_bulk(cliente_id, product_ids, enable)
