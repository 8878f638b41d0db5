"""
Global Search Service

One search box over clients, products and orders with relevance scoring and
amount / status filters.

Author: TM3
Date: 2025-08-11
"""
import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from app.repositories.client_repository import ClientRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


SEARCH_TYPES = ('all', 'clients', 'products', 'orders')
RESULTS_PER_TYPE = 10

# Amount filter is only applied when the range differs from these defaults
DEFAULT_MIN_AMOUNT = 0.0
DEFAULT_MAX_AMOUNT = 10000.0


class SearchFilters(BaseModel):
    type: str = Field('all', pattern=r'^(all|clients|products|orders)$')
    status: str = 'all'
    min_amount: float = DEFAULT_MIN_AMOUNT
    max_amount: float = DEFAULT_MAX_AMOUNT


def relevance_score(term: str, title: str, result_type: str) -> int:
    """
    Score of a result title against the search term

    +100 exact match, +50 prefix, +25 contains (case-insensitive, cumulative),
    +10 for clients, +5 for orders.
    """
    lower_term = term.lower()
    lower_title = (title or "").lower()

    score = 0
    if lower_title == lower_term:
        score += 100
    if lower_title.startswith(lower_term):
        score += 50
    if lower_term in lower_title:
        score += 25

    if result_type == 'client':
        score += 10
    if result_type == 'order':
        score += 5

    return score


def apply_filters(results: List[dict], filters: SearchFilters) -> List[dict]:
    """Amount and status filters, then sort by score (stable)"""
    filtered = results

    if filters.min_amount > DEFAULT_MIN_AMOUNT or filters.max_amount < DEFAULT_MAX_AMOUNT:
        def in_range(result):
            if result['type'] == 'client':
                return True
            return filters.min_amount <= result['amount'] <= filters.max_amount
        filtered = [r for r in filtered if in_range(r)]

    if filters.status != 'all':
        def matches_status(result):
            if result['type'] == 'order':
                return result['metadata']['estado'] == filters.status
            if result['type'] == 'client' and filters.status in ('activo', 'inactivo'):
                return result['metadata']['activo'] == (filters.status == 'activo')
            return True
        filtered = [r for r in filtered if matches_status(r)]

    return sorted(filtered, key=lambda r: r['score'], reverse=True)


class SearchService:
    def __init__(
        self,
        client_repo: Optional[ClientRepository] = None,
        product_repo: Optional[ProductRepository] = None,
        order_repo: Optional[OrderRepository] = None,
    ):
        self.client_repo = client_repo or ClientRepository()
        self.product_repo = product_repo or ProductRepository()
        self.order_repo = order_repo or OrderRepository()

    def search(self, term: str, filters: Optional[SearchFilters] = None, comercial_id: Optional[str] = None) -> List[dict]:
        """
        Search the caller's clients and orders plus active products

        Returns:
            Results sorted by relevance: {id, type, title, subtitle, description,
            amount, score, metadata}
        """
        term = (term or "").strip()
        if not term:
            return []

        filters = filters or SearchFilters()
        results: List[dict] = []

        if filters.type in ('all', 'clients'):
            for client in self.client_repo.find_all(comercial_id=comercial_id, search=term)[:RESULTS_PER_TYPE]:
                results.append({
                    "id": client.id,
                    "type": "client",
                    "title": client.nombre,
                    "subtitle": client.email or "Sin email",
                    "description": f"Tel: {client.telefono or 'N/A'} | {'Activo' if client.activo else 'Inactivo'}",
                    "amount": None,
                    "score": relevance_score(term, client.nombre, "client"),
                    "metadata": client.to_dict(),
                })

        if filters.type in ('all', 'products'):
            for product in self.product_repo.find_all(search=term, activo=True)[:RESULTS_PER_TYPE]:
                results.append({
                    "id": product.id,
                    "type": "product",
                    "title": product.nombre,
                    "subtitle": f"SKU: {product.sku}",
                    "description": product.descripcion or "Sin descripción",
                    "amount": float(product.precio),
                    "score": relevance_score(term, product.nombre, "product"),
                    "metadata": product.to_dict(),
                })

        if filters.type in ('all', 'orders'):
            orders, _ = self.order_repo.find_all(comercial_id=comercial_id, search=term, limit=RESULTS_PER_TYPE)
            for order in orders:
                results.append({
                    "id": order.id,
                    "type": "order",
                    "title": order.numero_pedido,
                    "subtitle": order.cliente_nombre or "Cliente desconocido",
                    "description": f"{order.estado} | {order.fecha_pedido.date().isoformat()}",
                    "amount": float(order.total),
                    "score": relevance_score(term, order.numero_pedido, "order"),
                    "metadata": order.to_dict(),
                })

        logger.debug(f"Search '{term}' ({filters.type}): {len(results)} raw results")
        return apply_filters(results, filters)
