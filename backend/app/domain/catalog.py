"""
Client Catalog Visibility

Which products each client can see (table `catalogos_clientes`, one row per
client/product pair). A product without a row is not visible to the client.

Author: TM3
Date: 2025-08-11
"""
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List

from pydantic import BaseModel, Field


@dataclass
class CatalogEntry:
    """Visibility of one product for one client"""
    cliente_id: str
    producto_id: str
    activo: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return asdict(self)


class CatalogBulkUpdate(BaseModel):
    """Enable or disable several products at once"""
    enable: bool
    product_ids: List[str] = Field(..., min_length=1)


def visibility_map(entries: Iterable[CatalogEntry]) -> Dict[str, bool]:
    """producto_id -> activo"""
    return {entry.producto_id: entry.activo for entry in entries}


def build_catalog_view(products, entries: Iterable[CatalogEntry]) -> dict:
    """
    Combine the active product list with a client's catalog rows

    Args:
        products: Product domain models (only active ones are listed)
        entries: CatalogEntry rows of the client

    Returns:
        {"products": [...product dict + in_catalog], "total": n, "enabled": n}
    """
    visible = visibility_map(entries)

    rows = []
    for product in products:
        if not product.activo:
            continue
        data = product.to_dict()
        data['in_catalog'] = visible.get(product.id, False)
        rows.append(data)

    return {
        "products": rows,
        "total": len(rows),
        "enabled": sum(1 for row in rows if row['in_catalog']),
    }


def toggled_visibility(entries: Iterable[CatalogEntry], producto_id: str) -> bool:
    """New visibility after a toggle (missing rows count as hidden)"""
    return not visibility_map(entries).get(producto_id, False)
