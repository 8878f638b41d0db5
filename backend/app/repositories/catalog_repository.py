"""
Catalog Repository - per-client product visibility (`catalogos_clientes`)

Author: TM3
Date: 2025-08-11
"""
import logging
from typing import List

from app.core.database import get_db_connection_dict_with_retry
from app.domain.catalog import CatalogEntry

logger = logging.getLogger(__name__)


UPSERT_SQL = """
    INSERT INTO catalogos_clientes (cliente_id, producto_id, activo)
    VALUES (%s, %s, %s)
    ON CONFLICT (cliente_id, producto_id) DO UPDATE SET
        activo = EXCLUDED.activo
"""


class CatalogRepository:
    """
    Repository for client catalog rows
    """

    def find_by_client(self, cliente_id: str) -> List[CatalogEntry]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT cliente_id, producto_id, activo
                FROM catalogos_clientes
                WHERE cliente_id = %s
            """, (cliente_id,))

            return [CatalogEntry(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def set_visibility(self, cliente_id: str, producto_id: str, activo: bool) -> CatalogEntry:
        """
        Show or hide one product for a client (upsert on the pair)
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(UPSERT_SQL, (cliente_id, producto_id, activo))

            conn.commit()
            return CatalogEntry(cliente_id=cliente_id, producto_id=producto_id, activo=activo)

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def set_visibility_bulk(self, cliente_id: str, product_ids: List[str], activo: bool) -> int:
        """
        Show or hide several products in one transaction

        Returns:
            Number of products written
        """
        if not product_ids:
            return 0

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.executemany(
                UPSERT_SQL,
                [(cliente_id, producto_id, activo) for producto_id in product_ids]
            )

            conn.commit()
            logger.info(
                f"Catalog of client {cliente_id}: {len(product_ids)} products "
                f"{'enabled' if activo else 'disabled'}"
            )
            return len(product_ids)

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()
