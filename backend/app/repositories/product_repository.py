"""
Product Repository - Data Access Layer for Products

Handles all database queries for `productos` and returns Product domain models.

Author: TM3
Date: 2025-08-09
"""
import logging
from decimal import Decimal
from typing import List, Optional, Dict

from app.core.database import get_db_connection_dict_with_retry
from app.domain.product import Product, ProductCreate, ProductUpdate, StockAvailability, generate_sku

logger = logging.getLogger(__name__)


PRODUCT_COLUMNS = """
    id, sku, nombre, descripcion, precio, categoria, stock_disponible,
    url_imagen, activo, created_at, updated_at
"""


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    def find_by_id(self, producto_id: str) -> Optional[Product]:
        """
        Find product by ID

        Args:
            producto_id: Product ID

        Returns:
            Product domain model or None if not found
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM productos
                WHERE id = %s
            """, (producto_id,))

            row = cursor.fetchone()
            return Product(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_by_sku(self, sku: str) -> Optional[Product]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM productos
                WHERE sku = %s
            """, (sku,))

            row = cursor.fetchone()
            return Product(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        search: Optional[str] = None,
        categoria: Optional[str] = None,
        activo: Optional[bool] = None
    ) -> List[Product]:
        """
        Find products with optional filters, ordered by name

        Args:
            search: Search in nombre, sku, descripcion (case-insensitive)
            categoria: Filter by category
            activo: Filter by active status

        Returns:
            List of products
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if search:
                conditions.append("(nombre ILIKE %s OR sku ILIKE %s OR descripcion ILIKE %s)")
                search_param = f"%{search}%"
                params.extend([search_param, search_param, search_param])

            if categoria:
                conditions.append("categoria = %s")
                params.append(categoria)

            if activo is not None:
                conditions.append("activo = %s")
                params.append(activo)

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM productos
                WHERE {where_clause}
                ORDER BY nombre
            """, params)

            return [Product(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_prices(self, product_ids: List[str]) -> Dict[str, Decimal]:
        """Current prices (producto_id -> precio) of the given products"""
        return {item.producto_id: item.precio for item in self.find_stock(product_ids)}

    def find_stock(self, product_ids: List[str]) -> List[StockAvailability]:
        """
        Stock availability for a set of products

        Returns:
            One StockAvailability per existing product (unknown ids are skipped)
        """
        if not product_ids:
            return []

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id as producto_id, stock_disponible, nombre, precio
                FROM productos
                WHERE id = ANY(%s)
                ORDER BY nombre
            """, (list(product_ids),))

            return [StockAvailability(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def create(self, product: ProductCreate) -> Product:
        """
        Insert a product, generating a SKU when none was given
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            sku = product.sku or generate_sku()

            cursor.execute(
                f"""
                INSERT INTO productos (
                    sku, nombre, descripcion, precio, categoria, stock_disponible,
                    url_imagen, activo, created_at, updated_at
                ) VALUES (
                    %s, %s, %s, %s, %s, %s, %s, %s, NOW(), NOW()
                )
                RETURNING {PRODUCT_COLUMNS}
                """,
                (
                    sku, product.nombre, product.descripcion, product.precio,
                    product.categoria, product.stock_disponible, product.url_imagen,
                    product.activo,
                )
            )
            row = cursor.fetchone()

            conn.commit()
            logger.info(f"Product {sku} created")
            return Product(**row)

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def update(self, producto_id: str, changes: ProductUpdate) -> Optional[Product]:
        """
        Update the fields that were sent

        Returns:
            Updated product or None if it does not exist
        """
        fields = changes.model_dump(exclude_unset=True)
        if not fields:
            return self.find_by_id(producto_id)

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            assignments = ", ".join(f"{name} = %s" for name in fields)
            cursor.execute(
                f"""
                UPDATE productos SET {assignments}, updated_at = NOW()
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
                """,
                list(fields.values()) + [producto_id]
            )
            row = cursor.fetchone()

            conn.commit()
            return Product(**row) if row else None

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def delete(self, producto_id: str) -> bool:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM productos WHERE id = %s", (producto_id,))
            deleted = cursor.rowcount > 0

            conn.commit()
            if deleted:
                logger.info(f"Product {producto_id} deleted")
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()
