"""
Order Repository - Data Access Layer for Orders

Handles all database queries for `pedidos` / `pedido_items` and returns Order
domain models. Item status writes and the order status recomputation that
follows them run in the same transaction.

Author: TM3
Date: 2025-08-09
Updated: 2025-08-10 (operational workflow: item confirmation, delivery)
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple, Dict, Any, Iterable

from psycopg2.extras import Json

from app.core.database import get_db_connection_dict_with_retry
from app.domain.errors import NotFoundError
from app.domain.numbering import ORDER_NUMBER_PREFIX, format_document_number
from app.domain.order import Order, OrderItem, OrderCreate, ItemSelection
from app.domain.order_workflow import (
    ItemStatus,
    derive_order_status,
    item_confirmation_timestamp,
)

logger = logging.getLogger(__name__)


ORDER_COLUMNS = """
    p.id, p.numero_pedido, p.cliente_id, p.total, p.estado, p.fecha_pedido, p.notas,
    p.items_confirmados, p.notas_operativas, p.fecha_entrega_estimada,
    p.stock_confirmado, p.motivo_no_confirmado,
    p.created_at, p.updated_at,
    c.nombre as cliente_nombre,
    c.email as cliente_email,
    c.telefono as cliente_telefono,
    c.comercial_id
"""

ITEM_COLUMNS = """
    pi.id, pi.pedido_id, pi.producto_id, pi.cantidad, pi.precio_unitario, pi.subtotal,
    pi.estado, pi.fecha_confirmacion, pi.notas_item, pi.stock_disponible,
    pr.nombre as producto_nombre,
    pr.sku as producto_sku
"""

# Columns the operational actions may write directly
UPDATABLE_ORDER_FIELDS = {
    'estado', 'notas_operativas', 'fecha_entrega_estimada',
    'stock_confirmado', 'motivo_no_confirmado', 'notas',
}


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    `comercial_id` arguments restrict results to orders of that commercial's
    clients; None means no restriction (admin scope).
    """

    def find_by_id(self, pedido_id: str, comercial_id: Optional[str] = None) -> Optional[Order]:
        """
        Find order by ID with client and items

        Args:
            pedido_id: Order ID
            comercial_id: Restrict to this commercial's clients

        Returns:
            Order with all related data or None if not found (or out of scope)
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            conditions = ["p.id = %s"]
            params: List[Any] = [pedido_id]
            if comercial_id:
                conditions.append("c.comercial_id = %s")
                params.append(comercial_id)

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM pedidos p
                LEFT JOIN clientes c ON p.cliente_id = c.id
                WHERE {" AND ".join(conditions)}
            """, params)

            row = cursor.fetchone()
            if not row:
                return None

            cursor.execute(f"""
                SELECT {ITEM_COLUMNS}
                FROM pedido_items pi
                LEFT JOIN productos pr ON pi.producto_id = pr.id
                WHERE pi.pedido_id = %s
                ORDER BY pi.id
            """, (pedido_id,))

            items = cursor.fetchall()

            order_dict = dict(row)
            order_dict['items'] = [OrderItem(**item) for item in items]

            return Order(**order_dict)

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        comercial_id: Optional[str] = None,
        estado: Optional[str] = None,
        cliente_id: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters, newest first

        Args:
            comercial_id: Restrict to this commercial's clients
            estado: Filter by order status
            cliente_id: Filter by client
            from_date: Orders placed on or after this date
            to_date: Orders placed on or before this date
            search: Search by order number, client name or notes
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of orders, total count)
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            where_clause, params = self._build_filters(
                comercial_id=comercial_id,
                estado=estado,
                cliente_id=cliente_id,
                from_date=from_date,
                to_date=to_date,
                search=search,
            )

            # Get total count
            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM pedidos p
                LEFT JOIN clientes c ON p.cliente_id = c.id
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM pedidos p
                LEFT JOIN clientes c ON p.cliente_id = c.id
                WHERE {where_clause}
                ORDER BY p.fecha_pedido DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            order_rows = cursor.fetchall()

            if not order_rows:
                return [], total

            return self._attach_items(cursor, order_rows), total

        finally:
            cursor.close()
            conn.close()

    def find_for_period(
        self,
        comercial_id: Optional[str] = None,
        from_date=None,
        to_date=None,
        estado: Optional[str] = None,
        cliente_id: Optional[str] = None,
    ) -> List[Order]:
        """
        All orders (with items) of a scope and period, oldest first

        Used by dashboards, analytics and reports, which aggregate in memory.
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            where_clause, params = self._build_filters(
                comercial_id=comercial_id,
                estado=estado,
                cliente_id=cliente_id,
                from_date=from_date,
                to_date=to_date,
            )

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM pedidos p
                LEFT JOIN clientes c ON p.cliente_id = c.id
                WHERE {where_clause}
                ORDER BY p.fecha_pedido ASC
            """, params)

            order_rows = cursor.fetchall()
            if not order_rows:
                return []

            return self._attach_items(cursor, order_rows)

        finally:
            cursor.close()
            conn.close()

    def find_recent(self, comercial_id: Optional[str] = None, limit: int = 10) -> List[Order]:
        """
        Most recent orders of a scope (lightweight, no items)
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            where_clause, params = self._build_filters(comercial_id=comercial_id)

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM pedidos p
                LEFT JOIN clientes c ON p.cliente_id = c.id
                WHERE {where_clause}
                ORDER BY p.created_at DESC
                LIMIT %s
            """, params + [limit])

            rows = cursor.fetchall()

            # For this endpoint, we don't include items (lightweight response)
            return [Order(**{**dict(row), 'items': []}) for row in rows]

        finally:
            cursor.close()
            conn.close()

    def find_item(self, item_id: str) -> Optional[OrderItem]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ITEM_COLUMNS}
                FROM pedido_items pi
                LEFT JOIN productos pr ON pi.producto_id = pr.id
                WHERE pi.id = %s
            """, (item_id,))

            row = cursor.fetchone()
            return OrderItem(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    # ============================================
    # Writes
    # ============================================

    def create(self, order: OrderCreate, prices: Dict[str, Decimal]) -> Order:
        """
        Insert an order and its items

        Args:
            order: Order payload
            prices: Current product prices (producto_id -> precio), used for
                    lines sent without precio_unitario

        Returns:
            The created Order (reloaded with joins)
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            lines = []
            for item in order.items:
                precio = item.precio_unitario
                if precio is None:
                    if item.producto_id not in prices:
                        raise NotFoundError("Product", item.producto_id)
                    precio = Decimal(prices[item.producto_id])
                lines.append((item.producto_id, item.cantidad, precio, precio * item.cantidad))

            total = sum((line[3] for line in lines), Decimal('0'))

            cursor.execute("SELECT nextval('pedidos_seq') as seq")
            sequence = cursor.fetchone()['seq']
            fecha_pedido = order.fecha_pedido or datetime.now()
            numero_pedido = format_document_number(ORDER_NUMBER_PREFIX, fecha_pedido, sequence)

            cursor.execute(
                """
                INSERT INTO pedidos (
                    numero_pedido, cliente_id, total, estado, fecha_pedido, notas,
                    created_at, updated_at
                ) VALUES (
                    %s, %s, %s, 'recibido', %s, %s, NOW(), NOW()
                )
                RETURNING id
                """,
                (numero_pedido, order.cliente_id, total, fecha_pedido, order.notas)
            )
            pedido_id = cursor.fetchone()['id']

            for producto_id, cantidad, precio, subtotal in lines:
                cursor.execute(
                    """
                    INSERT INTO pedido_items (
                        pedido_id, producto_id, cantidad, precio_unitario, subtotal, estado
                    ) VALUES (
                        %s, %s, %s, %s, %s, 'pendiente'
                    )
                    """,
                    (pedido_id, producto_id, cantidad, precio, subtotal)
                )

            conn.commit()
            logger.info(f"Order {numero_pedido} created with {len(lines)} items (total {total})")

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

        return self.find_by_id(pedido_id)

    def confirm_items(
        self,
        pedido_id: str,
        selections: List[ItemSelection],
        notas_operativas: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> str:
        """
        Apply a partial confirmation in one transaction

        Every selected item becomes confirmado / no_confirmado with its notes,
        the order stores the selection map and operational notes, and the order
        status is recomputed when an item status changed.

        Returns:
            The order status after the operation
        """
        now = now or datetime.now(timezone.utc)
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(
                "SELECT id, estado FROM pedido_items WHERE pedido_id = %s FOR UPDATE",
                (pedido_id,)
            )
            current = {row['id']: row['estado'] for row in cursor.fetchall()}

            unknown = [s.item_id for s in selections if s.item_id not in current]
            if unknown:
                raise ValueError(f"Items do not belong to order {pedido_id}: {', '.join(unknown)}")

            changed = False
            items_confirmados = {}

            for selection in selections:
                estado = ItemStatus.CONFIRMADO.value if selection.confirmed else ItemStatus.NO_CONFIRMADO.value
                cursor.execute(
                    """
                    UPDATE pedido_items SET
                        estado = %s,
                        notas_item = %s,
                        fecha_confirmacion = %s
                    WHERE id = %s
                    """,
                    (estado, selection.notes, item_confirmation_timestamp(estado, now), selection.item_id)
                )
                if current[selection.item_id] != estado:
                    changed = True
                current[selection.item_id] = estado
                items_confirmados[selection.item_id] = {
                    "confirmed": selection.confirmed,
                    "notes": selection.notes,
                }

            cursor.execute(
                """
                UPDATE pedidos SET
                    notas_operativas = %s,
                    items_confirmados = %s,
                    updated_at = NOW()
                WHERE id = %s
                """,
                (notas_operativas, Json(items_confirmados), pedido_id)
            )

            estado_pedido = self._recompute_status(cursor, pedido_id, current.values(), changed)

            conn.commit()
            logger.info(
                f"Order {pedido_id}: {len(selections)} items reviewed, status {estado_pedido}"
            )
            return estado_pedido

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def update_item_status(
        self,
        item_id: str,
        estado: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> str:
        """
        Write one item's status and recompute its order

        Returns:
            The order status after the operation
        """
        now = now or datetime.now(timezone.utc)
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(
                "SELECT id, pedido_id, estado FROM pedido_items WHERE id = %s FOR UPDATE",
                (item_id,)
            )
            row = cursor.fetchone()
            if not row:
                raise NotFoundError("Order item", item_id)

            pedido_id = row['pedido_id']

            cursor.execute(
                """
                UPDATE pedido_items SET
                    estado = %s,
                    notas_item = COALESCE(%s, notas_item),
                    fecha_confirmacion = %s
                WHERE id = %s
                """,
                (estado, notes, item_confirmation_timestamp(estado, now), item_id)
            )

            cursor.execute("SELECT estado FROM pedido_items WHERE pedido_id = %s", (pedido_id,))
            statuses = [r['estado'] for r in cursor.fetchall()]

            estado_pedido = self._recompute_status(cursor, pedido_id, statuses, row['estado'] != estado)

            conn.commit()
            logger.info(f"Item {item_id} -> {estado} (order {pedido_id} is {estado_pedido})")
            return estado_pedido

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def update_fields(self, pedido_id: str, **fields) -> bool:
        """
        Update order columns (estado, notas_operativas, fecha_entrega_estimada, ...)

        Returns:
            True if the order exists
        """
        invalid = set(fields) - UPDATABLE_ORDER_FIELDS
        if invalid:
            raise ValueError(f"Cannot update order fields: {', '.join(sorted(invalid))}")
        if not fields:
            return True

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            assignments = ", ".join(f"{name} = %s" for name in fields)
            cursor.execute(
                f"UPDATE pedidos SET {assignments}, updated_at = NOW() WHERE id = %s",
                list(fields.values()) + [pedido_id]
            )
            updated = cursor.rowcount > 0

            conn.commit()
            return updated

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    # ============================================
    # Helpers
    # ============================================

    @staticmethod
    def _build_filters(
        comercial_id: Optional[str] = None,
        estado: Optional[str] = None,
        cliente_id: Optional[str] = None,
        from_date=None,
        to_date=None,
        search: Optional[str] = None,
    ) -> Tuple[str, List[Any]]:
        conditions = []
        params: List[Any] = []

        if comercial_id:
            conditions.append("c.comercial_id = %s")
            params.append(comercial_id)

        if estado:
            conditions.append("p.estado = %s")
            params.append(estado)

        if cliente_id:
            conditions.append("p.cliente_id = %s")
            params.append(cliente_id)

        if from_date:
            conditions.append("p.fecha_pedido >= %s")
            params.append(from_date)

        if to_date:
            conditions.append("p.fecha_pedido <= %s")
            params.append(to_date)

        if search:
            conditions.append("""(
                p.numero_pedido ILIKE %s OR
                c.nombre ILIKE %s OR
                p.notas ILIKE %s
            )""")
            search_param = f"%{search}%"
            params.extend([search_param, search_param, search_param])

        where_clause = " AND ".join(conditions) if conditions else "1=1"
        return where_clause, params

    @staticmethod
    def _attach_items(cursor, order_rows) -> List[Order]:
        # Get ALL items for these orders in ONE QUERY
        order_ids = [order['id'] for order in order_rows]

        cursor.execute(f"""
            SELECT {ITEM_COLUMNS}
            FROM pedido_items pi
            LEFT JOIN productos pr ON pi.producto_id = pr.id
            WHERE pi.pedido_id = ANY(%s)
            ORDER BY pi.pedido_id, pi.id
        """, (order_ids,))

        items_by_order: Dict[str, List[OrderItem]] = {}
        for item in cursor.fetchall():
            items_by_order.setdefault(item['pedido_id'], []).append(OrderItem(**dict(item)))

        orders = []
        for row in order_rows:
            order_dict = dict(row)
            order_dict['items'] = items_by_order.get(row['id'], [])
            orders.append(Order(**order_dict))

        return orders

    @staticmethod
    def _recompute_status(cursor, pedido_id: str, item_statuses: Iterable[str], changed: bool) -> str:
        """
        Recompute pedidos.estado from its items (inside the caller's transaction)

        Only runs when an item status actually changed.
        """
        cursor.execute("SELECT estado FROM pedidos WHERE id = %s FOR UPDATE", (pedido_id,))
        row = cursor.fetchone()
        if not row:
            raise NotFoundError("Order", pedido_id)

        current = row['estado']
        if not changed:
            return current

        derived = derive_order_status(current, item_statuses)
        if derived != current:
            cursor.execute(
                "UPDATE pedidos SET estado = %s, updated_at = NOW() WHERE id = %s",
                (derived, pedido_id)
            )
            logger.info(f"Order {pedido_id} status recomputed: {current} -> {derived}")

        return derived
