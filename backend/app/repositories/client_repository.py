"""
Client Repository - Data Access Layer for Clients

Handles all database queries for `clientes` and returns Client domain models.
A `comercial_id` argument restricts every query to that commercial's clients.

Author: TM3
Date: 2025-08-09
"""
import logging
from typing import List, Optional

from app.core.database import get_db_connection_dict_with_retry
from app.domain.client import Client, ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)


CLIENT_COLUMNS = """
    cl.id, cl.nombre, cl.email, cl.telefono, cl.direccion, cl.tipo, cl.notas,
    cl.logo_url, cl.activo, cl.comercial_id, cl.created_at, cl.updated_at
"""

RETURNING_COLUMNS = """
    id, nombre, email, telefono, direccion, tipo, notas,
    logo_url, activo, comercial_id, created_at, updated_at
"""


class ClientRepository:
    """
    Repository for Client data access
    """

    def find_all(
        self,
        comercial_id: Optional[str] = None,
        search: Optional[str] = None,
        activo: Optional[bool] = None
    ) -> List[Client]:
        """
        Find clients with commercial name and order count, ordered by name

        Args:
            comercial_id: Restrict to this commercial's clients
            search: Matches nombre / email (case-insensitive) or telefono (substring)
            activo: Filter by active status

        Returns:
            List of clients
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if comercial_id:
                conditions.append("cl.comercial_id = %s")
                params.append(comercial_id)

            if search:
                conditions.append("(cl.nombre ILIKE %s OR cl.email ILIKE %s OR cl.telefono LIKE %s)")
                search_param = f"%{search}%"
                params.extend([search_param, search_param, search_param])

            if activo is not None:
                conditions.append("cl.activo = %s")
                params.append(activo)

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT
                    {CLIENT_COLUMNS},
                    co.nombre as comercial_nombre,
                    COUNT(p.id) as pedidos_count
                FROM clientes cl
                LEFT JOIN comerciales co ON cl.comercial_id = co.id
                LEFT JOIN pedidos p ON p.cliente_id = cl.id
                WHERE {where_clause}
                GROUP BY cl.id, co.nombre
                ORDER BY cl.nombre
            """, params)

            return [Client(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, cliente_id: str, comercial_id: Optional[str] = None) -> Optional[Client]:
        """
        Find client by ID

        Returns:
            Client or None if not found (or owned by another commercial)
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            conditions = ["cl.id = %s"]
            params = [cliente_id]
            if comercial_id:
                conditions.append("cl.comercial_id = %s")
                params.append(comercial_id)

            cursor.execute(f"""
                SELECT
                    {CLIENT_COLUMNS},
                    co.nombre as comercial_nombre,
                    (SELECT COUNT(*) FROM pedidos p WHERE p.cliente_id = cl.id) as pedidos_count
                FROM clientes cl
                LEFT JOIN comerciales co ON cl.comercial_id = co.id
                WHERE {" AND ".join(conditions)}
            """, params)

            row = cursor.fetchone()
            return Client(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, client: ClientCreate) -> Client:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(
                f"""
                INSERT INTO clientes (
                    nombre, email, telefono, direccion, tipo, notas, logo_url,
                    activo, comercial_id, created_at, updated_at
                ) VALUES (
                    %s, %s, %s, %s, %s, %s, %s, %s, %s, NOW(), NOW()
                )
                RETURNING {RETURNING_COLUMNS}
                """,
                (
                    client.nombre, client.email, client.telefono, client.direccion,
                    client.tipo, client.notas, client.logo_url, client.activo,
                    client.comercial_id,
                )
            )
            row = cursor.fetchone()

            conn.commit()
            logger.info(f"Client '{client.nombre}' created for commercial {client.comercial_id}")
            return Client(**row)

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def update(self, cliente_id: str, changes: ClientUpdate) -> Optional[Client]:
        """
        Update the fields that were sent

        Returns:
            Updated client or None if it does not exist
        """
        fields = changes.model_dump(exclude_unset=True)
        if not fields:
            return self.find_by_id(cliente_id)

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            assignments = ", ".join(f"{name} = %s" for name in fields)
            cursor.execute(
                f"""
                UPDATE clientes SET {assignments}, updated_at = NOW()
                WHERE id = %s
                RETURNING {RETURNING_COLUMNS}
                """,
                list(fields.values()) + [cliente_id]
            )
            row = cursor.fetchone()

            conn.commit()
            return Client(**row) if row else None

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def delete(self, cliente_id: str) -> bool:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM clientes WHERE id = %s", (cliente_id,))
            deleted = cursor.rowcount > 0

            conn.commit()
            if deleted:
                logger.info(f"Client {cliente_id} deleted")
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()
