"""
Comercial Repository - Data Access Layer for portal users

Handles all database queries for `comerciales`.

Author: TM3
Date: 2025-08-09
"""
import logging
from typing import List, Optional

from app.core.database import get_db_connection_dict_with_retry
from app.domain.comercial import Comercial, ComercialCreate, ComercialUpdate

logger = logging.getLogger(__name__)


COMERCIAL_COLUMNS = "id, nombre, email, role, activo, created_at, updated_at"


class ComercialRepository:
    """
    Repository for Comercial data access
    """

    def find_all(self) -> List[Comercial]:
        """
        All commercials with the number of clients assigned, newest first
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    co.id, co.nombre, co.email, co.role, co.activo,
                    co.created_at, co.updated_at,
                    COUNT(cl.id) as clientes_count
                FROM comerciales co
                LEFT JOIN clientes cl ON cl.comercial_id = co.id
                GROUP BY co.id
                ORDER BY co.created_at DESC
            """)

            return [Comercial(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_active(self) -> List[Comercial]:
        """Active commercials ordered by name (assignment pickers)"""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {COMERCIAL_COLUMNS}
                FROM comerciales
                WHERE activo = true
                ORDER BY nombre
            """)

            return [Comercial(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, comercial_id: str) -> Optional[Comercial]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {COMERCIAL_COLUMNS}
                FROM comerciales
                WHERE id = %s
            """, (comercial_id,))

            row = cursor.fetchone()
            return Comercial(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, comercial_id: str, comercial: ComercialCreate) -> Comercial:
        """
        Insert the profile row of an already created auth user

        Args:
            comercial_id: Supabase auth user id
            comercial: Profile data
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(
                f"""
                INSERT INTO comerciales (
                    id, nombre, email, role, activo, created_at, updated_at
                ) VALUES (
                    %s, %s, %s, %s, %s, NOW(), NOW()
                )
                RETURNING {COMERCIAL_COLUMNS}
                """,
                (comercial_id, comercial.nombre, comercial.email, comercial.role, comercial.activo)
            )
            row = cursor.fetchone()

            conn.commit()
            logger.info(f"Commercial {comercial.email} created with role {comercial.role}")
            return Comercial(**row)

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def update(self, comercial_id: str, changes: ComercialUpdate) -> Optional[Comercial]:
        fields = changes.model_dump(exclude_unset=True)
        if not fields:
            return self.find_by_id(comercial_id)

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            assignments = ", ".join(f"{name} = %s" for name in fields)
            cursor.execute(
                f"""
                UPDATE comerciales SET {assignments}, updated_at = NOW()
                WHERE id = %s
                RETURNING {COMERCIAL_COLUMNS}
                """,
                list(fields.values()) + [comercial_id]
            )
            row = cursor.fetchone()

            conn.commit()
            return Comercial(**row) if row else None

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def delete(self, comercial_id: str) -> bool:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM comerciales WHERE id = %s", (comercial_id,))
            deleted = cursor.rowcount > 0

            conn.commit()
            if deleted:
                logger.info(f"Commercial {comercial_id} deleted")
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()
