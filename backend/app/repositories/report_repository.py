"""
Report Repository - persisted operational reports (`reportes_operativos`)

Author: TM3
Date: 2025-08-12
"""
import logging
from datetime import date, datetime
from typing import List, Optional, Dict, Any

from psycopg2.extras import Json

from app.core.database import get_db_connection_dict_with_retry
from app.domain.numbering import REPORT_NUMBER_PREFIX, format_document_number
from app.domain.report import Report, REPORT_TYPES

logger = logging.getLogger(__name__)


REPORT_COLUMNS = """
    id, numero_reporte, tipo, comercial_id, periodo_inicio, periodo_fin,
    filtros, datos, created_at, updated_at
"""


class ReportRepository:
    """
    Repository for generated reports
    """

    def create(
        self,
        tipo: str,
        comercial_id: Optional[str],
        periodo_inicio: Optional[date],
        periodo_fin: Optional[date],
        filtros: Dict[str, Any],
        datos: Dict[str, Any]
    ) -> Report:
        """
        Store a generated report with number REP-YYYYMMDD-NNNN
        """
        if tipo not in REPORT_TYPES:
            raise ValueError(f"Invalid report type '{tipo}'. Allowed: {', '.join(REPORT_TYPES)}")

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT nextval('report_sequence') as seq")
            sequence = cursor.fetchone()['seq']
            numero_reporte = format_document_number(REPORT_NUMBER_PREFIX, datetime.now(), sequence)

            cursor.execute(
                f"""
                INSERT INTO reportes_operativos (
                    numero_reporte, tipo, comercial_id, periodo_inicio, periodo_fin,
                    filtros, datos, created_at, updated_at
                ) VALUES (
                    %s, %s, %s, %s, %s, %s, %s, NOW(), NOW()
                )
                RETURNING {REPORT_COLUMNS}
                """,
                (
                    numero_reporte, tipo, comercial_id, periodo_inicio, periodo_fin,
                    Json(filtros), Json(datos),
                )
            )
            row = cursor.fetchone()

            conn.commit()
            logger.info(f"Report {numero_reporte} ({tipo}) stored")
            return Report(**row)

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        comercial_id: Optional[str] = None,
        tipo: Optional[str] = None,
        limit: int = 50
    ) -> List[Report]:
        """
        Stored reports, newest first

        Args:
            comercial_id: Only this commercial's reports (None = all)
            tipo: Filter by report type
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            conditions = []
            params: List[Any] = []

            if comercial_id:
                conditions.append("comercial_id = %s")
                params.append(comercial_id)

            if tipo:
                conditions.append("tipo = %s")
                params.append(tipo)

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT {REPORT_COLUMNS}
                FROM reportes_operativos
                WHERE {where_clause}
                ORDER BY created_at DESC
                LIMIT %s
            """, params + [limit])

            return [Report(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, report_id: str, comercial_id: Optional[str] = None) -> Optional[Report]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            conditions = ["id = %s"]
            params = [report_id]
            if comercial_id:
                conditions.append("comercial_id = %s")
                params.append(comercial_id)

            cursor.execute(f"""
                SELECT {REPORT_COLUMNS}
                FROM reportes_operativos
                WHERE {" AND ".join(conditions)}
            """, params)

            row = cursor.fetchone()
            return Report(**row) if row else None

        finally:
            cursor.close()
            conn.close()
