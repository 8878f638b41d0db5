"""
Reportes operativos generados
"""
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, text

from app.core.database import Base


class ReporteOperativo(Base):
    __tablename__ = "reportes_operativos"
    __table_args__ = (
        CheckConstraint(
            "tipo IN ('comisiones', 'ventas', 'stock', 'entregas')",
            name="reportes_operativos_tipo_check",
        ),
    )

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    numero_reporte = Column(String(50), unique=True, nullable=False)
    tipo = Column(String(20), nullable=False, index=True)
    comercial_id = Column(UUID(as_uuid=False), ForeignKey("comerciales.id"), index=True)

    periodo_inicio = Column(Date)
    periodo_fin = Column(Date)
    filtros = Column(JSONB, server_default=text("'{}'::jsonb"))
    datos = Column(JSONB, server_default=text("'{}'::jsonb"))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    comercial = relationship("Comercial", back_populates="reportes")
