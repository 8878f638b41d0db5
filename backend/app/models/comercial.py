"""
Modelo de comerciales (usuarios del portal)
"""
from sqlalchemy import Column, String, Boolean, DateTime, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class Comercial(Base):
    """
    Comerciales y administradores. El id es el id del usuario de Supabase Auth.
    """
    __tablename__ = "comerciales"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'comercial')", name="comerciales_role_check"),
    )

    id = Column(UUID(as_uuid=False), primary_key=True)
    nombre = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(20), nullable=False, default="comercial", server_default="comercial")
    activo = Column(Boolean, default=True, server_default="true")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    clientes = relationship("Cliente", back_populates="comercial")
    reportes = relationship("ReporteOperativo", back_populates="comercial")
