"""
Modelo de clientes
"""
from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, text

from app.core.database import Base


class Cliente(Base):
    """
    Clientes asignados a un comercial
    """
    __tablename__ = "clientes"

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    nombre = Column(String(255), nullable=False, index=True)
    email = Column(String(255))
    telefono = Column(String(50))
    direccion = Column(Text)
    tipo = Column(String(50), default="minorista", server_default="minorista")
    notas = Column(Text)
    logo_url = Column(Text)  # bucket público `clients`
    activo = Column(Boolean, default=True, server_default="true", index=True)

    comercial_id = Column(UUID(as_uuid=False), ForeignKey("comerciales.id"), index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    comercial = relationship("Comercial", back_populates="clientes")
    pedidos = relationship("Pedido", back_populates="cliente")
    catalogo = relationship("CatalogoCliente", back_populates="cliente", cascade="all, delete-orphan")
