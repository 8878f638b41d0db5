"""
Visibilidad de productos por cliente
"""
from sqlalchemy import Column, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, text

from app.core.database import Base


class CatalogoCliente(Base):
    __tablename__ = "catalogos_clientes"
    __table_args__ = (
        UniqueConstraint("cliente_id", "producto_id", name="catalogos_clientes_cliente_producto_key"),
    )

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    cliente_id = Column(UUID(as_uuid=False), ForeignKey("clientes.id", ondelete="CASCADE"), nullable=False, index=True)
    producto_id = Column(UUID(as_uuid=False), ForeignKey("productos.id", ondelete="CASCADE"), nullable=False)
    activo = Column(Boolean, default=True, server_default="true")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    cliente = relationship("Cliente", back_populates="catalogo")
