"""
Modelo de productos
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, DECIMAL
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, text

from app.core.database import Base


class Producto(Base):
    """
    Catálogo general de productos
    """
    __tablename__ = "productos"

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    sku = Column(String(100), unique=True, nullable=False, index=True)
    nombre = Column(String(255), nullable=False)
    descripcion = Column(Text)
    precio = Column(DECIMAL(12, 2), nullable=False, default=0)
    categoria = Column(String(50), index=True)
    stock_disponible = Column(Integer, nullable=False, default=0, server_default="0")
    url_imagen = Column(Text)  # bucket público `products`
    activo = Column(Boolean, default=True, server_default="true", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    pedido_items = relationship("PedidoItem", back_populates="producto")
