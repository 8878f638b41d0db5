"""
Modelos relacionados con pedidos
"""
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, DECIMAL, ForeignKey, CheckConstraint,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, text

from app.core.database import Base
from app.domain.order_workflow import ORDER_STATUSES, ITEM_STATUSES


def _in_list(column: str, values) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class Pedido(Base):
    """
    Pedidos de clientes con su flujo operacional
    """
    __tablename__ = "pedidos"
    __table_args__ = (
        CheckConstraint(_in_list("estado", ORDER_STATUSES), name="pedidos_estado_check"),
    )

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    numero_pedido = Column(String(50), unique=True, nullable=False, index=True)
    cliente_id = Column(UUID(as_uuid=False), ForeignKey("clientes.id"), index=True)

    total = Column(DECIMAL(12, 2), nullable=False, default=0)
    estado = Column(String(30), nullable=False, default="recibido", server_default="recibido", index=True)
    fecha_pedido = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    notas = Column(Text)

    # Flujo operacional
    items_confirmados = Column(JSONB, server_default=text("'{}'::jsonb"))
    notas_operativas = Column(Text)
    fecha_entrega_estimada = Column(DateTime(timezone=True))
    stock_confirmado = Column(Boolean, default=False, server_default="false")
    motivo_no_confirmado = Column(Text)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    cliente = relationship("Cliente", back_populates="pedidos")
    items = relationship("PedidoItem", back_populates="pedido", cascade="all, delete-orphan")


class PedidoItem(Base):
    """
    Líneas de cada pedido, con estado propio
    """
    __tablename__ = "pedido_items"
    __table_args__ = (
        CheckConstraint(_in_list("estado", ITEM_STATUSES), name="pedido_items_estado_check"),
    )

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    pedido_id = Column(UUID(as_uuid=False), ForeignKey("pedidos.id", ondelete="CASCADE"), index=True, nullable=False)
    producto_id = Column(UUID(as_uuid=False), ForeignKey("productos.id"), index=True)

    cantidad = Column(Integer, nullable=False)
    precio_unitario = Column(DECIMAL(12, 2), nullable=False)
    subtotal = Column(DECIMAL(12, 2), nullable=False)

    estado = Column(String(30), nullable=False, default="pendiente", server_default="pendiente")
    fecha_confirmacion = Column(DateTime(timezone=True))
    notas_item = Column(Text)
    stock_disponible = Column(Integer)

    # Relationships
    pedido = relationship("Pedido", back_populates="items")
    producto = relationship("Producto", back_populates="pedido_items")
