"""
Order Domain Models

Represents order-related entities (tables `pedidos` and `pedido_items`).
These are the single source of truth for order data structure.

Author: TM3
Date: 2025-08-09
Updated: 2025-08-10 (operational workflow fields)
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime, date
from decimal import Decimal

from app.domain.order_workflow import (
    DEFAULT_ITEM_STATUS,
    DEFAULT_ORDER_STATUS,
    ORDER_STATUS_CONFIG,
    order_progress,
    validate_item_status,
    validate_order_status,
)


class OrderItem(BaseModel):
    """
    Order Item domain model - represents a line of `pedido_items`

    Fields:
        id: Item ID
        pedido_id: Parent order ID
        producto_id: Reference to product catalog
        cantidad: Units ordered
        precio_unitario: Price per unit at order time
        subtotal: cantidad * precio_unitario
        estado: Item status (pendiente, confirmado, no_confirmado, ...)
        fecha_confirmacion: When the item was confirmed
        notas_item: Operational notes for this line
        stock_disponible: Stock seen when the item was reviewed

        # From product catalog (optional, from JOIN)
        producto_nombre, producto_sku
    """

    id: str = Field(..., description="Order item ID")
    pedido_id: str = Field(..., description="Parent order ID")
    producto_id: Optional[str] = Field(None, description="Product ID")
    cantidad: int = Field(..., description="Quantity ordered")
    precio_unitario: Decimal = Field(..., description="Price per unit")
    subtotal: Decimal = Field(Decimal('0'), description="Line subtotal")
    estado: str = Field(DEFAULT_ITEM_STATUS, description="Item status")
    fecha_confirmacion: Optional[datetime] = Field(None, description="Confirmation timestamp")
    notas_item: Optional[str] = Field(None, description="Item notes")
    stock_disponible: Optional[int] = Field(None, description="Stock at review time")

    # From product catalog (optional, from JOIN)
    producto_nombre: Optional[str] = Field(None, description="Product name (from JOIN)")
    producto_sku: Optional[str] = Field(None, description="Product SKU (from JOIN)")

    model_config = ConfigDict(from_attributes=True)

    @property
    def line_total(self) -> Decimal:
        """Revenue of the line, computed from quantity and unit price"""
        return self.precio_unitario * self.cantidad

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()

        for field in ['precio_unitario', 'subtotal']:
            if data.get(field) is not None:
                data[field] = float(data[field])
        if data.get('fecha_confirmacion'):
            data['fecha_confirmacion'] = data['fecha_confirmacion'].isoformat()

        return data


class Order(BaseModel):
    """
    Order domain model - represents a row of `pedidos`

    Fields:
        id: Order ID (uuid)
        numero_pedido: Human-readable number (PED-YYYYMMDD-NNNN)
        cliente_id: Reference to client
        total: Order total
        estado: Workflow status (recibido ... cancelado)
        fecha_pedido: When the order was placed
        notas: Notes entered with the order

        # Operational workflow
        items_confirmados: {item_id: {confirmed, notes}} from the last partial confirmation
        notas_operativas: Notes from operations
        fecha_entrega_estimada: Scheduled delivery
        stock_confirmado: Stock reviewed for every line
        motivo_no_confirmado: Why items were rejected

        # Related data (optional, from JOINs)
        cliente_nombre, cliente_email, cliente_telefono, comercial_id

        items: Order lines
    """

    id: str = Field(..., description="Order ID")
    numero_pedido: Optional[str] = Field(None, description="Order number")
    cliente_id: Optional[str] = Field(None, description="Client ID")
    total: Decimal = Field(Decimal('0'), description="Order total")
    estado: str = Field(DEFAULT_ORDER_STATUS, description="Order status")
    fecha_pedido: datetime = Field(..., description="Order date")
    notas: Optional[str] = Field(None, description="Order notes")

    # Operational workflow
    items_confirmados: Dict[str, Any] = Field(default_factory=dict, description="Last item confirmation")
    notas_operativas: Optional[str] = Field(None, description="Operational notes")
    fecha_entrega_estimada: Optional[datetime] = Field(None, description="Estimated delivery")
    stock_confirmado: bool = Field(False, description="Stock confirmed")
    motivo_no_confirmado: Optional[str] = Field(None, description="Reason items were not confirmed")

    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    # Related data (from JOINs - optional)
    cliente_nombre: Optional[str] = Field(None, description="Client name (from JOIN)")
    cliente_email: Optional[str] = Field(None, description="Client email (from JOIN)")
    cliente_telefono: Optional[str] = Field(None, description="Client phone (from JOIN)")
    comercial_id: Optional[str] = Field(None, description="Owning commercial (from JOIN)")

    items: List[OrderItem] = Field(default_factory=list, description="Order items")

    model_config = ConfigDict(from_attributes=True)

    @field_validator('items_confirmados', mode='before')
    @classmethod
    def none_to_empty(cls, value):
        return value or {}

    # Computed properties
    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.cantidad for item in self.items)

    @property
    def progress(self) -> int:
        return order_progress(self.estado)

    @property
    def status_label(self) -> str:
        config = ORDER_STATUS_CONFIG.get(self.estado)
        return config['label'] if config else self.estado

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump()

        data['item_count'] = self.item_count
        data['total_quantity'] = self.total_quantity
        data['progress'] = self.progress
        data['status_label'] = self.status_label

        data['total'] = float(data['total'])

        for field in ['fecha_pedido', 'fecha_entrega_estimada', 'created_at', 'updated_at']:
            if isinstance(data.get(field), (datetime, date)):
                data[field] = data[field].isoformat()

        data['items'] = [item.to_dict() for item in self.items]

        return data


class OrderItemCreate(BaseModel):
    """Line of a new order"""
    producto_id: str
    cantidad: int = Field(..., ge=1)
    precio_unitario: Optional[Decimal] = Field(None, ge=0, description="Defaults to the product price")


class OrderCreate(BaseModel):
    """Schema for creating a new order"""
    cliente_id: str
    fecha_pedido: Optional[datetime] = None
    notas: Optional[str] = None
    items: List[OrderItemCreate] = Field(..., min_length=1)


class ItemSelection(BaseModel):
    """One line of a partial confirmation"""
    item_id: str
    confirmed: bool
    notes: Optional[str] = None


class PartialConfirmation(BaseModel):
    """Payload of POST /orders/{id}/confirm-items"""
    items: List[ItemSelection] = Field(..., min_length=1)
    notas_operativas: Optional[str] = None


class ItemStatusUpdate(BaseModel):
    estado: str
    notes: Optional[str] = None

    @field_validator('estado')
    @classmethod
    def check_estado(cls, value):
        return validate_item_status(value)


class OrderStatusUpdate(BaseModel):
    estado: str
    notes: Optional[str] = None

    @field_validator('estado')
    @classmethod
    def check_estado(cls, value):
        return validate_order_status(value)


class DeliverySchedule(BaseModel):
    fecha_entrega_estimada: datetime


class StockCheckRequest(BaseModel):
    product_ids: List[str] = Field(..., min_length=1)
