"""
Product Domain Model

Represents a product of the Barplas catalog (table `productos`).
This is the single source of truth for product data structure.

Author: TM3
Date: 2025-08-09
"""
import secrets
import string
import time
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal


PRODUCT_CATEGORIES = [
    'Embalaje',
    'Alimentario',
    'Industrial',
    'Farmacéutico',
    'Cosmético',
    'Promocional',
    'Otros',
]

_SKU_ALPHABET = string.digits + string.ascii_uppercase


def generate_sku(now_ms: Optional[int] = None) -> str:
    """
    Generate a SKU for products created without one

    Format: PRD-<last 6 digits of the ms timestamp><3 random base-36 chars>
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = ''.join(secrets.choice(_SKU_ALPHABET) for _ in range(3))
    return f"PRD-{str(now_ms)[-6:]}{suffix}"


class Product(BaseModel):
    """
    Product domain model - represents a row of `productos`

    Fields:
        id: Product ID (uuid)
        sku: Stock Keeping Unit (unique)
        nombre: Product name
        descripcion: Description (optional)
        precio: Unit sale price
        categoria: One of PRODUCT_CATEGORIES (optional)
        stock_disponible: Units available
        url_imagen: Public URL in the `products` storage bucket
        activo: Whether product is offered
    """

    id: str = Field(..., description="Product ID")
    sku: str = Field(..., description="Stock Keeping Unit")
    nombre: str = Field(..., description="Product name")
    descripcion: Optional[str] = Field(None, description="Product description")
    precio: Decimal = Field(Decimal('0'), description="Unit price")
    categoria: Optional[str] = Field(None, description="Product category")
    stock_disponible: int = Field(0, description="Units available")
    url_imagen: Optional[str] = Field(None, description="Image URL")
    activo: bool = Field(True, description="Whether product is active")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock_disponible <= 0

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['precio'] = float(data['precio'])
        data['is_out_of_stock'] = self.is_out_of_stock
        if data.get('created_at'):
            data['created_at'] = data['created_at'].isoformat()
        if data.get('updated_at'):
            data['updated_at'] = data['updated_at'].isoformat()
        return data


def _check_category(value: Optional[str]) -> Optional[str]:
    if value and value not in PRODUCT_CATEGORIES:
        raise ValueError(f"categoria must be one of: {', '.join(PRODUCT_CATEGORIES)}")
    return value or None


def _not_null(value):
    if value is None:
        raise ValueError("field cannot be null")
    return value


class ProductCreate(BaseModel):
    """Schema for creating a new product (SKU generated when omitted)"""
    sku: Optional[str] = None
    nombre: str = Field(..., min_length=1)
    descripcion: Optional[str] = None
    precio: Decimal = Field(Decimal('0'), ge=0)
    categoria: Optional[str] = None
    stock_disponible: int = Field(0, ge=0)
    url_imagen: Optional[str] = None
    activo: bool = True

    validate_categoria = field_validator('categoria')(_check_category)


class ProductUpdate(BaseModel):
    """Schema for updating an existing product"""
    sku: Optional[str] = Field(None, min_length=1)
    nombre: Optional[str] = Field(None, min_length=1)
    descripcion: Optional[str] = None
    precio: Optional[Decimal] = Field(None, ge=0)
    categoria: Optional[str] = None
    stock_disponible: Optional[int] = Field(None, ge=0)
    url_imagen: Optional[str] = None
    activo: Optional[bool] = None

    validate_categoria = field_validator('categoria')(_check_category)
    required_when_sent = field_validator('sku', 'nombre', 'precio', 'stock_disponible', 'activo')(_not_null)


class StockAvailability(BaseModel):
    """Row returned by the stock availability check"""
    producto_id: str
    stock_disponible: int
    nombre: str
    precio: Decimal
