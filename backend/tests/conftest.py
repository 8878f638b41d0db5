"""
Pytest fixtures and configuration for Barplas Portal Backend tests

This file provides shared fixtures that can be used across all test modules.
No test needs a database: repositories are exercised against MagicMock
connections and the API against overridden dependencies.

Author: TM3
Date: 2025-08-12
"""
import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

from app.core.auth import TokenUser
from app.domain.client import Client
from app.domain.order import Order, OrderItem
from app.domain.product import Product


ADMIN_ID = "00000000-0000-0000-0000-00000000a001"
COMERCIAL_ID = "00000000-0000-0000-0000-00000000c001"


def make_item(item_id="item-1", pedido_id="ped-1", nombre="Envase PET 500ml",
              cantidad=10, precio="2.50", estado="pendiente", **extra) -> OrderItem:
    precio = Decimal(precio)
    return OrderItem(
        id=item_id,
        pedido_id=pedido_id,
        producto_id=extra.pop("producto_id", f"prod-{item_id}"),
        cantidad=cantidad,
        precio_unitario=precio,
        subtotal=precio * cantidad,
        estado=estado,
        producto_nombre=nombre,
        **extra
    )


def make_order(pedido_id="ped-1", total="100.00", estado="recibido",
               fecha=datetime(2025, 8, 5, 10, 30), cliente_id="cli-1",
               cliente_nombre="Plásticos del Sur", items=None, **extra) -> Order:
    return Order(
        id=pedido_id,
        numero_pedido=extra.pop("numero_pedido", f"PED-{fecha:%Y%m%d}-0001"),
        cliente_id=cliente_id,
        cliente_nombre=cliente_nombre,
        total=Decimal(total),
        estado=estado,
        fecha_pedido=fecha,
        created_at=extra.pop("created_at", fecha),
        items=items or [],
        **extra
    )


def make_client(cliente_id="cli-1", nombre="Plásticos del Sur", activo=True, **extra) -> Client:
    return Client(
        id=cliente_id,
        nombre=nombre,
        email=extra.pop("email", "compras@plasticosdelsur.es"),
        telefono=extra.pop("telefono", "600123456"),
        activo=activo,
        comercial_id=extra.pop("comercial_id", COMERCIAL_ID),
        **extra
    )


def make_product(producto_id="prod-1", nombre="Envase PET 500ml", precio="2.50",
                 stock=100, activo=True, **extra) -> Product:
    return Product(
        id=producto_id,
        sku=extra.pop("sku", "PRD-123456ABC"),
        nombre=nombre,
        precio=Decimal(precio),
        stock_disponible=stock,
        activo=activo,
        categoria=extra.pop("categoria", "Embalaje"),
        **extra
    )


@pytest.fixture
def admin_user():
    return TokenUser(id=ADMIN_ID, email="admin@barplas.com", name="Admin Barplas", role="admin")


@pytest.fixture
def comercial_user():
    return TokenUser(id=COMERCIAL_ID, email="ana@barplas.com", name="Ana López", role="comercial")


@pytest.fixture
def mock_db():
    """
    MagicMock connection + cursor pair

    Returns (connection, cursor); patch the repository's connection factory
    to return the connection.
    """
    conn = MagicMock()
    cursor = MagicMock()
    conn.cursor.return_value = cursor
    return conn, cursor


@pytest.fixture
def sample_order_row():
    """
    Row of the orders query (RealDictCursor)
    """
    return {
        'id': 'ped-1',
        'numero_pedido': 'PED-20250805-0001',
        'cliente_id': 'cli-1',
        'total': Decimal('125.00'),
        'estado': 'recibido',
        'fecha_pedido': datetime(2025, 8, 5, 10, 30),
        'notas': 'Entrega por la mañana',
        'items_confirmados': None,
        'notas_operativas': None,
        'fecha_entrega_estimada': None,
        'stock_confirmado': False,
        'motivo_no_confirmado': None,
        'created_at': datetime(2025, 8, 5, 10, 30),
        'updated_at': None,
        'cliente_nombre': 'Plásticos del Sur',
        'cliente_email': 'compras@plasticosdelsur.es',
        'cliente_telefono': '600123456',
        'comercial_id': COMERCIAL_ID,
    }


@pytest.fixture
def sample_item_rows():
    return [
        {
            'id': 'item-1', 'pedido_id': 'ped-1', 'producto_id': 'prod-1',
            'cantidad': 10, 'precio_unitario': Decimal('2.50'), 'subtotal': Decimal('25.00'),
            'estado': 'pendiente', 'fecha_confirmacion': None, 'notas_item': None,
            'stock_disponible': None, 'producto_nombre': 'Envase PET 500ml', 'producto_sku': 'PRD-1',
        },
        {
            'id': 'item-2', 'pedido_id': 'ped-1', 'producto_id': 'prod-2',
            'cantidad': 20, 'precio_unitario': Decimal('5.00'), 'subtotal': Decimal('100.00'),
            'estado': 'pendiente', 'fecha_confirmacion': None, 'notas_item': None,
            'stock_disponible': None, 'producto_nombre': 'Tapa rosca 38mm', 'producto_sku': 'PRD-2',
        },
    ]


@pytest.fixture
def sample_product_row():
    return {
        'id': 'prod-1',
        'sku': 'PRD-123456ABC',
        'nombre': 'Envase PET 500ml',
        'descripcion': 'Botella transparente',
        'precio': Decimal('2.50'),
        'categoria': 'Embalaje',
        'stock_disponible': 100,
        'url_imagen': None,
        'activo': True,
        'created_at': datetime(2025, 8, 1, 9, 0),
        'updated_at': None,
    }


@pytest.fixture
def order_factory():
    return make_order


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def client_factory():
    return make_client


@pytest.fixture
def product_factory():
    return make_product
