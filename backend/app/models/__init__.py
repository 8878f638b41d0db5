"""
Modelos de base de datos (esquema de Supabase)
"""
from .comercial import Comercial
from .client import Cliente
from .product import Producto
from .order import Pedido, PedidoItem
from .catalog import CatalogoCliente
from .report import ReporteOperativo

__all__ = [
    "Comercial",
    "Cliente",
    "Producto",
    "Pedido",
    "PedidoItem",
    "CatalogoCliente",
    "ReporteOperativo",
]
