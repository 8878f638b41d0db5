"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.

Author: TM3
Date: 2025-08-09
"""
from app.domain.product import Product
from app.domain.order import Order, OrderItem
from app.domain.client import Client
from app.domain.comercial import Comercial
from app.domain.catalog import CatalogEntry
from app.domain.report import Report

__all__ = ['Product', 'Order', 'OrderItem', 'Client', 'Comercial', 'CatalogEntry', 'Report']
