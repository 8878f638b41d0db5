"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.

Author: TM3
Date: 2025-08-09
"""
from app.repositories.comercial_repository import ComercialRepository
from app.repositories.client_repository import ClientRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.report_repository import ReportRepository

__all__ = [
    'ComercialRepository',
    'ClientRepository',
    'ProductRepository',
    'OrderRepository',
    'CatalogRepository',
    'ReportRepository',
]
