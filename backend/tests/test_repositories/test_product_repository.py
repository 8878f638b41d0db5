"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.

Author: TM3
Date: 2025-08-12
"""
import re
import pytest
from decimal import Decimal
from unittest.mock import patch

from app.domain.product import Product, ProductCreate, ProductUpdate
from app.repositories.product_repository import ProductRepository

CONNECTION = 'app.repositories.product_repository.get_db_connection_dict_with_retry'


class TestProductRepository:
    """Test ProductRepository methods"""

    @patch(CONNECTION)
    def test_find_by_id_returns_product(self, mock_get_conn, mock_db, sample_product_row):
        """Test find_by_id returns a Product domain model"""
        # Arrange
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchone.return_value = sample_product_row

        # Act
        product = ProductRepository().find_by_id('prod-1')

        # Assert
        assert isinstance(product, Product)
        assert product.sku == 'PRD-123456ABC'
        assert product.precio == Decimal('2.50')
        cursor.execute.assert_called_once()
        cursor.close.assert_called_once()
        conn.close.assert_called_once()

    @patch(CONNECTION)
    def test_find_by_id_returns_none_when_not_found(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchone.return_value = None

        assert ProductRepository().find_by_id('nope') is None

    @patch(CONNECTION)
    def test_find_all_with_filters(self, mock_get_conn, mock_db, sample_product_row):
        """Test find_all builds the WHERE clause from the filters"""
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchall.return_value = [sample_product_row]

        products = ProductRepository().find_all(search='pet', categoria='Embalaje', activo=True)

        assert len(products) == 1
        sql, params = cursor.execute.call_args.args
        assert "nombre ILIKE %s OR sku ILIKE %s" in sql
        assert "ORDER BY nombre" in sql
        assert params == ['%pet%', '%pet%', '%pet%', 'Embalaje', True]

    @patch(CONNECTION)
    def test_find_all_without_filters(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchall.return_value = []

        assert ProductRepository().find_all() == []
        assert "WHERE 1=1" in cursor.execute.call_args.args[0]

    @patch(CONNECTION)
    def test_find_stock_empty_list_skips_query(self, mock_get_conn):
        assert ProductRepository().find_stock([]) == []
        mock_get_conn.assert_not_called()

    @patch(CONNECTION)
    def test_find_prices(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchall.return_value = [
            {'producto_id': 'p1', 'stock_disponible': 0, 'nombre': 'Envase', 'precio': Decimal('2.50')},
            {'producto_id': 'p2', 'stock_disponible': 40, 'nombre': 'Tapa', 'precio': Decimal('0.10')},
        ]

        prices = ProductRepository().find_prices(['p1', 'p2', 'p3'])

        assert prices == {'p1': Decimal('2.50'), 'p2': Decimal('0.10')}
        assert cursor.execute.call_args.args[1] == (['p1', 'p2', 'p3'],)

    @patch(CONNECTION)
    def test_create_generates_sku(self, mock_get_conn, mock_db, sample_product_row):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchone.return_value = sample_product_row

        ProductRepository().create(ProductCreate(nombre='Envase PET 500ml', precio=Decimal('2.50')))

        sku = cursor.execute.call_args.args[1][0]
        assert re.fullmatch(r"PRD-\d{6}[0-9A-Z]{3}", sku)
        conn.commit.assert_called_once()

    @patch(CONNECTION)
    def test_create_rolls_back_on_error(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.execute.side_effect = Exception("duplicate key value violates unique constraint")

        with pytest.raises(Exception):
            ProductRepository().create(ProductCreate(nombre='Envase', sku='PRD-1'))

        conn.rollback.assert_called_once()
        conn.close.assert_called_once()

    @patch(CONNECTION)
    def test_update_only_sent_fields(self, mock_get_conn, mock_db, sample_product_row):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchone.return_value = {**sample_product_row, 'stock_disponible': 0}

        product = ProductRepository().update('prod-1', ProductUpdate(stock_disponible=0))

        sql, params = cursor.execute.call_args.args
        assert "SET stock_disponible = %s, updated_at = NOW()" in sql
        assert params == [0, 'prod-1']
        assert product.is_out_of_stock

    @patch.object(ProductRepository, 'find_by_id')
    @patch(CONNECTION)
    def test_update_without_changes_reads(self, mock_get_conn, mock_find):
        ProductRepository().update('prod-1', ProductUpdate())

        mock_get_conn.assert_not_called()
        mock_find.assert_called_once_with('prod-1')

    @patch(CONNECTION)
    def test_delete(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.rowcount = 1

        assert ProductRepository().delete('prod-1') is True
        conn.commit.assert_called_once()
