"""
Unit tests for the client, catalog, report and commercial repositories

Author: TM3
Date: 2025-08-12
"""
import re
import pytest
from datetime import date, datetime
from unittest.mock import patch

from app.domain.client import ClientCreate, ClientUpdate
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.client_repository import ClientRepository
from app.repositories.comercial_repository import ComercialRepository
from app.repositories.report_repository import ReportRepository


@pytest.fixture
def client_row():
    return {
        'id': 'cli-1', 'nombre': 'Plásticos del Sur', 'email': 'compras@plasticosdelsur.es',
        'telefono': '600123456', 'direccion': 'Polígono Sur 4', 'tipo': 'minorista', 'notas': None,
        'logo_url': None, 'activo': True, 'comercial_id': 'com-1',
        'created_at': datetime(2025, 8, 1), 'updated_at': None,
    }


class TestClientRepository:

    @patch('app.repositories.client_repository.get_db_connection_dict_with_retry')
    def test_find_all_scoped_search(self, mock_get_conn, mock_db, client_row):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchall.return_value = [{**client_row, 'comercial_nombre': 'Ana López', 'pedidos_count': 3}]

        clients = ClientRepository().find_all(comercial_id='com-1', search='600', activo=True)

        assert clients[0].pedidos_count == 3
        assert clients[0].comercial_nombre == 'Ana López'
        sql, params = cursor.execute.call_args.args
        assert "cl.telefono LIKE %s" in sql
        assert params == ['com-1', '%600%', '%600%', '%600%', True]

    @patch('app.repositories.client_repository.get_db_connection_dict_with_retry')
    def test_find_by_id_out_of_scope(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchone.return_value = None

        assert ClientRepository().find_by_id('cli-1', comercial_id='com-2') is None
        assert cursor.execute.call_args.args[1] == ['cli-1', 'com-2']

    @patch('app.repositories.client_repository.get_db_connection_dict_with_retry')
    def test_create(self, mock_get_conn, mock_db, client_row):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchone.return_value = client_row

        client = ClientRepository().create(ClientCreate(nombre='Plásticos del Sur', comercial_id='com-1'))

        assert client.id == 'cli-1'
        params = cursor.execute.call_args.args[1]
        assert params[0] == 'Plásticos del Sur'
        assert params[-1] == 'com-1'
        conn.commit.assert_called_once()

    @patch('app.repositories.client_repository.get_db_connection_dict_with_retry')
    def test_update_sent_fields(self, mock_get_conn, mock_db, client_row):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchone.return_value = {**client_row, 'activo': False}

        client = ClientRepository().update('cli-1', ClientUpdate(activo=False))

        assert client.activo is False
        assert cursor.execute.call_args.args[1] == [False, 'cli-1']


class TestCatalogRepository:

    @patch('app.repositories.catalog_repository.get_db_connection_dict_with_retry')
    def test_set_visibility_upserts(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn

        entry = CatalogRepository().set_visibility('cli-1', 'p1', False)

        sql, params = cursor.execute.call_args.args
        assert "ON CONFLICT (cliente_id, producto_id)" in sql
        assert params == ('cli-1', 'p1', False)
        assert entry.activo is False

    @patch('app.repositories.catalog_repository.get_db_connection_dict_with_retry')
    def test_bulk_writes_all_rows_in_one_transaction(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn

        count = CatalogRepository().set_visibility_bulk('cli-1', ['p1', 'p2'], True)

        assert count == 2
        assert cursor.executemany.call_args.args[1] == [('cli-1', 'p1', True), ('cli-1', 'p2', True)]
        conn.commit.assert_called_once()

    @patch('app.repositories.catalog_repository.get_db_connection_dict_with_retry')
    def test_bulk_with_nothing_to_write(self, mock_get_conn):
        assert CatalogRepository().set_visibility_bulk('cli-1', [], True) == 0
        mock_get_conn.assert_not_called()

    @patch('app.repositories.catalog_repository.get_db_connection_dict_with_retry')
    def test_find_by_client(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchall.return_value = [{'cliente_id': 'cli-1', 'producto_id': 'p1', 'activo': True}]

        entries = CatalogRepository().find_by_client('cli-1')

        assert entries[0].producto_id == 'p1'


class TestReportRepository:

    def test_invalid_type(self):
        with pytest.raises(ValueError):
            ReportRepository().create('inventario', None, None, None, {}, {})

    @patch('app.repositories.report_repository.get_db_connection_dict_with_retry')
    def test_create_numbers_report(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchone.side_effect = [
            {'seq': 7},
            {
                'id': 'rep-1', 'numero_reporte': 'REP-20250812-0007', 'tipo': 'comisiones',
                'comercial_id': 'com-1', 'periodo_inicio': date(2025, 8, 1), 'periodo_fin': date(2025, 8, 31),
                'filtros': {}, 'datos': {'total_ventas': 0}, 'created_at': datetime(2025, 8, 12), 'updated_at': None,
            },
        ]

        report = ReportRepository().create(
            'comisiones', 'com-1', date(2025, 8, 1), date(2025, 8, 31), {}, {'total_ventas': 0},
        )

        numero = cursor.execute.call_args.args[1][0]
        assert re.fullmatch(r"REP-\d{8}-0007", numero)
        assert report.to_dict()['periodo_inicio'] == '2025-08-01'
        conn.commit.assert_called_once()

    @patch('app.repositories.report_repository.get_db_connection_dict_with_retry')
    def test_find_all_filters(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchall.return_value = []

        ReportRepository().find_all(comercial_id='com-1', tipo='ventas', limit=20)

        assert cursor.execute.call_args.args[1] == ['com-1', 'ventas', 20]


class TestComercialRepository:

    @patch('app.repositories.comercial_repository.get_db_connection_dict_with_retry')
    def test_find_by_id(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.fetchone.return_value = {
            'id': 'com-1', 'nombre': 'Ana López', 'email': 'ana@barplas.com', 'role': 'admin',
            'activo': True, 'created_at': None, 'updated_at': None,
        }

        comercial = ComercialRepository().find_by_id('com-1')

        assert comercial.is_admin
        cursor.close.assert_called_once()

    @patch('app.repositories.comercial_repository.get_db_connection_dict_with_retry')
    def test_delete_missing(self, mock_get_conn, mock_db):
        conn, cursor = mock_db
        mock_get_conn.return_value = conn
        cursor.rowcount = 0

        assert ComercialRepository().delete('com-9') is False
