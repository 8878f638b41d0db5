"""
Unit tests for OrderOperationsService

Repositories are mocked; the repository tests cover the SQL side.

Author: TM3
Date: 2025-08-12
"""
import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

from app.domain.errors import InvalidStatusError, NotFoundError
from app.domain.order import ItemSelection, OrderCreate
from app.services.order_operations_service import OrderOperationsService


@pytest.fixture
def repos():
    return MagicMock(), MagicMock(), MagicMock()


@pytest.fixture
def service(repos):
    order_repo, product_repo, client_repo = repos
    return OrderOperationsService(order_repo=order_repo, product_repo=product_repo, client_repo=client_repo)


class TestGetAndCreate:

    def test_order_outside_scope_is_not_found(self, service, repos):
        repos[0].find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.get_order("ped-9", comercial_id="com-1")
        repos[0].find_by_id.assert_called_once_with("ped-9", comercial_id="com-1")

    def test_create_fills_missing_prices(self, service, repos, order_factory):
        order_repo, product_repo, client_repo = repos
        client_repo.find_by_id.return_value = MagicMock()
        product_repo.find_prices.return_value = {"p2": Decimal("4.00")}
        order_repo.create.return_value = order_factory()
        payload = OrderCreate(cliente_id="cli-1", items=[
            {"producto_id": "p1", "cantidad": 2, "precio_unitario": "1.00"},
            {"producto_id": "p2", "cantidad": 1},
        ])

        service.create_order(payload, comercial_id="com-1")

        client_repo.find_by_id.assert_called_once_with("cli-1", comercial_id="com-1")
        product_repo.find_prices.assert_called_once_with(["p2"])
        order_repo.create.assert_called_once_with(payload, {"p2": Decimal("4.00")})

    def test_create_for_foreign_client(self, service, repos):
        repos[2].find_by_id.return_value = None
        payload = OrderCreate(cliente_id="cli-x", items=[{"producto_id": "p1", "cantidad": 1}])

        with pytest.raises(NotFoundError):
            service.create_order(payload, comercial_id="com-1")
        repos[0].create.assert_not_called()


class TestPartialConfirmation:

    def test_empty_selection_rejected(self, service, repos):
        with pytest.raises(ValueError):
            service.confirm_partial_order("ped-1", [])
        repos[0].confirm_items.assert_not_called()

    def test_confirms_and_reloads(self, service, repos, order_factory):
        order_repo = repos[0]
        order_repo.find_by_id.side_effect = [order_factory(), order_factory(estado="confirmado_parcial")]
        order_repo.confirm_items.return_value = "confirmado_parcial"
        selections = [ItemSelection(item_id="item-1", confirmed=True), ItemSelection(item_id="item-2", confirmed=False)]
        now = datetime(2025, 8, 12, 9, 0)

        result = service.confirm_partial_order("ped-1", selections, "Falta stock de tapas", now=now)

        order_repo.confirm_items.assert_called_once_with("ped-1", selections, "Falta stock de tapas", now=now)
        assert result.estado == "confirmado_parcial"


class TestStatusChanges:

    def test_item_status_validated_before_lookup(self, service, repos):
        with pytest.raises(InvalidStatusError):
            service.update_item_status("item-1", "revision")
        repos[0].find_item.assert_not_called()

    def test_unknown_item(self, service, repos):
        repos[0].find_item.return_value = None
        with pytest.raises(NotFoundError):
            service.update_item_status("item-9", "confirmado")

    def test_item_status_update(self, service, repos, item_factory, order_factory):
        order_repo = repos[0]
        order_repo.find_item.return_value = item_factory()
        order_repo.find_by_id.return_value = order_factory()

        service.update_item_status("item-1", "sin_stock", "Sin existencias", comercial_id="com-1")

        order_repo.update_item_status.assert_called_once_with("item-1", "sin_stock", "Sin existencias", now=None)
        order_repo.find_by_id.assert_called_with("ped-1", comercial_id="com-1")

    def test_manual_status_with_notes(self, service, repos, order_factory):
        repos[0].find_by_id.return_value = order_factory()

        service.update_order_status("ped-1", "cancelado", notes="Cliente anula")

        repos[0].update_fields.assert_called_once_with("ped-1", estado="cancelado", notas_operativas="Cliente anula")

    def test_manual_status_without_notes_keeps_notes(self, service, repos, order_factory):
        repos[0].find_by_id.return_value = order_factory()

        service.update_order_status("ped-1", "preparacion")

        repos[0].update_fields.assert_called_once_with("ped-1", estado="preparacion")

    def test_invalid_manual_status(self, service, repos):
        with pytest.raises(InvalidStatusError):
            service.update_order_status("ped-1", "pendiente")
        repos[0].update_fields.assert_not_called()

    def test_schedule_delivery_marks_shipped(self, service, repos, order_factory):
        repos[0].find_by_id.return_value = order_factory(estado="preparacion")
        when = datetime(2025, 8, 20, 10, 0)

        service.schedule_delivery("ped-1", when)

        repos[0].update_fields.assert_called_once_with("ped-1", fecha_entrega_estimada=when, estado="enviado")

    def test_advance(self, service, repos, order_factory):
        repos[0].find_by_id.return_value = order_factory(estado="enviado")

        service.advance_order("ped-1")

        repos[0].update_fields.assert_called_once_with("ped-1", estado="entregado")

    def test_cannot_advance_terminal_order(self, service, repos, order_factory):
        repos[0].find_by_id.return_value = order_factory(estado="entregado")

        with pytest.raises(ValueError):
            service.advance_order("ped-1")


class TestStock:

    def test_check_stock_delegates(self, service, repos):
        repos[1].find_stock.return_value = []
        assert service.check_stock_availability(["p1"]) == []
        repos[1].find_stock.assert_called_once_with(["p1"])
