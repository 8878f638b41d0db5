"""
Unit tests for the global search

Author: TM3
Date: 2025-08-12
"""
from datetime import datetime
from unittest.mock import MagicMock

from app.services.search_service import SearchFilters, SearchService, apply_filters, relevance_score


class TestRelevanceScore:

    def test_exact_match_is_cumulative(self):
        assert relevance_score("envase", "Envase", "product") == 175

    def test_prefix(self):
        assert relevance_score("env", "Envase PET", "product") == 75

    def test_contains_client_bonus(self):
        assert relevance_score("sur", "Plásticos del Sur", "client") == 35

    def test_order_bonus_without_match(self):
        assert relevance_score("xyz", "PED-20250805-0001", "order") == 5


def _result(type_, score, amount=None, **metadata):
    return {"type": type_, "score": score, "amount": amount, "metadata": metadata}


class TestApplyFilters:

    def test_default_filters_only_sort(self):
        results = [_result("product", 25, 5.0), _result("client", 35)]
        assert [r["score"] for r in apply_filters(results, SearchFilters())] == [35, 25]

    def test_amount_range_keeps_clients(self):
        results = [_result("product", 1, 5.0), _result("order", 1, 500.0), _result("client", 1)]

        filtered = apply_filters(results, SearchFilters(min_amount=100, max_amount=1000))

        assert [r["type"] for r in filtered] == ["order", "client"]

    def test_status_filters_orders_and_clients(self):
        results = [
            _result("order", 1, 10.0, estado="enviado"),
            _result("order", 1, 10.0, estado="recibido"),
            _result("client", 1, activo=False),
            _result("client", 1, activo=True),
            _result("product", 1, 1.0),
        ]

        filtered = apply_filters(results, SearchFilters(status="inactivo"))

        assert [r["type"] for r in filtered] == ["client", "product"]
        assert filtered[0]["metadata"]["activo"] is False

    def test_order_status_lets_clients_through(self):
        results = [_result("order", 1, 10.0, estado="enviado"), _result("client", 1, activo=True)]
        assert len(apply_filters(results, SearchFilters(status="enviado"))) == 2


class TestSearchService:

    def _service(self):
        client_repo, product_repo, order_repo = MagicMock(), MagicMock(), MagicMock()
        client_repo.find_all.return_value = []
        product_repo.find_all.return_value = []
        order_repo.find_all.return_value = ([], 0)
        return SearchService(client_repo, product_repo, order_repo), client_repo, product_repo, order_repo

    def test_blank_term_returns_nothing(self):
        service, client_repo, _, _ = self._service()
        assert service.search("   ") == []
        client_repo.find_all.assert_not_called()

    def test_results_sorted_by_score(self, client_factory, product_factory, order_factory):
        service, client_repo, product_repo, order_repo = self._service()
        client_repo.find_all.return_value = [client_factory(nombre="Envases Levante")]
        product_repo.find_all.return_value = [product_factory(nombre="Envase")]
        order_repo.find_all.return_value = ([order_factory(fecha=datetime(2025, 8, 5))], 1)

        results = service.search("envase", comercial_id="com-1")

        assert [r["type"] for r in results] == ["product", "client", "order"]
        assert results[0]["subtitle"] == "SKU: PRD-123456ABC"
        assert results[2]["description"] == "recibido | 2025-08-05"
        client_repo.find_all.assert_called_once_with(comercial_id="com-1", search="envase")
        product_repo.find_all.assert_called_once_with(search="envase", activo=True)

    def test_type_filter_limits_sources(self):
        service, client_repo, product_repo, order_repo = self._service()

        service.search("tapa", SearchFilters(type="products"))

        product_repo.find_all.assert_called_once()
        client_repo.find_all.assert_not_called()
        order_repo.find_all.assert_not_called()
