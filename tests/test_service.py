# tests/test_service.py

"""
Tests for CatalogService: validation, not-found handling and the
translation of storage faults into InternalFailure.
"""

import logging
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from product_catalog.exceptions import InternalFailure, InvalidInput, NotFound
from product_catalog.service import CatalogService


class RecordingRepository:
    """Stands in for ProductRepository and records which entry point was used."""

    def __init__(self):
        self.calls = []

    def list_all(self):
        self.calls.append(("list_all",))
        return []

    def search(self, category_id, min_price, max_price, color):
        self.calls.append(("search", category_id, min_price, max_price, color))
        return []


class BrokenRepository:
    """Every call fails the way a lost database connection does."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused by db-host-7"))

    list_all = search = get_by_id = get_by_category = _fail
    create = update = delete = update_stock = _fail


@pytest.fixture
def service(repository):
    return CatalogService(repository)


def test_search_or_list_without_filters_uses_list_all():
    repo = RecordingRepository()

    CatalogService(repo).search_or_list()

    assert repo.calls == [("list_all",)]


def test_search_or_list_blank_color_is_not_a_filter():
    repo = RecordingRepository()

    CatalogService(repo).search_or_list(color="   ")

    assert repo.calls == [("list_all",)]


@pytest.mark.parametrize(
    "filters",
    [
        {"category_id": 1},
        {"min_price": Decimal("0")},
        {"max_price": Decimal("10")},
        {"color": "red"},
    ],
)
def test_search_or_list_any_filter_uses_search(filters):
    repo = RecordingRepository()

    CatalogService(repo).search_or_list(**filters)

    assert repo.calls[0][0] == "search"


def test_get_by_id_missing_raises_not_found(service):
    with pytest.raises(NotFound) as exc_info:
        service.get_by_id(12345)
    assert exc_info.value.detail == "Product not found."


def test_create_returns_product_with_id(service, make_product):
    created = service.create(make_product())

    assert created.id is not None
    assert service.get_by_id(created.id).name == "Shirt"


@pytest.mark.parametrize("name", [None, "", "   "])
def test_create_rejects_blank_name(service, make_product, name):
    with pytest.raises(InvalidInput) as exc_info:
        service.create(make_product(name=name))
    assert exc_info.value.detail == "Product name is required."


@pytest.mark.parametrize("category_id", [0, -1])
def test_create_rejects_non_positive_category(service, make_product, category_id):
    with pytest.raises(InvalidInput) as exc_info:
        service.create(make_product(category_id=category_id))
    assert exc_info.value.detail == "Valid category ID is required."


def test_update_checks_existence_before_validation(service, make_product):
    with pytest.raises(NotFound):
        service.update(999999, make_product(name=""))


def test_update_validates_input(service, make_product):
    created = service.create(make_product())

    with pytest.raises(InvalidInput):
        service.update(created.id, make_product(name=""))
    assert service.get_by_id(created.id).name == "Shirt"


def test_update_replaces_product(service, make_product):
    created = service.create(make_product())

    service.update(created.id, make_product(name="Polo", stock=4))

    updated = service.get_by_id(created.id)
    assert (updated.name, updated.stock) == ("Polo", 4)


def test_delete_twice_raises_not_found_second_time(service, make_product):
    created = service.create(make_product())

    service.delete(created.id)
    with pytest.raises(NotFound):
        service.delete(created.id)


def test_adjust_stock_returns_updated_product(service, make_product):
    created = service.create(make_product(stock=10))

    assert service.adjust_stock(created.id, -4).stock == 6
    assert service.adjust_stock(created.id, 4).stock == 10


def test_adjust_stock_missing_raises_not_found(service):
    with pytest.raises(NotFound):
        service.adjust_stock(999999, 1)


def test_list_by_category(service, make_product):
    service.create(make_product(category_id=4))
    service.create(make_product(category_id=5))

    assert [p.category_id for p in service.list_by_category(4)] == [4]


@pytest.mark.parametrize(
    "call",
    [
        lambda s, p: s.search_or_list(),
        lambda s, p: s.search_or_list(color="red"),
        lambda s, p: s.get_by_id(1),
        lambda s, p: s.create(p),
        lambda s, p: s.update(1, p),
        lambda s, p: s.delete(1),
        lambda s, p: s.adjust_stock(1, 1),
        lambda s, p: s.list_by_category(1),
    ],
)
def test_storage_faults_become_internal_failure(call, make_product):
    service = CatalogService(BrokenRepository())

    with pytest.raises(InternalFailure) as exc_info:
        call(service, make_product())

    assert exc_info.value.detail == "Oops... our bad."
    assert "db-host-7" not in str(exc_info.value)


def test_storage_faults_are_logged_with_operation_and_id(caplog):
    service = CatalogService(BrokenRepository())

    with caplog.at_level(logging.ERROR, logger="product_catalog.service"):
        with pytest.raises(InternalFailure):
            service.delete(77)

    assert "delete" in caplog.text
    assert "product_id=77" in caplog.text
    assert "db-host-7" in caplog.text
