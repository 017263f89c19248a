"""Tests for the InventoryLedger: check-and-reserve, restock, advisory reads."""

from decimal import Decimal

import pytest

from storefront.data.database import unit_of_work
from storefront.domain.errors import InsufficientStock, ItemNotFound, ValidationError
from storefront.services.inventory_ledger import InventoryLedger


class TestReserve:

    def test_reserve_decrements_stock(self, db, add_product, stock_of):
        add_product(1, stock=5)
        with unit_of_work(db):
            InventoryLedger(db).reserve(1, 3)
        assert stock_of(1) == 2

    def test_reserve_entire_stock(self, db, add_product, stock_of):
        add_product(1, stock=4)
        with unit_of_work(db):
            InventoryLedger(db).reserve(1, 4)
        assert stock_of(1) == 0

    def test_reserve_more_than_available_reports_available(self, db, add_product, stock_of):
        add_product(1, stock=2)
        with pytest.raises(InsufficientStock) as exc:
            with unit_of_work(db):
                InventoryLedger(db).reserve(1, 3)
        assert exc.value.item_id == 1
        assert exc.value.available == 2
        assert stock_of(1) == 2

    def test_rejected_reservation_never_goes_negative(self, db, add_product, stock_of):
        add_product(1, stock=0)
        with pytest.raises(InsufficientStock):
            with unit_of_work(db):
                InventoryLedger(db).reserve(1, 1)
        assert stock_of(1) == 0

    def test_unknown_item(self, db):
        with pytest.raises(ItemNotFound):
            with unit_of_work(db):
                InventoryLedger(db).reserve(99, 1)

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_rejected(self, db, add_product, quantity):
        add_product(1, stock=5)
        with pytest.raises(ValidationError, match="must be positive"):
            InventoryLedger(db).reserve(1, quantity)

    def test_rollback_undoes_reservation(self, db, add_product, stock_of):
        add_product(1, stock=5)
        with pytest.raises(RuntimeError):
            with unit_of_work(db):
                InventoryLedger(db).reserve(1, 5)
                raise RuntimeError("boom")
        assert stock_of(1) == 5


class TestRestock:

    def test_restock_increments_stock(self, db, add_product, stock_of):
        add_product(1, stock=2)
        with unit_of_work(db):
            InventoryLedger(db).restock(1, 3)
        assert stock_of(1) == 5

    def test_restock_unknown_item(self, db):
        with pytest.raises(ItemNotFound):
            with unit_of_work(db):
                InventoryLedger(db).restock(42, 1)

    def test_restock_zero_rejected(self, db, add_product):
        add_product(1)
        with pytest.raises(ValidationError):
            InventoryLedger(db).restock(1, 0)

    def test_reserve_restock_sequence_stays_non_negative(self, db, add_product, stock_of):
        add_product(1, stock=3)
        ledger = InventoryLedger(db)
        for quantity in (2, 2, 1, 1):
            try:
                with unit_of_work(db):
                    ledger.reserve(1, quantity)
            except InsufficientStock:
                with unit_of_work(db):
                    ledger.restock(1, 1)
            assert stock_of(1) >= 0
        assert stock_of(1) == 0


class TestCatalogLookup:

    def test_get_item(self, db, add_product):
        add_product(7, price="12.50", stock=9, name="Lantern")
        item = InventoryLedger(db).get_item(7)
        assert item.name == "Lantern"
        assert item.price == Decimal("12.50")
        assert item.stock_count == 9

    def test_available_unknown_item(self, db):
        with pytest.raises(ItemNotFound):
            InventoryLedger(db).available(3)
