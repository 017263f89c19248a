"""Transaction scopes of the store: writers serialize, reads never hold the write lock."""

import time
from decimal import Decimal

import pytest
from sqlalchemy import select, update

from storefront.data.database import Store, read_scope, unit_of_work
from storefront.data.models.product import ProductModel
from storefront.domain.owner import UserOwner
from storefront.services.cart_service import CartService
from storefront.services.inventory_ledger import InventoryLedger
from storefront.services.order_service import OrderService

ALICE = UserOwner(1)
BOB = UserOwner(2)


@pytest.fixture
def file_store(tmp_path):
    store = Store(f"sqlite:///{tmp_path / 'shop.db'}")
    store.create_schema()
    with store.session() as db:
        db.add(ProductModel(id=1, name="Lamp", price=Decimal("20.00"), stock_count=5))
        db.commit()
    yield store
    store.close()


class TestReadsDoNotBlockWriters:

    def test_writer_proceeds_after_snapshot_in_open_session(self, file_store):
        with file_store.session() as reader, file_store.session() as writer:
            CartService(reader).snapshot(ALICE)

            started = time.monotonic()
            CartService(writer).add_line(BOB, 1, 1)

            assert time.monotonic() - started < 1
            assert not reader.in_transaction()

    def test_snapshot_during_active_write(self, file_store):
        with file_store.session() as reader, file_store.session() as writer:
            with unit_of_work(writer):
                writer.execute(
                    update(ProductModel)
                    .where(ProductModel.id == 1)
                    .values(stock_count=4)
                    .execution_options(synchronize_session=False)
                )
                assert CartService(reader).snapshot(ALICE)["items"] == []
                assert InventoryLedger(reader).available(1) == 5

            assert InventoryLedger(reader).available(1) == 4

    def test_order_listing_leaves_no_open_transaction(self, file_store):
        with file_store.session() as reader, file_store.session() as writer:
            OrderService(reader).list_orders(ALICE)
            assert not reader.in_transaction()
            CartService(writer).add_line(ALICE, 1, 2)


class TestScopes:

    def test_write_after_plain_read_in_same_session(self, file_store):
        with file_store.session() as db:
            db.execute(select(ProductModel.id)).all()
            assert db.in_transaction()

            CartService(db).add_line(ALICE, 1, 1)

            assert CartService(db).snapshot(ALICE)["item_count"] == 1

    def test_read_inside_unit_of_work_keeps_the_write(self, file_store):
        with file_store.session() as db:
            with unit_of_work(db):
                db.execute(
                    update(ProductModel)
                    .where(ProductModel.id == 1)
                    .values(stock_count=3)
                    .execution_options(synchronize_session=False)
                )
                with read_scope(db):
                    pass
                assert db.in_transaction()
                assert InventoryLedger(db).available(1) == 3

            assert InventoryLedger(db).available(1) == 3
