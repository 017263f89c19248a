from decimal import Decimal

import pytest

from storefront.data.database import Store
from storefront.data.models.product import ProductModel
from storefront.services.inventory_ledger import InventoryLedger
from tests.fakes import FakeNotificationService


@pytest.fixture
def store():
    store = Store("sqlite://")
    store.create_schema()
    yield store
    store.close()


@pytest.fixture
def db(store):
    with store.session() as session:
        yield session


@pytest.fixture
def add_product(db):
    """Insert a catalog row and commit it; returns the item id."""

    def _add(item_id: int, price: str = "10.00", stock: int = 5, name: str | None = None) -> int:
        db.add(
            ProductModel(
                id=item_id,
                name=name or f"Item {item_id}",
                price=Decimal(price),
                stock_count=stock,
            )
        )
        db.commit()
        return item_id

    return _add


@pytest.fixture
def stock_of(db):
    def _stock(item_id: int) -> int:
        return InventoryLedger(db).available(item_id)

    return _stock


@pytest.fixture
def notifier():
    return FakeNotificationService()
