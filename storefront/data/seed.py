# storefront/data/seed.py
from decimal import Decimal

from sqlalchemy import select

from storefront.data.database import Store, unit_of_work
from storefront.data.models.product import ProductModel
from storefront.utils.settings import DATABASE_URL

PRODUCTS = [
    {"id": 1, "name": "Dragon Scale Pendant", "price": Decimal("49.99"), "stock_count": 25},
    {"id": 2, "name": "Elven Cloak Pin", "price": Decimal("19.50"), "stock_count": 40},
    {"id": 3, "name": "Wizard Tower Print", "price": Decimal("35.00"), "stock_count": 10},
    {"id": 4, "name": "Enchanted Map Scroll", "price": Decimal("24.00"), "stock_count": 0},
]


def seed(store: Store) -> int:
    with store.session() as db:
        # not forcing: only seed if empty
        if db.execute(select(ProductModel.id).limit(1)).first():
            return 0
        with unit_of_work(db):
            db.add_all([ProductModel(**p) for p in PRODUCTS])
    return len(PRODUCTS)


if __name__ == "__main__":
    store = Store(DATABASE_URL)
    try:
        store.create_schema()
        print(f"Seeded {seed(store)} products")
    finally:
        store.close()
