# storefront/repos/product_repo.py
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    """
    Zapytania kolumnowe (nie encje ORM), zeby zawsze czytac swieza wartosc
    stock_count z bazy a nie z identity mapy sesji.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_row(self, product_id: int):
        return self.db.execute(
            select(ProductModel.id, ProductModel.name, ProductModel.price, ProductModel.stock_count)
            .where(ProductModel.id == product_id)
        ).one_or_none()

    def get_rows(self, product_ids: list[int]) -> dict:
        if not product_ids:
            return {}
        rows = self.db.execute(
            select(ProductModel.id, ProductModel.name, ProductModel.price, ProductModel.stock_count)
            .where(ProductModel.id.in_(product_ids))
        ).all()
        return {r.id: r for r in rows}

    def get_stock(self, product_id: int) -> int | None:
        return self.db.execute(
            select(ProductModel.stock_count).where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def get_price(self, product_id: int) -> Decimal | None:
        return self.db.execute(
            select(ProductModel.price).where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def decrement_stock_if_available(self, product_id: int, quantity: int) -> int:
        # update products set stock_count = stock_count - q where id = ? and stock_count >= q
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock_count >= quantity)
            .values(stock_count=ProductModel.stock_count - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def increment_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock_count=ProductModel.stock_count + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
