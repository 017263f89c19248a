# storefront/services/inventory_ledger.py
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.database import read_scope
from storefront.domain.errors import InsufficientStock, ItemNotFound, ValidationError
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CatalogItem:
    item_id: int
    name: str
    price: Decimal
    stock_count: int


class InventoryLedger:
    """
    Jedyny komponent ktory zapisuje products.stock_count.

    -reserve: atomowe sprawdz-i-zmniejsz (jeden warunkowy UPDATE)
    -restock: akcja kompensujaca przy anulowaniu zamowienia
    -available: odczyt doradczy, moze byc nieaktualny chwile po odczycie

    Metody nie robia commita, dzialaja w transakcji wolajacego (unit_of_work),
    wiec rezerwacja i zamowienie commituja sie razem albo wcale.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)

    #query
    def get_item(self, item_id: int) -> CatalogItem:
        with read_scope(self.db):
            row = self.repo.get_row(item_id)
        if row is None:
            raise ItemNotFound(item_id)
        return CatalogItem(item_id=row.id, name=row.name, price=row.price, stock_count=row.stock_count)

    def available(self, item_id: int) -> int:
        with read_scope(self.db):
            stock = self.repo.get_stock(item_id)
        if stock is None:
            raise ItemNotFound(item_id)
        return stock

    #commands
    def reserve(self, item_id: int, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")

        # warunek stock_count >= q w samym UPDATE, nie ma okna miedzy odczytem a zapisem
        rowcount = self.repo.decrement_stock_if_available(item_id, quantity)
        if rowcount == 0:
            available = self.available(item_id)
            logger.info(f"Reservation of {quantity} x item {item_id} rejected, {available} available")
            raise InsufficientStock(item_id, available)

        logger.info(f"Reserved {quantity} x item {item_id}")

    def restock(self, item_id: int, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")

        rowcount = self.repo.increment_stock(item_id, quantity)
        if rowcount == 0:
            raise ItemNotFound(item_id)

        logger.info(f"Restocked {quantity} x item {item_id}")
