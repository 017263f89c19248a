from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session
from storefront.data.database import read_scope, unit_of_work
from storefront.data.models.cart_line import CartLineModel
from storefront.domain.errors import InsufficientStock, LineNotFound, ValidationError
from storefront.domain.owner import Owner, owner_columns
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.inventory_ledger import InventoryLedger
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def build_snapshot(owner: Owner, lines: list[CartLineModel], products: dict) -> Dict[str, Any]:
    items = []
    for line in lines:
        product = products[line.product_id]
        items.append(
            {
                "item_id": line.product_id,
                "name": product.name,
                "quantity": line.quantity,
                "price": product.price,
                "subtotal": product.price * line.quantity,
                "stock_count": product.stock_count,
            }
        )

    return {
        "owner": str(owner),
        "items": items,
        "total": sum((i["subtotal"] for i in items), Decimal("0.00")),
        "item_count": sum(i["quantity"] for i in items),
    }


class CartService:
    """
    CartStore: pozycje koszyka per wlasciciel (user albo sesja goscia)
    commands (add, set, remove, clear, purge) modyfikuja stan, kazda w osobnej transakcji
    query (snapshot) tylko odczyt

    Sprawdzanie stanu magazynu tutaj to tylko wczesne odrzucenie, nie rezerwacja.
    Prawdziwa rezerwacja dzieje sie dopiero w checkoucie.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.ledger = InventoryLedger(db)

    #query - odczyt
    def snapshot(self, owner: Owner) -> Dict[str, Any]:
        with read_scope(self.db):
            lines = self.repo.get_lines(owner)
            products = self.products.get_rows([line.product_id for line in lines])
            return build_snapshot(owner, lines, products)

    #commands
    def add_line(self, owner: Owner, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        with unit_of_work(self.db):
            available = self.ledger.available(item_id)
            existing = self.repo.get_line(owner, item_id)
            new_quantity = existing.quantity + quantity if existing else quantity

            if new_quantity > available:
                raise InsufficientStock(item_id, available)

            if existing:
                logger.info(
                    f"Item {item_id} already in cart of {owner}, quantity "
                    f"{existing.quantity} -> {new_quantity}"
                )
                existing.quantity = new_quantity
                existing.updated_at = datetime.now(timezone.utc)
            else:
                logger.info(f"Adding item {item_id} x {quantity} to cart of {owner}")
                self.repo.add_line(
                    CartLineModel(product_id=item_id, quantity=quantity, **owner_columns(owner))
                )

        return {"item_id": item_id, "quantity": new_quantity, "removed": False}

    def set_line_quantity(self, owner: Owner, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 0:
            raise ValidationError("Quantity must not be negative")

        if quantity == 0:
            self.remove_line(owner, item_id)
            return {"item_id": item_id, "quantity": 0, "removed": True}

        with unit_of_work(self.db):
            # PUT zmienia tylko istniejaca pozycje, dodawanie idzie przez add_line
            existing = self.repo.get_line(owner, item_id)
            if not existing:
                raise LineNotFound(item_id)

            available = self.ledger.available(item_id)
            if quantity > available:
                raise InsufficientStock(item_id, available)

            existing.quantity = quantity
            existing.updated_at = datetime.now(timezone.utc)

        logger.info(f"Cart of {owner}: item {item_id} set to {quantity}")
        return {"item_id": item_id, "quantity": quantity, "removed": False}

    def remove_line(self, owner: Owner, item_id: int) -> None:
        with unit_of_work(self.db):
            deleted = self.repo.delete_owner_line(owner, item_id)

        if deleted:
            logger.info(f"Item {item_id} removed from cart of {owner}")

    def clear(self, owner: Owner) -> int:
        with unit_of_work(self.db):
            deleted = self.repo.delete_lines(owner)

        logger.info(f"Cart of {owner} cleared ({deleted} lines)")
        return deleted

    def purge_stale_guest_lines(self, older_than: datetime) -> int:
        """Usuwa pozycje koszykow gosci nieruszane od `older_than`."""
        with unit_of_work(self.db):
            deleted = self.repo.delete_stale_anonymous_lines(older_than)

        if deleted:
            logger.warning(f"Purged {deleted} stale guest cart lines (untouched since {older_than.isoformat()})")
        return deleted
