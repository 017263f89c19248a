# storefront/services/checkout_service.py
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import read_scope, unit_of_work
from storefront.data.models.order import OrderModel
from storefront.data.models.order_line_item import OrderLineItemModel
from storefront.domain.errors import EmptyCart
from storefront.domain.order_status import OrderStatus
from storefront.domain.owner import Owner, UserOwner, owner_columns
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.inventory_ledger import InventoryLedger
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import order_to_dict
from storefront.utils.retry import store_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Zamiana koszyka na zamowienie, calosc jako jedna transakcja:

    1. odczyt pozycji koszyka (pusty -> EmptyCart)
    2. rezerwacja kazdej pozycji, rosnaco po item_id (staly porzadek blokad)
    3. zamrozenie ceny z chwili rezerwacji, total z zamrozonych cen
    4. zamowienie (pending) + pozycje zamowienia
    5. czyszczenie koszyka
    6. commit, dopiero potem wynik i powiadomienie

    Dowolny blad przed commitem -> rollback, koszyk i magazyn bez zmian.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.carts = CartRepo(db)
        self.orders = OrderRepo(db)
        self.products = ProductRepo(db)
        self.ledger = InventoryLedger(db)
        self.notification_service = notification_service or NotificationService()

    @store_retry()
    def checkout(
        self,
        owner: Owner,
        shipping_address: str = "",
        payment_intent_id: str | None = None,
    ) -> Dict[str, Any]:
        with unit_of_work(self.db):
            lines = self.carts.get_lines(owner)
            if not lines:
                raise EmptyCart()

            order = OrderModel(
                status=OrderStatus.PENDING.value,
                total_amount=Decimal("0.00"),
                shipping_address=shipping_address or "",
                payment_intent_id=payment_intent_id,
                **owner_columns(owner),
            )

            total = Decimal("0.00")
            for line in sorted(lines, key=lambda line: line.product_id):
                # InsufficientStock stad wycofuje wszystkie wczesniejsze rezerwacje
                self.ledger.reserve(line.product_id, line.quantity)

                # wiersz produktu jest juz zablokowany naszym UPDATE, cena nie ucieknie
                unit_price = self.products.get_price(line.product_id)
                total += unit_price * line.quantity
                order.items.append(
                    OrderLineItemModel(
                        product_id=line.product_id,
                        quantity=line.quantity,
                        unit_price=unit_price,
                    )
                )

            order.total_amount = total
            self.orders.add_order(order)
            self.carts.delete_lines(owner)

            self.orders.record_event(
                "order_placed",
                owner.user_id if isinstance(owner, UserOwner) else None,
                {"order_id": order.id, "total": str(total)},
            )

        logger.info(f"Order {order.id} placed by {owner}: {len(order.items)} lines, total {total}")

        order_id = order.id
        with read_scope(self.db):
            result = order_to_dict(order)
        self._notify(owner, order_id)
        return result

    def _notify(self, owner: Owner, order_id: int):
        # zamowienie jest juz zacommitowane, blad brokera nie moze zepsuc odpowiedzi
        try:
            self.notification_service.send_order_notification(str(owner), order_id)
        except Exception as e:
            logger.warning(f"Failed to enqueue notification for order {order_id}: {e}")
