# storefront/services/order_lifecycle.py
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import read_scope, unit_of_work
from storefront.data.models.order import OrderModel
from storefront.domain.errors import ConcurrentUpdate, InvalidTransition, OrderNotFound
from storefront.domain.order_status import OrderStatus, can_transition
from storefront.domain.owner import Owner
from storefront.repos.order_repo import OrderRepo
from storefront.services.inventory_ledger import InventoryLedger
from storefront.services.order_service import order_to_dict
from storefront.utils.retry import store_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderLifecycle:
    """
    Maszyna stanow zamowienia:

        pending -> processing | cancelled
        processing -> shipped | cancelled
        shipped -> delivered
        delivered, cancelled - koncowe

    Wejscie w cancelled zwraca na magazyn wszystkie pozycje w tej samej
    transakcji co zmiana statusu. Ponowne anulowanie to no-op.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.ledger = InventoryLedger(db)

    @store_retry()
    def transition(self, order_id: int, new_status: OrderStatus) -> Dict[str, Any]:
        """Zmiana statusu (administracyjna)."""
        new_status = OrderStatus(new_status)

        with unit_of_work(self.db):
            order = self.repo.get_order(order_id, for_update=True)
            if not order:
                raise OrderNotFound(order_id)
            self._apply(order, new_status)

        return self._reload(order_id)

    @store_retry()
    def cancel(self, order_id: int, owner: Owner) -> Dict[str, Any]:
        """Anulowanie przez wlasciciela - tylko zamowienia pending."""
        with unit_of_work(self.db):
            order = self.repo.get_order(order_id, owner=owner, for_update=True)
            if not order:
                raise OrderNotFound(order_id)

            current = OrderStatus(order.status)
            if current not in (OrderStatus.PENDING, OrderStatus.CANCELLED):
                raise InvalidTransition(current.value, OrderStatus.CANCELLED.value)

            self._apply(order, OrderStatus.CANCELLED)

        return self._reload(order_id)

    def _apply(self, order: OrderModel, new_status: OrderStatus):
        current = OrderStatus(order.status)

        if current == OrderStatus.CANCELLED and new_status == OrderStatus.CANCELLED:
            logger.info(f"Order {order.id} already cancelled, nothing to do")
            return

        if not can_transition(current, new_status):
            raise InvalidTransition(current.value, new_status.value)

        if new_status == OrderStatus.CANCELLED:
            # akcja kompensujaca, rosnaco po item_id jak przy rezerwacji
            for item in sorted(order.items, key=lambda i: i.product_id):
                self.ledger.restock(item.product_id, item.quantity)

        # Optimistic locking warunek na poprzedni status
        # np update orders set status 'cancelled' where id 1 and status 'pending'
        rowcount = self.repo.update_order_status(order.id, current.value, new_status.value)
        if rowcount == 0:
            raise ConcurrentUpdate(f"Order {order.id} was modified by another operation")

        logger.info(f"Order {order.id}: {current.value} -> {new_status.value}")

    def _reload(self, order_id: int) -> Dict[str, Any]:
        with read_scope(self.db):
            order = self.repo.get_order(order_id)
            return order_to_dict(order)
