# storefront/services/order_service.py
import math
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import read_scope
from storefront.data.models.order import OrderModel
from storefront.domain.errors import OrderNotFound, ValidationError
from storefront.domain.order_status import OrderStatus
from storefront.domain.owner import Owner, owner_from_columns
from storefront.repos.order_repo import OrderRepo
from storefront.utils.settings import ORDERS_PAGE_LIMIT_MAX


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "owner": str(owner_from_columns(order.user_id, order.session_id)),
        "status": order.status,
        "total_amount": order.total_amount,
        "shipping_address": order.shipping_address,
        "payment_intent_id": order.payment_intent_id,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "items": [
            {
                "item_id": i.product_id,
                "quantity": i.quantity,
                "unit_price": i.unit_price,
                "subtotal": i.unit_price * i.quantity,
            }
            for i in order.items
        ],
    }


class OrderService:
    """
    Odczyty zamowien (query). Zmiany statusu sa w OrderLifecycle.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)

    def get_order(self, order_id: int, owner: Owner | None = None) -> Dict[str, Any]:
        """
        Pobranie zamowienia; z ownerem widac tylko jego zamowienia,
        cudze wygladaja jak nieistniejace.
        """
        with read_scope(self.db):
            order = self.repo.get_order(order_id, owner=owner)

            if not order:
                raise OrderNotFound(order_id)

            return order_to_dict(order)

    def list_orders(
        self,
        owner: Owner,
        status: OrderStatus | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> Dict[str, Any]:
        if page < 1:
            raise ValidationError("Page must be at least 1")

        limit = min(ORDERS_PAGE_LIMIT_MAX, max(1, limit))
        with read_scope(self.db):
            orders, total = self.repo.list_orders(
                owner,
                status.value if status is not None else None,
                limit=limit,
                offset=(page - 1) * limit,
            )
            rows = [order_to_dict(o) for o in orders]

        return {
            "orders": rows,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit),
            },
        }
