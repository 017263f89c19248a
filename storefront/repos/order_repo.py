# storefront/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.analytics_event import AnalyticsEventModel
from storefront.data.models.order import OrderModel
from storefront.domain.owner import AnonymousOwner, Owner, UserOwner


def _owner_filter(owner: Owner):
    if isinstance(owner, UserOwner):
        return OrderModel.user_id == owner.user_id
    if isinstance(owner, AnonymousOwner):
        return OrderModel.session_id == owner.token
    raise TypeError(f"Unsupported owner type: {type(owner).__name__}")


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int, owner: Owner | None = None, for_update: bool = False) -> OrderModel | None:
        stmt = (
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .options(selectinload(OrderModel.items))
            .execution_options(populate_existing=True)
        )
        if owner is not None:
            stmt = stmt.where(_owner_filter(owner))
        if for_update:
            stmt = stmt.with_for_update(of=OrderModel)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_orders(self, owner: Owner, status: str | None, limit: int, offset: int) -> tuple[list[OrderModel], int]:
        filters = [_owner_filter(owner)]
        if status is not None:
            filters.append(OrderModel.status == status)

        total = self.db.execute(
            select(func.count()).select_from(OrderModel).where(*filters)
        ).scalar_one()

        orders = list(
            self.db.execute(
                select(OrderModel)
                .where(*filters)
                .options(selectinload(OrderModel.items))
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
                .limit(limit)
                .offset(offset)
            ).scalars()
        )
        return orders, total

    def update_order_status(self, order_id: int, old_status: str, new_status: str) -> int:
        # optimistic check: update orders set status = new where id = ? and status = old
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == old_status)
            .values(status=new_status, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def record_event(self, event_type: str, user_id: int | None, payload: dict):
        self.db.add(AnalyticsEventModel(event_type=event_type, user_id=user_id, payload=payload))
