from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.order_status import OrderStatus

_STATUSES = ", ".join(f"'{s.value}'" for s in OrderStatus)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=True, index=True)
    session_id = Column(String(128), nullable=True, index=True)

    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    # suma z cen zamrozonych przy checkoucie, nie zmienia sie po utworzeniu
    total_amount = Column(Numeric(10, 2), nullable=False)
    shipping_address = Column(String, nullable=False, default="")
    payment_intent_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderLineItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineItemModel.product_id",
    )

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_orders_total"),
        CheckConstraint(f"status IN ({_STATUSES})", name="ck_orders_status"),
        CheckConstraint(
            "(user_id IS NULL) <> (session_id IS NULL)",
            name="ck_orders_single_owner",
        ),
    )
