# storefront/repos/cart_repo.py
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.data.models.cart_line import CartLineModel
from storefront.domain.owner import AnonymousOwner, Owner, UserOwner


def _owner_filter(owner: Owner):
    if isinstance(owner, UserOwner):
        return CartLineModel.user_id == owner.user_id
    if isinstance(owner, AnonymousOwner):
        return CartLineModel.session_id == owner.token
    raise TypeError(f"Unsupported owner type: {type(owner).__name__}")


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_lines(self, owner: Owner) -> list[CartLineModel]:
        # rosnaco po product_id, staly porzadek blokad przy checkoucie
        return list(
            self.db.execute(
                select(CartLineModel)
                .where(_owner_filter(owner))
                .order_by(CartLineModel.product_id)
            ).scalars()
        )

    def get_line(self, owner: Owner, product_id: int) -> CartLineModel | None:
        return self.db.execute(
            select(CartLineModel).where(_owner_filter(owner), CartLineModel.product_id == product_id)
        ).scalar_one_or_none()

    def add_line(self, line: CartLineModel) -> CartLineModel:
        self.db.add(line)
        self.db.flush()
        return line

    def delete_line(self, line: CartLineModel):
        self.db.delete(line)
        self.db.flush()

    def delete_owner_line(self, owner: Owner, product_id: int) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(_owner_filter(owner), CartLineModel.product_id == product_id)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount

    def delete_lines(self, owner: Owner) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(_owner_filter(owner))
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount

    def delete_stale_anonymous_lines(self, cutoff: datetime) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(CartLineModel.session_id.is_not(None), CartLineModel.updated_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
