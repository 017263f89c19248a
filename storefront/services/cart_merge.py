# storefront/services/cart_merge.py
from datetime import datetime, timezone
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import read_scope, unit_of_work
from storefront.domain.owner import AnonymousOwner, UserOwner
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.cart_service import build_snapshot
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartMergeResolver:
    """
    Przy logowaniu przenosi koszyk goscia do koszyka uzytkownika.

    - ta sama pozycja u obu: min(user + gosc, stan magazynu)
    - pozycja tylko u goscia: przepinana na usera, tez obcieta do stanu magazynu
    - po merge koszyk goscia jest pusty, ponowny merge nic nie robi
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    def merge(self, user: UserOwner, anonymous: AnonymousOwner) -> Dict[str, Any]:
        if not isinstance(user, UserOwner) or not isinstance(anonymous, AnonymousOwner):
            raise TypeError("merge() expects a UserOwner target and an AnonymousOwner source")

        with unit_of_work(self.db):
            guest_lines = self.repo.get_lines(anonymous)
            now = datetime.now(timezone.utc)
            merged = reowned = dropped = 0

            for guest_line in guest_lines:
                item_id = guest_line.product_id
                stock = self.products.get_stock(item_id) or 0
                existing = self.repo.get_line(user, item_id)

                wanted = guest_line.quantity + (existing.quantity if existing else 0)
                capped = min(wanted, stock)
                if capped < wanted:
                    logger.warning(
                        f"Merge {anonymous} -> {user}: item {item_id} capped at {capped} (wanted {wanted})"
                    )

                if existing:
                    # pozycja goscia znika, ilosc laduje w pozycji usera
                    self.repo.delete_line(guest_line)
                    if capped > 0:
                        existing.quantity = capped
                        existing.updated_at = now
                        merged += 1
                    else:
                        self.repo.delete_line(existing)
                        dropped += 1
                elif capped > 0:
                    # przepiecie wlasciciela: update cart set user_id = ?, session_id = null
                    guest_line.user_id = user.user_id
                    guest_line.session_id = None
                    guest_line.quantity = capped
                    guest_line.updated_at = now
                    reowned += 1
                else:
                    self.repo.delete_line(guest_line)
                    dropped += 1

            # nic z koszyka goscia nie moze zostac
            self.repo.delete_lines(anonymous)

        if guest_lines:
            logger.info(
                f"Merged cart {anonymous} into {user}: {merged} combined, "
                f"{reowned} re-owned, {dropped} dropped for lack of stock"
            )

        with read_scope(self.db):
            lines = self.repo.get_lines(user)
            return build_snapshot(user, lines, self.products.get_rows([line.product_id for line in lines]))
