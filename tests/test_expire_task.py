"""Tests for the periodic guest-cart purge."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storefront.data.models.product import ProductModel
from storefront.domain.owner import AnonymousOwner, UserOwner
from storefront.services.cart_service import CartService
from storefront.tasks.expire import purge_stale_guest_carts
from storefront.utils.settings import GUEST_CART_TTL_SECONDS


def test_purge_uses_configured_ttl(store):
    guest = AnonymousOwner("old-guest")
    with store.session() as db:
        db.add(ProductModel(id=1, name="Item", price=Decimal("1.00"), stock_count=10))
        db.commit()
        CartService(db).add_line(guest, 1, 2)
        CartService(db).add_line(UserOwner(1), 1, 1)

    not_yet = datetime.now(timezone.utc) + timedelta(seconds=GUEST_CART_TTL_SECONDS - 60)
    assert purge_stale_guest_carts(store, now=not_yet) == 0

    later = datetime.now(timezone.utc) + timedelta(seconds=GUEST_CART_TTL_SECONDS + 60)
    assert purge_stale_guest_carts(store, now=later) == 1

    with store.session() as db:
        assert CartService(db).snapshot(guest)["items"] == []
        assert CartService(db).snapshot(UserOwner(1))["item_count"] == 1
