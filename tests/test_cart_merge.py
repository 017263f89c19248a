"""Tests for folding a guest cart into a user cart at login."""

import pytest
from sqlalchemy import text

from storefront.domain.owner import AnonymousOwner, UserOwner
from storefront.services.cart_merge import CartMergeResolver
from storefront.services.cart_service import CartService

USER = UserOwner(10)
GUEST = AnonymousOwner("sess-abc")


def _quantities(db, owner):
    return {i["item_id"]: i["quantity"] for i in CartService(db).snapshot(owner)["items"]}


class TestMerge:

    def test_conflicting_line_capped_at_stock(self, db, add_product):
        add_product(2, stock=2)
        carts = CartService(db)
        carts.add_line(GUEST, 2, 2)
        carts.add_line(USER, 2, 1)

        snap = CartMergeResolver(db).merge(USER, GUEST)

        assert [(i["item_id"], i["quantity"]) for i in snap["items"]] == [(2, 2)]
        assert _quantities(db, GUEST) == {}

    def test_conflicting_line_summed_when_stock_allows(self, db, add_product):
        add_product(1, stock=10)
        carts = CartService(db)
        carts.add_line(GUEST, 1, 3)
        carts.add_line(USER, 1, 4)

        CartMergeResolver(db).merge(USER, GUEST)

        assert _quantities(db, USER) == {1: 7}

    def test_guest_only_line_is_reowned(self, db, add_product):
        add_product(1, stock=10)
        add_product(2, stock=10)
        carts = CartService(db)
        carts.add_line(GUEST, 1, 2)
        carts.add_line(USER, 2, 1)

        CartMergeResolver(db).merge(USER, GUEST)

        assert _quantities(db, USER) == {1: 2, 2: 1}
        assert _quantities(db, GUEST) == {}

    def test_reowned_line_capped_when_stock_dropped(self, db, add_product):
        add_product(1, stock=5)
        CartService(db).add_line(GUEST, 1, 5)
        db.execute(
            text("UPDATE products SET stock_count = 3 WHERE id = 1")
        )
        db.commit()

        CartMergeResolver(db).merge(USER, GUEST)

        assert _quantities(db, USER) == {1: 3}

    def test_line_dropped_when_out_of_stock(self, db, add_product):
        add_product(1, stock=5)
        CartService(db).add_line(GUEST, 1, 2)
        db.execute(
            text("UPDATE products SET stock_count = 0 WHERE id = 1")
        )
        db.commit()

        snap = CartMergeResolver(db).merge(USER, GUEST)

        assert snap["items"] == []
        assert _quantities(db, GUEST) == {}

    def test_merge_is_idempotent(self, db, add_product):
        add_product(1, stock=10)
        CartService(db).add_line(GUEST, 1, 2)
        resolver = CartMergeResolver(db)

        first = resolver.merge(USER, GUEST)
        second = resolver.merge(USER, GUEST)

        assert first == second
        assert _quantities(db, USER) == {1: 2}

    def test_merge_loses_no_quantity_without_caps(self, db, add_product):
        for item_id in (1, 2, 3):
            add_product(item_id, stock=50)
        carts = CartService(db)
        carts.add_line(GUEST, 1, 2)
        carts.add_line(GUEST, 2, 5)
        carts.add_line(USER, 2, 1)
        carts.add_line(USER, 3, 4)
        before = sum(_quantities(db, GUEST).values()) + sum(_quantities(db, USER).values())

        CartMergeResolver(db).merge(USER, GUEST)

        assert sum(_quantities(db, USER).values()) == before

    def test_other_guest_carts_untouched(self, db, add_product):
        add_product(1, stock=10)
        other = AnonymousOwner("someone-else")
        carts = CartService(db)
        carts.add_line(GUEST, 1, 1)
        carts.add_line(other, 1, 3)

        CartMergeResolver(db).merge(USER, GUEST)

        assert _quantities(db, other) == {1: 3}

    def test_rejects_swapped_owner_kinds(self, db):
        with pytest.raises(TypeError):
            CartMergeResolver(db).merge(GUEST, USER)
