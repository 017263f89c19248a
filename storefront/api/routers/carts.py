#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api import get_owner, get_user_owner, to_http
from storefront.data.database import get_db
from storefront.domain.errors import FulfillmentError
from storefront.domain.owner import AnonymousOwner, Owner, UserOwner
from storefront.domain.schemas import (
    CartLineIn,
    CartLineQuantityIn,
    CartLineStateOut,
    CartOut,
    MergeIn,
)
from storefront.services.cart_merge import CartMergeResolver
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("/", response_model=CartOut)
def get_cart(owner: Owner = Depends(get_owner), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.snapshot(owner)
    except FulfillmentError as e:
        raise to_http(e)


@router.post("/items", response_model=CartLineStateOut, status_code=201)
def add_item(
    payload: CartLineIn,
    owner: Owner = Depends(get_owner),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_line(owner, payload.item_id, payload.quantity)
    except FulfillmentError as e:
        raise to_http(e)


@router.put("/items/{item_id}", response_model=CartLineStateOut)
def set_item_quantity(
    item_id: int,
    payload: CartLineQuantityIn,
    owner: Owner = Depends(get_owner),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.set_line_quantity(owner, item_id, payload.quantity)
    except FulfillmentError as e:
        raise to_http(e)


@router.delete("/items/{item_id}", status_code=204)
def remove_item(
    item_id: int,
    owner: Owner = Depends(get_owner),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.remove_line(owner, item_id)
    except FulfillmentError as e:
        raise to_http(e)


@router.delete("/", status_code=204)
def clear_cart(owner: Owner = Depends(get_owner), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.clear(owner)
    except FulfillmentError as e:
        raise to_http(e)


@router.post("/merge", response_model=CartOut)
def merge_cart(
    payload: MergeIn,
    user: UserOwner = Depends(get_user_owner),
    db: Session = Depends(get_db),
):
    """
    Przenosi koszyk goscia do koszyka zalogowanego usera (wolane po logowaniu).
    """
    try:
        anonymous = AnonymousOwner(payload.session_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        return CartMergeResolver(db).merge(user, anonymous)
    except FulfillmentError as e:
        raise to_http(e)
