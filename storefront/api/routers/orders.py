# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api import get_owner, to_http
from storefront.data.database import get_db
from storefront.domain.errors import FulfillmentError
from storefront.domain.order_status import OrderStatus
from storefront.domain.owner import Owner
from storefront.domain.schemas import CheckoutIn, OrderOut, OrderPageOut, StatusIn
from storefront.services.checkout_service import CheckoutService
from storefront.services.notification_service import NotificationService
from storefront.services.order_lifecycle import OrderLifecycle
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_notification_service() -> NotificationService:
    return NotificationService()


@router.post("/checkout", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    owner: Owner = Depends(get_owner),
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    """
    Tworzy zamowienie z koszyka (rezerwacja + zamowienie + czyszczenie koszyka atomowo).
    Powiadomienie wysylane asynchronicznie po commicie.
    """
    svc = CheckoutService(db, notifications)
    try:
        return svc.checkout(owner, payload.shipping_address, payload.payment_intent_id)
    except FulfillmentError as e:
        raise to_http(e)


@router.get("/", response_model=OrderPageOut)
def list_orders(
    status: OrderStatus | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    owner: Owner = Depends(get_owner),
    db: Session = Depends(get_db),
):
    try:
        return OrderService(db).list_orders(owner, status=status, page=page, limit=limit)
    except FulfillmentError as e:
        raise to_http(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    owner: Owner = Depends(get_owner),
    db: Session = Depends(get_db),
):
    try:
        return OrderService(db).get_order(order_id, owner=owner)
    except FulfillmentError as e:
        raise to_http(e)


@router.put("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    owner: Owner = Depends(get_owner),
    db: Session = Depends(get_db),
):
    """
    Anulowanie przez klienta, tylko zamowienia pending. Towar wraca na magazyn.
    """
    try:
        return OrderLifecycle(db).cancel(order_id, owner)
    except FulfillmentError as e:
        raise to_http(e)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: StatusIn,
    db: Session = Depends(get_db),
):
    """
    Zmiana statusu (panel admina; autoryzacja jest poza tym serwisem).
    """
    try:
        return OrderLifecycle(db).transition(order_id, payload.status)
    except FulfillmentError as e:
        raise to_http(e)
