# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime

from storefront.domain.order_status import OrderStatus


class CartLineIn(BaseModel):
    """Dodanie pozycji do koszyka (ilosc sumowana z istniejaca)."""

    item_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(1, gt=0, description="Ilosc (musi byc > 0)")


class CartLineQuantityIn(BaseModel):
    """Ustawienie ilosci pozycji; 0 usuwa pozycje."""

    quantity: int = Field(..., ge=0, description="Nowa ilosc (0 usuwa pozycje)")


class MergeIn(BaseModel):
    session_id: str = Field(..., min_length=1, max_length=128, description="Token sesji goscia")


class CartLineStateOut(BaseModel):
    item_id: int
    quantity: int
    removed: bool = False


class CartLineOut(BaseModel):
    item_id: int
    name: str
    quantity: int
    price: Decimal
    subtotal: Decimal
    stock_count: int


class CartOut(BaseModel):
    """Koszyk: total liczony z aktualnych cen, tylko informacyjnie."""

    owner: str
    items: List[CartLineOut]
    total: Decimal
    item_count: int


class CheckoutIn(BaseModel):
    shipping_address: str = Field("", max_length=500)
    payment_intent_id: str | None = Field(None, max_length=255)


class StatusIn(BaseModel):
    status: OrderStatus


class OrderLineItemOut(BaseModel):
    item_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderOut(BaseModel):
    id: int
    owner: str
    status: OrderStatus
    total_amount: Decimal
    shipping_address: str
    payment_intent_id: str | None = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderLineItemOut]

    model_config = ConfigDict(from_attributes=True)


class PaginationOut(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class OrderPageOut(BaseModel):
    orders: List[OrderOut]
    pagination: PaginationOut


class HealthOut(BaseModel):
    status: str
    store: bool
