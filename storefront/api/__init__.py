# storefront/api/__init__.py
from fastapi import Cookie, Header, HTTPException

from storefront.domain.errors import (
    ConcurrentUpdate,
    EmptyCart,
    FulfillmentError,
    InsufficientStock,
    InvalidTransition,
    NotFoundError,
    StoreUnavailable,
    ValidationError,
)
from storefront.domain.owner import AnonymousOwner, Owner, UserOwner


def get_owner(
    x_user_id: int | None = Header(None, gt=0),
    x_session_id: str | None = Header(None, max_length=128),
    session_id: str | None = Cookie(None, max_length=128),
) -> Owner:
    """Uwierzytelniony user ma pierwszenstwo, inaczej sesja goscia (naglowek albo cookie)."""
    if x_user_id is not None:
        return UserOwner(x_user_id)

    token = x_session_id or session_id
    if token and token.strip():
        return AnonymousOwner(token.strip())

    raise HTTPException(status_code=400, detail="User or session identifier required")


def get_user_owner(x_user_id: int | None = Header(None, gt=0)) -> UserOwner:
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return UserOwner(x_user_id)


def to_http(e: FulfillmentError) -> HTTPException:
    if isinstance(e, InsufficientStock):
        return HTTPException(
            status_code=409,
            detail={"error": str(e), "item_id": e.item_id, "available": e.available},
        )
    if isinstance(e, InvalidTransition):
        return HTTPException(
            status_code=409,
            detail={"error": str(e), "from": e.current, "to": e.requested},
        )
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ConcurrentUpdate):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, StoreUnavailable):
        return HTTPException(status_code=503, detail="Store unavailable, try again", headers={"Retry-After": "1"})
    if isinstance(e, (EmptyCart, ValidationError)):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))
