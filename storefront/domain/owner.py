# storefront/domain/owner.py
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class UserOwner:
    """Zalogowane konto."""

    user_id: int

    def __str__(self):
        return f"user:{self.user_id}"


@dataclass(frozen=True)
class AnonymousOwner:
    """Gosc, rozpoznawany tylko po tokenie sesji."""

    token: str

    def __post_init__(self):
        if not self.token or not self.token.strip():
            raise ValueError("Anonymous session token must not be empty")

    def __str__(self):
        return f"session:{self.token}"


Owner = Union[UserOwner, AnonymousOwner]


def owner_columns(owner: Owner) -> dict:
    """Owner -> para kolumn (user_id, session_id), dokladnie jedna nie jest NULL."""
    if isinstance(owner, UserOwner):
        return {"user_id": owner.user_id, "session_id": None}
    if isinstance(owner, AnonymousOwner):
        return {"user_id": None, "session_id": owner.token}
    raise TypeError(f"Unsupported owner type: {type(owner).__name__}")


def owner_from_columns(user_id: int | None, session_id: str | None) -> Owner:
    if user_id is not None:
        return UserOwner(user_id)
    return AnonymousOwner(session_id)
