# storefront/domain/errors.py


class FulfillmentError(Exception):
    """
    Baza wszystkich bledow biznesowych, routery tlumacza je w jednym miejscu (to_http).
    Zaden nie leci po commicie: kto go zlapie, ma store w stanie sprzed wywolania.
    """


class ValidationError(FulfillmentError):
    pass


class InsufficientStock(FulfillmentError):
    """Da sie naprawic: zmniejszyc ilosc albo usunac pozycje."""

    def __init__(self, item_id: int, available: int):
        self.item_id = item_id
        self.available = available
        super().__init__(f"Insufficient stock for item {item_id} ({available} available)")


class EmptyCart(FulfillmentError):
    def __init__(self):
        super().__init__("Cart is empty")


class InvalidTransition(FulfillmentError):
    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move order from {current} to {requested}")


class NotFoundError(FulfillmentError):
    """Nie istnieje albo nie nalezy do wolajacego."""


class ItemNotFound(NotFoundError):
    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found")


class LineNotFound(NotFoundError):
    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__(f"Item {item_id} is not in the cart")


class OrderNotFound(NotFoundError):
    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class ConcurrentUpdate(FulfillmentError):
    """Inna transakcja zmienila te same wiersze pierwsza, mozna ponowic."""


class StoreUnavailable(FulfillmentError):
    """Store nieosiagalny albo porzucil transakcje. Nic nie zacommitowano, mozna ponowic."""
