#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.product import ProductModel
from storefront.data.models.cart_line import CartLineModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_line_item import OrderLineItemModel
from storefront.data.models.analytics_event import AnalyticsEventModel

__all__ = [
    "ProductModel",
    "CartLineModel",
    "OrderModel",
    "OrderLineItemModel",
    "AnalyticsEventModel",
]
