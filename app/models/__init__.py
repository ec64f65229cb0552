from app.models.media import Media
from app.models.rule import Rule
from app.models.sales_channel import SalesChannel, sales_channel_shipping_method
from app.models.shipping_method import ShippingMethod

__all__ = [
    "Media",
    "Rule",
    "SalesChannel",
    "sales_channel_shipping_method",
    "ShippingMethod",
]
