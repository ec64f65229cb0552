"""
Shipping Module

- ShippingMethodRoute: Store API listing of a sales channel's shipping methods
- ShippingMethodRepository: sales-channel scoped search
- ShippingMethodCollection: availability rule filtering
"""
from app.modules.shipping.collection import ShippingMethodCollection
from app.modules.shipping.repository import SalesChannelRepository, ShippingMethodRepository
from app.modules.shipping.route import (
    AbstractShippingMethodRoute,
    ShippingMethodRoute,
    ShippingMethodRouteResponse,
)

__all__ = [
    "ShippingMethodCollection",
    "SalesChannelRepository",
    "ShippingMethodRepository",
    "AbstractShippingMethodRoute",
    "ShippingMethodRoute",
    "ShippingMethodRouteResponse",
]
