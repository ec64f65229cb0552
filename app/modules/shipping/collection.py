"""
Shipping method collection
"""
from app.dal.search_result import EntityCollection
from app.models.shipping_method import ShippingMethod
from app.services.context_service import SalesChannelContext


class ShippingMethodCollection(EntityCollection[ShippingMethod]):
    """Ordered shipping methods returned by a search."""

    def filter_by_active_rules(self, context: SalesChannelContext) -> "ShippingMethodCollection":
        """
        Keep the methods whose availability rule matches the context.

        Methods without an availability rule are always kept. Order is
        preserved and self is left untouched.
        """
        return self.filter(
            lambda method: method.availability_rule_id is None
            or context.has_rule(method.availability_rule_id)
        )
