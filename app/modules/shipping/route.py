"""
Shipping Method Route

Loads the shipping methods of the current sales channel:
- only active methods, with their media
- onlyAvailable narrows the result to methods whose availability rule matches

With onlyAvailable the collection is filtered after the search; total and
aggregations still describe the unfiltered search.
"""
import logging
from abc import ABC, abstractmethod
from typing import Union

from app.core.exceptions import DecorationPatternError
from app.core.request_utils import RequestParams
from app.dal.criteria import Criteria, EqualsFilter
from app.dal.search_result import EntitySearchResult
from app.modules.shipping.repository import SalesChannelRepository
from app.schemas.shipping_method import ShippingMethodListResponse, search_result_to_response
from app.services.context_service import SalesChannelContext

logger = logging.getLogger(__name__)


class ShippingMethodRouteResponse:
    """Wraps the search result handed back to the HTTP layer."""

    def __init__(self, result: EntitySearchResult):
        self.result = result

    @property
    def shipping_methods(self):
        return self.result.entities

    def to_payload(self) -> ShippingMethodListResponse:
        return search_result_to_response(self.result)


class AbstractShippingMethodRoute(ABC):
    """
    Interface for shipping method routes.

    Decorators subclass this, keep the route they wrap and return it from
    get_decorated().
    """

    @abstractmethod
    def get_decorated(self) -> Union["AbstractShippingMethodRoute", DecorationPatternError]:
        pass

    @abstractmethod
    async def load(
        self,
        request: RequestParams,
        context: SalesChannelContext,
        criteria: Criteria,
    ) -> ShippingMethodRouteResponse:
        pass


class ShippingMethodRoute(AbstractShippingMethodRoute):
    """Base implementation backed by a sales channel repository."""

    def __init__(self, shipping_method_repository: SalesChannelRepository):
        self.shipping_method_repository = shipping_method_repository

    def get_decorated(self) -> DecorationPatternError:
        return DecorationPatternError(self.__class__.__name__)

    async def load(
        self,
        request: RequestParams,
        context: SalesChannelContext,
        criteria: Criteria,
    ) -> ShippingMethodRouteResponse:
        criteria.add_filter(EqualsFilter("active", True)).add_association("media")

        shipping_methods = await self.shipping_method_repository.search(criteria, context)

        if request.get_boolean("onlyAvailable", False):
            collection = shipping_methods.entities
            shipping_methods.assign(entities=collection.filter_by_active_rules(context))
            logger.debug(
                f"onlyAvailable kept {len(shipping_methods.entities)} of {len(collection)} shipping methods"
            )

        return ShippingMethodRouteResponse(shipping_methods)
