"""
Store API: shipping methods

GET|POST /store-api/v{version}/shipping-method

Parameters (query or JSON body):
- onlyAvailable: only methods whose availability rule matches the context
- criteria parameters: ids, limit, page, filter, post-filter, sort,
  associations, aggregations, total-count-mode
"""
import logging

from fastapi import APIRouter, Depends, Request

from app.api.deps import get_criteria_builder, get_sales_channel_context, get_shipping_method_route
from app.core.request_utils import read_request_params
from app.dal.criteria_builder import RequestCriteriaBuilder
from app.modules.shipping.route import AbstractShippingMethodRoute
from app.schemas.shipping_method import ShippingMethodListResponse
from app.services.context_service import SalesChannelContext

logger = logging.getLogger(__name__)

ROUTE_PATH = "/store-api/v{version}/shipping-method"
ROUTE_NAME = "store-api.shipping.method"


async def load_shipping_methods(
    request: Request,
    version: int,
    context: SalesChannelContext = Depends(get_sales_channel_context),
    route: AbstractShippingMethodRoute = Depends(get_shipping_method_route),
    criteria_builder: RequestCriteriaBuilder = Depends(get_criteria_builder),
) -> ShippingMethodListResponse:
    """Loads all available shipping methods."""
    params = await read_request_params(request)
    criteria = criteria_builder.handle_request(params.all())

    response = await route.load(params, context, criteria)
    return response.to_payload()


def build_router() -> APIRouter:
    router = APIRouter(tags=["Store API", "Shipping Method"])
    router.add_api_route(
        ROUTE_PATH,
        load_shipping_methods,
        methods=["GET", "POST"],
        name=ROUTE_NAME,
        response_model=ShippingMethodListResponse,
        summary="Loads all available shipping methods",
        operation_id="readShippingMethod",
    )
    return router
