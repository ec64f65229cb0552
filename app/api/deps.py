"""
API dependencies

Store API routes receive their collaborators through these factories, so
tests can swap them with app.dependency_overrides.
"""
from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.request_utils import extract_header
from app.dal.criteria_builder import RequestCriteriaBuilder
from app.modules.shipping.repository import ShippingMethodRepository
from app.modules.shipping.route import AbstractShippingMethodRoute, ShippingMethodRoute
from app.services.context_service import (
    ACCESS_KEY_HEADER,
    CONTEXT_TOKEN_HEADER,
    SalesChannelContext,
    SalesChannelContextService,
)


async def get_sales_channel_context(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> SalesChannelContext:
    """Resolve the sales channel context and echo its token to the client."""
    service = SalesChannelContextService(db)
    context = await service.get(
        access_key=extract_header(request, ACCESS_KEY_HEADER),
        token=extract_header(request, CONTEXT_TOKEN_HEADER),
    )
    response.headers[CONTEXT_TOKEN_HEADER] = context.token
    return context


def get_criteria_builder() -> RequestCriteriaBuilder:
    return RequestCriteriaBuilder(max_limit=settings.STORE_API_MAX_LIMIT)


async def get_shipping_method_route(
    db: AsyncSession = Depends(get_db),
) -> AbstractShippingMethodRoute:
    """Shipping method route wired to the database-backed repository."""
    return ShippingMethodRoute(ShippingMethodRepository(db))
