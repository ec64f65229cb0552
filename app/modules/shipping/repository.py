"""
Shipping Method Repository

Sales-channel scoped search over shipping methods:
1. Scope to methods assigned to the context's sales channel
2. Apply ids and filters
3. Aggregate over the filtered set
4. Apply post-filters, sorting and paging
5. Eager-load requested associations and compute the total
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.dal.criteria import Criteria, FieldSorting, TotalCountMode
from app.dal.query import CriteriaQueryBuilder
from app.dal.search_result import EntitySearchResult
from app.models.sales_channel import SalesChannel
from app.models.shipping_method import ShippingMethod
from app.modules.shipping.collection import ShippingMethodCollection
from app.services.context_service import SalesChannelContext

logger = logging.getLogger(__name__)

ENTITY_NAME = "shipping_method"

# Rows fetched beyond the current page in NEXT_PAGES mode
NEXT_PAGES_WINDOW = 5

DEFAULT_SORTINGS = [
    FieldSorting("position", FieldSorting.ASCENDING),
    FieldSorting("name", FieldSorting.ASCENDING),
]


class SalesChannelRepository(ABC):
    """Search interface for entities scoped to a sales channel."""

    @abstractmethod
    async def search(self, criteria: Criteria, context: SalesChannelContext) -> EntitySearchResult:
        pass


class ShippingMethodRepository(SalesChannelRepository):
    """SQLAlchemy-backed shipping method search."""

    query_builder = CriteriaQueryBuilder(
        ENTITY_NAME,
        fields={
            "id": ShippingMethod.id,
            "name": ShippingMethod.name,
            "description": ShippingMethod.description,
            "active": ShippingMethod.active,
            "position": ShippingMethod.position,
            "tracking_url": ShippingMethod.tracking_url,
            "availability_rule_id": ShippingMethod.availability_rule_id,
            "media_id": ShippingMethod.media_id,
            "created_at": ShippingMethod.created_at,
            "updated_at": ShippingMethod.updated_at,
        },
        associations={
            "media": ShippingMethod.media,
            "availability_rule": ShippingMethod.availability_rule,
        },
    )

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(self, criteria: Criteria, context: SalesChannelContext) -> EntitySearchResult:
        builder = self.query_builder

        where = self._scope(context)
        if criteria.ids:
            where.append(ShippingMethod.id.in_(criteria.ids))
        where.extend(builder.conditions(criteria.filters))

        aggregations = await builder.aggregate(self.db, criteria.aggregations, ShippingMethod, where)

        where.extend(builder.conditions(criteria.post_filters))

        stmt = (
            select(ShippingMethod)
            .where(*where)
            .order_by(*builder.order_by(criteria.sortings or DEFAULT_SORTINGS))
            # id last keeps offset paging stable on non-unique sort fields
            .order_by(ShippingMethod.id)
            .options(*builder.load_options(criteria))
        )

        offset = criteria.offset or 0
        if offset:
            stmt = stmt.offset(offset)
        if criteria.limit is not None:
            fetch = criteria.limit
            if criteria.total_count_mode == TotalCountMode.NEXT_PAGES:
                fetch = criteria.limit * NEXT_PAGES_WINDOW + 1
            stmt = stmt.limit(fetch)

        rows = list((await self.db.execute(stmt)).scalars().unique().all())

        if criteria.total_count_mode == TotalCountMode.EXACT:
            total = await self._count(where)
        elif criteria.total_count_mode == TotalCountMode.NEXT_PAGES:
            total = offset + len(rows)
        else:
            total = len(rows)

        if criteria.limit is not None:
            rows = rows[: criteria.limit]

        logger.debug(
            f"Shipping method search for sales channel {context.sales_channel_id}: "
            f"{len(rows)} rows, total={total}"
        )

        return EntitySearchResult(
            entity=ENTITY_NAME,
            total=total,
            entities=ShippingMethodCollection(rows),
            aggregations=aggregations,
            criteria=criteria,
            context=context,
        )

    def _scope(self, context: SalesChannelContext) -> List[Any]:
        return [ShippingMethod.sales_channels.any(SalesChannel.id == context.sales_channel_id)]

    async def _count(self, where: List[Any]) -> int:
        stmt = select(func.count(ShippingMethod.id)).where(*where)
        return (await self.db.execute(stmt)).scalar_one()
