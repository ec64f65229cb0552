"""
Sales Channel Context Service

Resolves the storefront context a Store API request runs in:
- sales channel from the sw-access-key header
- context token from sw-context-token (generated when absent)
- ids of the rules that currently match

Rule conditions are evaluated elsewhere; every rule not flagged invalid is
treated as matching.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import SalesChannelNotFoundError
from app.core.utils import random_token
from app.models.rule import Rule
from app.models.sales_channel import SalesChannel

logger = logging.getLogger(__name__)

ACCESS_KEY_HEADER = "sw-access-key"
CONTEXT_TOKEN_HEADER = "sw-context-token"


@dataclass(frozen=True)
class SalesChannelContext:
    """Read-only storefront context of one request."""
    token: str
    sales_channel_id: str
    currency_id: str
    language_id: str
    customer_id: Optional[str] = None
    rule_ids: Tuple[str, ...] = ()

    def has_rule(self, rule_id: Optional[str]) -> bool:
        return rule_id is not None and rule_id in self.rule_ids


class SalesChannelContextService:
    """Build SalesChannelContext objects from the database."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, access_key: Optional[str], token: Optional[str] = None) -> SalesChannelContext:
        """
        Resolve the context for an access key.

        Raises:
            SalesChannelNotFoundError: key missing or no active sales channel uses it
        """
        if not access_key:
            raise SalesChannelNotFoundError(f"Header {ACCESS_KEY_HEADER} is required")

        sales_channel = await self._get_sales_channel(access_key)
        if sales_channel is None:
            logger.info("Rejected request with unknown sales channel access key")
            raise SalesChannelNotFoundError("No active sales channel found for the supplied access key")

        rule_ids = await self._load_rule_ids()

        return SalesChannelContext(
            token=token or random_token(),
            sales_channel_id=sales_channel.id,
            currency_id=sales_channel.currency_id,
            language_id=sales_channel.language_id,
            rule_ids=rule_ids,
        )

    async def _get_sales_channel(self, access_key: str) -> Optional[SalesChannel]:
        result = await self.db.execute(
            select(SalesChannel).where(
                SalesChannel.access_key == access_key,
                SalesChannel.active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def _load_rule_ids(self) -> Tuple[str, ...]:
        result = await self.db.execute(
            select(Rule.id)
            .where(Rule.invalid.is_(False))
            .order_by(Rule.priority.desc(), Rule.id)
        )
        return tuple(result.scalars().all())
