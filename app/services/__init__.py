from app.services.context_service import (
    SalesChannelContext,
    SalesChannelContextService,
    ACCESS_KEY_HEADER,
    CONTEXT_TOKEN_HEADER,
)

__all__ = [
    "SalesChannelContext",
    "SalesChannelContextService",
    "ACCESS_KEY_HEADER",
    "CONTEXT_TOKEN_HEADER",
]
