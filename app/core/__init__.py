from app.core.config import settings
from app.core.database import get_db, Base
from app.core.exceptions import (
    StoreApiError,
    InvalidCriteriaError,
    InvalidRequestBodyError,
    SalesChannelNotFoundError,
    DecorationPatternError,
)
