"""
Store API Exception Hierarchy

Every exception carries a machine-readable code, an HTTP status and a details
mapping so the error handler can render it without inspecting the type.

Exception Hierarchy:
    StoreApiError
    ├── InvalidCriteriaError
    ├── InvalidRequestBodyError
    ├── SalesChannelNotFoundError
    └── DecorationPatternError
"""
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class StoreApiError(Exception):
    """
    Base exception for all Store API errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        status_code: HTTP status used when the error reaches the client
        details: Additional context, rendered as the error's meta block
    """

    default_code: str = "FRAMEWORK__STORE_API_ERROR"
    default_status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.status_code = status_code or self.default_status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "status": self.status_code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# REQUEST ERRORS
# =============================================================================

class InvalidCriteriaError(StoreApiError):
    """Search criteria could not be built or applied."""
    default_code = "FRAMEWORK__INVALID_CRITERIA"
    default_status_code = 400

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if parameter is not None:
            details["parameter"] = parameter
        super().__init__(message, details=details, **kwargs)


class InvalidRequestBodyError(StoreApiError):
    """Request body is not a JSON object."""
    default_code = "FRAMEWORK__INVALID_REQUEST_BODY"
    default_status_code = 400


# =============================================================================
# CONTEXT ERRORS
# =============================================================================

class SalesChannelNotFoundError(StoreApiError):
    """No active sales channel matches the supplied access key."""
    default_code = "FRAMEWORK__API_INVALID_ACCESS_KEY"
    default_status_code = 401


# =============================================================================
# ROUTE DECORATION
# =============================================================================

class DecorationPatternError(StoreApiError):
    """
    Returned by base route implementations that wrap nothing.

    Routes hand this back from get_decorated() instead of raising it, so
    callers can check for it like any other value.
    """
    default_code = "FRAMEWORK__DECORATION_PATTERN"
    default_status_code = 500

    def __init__(self, class_name: str, **kwargs):
        super().__init__(
            f"The getDecorated() function of core class {class_name} cannot be used. "
            "This class is the base class.",
            details={"class": class_name},
            **kwargs,
        )
        self.class_name = class_name
