"""
Request utility functions

Store API routes accept their parameters either in the query string or in a
JSON body. RequestParams keeps both and looks the query up first.
"""
import json
import logging
from typing import Any, Dict, Mapping, Optional

from fastapi import Request

from app.core.exceptions import InvalidRequestBodyError

logger = logging.getLogger(__name__)

TRUTHY_STRINGS = frozenset({"1", "true", "on", "yes"})

_MISSING = object()


def parse_boolean(value: Any, default: bool = False) -> bool:
    """
    Permissive boolean coercion for request values.

    True, 1 and the strings "1", "true", "on", "yes" (any case) are true.
    None resolves to the default; every other value is false.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return False


class RequestParams:
    """Query and body parameters of a single request."""

    def __init__(
        self,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
    ):
        self.query: Dict[str, Any] = dict(query or {})
        self.body: Dict[str, Any] = dict(body or {})

    def get(self, key: str, default: Any = None) -> Any:
        value = self.query.get(key, _MISSING)
        if value is _MISSING:
            value = self.body.get(key, default)
        return value

    def get_boolean(self, key: str, default: bool = False) -> bool:
        return parse_boolean(self.get(key), default)

    def all(self) -> Dict[str, Any]:
        """Body values overlaid with query values."""
        merged = dict(self.body)
        merged.update(self.query)
        return merged

    def __contains__(self, key: str) -> bool:
        return key in self.query or key in self.body

    def __repr__(self) -> str:
        return f"RequestParams(query={self.query!r}, body={self.body!r})"


async def read_request_params(request: Request) -> RequestParams:
    """
    Collect query and JSON body parameters from a request.

    Query values that look like JSON arrays or objects are decoded so that
    structured criteria can be passed on GET requests.
    """
    query: Dict[str, Any] = {}
    for key, value in request.query_params.items():
        query[key] = _decode_query_value(value)

    body: Dict[str, Any] = {}
    raw = await request.body()
    if raw and raw.strip():
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidRequestBodyError(f"Request body is not valid JSON: {e.msg}")
        if not isinstance(decoded, dict):
            raise InvalidRequestBodyError("Request body must be a JSON object")
        body = decoded

    return RequestParams(query=query, body=body)


def _decode_query_value(value: str) -> Any:
    stripped = value.strip()
    if stripped[:1] in ("[", "{"):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            logger.debug(f"Query value is not JSON, keeping raw string: {value[:50]}")
    return value


def extract_header(request: Request, name: str) -> Optional[str]:
    """Return a stripped header value, or None when missing or blank."""
    value = request.headers.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()
