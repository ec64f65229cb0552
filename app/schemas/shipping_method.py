"""
Shipping method schemas

Pydantic models for the shipping method listing. Field names are serialized
camelCase, matching the Store API JSON conventions.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable


class StoreApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MediaView(StoreApiModel):
    id: str
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    url: Optional[str] = None
    alt: Optional[str] = None
    title: Optional[str] = None


class RuleView(StoreApiModel):
    id: str
    name: str
    priority: int


class ShippingMethodView(StoreApiModel):
    id: str
    name: str
    description: Optional[str] = None
    active: bool
    position: int = 1
    tracking_url: Optional[str] = None
    availability_rule_id: Optional[str] = None
    media_id: Optional[str] = None
    media: Optional[MediaView] = None
    availability_rule: Optional[RuleView] = None


class ShippingMethodListResponse(StoreApiModel):
    """Search result envelope: {total, aggregations, elements}."""
    total: int
    aggregations: Dict[str, Any] = Field(default_factory=dict)
    elements: List[ShippingMethodView] = Field(default_factory=list)


def _loaded_relation(entity: Any, name: str) -> Any:
    """Return a relationship only if it was loaded; never trigger a lazy load."""
    try:
        state = inspect(entity)
    except NoInspectionAvailable:
        return getattr(entity, name, None)
    if name in state.unloaded:
        return None
    return getattr(entity, name)


def shipping_method_to_view(method: Any) -> ShippingMethodView:
    media = _loaded_relation(method, "media")
    rule = _loaded_relation(method, "availability_rule")

    return ShippingMethodView(
        id=method.id,
        name=method.name,
        description=method.description,
        active=bool(method.active),
        position=method.position if method.position is not None else 1,
        tracking_url=method.tracking_url,
        availability_rule_id=method.availability_rule_id,
        media_id=method.media_id,
        media=MediaView.model_validate(media) if media is not None else None,
        availability_rule=RuleView.model_validate(rule) if rule is not None else None,
    )


def search_result_to_response(result) -> ShippingMethodListResponse:
    return ShippingMethodListResponse(
        total=result.total,
        aggregations=result.aggregations,
        elements=[shipping_method_to_view(method) for method in result.entities],
    )
