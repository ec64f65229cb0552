"""
Tests for the shipping method route and collection.
"""
import pytest

from app.core.exceptions import DecorationPatternError
from app.core.request_utils import RequestParams
from app.dal.criteria import Criteria, EqualsFilter
from app.modules.shipping.collection import ShippingMethodCollection
from app.modules.shipping.route import (
    AbstractShippingMethodRoute,
    ShippingMethodRoute,
    ShippingMethodRouteResponse,
)

from tests.conftest import (
    FailingShippingMethodRepository,
    FakeShippingMethodRepository,
    make_shipping_method,
)


class TestShippingMethodCollection:

    def test_filter_by_active_rules_keeps_matching_and_unruled(self, sample_methods, sales_channel_context):
        collection = ShippingMethodCollection(sample_methods)

        filtered = collection.filter_by_active_rules(sales_channel_context)

        assert isinstance(filtered, ShippingMethodCollection)
        assert [m.name for m in filtered] == ["Standard", "Pickup"]

    def test_filter_by_active_rules_leaves_original_untouched(self, sample_methods, sales_channel_context):
        collection = ShippingMethodCollection(sample_methods)

        collection.filter_by_active_rules(sales_channel_context)

        assert len(collection) == 5

    def test_filter_with_no_matching_rules(self, sample_methods, sales_channel_context):
        from dataclasses import replace

        context = replace(sales_channel_context, rule_ids=())
        filtered = ShippingMethodCollection(sample_methods).filter_by_active_rules(context)

        assert [m.name for m in filtered] == ["Pickup"]


class TestShippingMethodRoute:

    @pytest.mark.asyncio
    async def test_load_adds_active_filter_and_media_association(self, sample_methods, sales_channel_context):
        repository = FakeShippingMethodRepository(sample_methods)
        route = ShippingMethodRoute(repository)
        criteria = Criteria()

        await route.load(RequestParams(), sales_channel_context, criteria)

        searched_criteria, searched_context = repository.calls[0]
        assert searched_criteria is criteria
        assert searched_context is sales_channel_context
        assert EqualsFilter("active", True) in criteria.filters
        assert "media" in criteria.associations

    @pytest.mark.asyncio
    async def test_load_keeps_prior_filters_and_associations(self, sample_methods, sales_channel_context):
        repository = FakeShippingMethodRepository(sample_methods)
        criteria = Criteria().add_filter(EqualsFilter("active", False)).add_association("availability_rule")

        await ShippingMethodRoute(repository).load(RequestParams(), sales_channel_context, criteria)

        assert criteria.filters[0] == EqualsFilter("active", False)
        assert criteria.filters[-1] == EqualsFilter("active", True)
        assert "availability_rule" in criteria.associations
        assert "media" in criteria.associations

    @pytest.mark.asyncio
    async def test_without_only_available_returns_repository_collection(self, sample_methods, sales_channel_context):
        repository = FakeShippingMethodRepository(sample_methods)

        response = await ShippingMethodRoute(repository).load(RequestParams(), sales_channel_context, Criteria())

        assert isinstance(response, ShippingMethodRouteResponse)
        assert list(response.shipping_methods) == sample_methods
        assert response.result.total == 5

    @pytest.mark.asyncio
    async def test_only_available_false_does_not_filter(self, sample_methods, sales_channel_context):
        repository = FakeShippingMethodRepository(sample_methods)
        params = RequestParams(query={"onlyAvailable": "false"})

        response = await ShippingMethodRoute(repository).load(params, sales_channel_context, Criteria())

        assert len(response.shipping_methods) == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["1", "true", 1, True])
    async def test_only_available_filters_but_keeps_total(self, value, sample_methods, sales_channel_context):
        aggregations = {"count": {"count": 5}}
        repository = FakeShippingMethodRepository(sample_methods, aggregations=aggregations)
        params = RequestParams(query={"onlyAvailable": value})

        response = await ShippingMethodRoute(repository).load(params, sales_channel_context, Criteria())

        assert [m.name for m in response.shipping_methods] == ["Standard", "Pickup"]
        assert response.result.total == 5
        assert response.result.aggregations == aggregations

    @pytest.mark.asyncio
    async def test_repository_failure_propagates(self, sales_channel_context):
        route = ShippingMethodRoute(FailingShippingMethodRepository())

        with pytest.raises(ConnectionError):
            await route.load(RequestParams(), sales_channel_context, Criteria())

    @pytest.mark.asyncio
    async def test_response_payload(self, sales_channel_context):
        from app.models import Media

        media = Media(id="e" * 32, file_name="logo", mime_type="image/png", url="https://cdn.example.com/logo.png")
        methods = [make_shipping_method("1" * 32, "Standard", media=media)]
        repository = FakeShippingMethodRepository(methods, total=7)

        response = await ShippingMethodRoute(repository).load(RequestParams(), sales_channel_context, Criteria())
        payload = response.to_payload().model_dump(by_alias=True)

        assert payload["total"] == 7
        assert payload["aggregations"] == {}
        element = payload["elements"][0]
        assert element["name"] == "Standard"
        assert element["mediaId"] == "e" * 32
        assert element["media"]["fileName"] == "logo"
        assert element["availabilityRule"] is None


class TestRouteDecoration:

    def test_base_route_returns_decoration_error(self):
        route = ShippingMethodRoute(FakeShippingMethodRepository([]))

        decorated = route.get_decorated()

        assert isinstance(decorated, DecorationPatternError)
        assert decorated.code == "FRAMEWORK__DECORATION_PATTERN"
        assert decorated.class_name == "ShippingMethodRoute"

    @pytest.mark.asyncio
    async def test_decorator_wraps_base_route(self, sample_methods, sales_channel_context):
        class OnlyFirstShippingMethodRoute(AbstractShippingMethodRoute):
            def __init__(self, decorated):
                self.decorated = decorated

            def get_decorated(self):
                return self.decorated

            async def load(self, request, context, criteria):
                response = await self.decorated.load(request, context, criteria)
                response.result.assign(entities=ShippingMethodCollection(list(response.shipping_methods)[:1]))
                return response

        base = ShippingMethodRoute(FakeShippingMethodRepository(sample_methods))
        route = OnlyFirstShippingMethodRoute(base)

        response = await route.load(RequestParams(), sales_channel_context, Criteria())

        assert route.get_decorated() is base
        assert isinstance(base.get_decorated(), DecorationPatternError)
        assert len(response.shipping_methods) == 1
