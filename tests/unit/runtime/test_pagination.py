"""Unit tests for page planning and the pagination aggregator."""

from __future__ import annotations

import math

import pytest
import pytest_asyncio

from float_mcp.core import NotFoundError, ResponseFormat, UpstreamError, ValidationError
from float_mcp.runtime import (
    AdmissionQueue,
    PagePolicy,
    PaginationAggregator,
    RequestExecutor,
)


def _people(count: int) -> list[dict]:
    return [{"people_id": i, "name": f"Person {i}"} for i in range(1, count + 1)]


@pytest_asyncio.fixture
async def executor(backend):
    admission = AdmissionQueue(60_000, 1000)
    yield RequestExecutor(backend, admission, api_key="k")
    await admission.shutdown()


class TestPagePlan:
    def test_defaults(self, executor):
        plan = PaginationAggregator(executor).plan({})
        assert (plan.start_page, plan.per_page, plan.single_page) == (1, 50, False)

    def test_per_page_is_clamped_to_max(self, executor):
        plan = PaginationAggregator(executor).plan({"per-page": 1000})
        assert plan.per_page == 200

    def test_page_and_per_page_pin_a_single_page(self, executor):
        plan = PaginationAggregator(executor).plan({"page": "3", "per-page": 10})
        assert (plan.start_page, plan.per_page, plan.single_page) == (3, 10, True)

    @pytest.mark.parametrize("value", [0, -1, "abc", True, 1.5])
    def test_invalid_page_raises_validation_error(self, executor, value):
        with pytest.raises(ValidationError):
            PaginationAggregator(executor).plan({"page": value})

    def test_policy_rejects_default_above_max(self):
        with pytest.raises(ValueError):
            PagePolicy(default_page_size=300, max_page_size=200)


class TestPaginationAggregator:
    """Test PaginationAggregator page driving."""

    @pytest.mark.parametrize(("total", "per_page"), [(120, 50), (7, 3), (1, 50), (49, 50)])
    @pytest.mark.asyncio
    async def test_fetches_all_items_in_order(self, executor, backend, total, per_page):
        backend.seed("people", _people(total))
        aggregator = PaginationAggregator(executor, PagePolicy(default_page_size=per_page))

        result = await aggregator.execute("/people")

        assert result.items == _people(total)
        assert result.pages_fetched == math.ceil(total / per_page)
        assert len(backend.calls) == math.ceil(total / per_page)

    @pytest.mark.asyncio
    async def test_full_last_page_needs_one_empty_page(self, executor, backend):
        backend.seed("people", _people(100))
        aggregator = PaginationAggregator(executor)

        result = await aggregator.execute("/people")

        assert result.total_items == 100
        assert [c["params"]["page"] for c in backend.calls] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_empty_collection_is_one_call(self, executor, backend):
        result = await PaginationAggregator(executor).execute("/people")

        assert result.items == []
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_explicit_page_and_per_page_make_exactly_one_call(self, executor, backend):
        backend.seed("people", _people(500))

        items = await PaginationAggregator(executor).fetch_all(
            "/people", {"page": 2, "per-page": 10}
        )

        assert items == _people(20)[10:]
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_filters_are_forwarded_on_every_page(self, executor, backend):
        backend.seed("people", _people(5))
        aggregator = PaginationAggregator(executor, PagePolicy(default_page_size=2))

        await aggregator.execute("/people", {"active": 1, "department_id": 4})

        assert len(backend.calls) == 3
        for call in backend.calls:
            assert call["params"]["active"] == "1"
            assert call["params"]["department_id"] == "4"
            assert call["params"]["per-page"] == "2"

    @pytest.mark.asyncio
    async def test_page_cap_without_terminal_page_is_upstream_error(self, executor, backend):
        backend.seed("people", _people(10))
        aggregator = PaginationAggregator(
            executor, PagePolicy(default_page_size=2, max_pages=3)
        )

        with pytest.raises(UpstreamError):
            await aggregator.execute("/people")
        assert len(backend.calls) == 3

    @pytest.mark.asyncio
    async def test_page_error_propagates(self, executor, backend):
        backend.respond("GET", "/people", 404, {"message": "Not found"})

        with pytest.raises(NotFoundError):
            await PaginationAggregator(executor).execute("/people")


class TestXMLPages:
    """Test page driving when the remote answers in XML."""

    @pytest.mark.asyncio
    async def test_collection_of_exactly_per_page_ends_on_empty_page(self, executor, backend):
        backend.seed("people", _people(2))
        aggregator = PaginationAggregator(executor, PagePolicy(default_page_size=2))

        result = await aggregator.execute("/people", response_format=ResponseFormat.XML)

        assert result.items == [
            {"people_id": "1", "name": "Person 1"},
            {"people_id": "2", "name": "Person 2"},
        ]
        assert result.pages_fetched == 2

    @pytest.mark.asyncio
    async def test_empty_collection(self, executor, backend):
        result = await PaginationAggregator(executor).execute(
            "/people", response_format=ResponseFormat.XML
        )

        assert result.items == []
        assert backend.calls[0]["headers"]["Accept"] == "application/xml"

    @pytest.mark.asyncio
    async def test_single_record_page_is_a_list(self, executor, backend):
        backend.seed("people", _people(1))

        items = await PaginationAggregator(executor).fetch_all(
            "/people", response_format=ResponseFormat.XML
        )

        assert items == [{"people_id": "1", "name": "Person 1"}]

    @pytest.mark.asyncio
    async def test_routed_list_with_model_adapter(self, api, backend):
        backend.seed("people", _people(2))

        result = await api.route("people", "list", {"per-page": 2}, response_format="xml")

        assert [p["name"] for p in result] == ["Person 1", "Person 2"]
        assert [c["params"]["page"] for c in backend.calls] == ["1", "2"]
