"""Unit tests for RequestExecutor."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
import pytest_asyncio
from pydantic import BaseModel

from float_mcp.core import (
    AuthError,
    HttpMethod,
    NotFoundError,
    RateLimitError,
    ResponseFormat,
    UpstreamError,
    ValidationError,
)
from float_mcp.models import Person, Project
from float_mcp.runtime import AdmissionQueue
from float_mcp.runtime.rest import (
    HTTPResponse,
    ModelAdapter,
    RequestDescriptor,
    RequestExecutor,
)


@pytest_asyncio.fixture
async def admission():
    queue = AdmissionQueue(60_000, 100)
    yield queue
    await queue.shutdown()


@pytest.fixture
def executor(backend, admission):
    return RequestExecutor(backend, admission, api_key="secret", user_agent="float-mcp-tests")


class TestRequestExecutor:
    """Test RequestExecutor request building and response mapping."""

    @pytest.mark.asyncio
    async def test_get_sends_bearer_and_accept(self, executor, backend, admission):
        backend.seed("people", [{"people_id": 1, "name": "Ada"}])

        result = await executor.get("/people/1")

        assert result == {"people_id": 1, "name": "Ada"}
        call = backend.calls[0]
        assert call["headers"]["Authorization"] == "Bearer secret"
        assert call["headers"]["Accept"] == "application/json"
        assert call["headers"]["User-Agent"] == "float-mcp-tests"
        assert "Content-Type" not in call["headers"]
        assert admission.in_flight == 1

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self, executor, backend, admission):
        created = await executor.post("/clients", {"name": "Acme"})

        assert created["name"] == "Acme"
        call = backend.calls[0]
        assert call["method"] == "POST"
        assert call["body"] == {"name": "Acme"}
        assert call["headers"]["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_xml_format_sets_accept_and_decodes(self, admission):
        http = MagicMock()
        http.request = AsyncMock(
            return_value=HTTPResponse(
                200, "<clients><client><client_id>4</client_id></client></clients>"
            )
        )
        executor = RequestExecutor(http, admission, api_key="k")

        result = await executor.get("/clients", response_format=ResponseFormat.XML, many=True)

        assert result == [{"client_id": "4"}]
        assert http.request.call_args.kwargs["headers"]["Accept"] == "application/xml"

    @pytest.mark.asyncio
    async def test_xml_single_record_follows_adapter_shape(self, admission):
        http = MagicMock()
        http.request = AsyncMock(
            return_value=HTTPResponse(
                200, "<project><client><client_id>1</client_id></client></project>"
            )
        )
        executor = RequestExecutor(http, admission, api_key="k")

        result = await executor.get(
            "/projects/5", response_format=ResponseFormat.XML, adapter=ModelAdapter(Project)
        )

        assert result == {"client": {"client_id": "1"}}

    @pytest.mark.asyncio
    async def test_admission_happens_before_request(self):
        order: list[str] = []
        admission = MagicMock()
        admission.admit = AsyncMock(side_effect=lambda: order.append("admit"))
        http = MagicMock()

        async def request(*args, **kwargs):
            order.append("request")
            return HTTPResponse(200, "[]")

        http.request = request
        executor = RequestExecutor(http, admission, api_key="k")

        await executor.get("/people")

        assert order == ["admit", "request"]

    @pytest.mark.parametrize(
        ("status", "error_class"),
        [(401, AuthError), (403, AuthError), (404, NotFoundError), (500, UpstreamError)],
    )
    @pytest.mark.asyncio
    async def test_non_2xx_maps_to_error_class(
        self, executor, backend, admission, status, error_class
    ):
        backend.respond("GET", "/projects/7", status, {"message": "nope"})

        with pytest.raises(error_class) as exc_info:
            await executor.get("/projects/7")

        assert exc_info.value.status_code == status
        assert exc_info.value.body == {"message": "nope"}

    @pytest.mark.asyncio
    async def test_429_carries_retry_after(self, executor, backend, admission):
        backend.respond("GET", "/people", 429, {"message": "slow down"}, {"retry-after": "30"})

        with pytest.raises(RateLimitError) as exc_info:
            await executor.get("/people")

        assert exc_info.value.retry_after == 30.0

    @pytest.mark.asyncio
    async def test_error_body_that_is_not_json_is_empty(self, admission):
        http = MagicMock()
        http.request = AsyncMock(return_value=HTTPResponse(502, "<html>Bad gateway"))
        executor = RequestExecutor(http, admission, api_key="k")

        with pytest.raises(UpstreamError) as exc_info:
            await executor.get("/people")

        assert exc_info.value.status_code == 502
        assert exc_info.value.body == {}

    @pytest.mark.parametrize(
        "error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()]
    )
    @pytest.mark.asyncio
    async def test_transport_failure_is_upstream_error_without_status(self, admission, error):
        http = MagicMock()
        http.request = AsyncMock(side_effect=error)
        executor = RequestExecutor(http, admission, api_key="k")

        with pytest.raises(UpstreamError) as exc_info:
            await executor.get("/people")

        assert type(exc_info.value) is UpstreamError
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_undecodable_2xx_is_validation_error(self, admission):
        http = MagicMock()
        http.request = AsyncMock(return_value=HTTPResponse(200, "not json"))
        executor = RequestExecutor(http, admission, api_key="k")

        with pytest.raises(ValidationError):
            await executor.get("/people")

    @pytest.mark.asyncio
    async def test_adapter_shape_mismatch_is_validation_error(
        self, executor, backend, admission
    ):
        class Strict(BaseModel):
            people_id: int

        backend.seed("people", [{"people_id": "not-a-number"}])

        with pytest.raises(ValidationError) as exc_info:
            await executor.execute(
                RequestDescriptor(
                    HttpMethod.GET, "/people/not-a-number", adapter=ModelAdapter(Strict)
                )
            )

        assert exc_info.value.details[0]["loc"] == ["people_id"]

    @pytest.mark.asyncio
    async def test_model_adapter_keeps_unknown_fields(self, executor, backend, admission):
        record = {"people_id": 1, "name": "Ada", "tags": [{"name": "lead"}], "custom": "x"}
        backend.seed("people", [record])

        result = await executor.get("/people/1", adapter=ModelAdapter(Person))

        assert result == record

    @pytest.mark.asyncio
    async def test_empty_2xx_body_is_none(self, executor, backend, admission):
        backend.seed("tasks", [{"task_id": 5}])

        assert await executor.delete("/tasks/5") is None


class TestRequestDescriptor:
    def test_collection_shape_defaults_to_adapter(self):
        descriptor = RequestDescriptor(
            HttpMethod.GET, "/people", adapter=ModelAdapter(Person, many=True)
        )
        assert descriptor.expects_collection is True

    def test_explicit_shape_wins(self):
        descriptor = RequestDescriptor(
            HttpMethod.GET, "/people", adapter=ModelAdapter(Person, many=True), many=False
        )
        assert descriptor.expects_collection is False

    def test_unknown_without_adapter(self):
        assert RequestDescriptor(HttpMethod.GET, "/people").expects_collection is None
