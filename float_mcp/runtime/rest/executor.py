"""Request executor: admission, one HTTP call, decoding and error mapping.

Architecture:
    RequestExecutor is the only component that talks to the network. Every
    call goes through the same pipeline:

    1. Admission: await the shared AdmissionQueue
    2. Build: bearer token, Accept header from the response format, JSON
       body, base URL + path (the HTTP client owns URL joining)
    3. Send: transport failures become UpstreamError without a status
    4. Map: 2xx bodies are decoded and passed through the descriptor's
       adapter; non-2xx bodies are decoded best-effort and raised as the
       status-mapped error class

Design Decisions:
    - RequestDescriptor is immutable and built per logical call
    - Adapters follow the ResponseAdapter.parse() shape so handlers can pass
      a pydantic-backed ModelAdapter or nothing at all
    - Decode and adapter failures on a 2xx are ValidationError, keeping
      "remote returned unexpected data" apart from "remote rejected the call"
    - No retries; the caller owns retry policy
    - Request bodies and query values are never logged
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import TYPE_CHECKING, Any

import aiohttp
import pydantic

from ...core.enums import HttpMethod, ResponseFormat
from ...core.exceptions import (
    UpstreamError,
    ValidationError,
    error_for_status,
    validation_details,
)
from .codecs import DecodeError, best_effort_decode, decode_body, encode_body, encode_query

if TYPE_CHECKING:
    from ..admission import AdmissionQueue
    from .http import HTTPClient, HTTPResponse

logger = logging.getLogger(__name__)


class ResponseAdapter:
    """Identity adapter: returns the decoded payload unchanged."""

    many: bool | None = None

    def parse(self, response: Any) -> Any:
        return response


class ModelAdapter(ResponseAdapter):
    """Validate a decoded payload against a pydantic model.

    The validated value is dumped back to plain data, so callers always see
    dicts and lists. Models are permissive (unknown fields are kept), which
    makes the adapter a shape check rather than a projection.
    """

    def __init__(self, model: type[pydantic.BaseModel], *, many: bool = False) -> None:
        self.model = model
        self.many = many

    def parse(self, response: Any) -> Any:
        if response is None:
            return [] if self.many else None
        if self.many:
            items = response if isinstance(response, list) else [response]
            return [self._validate(item) for item in items]
        return self._validate(response)

    def _validate(self, item: Any) -> Any:
        return self.model.model_validate(item).model_dump(mode="json", exclude_unset=True)


@dataclass(frozen=True)
class RequestDescriptor:
    """One logical call against the remote service."""

    method: HttpMethod
    path: str
    query: dict[str, Any] | None = None
    body: Any = None
    adapter: ResponseAdapter | None = None
    response_format: ResponseFormat = ResponseFormat.JSON
    headers: dict[str, str] = field(default_factory=dict)
    many: bool | None = None

    @property
    def expects_collection(self) -> bool | None:
        """Whether the body is a collection, falling back to the adapter's shape."""
        if self.many is not None:
            return self.many
        return self.adapter.many if self.adapter is not None else None


class RequestExecutor:
    """Executes RequestDescriptors against the remote service."""

    def __init__(
        self,
        http: HTTPClient,
        admission: AdmissionQueue,
        *,
        api_key: str,
        user_agent: str | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            http: HTTP client owning the session and base URL
            admission: Shared admission queue gating every call
            api_key: Pre-issued bearer token
            user_agent: Optional User-Agent header value
        """
        self._http = http
        self._admission = admission
        self._api_key = api_key
        self._user_agent = user_agent

    @property
    def admission(self) -> AdmissionQueue:
        return self._admission

    async def execute(self, descriptor: RequestDescriptor) -> Any:
        """Run one call and return the decoded, adapted payload.

        Raises:
            ValidationError: 2xx body could not be decoded or adapted
            AuthError: 401/403
            NotFoundError: 404
            RateLimitError: 429
            UpstreamError: any other non-2xx, or transport failure
        """
        await self._admission.admit()

        method = descriptor.method.value
        headers = self._build_headers(descriptor)
        data, content_type = (
            encode_body(descriptor.body) if descriptor.method.carries_body else (None, None)
        )
        if content_type:
            headers["Content-Type"] = content_type

        started = perf_counter()
        try:
            response = await self._http.request(
                method,
                descriptor.path,
                params=encode_query(descriptor.query),
                data=data,
                headers=headers,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(
                "request_transport_error",
                extra={
                    "method": method,
                    "path": descriptor.path,
                    "error_type": type(e).__name__,
                },
            )
            raise UpstreamError(f"{method} {descriptor.path} failed: {type(e).__name__}") from e

        logger.debug(
            "request_completed",
            extra={
                "method": method,
                "path": descriptor.path,
                "status": response.status,
                "latency_ms": (perf_counter() - started) * 1000.0,
            },
        )

        if not response.ok:
            raise self._map_error(descriptor, response)
        return self._decode(descriptor, response)

    async def get(self, path: str, *, query: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        return await self.execute(RequestDescriptor(HttpMethod.GET, path, query=query, **kwargs))

    async def post(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        return await self.execute(RequestDescriptor(HttpMethod.POST, path, body=body, **kwargs))

    async def patch(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        return await self.execute(RequestDescriptor(HttpMethod.PATCH, path, body=body, **kwargs))

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.execute(RequestDescriptor(HttpMethod.DELETE, path, **kwargs))

    def _build_headers(self, descriptor: RequestDescriptor) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": descriptor.response_format.media_type,
        }
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        headers.update(descriptor.headers)
        return headers

    def _decode(self, descriptor: RequestDescriptor, response: HTTPResponse) -> Any:
        try:
            payload = decode_body(
                response.text,
                descriptor.response_format,
                many=descriptor.expects_collection,
            )
        except DecodeError as e:
            raise ValidationError(
                f"{descriptor.method.value} {descriptor.path} returned an undecodable body: {e}",
            ) from e

        if descriptor.adapter is None:
            return payload
        try:
            return descriptor.adapter.parse(payload)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"{descriptor.method.value} {descriptor.path} returned an unexpected shape",
                details=validation_details(e),
            ) from e

    def _map_error(self, descriptor: RequestDescriptor, response: HTTPResponse) -> UpstreamError:
        body = best_effort_decode(response.text, descriptor.response_format)
        logger.warning(
            "request_failed",
            extra={
                "method": descriptor.method.value,
                "path": descriptor.path,
                "status": response.status,
            },
        )
        return error_for_status(
            response.status,
            body,
            method=descriptor.method.value,
            path=descriptor.path,
            retry_after=_retry_after(response.headers),
        )


def _retry_after(headers: dict[str, str]) -> float | None:
    for key, value in headers.items():
        if key.lower() == "retry-after":
            try:
                return float(value)
            except (TypeError, ValueError):
                return None
    return None
