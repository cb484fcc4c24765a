"""Shared fixtures: an in-memory Float backend and a FloatAPI wired to it."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any
from xml.sax.saxutils import escape

import pytest
import pytest_asyncio

from float_mcp.api import FloatAPI
from float_mcp.runtime.rest import HTTPResponse

# Wednesday
FIXED_NOW = datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc)

ID_FIELDS = {
    "people": "people_id",
    "projects": "project_id",
    "tasks": "task_id",
    "clients": "client_id",
    "departments": "department_id",
    "roles": "role_id",
    "accounts": "account_id",
    "statuses": "status_id",
    "phases": "phase_id",
    "milestones": "milestone_id",
    "project_tasks": "project_task_id",
    "logged-time": "logged_time_id",
    "timeoff": "timeoff_id",
    "timeoff-types": "timeoff_type_id",
    "public-holidays": "holiday_id",
    "team-holidays": "holiday_id",
}


def _to_xml(tag: str, value: Any) -> str:
    """Render decoded JSON the way an XML endpoint would: lists become <item> children."""
    if isinstance(value, list):
        inner = "\n".join(_to_xml("item", v) for v in value)
        return f"<{tag}>\n{inner}\n</{tag}>"
    if isinstance(value, dict):
        inner = "".join(_to_xml(k, v) for k, v in value.items())
    else:
        inner = escape(str(value))
    return f"<{tag}>{inner}</{tag}>"


class FakeFloatBackend:
    """HTTPClient stand-in serving collections from memory.

    List reads honour page / per-page and ignore every other filter; tests
    assert on the recorded query instead. ``responses`` overrides a
    (method, path) pair with a fixed status, body and headers.
    """

    def __init__(self) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.responses: dict[tuple[str, str], tuple[int, Any, dict[str, str]]] = {}
        self.calls: list[dict[str, Any]] = []
        self.closed = False
        self._next_id = 1000

    def seed(self, collection: str, records: list[dict[str, Any]]) -> None:
        self.collections[collection] = [dict(r) for r in records]

    def respond(
        self,
        method: str,
        path: str,
        status: int,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.responses[(method, path)] = (status, body, headers or {})

    def calls_to(self, method: str, path: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method and c["path"] == path]

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> HTTPResponse:
        response = self._serve(method, url, params=params, data=data, headers=headers)
        if (headers or {}).get("Accept") != "application/xml" or not response.text:
            return response
        root = url.strip("/").split("/")[0]
        xml = _to_xml(root, json.loads(response.text))
        return HTTPResponse(status=response.status, text=xml, headers=response.headers)

    def _serve(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> HTTPResponse:
        body = json.loads(data) if data else None
        self.calls.append(
            {
                "method": method,
                "path": url,
                "params": dict(params or {}),
                "body": body,
                "headers": dict(headers or {}),
            }
        )
        if (method, url) in self.responses:
            status, payload, extra = self.responses[(method, url)]
            return self._reply(status, payload, extra)

        parts = url.strip("/").split("/")
        collection, record_id = parts[0], (parts[1] if len(parts) > 1 else None)
        records = self.collections.setdefault(collection, [])
        id_field = ID_FIELDS.get(collection, "id")

        if record_id is None:
            if method == "GET":
                page = int((params or {}).get("page", 1))
                per_page = int((params or {}).get("per-page", 50))
                start = (page - 1) * per_page
                return self._reply(200, records[start : start + per_page])
            if method == "POST":
                self._next_id += 1
                record = {id_field: self._next_id, **(body or {})}
                records.append(record)
                return self._reply(200, record)
            return self._reply(405, {"message": "Method not allowed"})

        record = next((r for r in records if str(r.get(id_field)) == record_id), None)
        if record is None:
            return self._reply(404, {"message": "Not found"})
        if method == "GET":
            return self._reply(200, record)
        if method in ("PATCH", "PUT"):
            record.update(body or {})
            return self._reply(200, record)
        if method == "DELETE":
            records.remove(record)
            return self._reply(204, None)
        return self._reply(405, {"message": "Method not allowed"})

    @staticmethod
    def _reply(status: int, payload: Any, headers: dict[str, str] | None = None) -> HTTPResponse:
        text = "" if payload is None else json.dumps(payload)
        return HTTPResponse(status=status, text=text, headers=headers or {})

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def backend() -> FakeFloatBackend:
    return FakeFloatBackend()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest_asyncio.fixture
async def api(backend, fixed_clock):
    """FloatAPI over the fake backend with a fixed clock."""
    float_api = FloatAPI(api_key="test-key", http=backend, clock=fixed_clock)
    yield float_api
    await float_api.close()
