"""Unit tests for generated CRUD handlers."""

from __future__ import annotations

import pytest

from float_mcp.handlers import RESOURCES, register_crud
from float_mcp.registration import build_default_registry
from float_mcp.runtime import OperationRegistry

CRUD_OPERATIONS = ["list", "get", "create", "update", "delete"]


class TestCrudRegistration:
    def test_every_resource_gets_five_operations(self):
        registry = build_default_registry()
        for family in RESOURCES:
            assert registry.operations(family)[:5] == CRUD_OPERATIONS

    def test_register_single_resource(self):
        registry = OperationRegistry()
        register_crud(registry, RESOURCES["clients"])

        assert registry.families() == ["clients"]
        assert registry.get("clients", "get").description == "Get a client"


class TestCrudHandlers:
    """Test CRUD handlers over the fake backend."""

    @pytest.mark.asyncio
    async def test_allocations_share_the_tasks_endpoint(self, api, backend):
        backend.seed("tasks", [{"task_id": 3, "people_id": 1, "hours": 4}])

        result = await api.route("allocations", "get", {"id": 3})

        assert result == {"task_id": 3, "people_id": 1, "hours": 4}
        assert backend.calls[0]["path"] == "/tasks/3"

    @pytest.mark.asyncio
    async def test_list_reads_every_page(self, api, backend):
        backend.seed("clients", [{"client_id": i} for i in range(1, 121)])

        result = await api.route("clients", "list", {})

        assert len(result) == 120
        assert [c["params"]["page"] for c in backend.calls] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_create_forwards_all_fields(self, api, backend):
        await api.route(
            "timeoff",
            "create",
            {"people_ids": [1, 2], "timeoff_type_id": 3, "start_date": "2024-04-01"},
        )

        assert backend.calls[0]["body"] == {
            "people_ids": [1, 2],
            "timeoff_type_id": 3,
            "start_date": "2024-04-01",
        }

    @pytest.mark.asyncio
    async def test_archiving_families_say_archived(self, api, backend):
        backend.seed("clients", [{"client_id": 2}])

        result = await api.route("clients", "delete", {"id": "2"})

        assert result["message"] == "Client archived successfully"
        assert backend.calls[0]["path"] == "/clients/2"
