"""Unit tests for phase, milestone and project task operations."""

from __future__ import annotations

import pytest

from float_mcp.core import ValidationError

MILESTONES = [
    {"milestone_id": 1, "name": "Launch", "date": "2024-04-01", "completed": 0},
    {"milestone_id": 2, "name": "Kickoff", "date": "2024-03-01", "completed": 0},
    {"milestone_id": 3, "name": "Review", "end_date": "2024-03-10", "completed": 0},
    {"milestone_id": 4, "name": "Today", "date": "2024-03-13", "completed": 0},
    {"milestone_id": 5, "name": "Undated", "completed": 0},
]


class TestPhaseOperations:
    @pytest.mark.asyncio
    async def test_active_phases_forces_active_filter(self, api, backend):
        await api.route("phases", "get-active-phases", {"active": 0, "project_id": 3})

        params = backend.calls[0]["params"]
        assert params["active"] == "1"
        assert params["project_id"] == "3"

    @pytest.mark.asyncio
    async def test_phase_schedule_sorted_by_start(self, api, backend):
        backend.seed(
            "phases",
            [
                {"phase_id": 1, "name": "Build", "start_date": "2024-05-01"},
                {"phase_id": 2, "name": "Design", "start_date": "2024-02-01"},
            ],
        )

        result = await api.route("phases", "get-phase-schedule", {"project_id": 3})

        assert [p["name"] for p in result] == ["Design", "Build"]

    @pytest.mark.asyncio
    async def test_date_range_requires_ordered_dates(self, api, backend):
        with pytest.raises(ValidationError):
            await api.route(
                "phases",
                "get-phases-by-date-range",
                {"start_date": "2024-03-10", "end_date": "2024-03-01"},
            )
        assert backend.calls == []


class TestMilestoneOperations:
    """Test milestone windows relative to the fixed clock (2024-03-13)."""

    @pytest.mark.asyncio
    async def test_upcoming_sends_window_and_sorts(self, api, backend):
        backend.seed("milestones", [MILESTONES[0], MILESTONES[3]])

        result = await api.route("milestones", "get-upcoming-milestones", {})

        params = backend.calls[0]["params"]
        assert params["date_from"] == "2024-03-13"
        assert params["completed"] == "0"
        assert [m["milestone_id"] for m in result] == [4, 1]

    @pytest.mark.asyncio
    async def test_overdue_keeps_only_past_due(self, api, backend):
        backend.seed("milestones", MILESTONES)

        result = await api.route("milestones", "get-overdue-milestones", {})

        assert backend.calls[0]["params"]["date_to"] == "2024-03-13"
        assert [m["milestone_id"] for m in result] == [2, 3]

    @pytest.mark.asyncio
    async def test_complete_milestone_stamps_today(self, api, backend):
        backend.seed("milestones", MILESTONES)

        result = await api.route("milestones", "complete-milestone", {"id": 1})

        assert backend.calls[-1]["body"] == {"completed": 1, "completed_date": "2024-03-13"}
        assert result["completed"] == 1

    @pytest.mark.asyncio
    async def test_reminders_default_to_unsent(self, api, backend):
        await api.route("milestones", "get-milestone-reminders", {})

        assert backend.calls[0]["params"]["reminder_sent"] == "0"


class TestProjectTaskOperations:
    @pytest.mark.asyncio
    async def test_dependencies_report_missing(self, api, backend):
        backend.seed(
            "project_tasks",
            [
                {"project_task_id": 1, "task_names": "Ship", "dependencies": [2, 3]},
                {"project_task_id": 2, "task_names": "Build"},
            ],
        )

        result = await api.route("project-tasks", "get-project-task-dependencies", {"id": 1})

        assert result["dependencies"] == [2, 3]
        assert [d["project_task_id"] for d in result["dependency_details"]] == [2]
        assert result["missing"] == [3]

    @pytest.mark.asyncio
    async def test_bulk_create_sets_project_on_every_item(self, api, backend):
        result = await api.route(
            "project-tasks",
            "bulk-create-project-tasks",
            {
                "project_id": 12,
                "project_tasks": [
                    {"task_names": "Design", "estimated_hours": 10},
                    {"task_names": ""},
                    {"task_names": "Build", "billable": 1},
                ],
            },
        )

        assert result["summary"] == {"total": 3, "successful": 2, "failed": 1}
        assert result["errors"][0]["index"] == 1
        bodies = [c["body"] for c in backend.calls_to("POST", "/project_tasks")]
        assert bodies == [
            {"task_names": "Design", "estimated_hours": 10.0, "project_id": 12},
            {"task_names": "Build", "billable": 1, "project_id": 12},
        ]

    @pytest.mark.asyncio
    async def test_reorder_patches_each_task(self, api, backend):
        backend.seed("project_tasks", [{"project_task_id": 1}, {"project_task_id": 2}])

        result = await api.route(
            "project-tasks",
            "reorder-project-tasks",
            {
                "task_order": [
                    {"project_task_id": 2, "sort_order": 1},
                    {"project_task_id": 1, "sort_order": 2},
                ]
            },
        )

        assert result["success"] is True
        assert [r["data"]["sort_order"] for r in result["results"]] == [1, 2]
        assert [c["path"] for c in backend.calls] == ["/project_tasks/2", "/project_tasks/1"]

    @pytest.mark.asyncio
    async def test_archive_sets_inactive(self, api, backend):
        backend.seed("project_tasks", [{"project_task_id": 6, "active": 1}])

        result = await api.route("project-tasks", "archive-project-task", {"id": 6})

        assert result["active"] == 0
