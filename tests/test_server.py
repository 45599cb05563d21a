"""
Integration tests for the MCP server entry point.

Tool functions are called directly with a stand-in context that carries the
lifespan resources, the same objects FastMCP hands them at runtime.
"""

import asyncio
import os
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from talentflow.config import Config
from talentflow.db.schema import CANDIDATES, JOBS
from talentflow.server import (
    AppContext,
    create_job_tool,
    get_assessment_tool,
    get_candidate_timeline_tool,
    get_jobs_tool,
    mcp,
    open_app_context,
    reorder_jobs_tool,
    update_candidate_tool,
)
from talentflow.utils.transport import SimulatedNetwork

TOOL_NAMES = {
    "get_jobs",
    "get_job",
    "create_job",
    "update_job",
    "reorder_jobs",
    "get_candidates",
    "get_candidate",
    "create_candidate",
    "update_candidate",
    "get_candidate_timeline",
    "get_assessment",
    "save_assessment",
    "submit_assessment_response",
    "get_assessment_responses",
}


def _config(tmp_path, **env):
    base = {
        "TALENTFLOW_DB": str(tmp_path / "talentflow.db"),
        "TALENTFLOW_LATENCY_MIN_MS": "0",
        "TALENTFLOW_LATENCY_MAX_MS": "0",
        "TALENTFLOW_FAILURE_RATE": "0",
        "TALENTFLOW_SEED_JOBS": "4",
        "TALENTFLOW_SEED_CANDIDATES": "12",
    }
    base.update(env)
    with patch.dict(os.environ, base, clear=True):
        return Config()


def _ctx(app: AppContext):
    return SimpleNamespace(request_context=SimpleNamespace(lifespan_context=app))


@pytest.fixture
def app(tmp_path):
    app = open_app_context(_config(tmp_path))
    yield app
    app.store.close()


class TestOpenAppContext:
    def test_seeds_empty_store(self, app):
        assert app.store.is_open
        assert app.store.count(JOBS) == 4
        assert app.store.count(CANDIDATES) == 12
        assert app.network.failure_rate == 0.0

    def test_reopen_keeps_existing_data(self, tmp_path):
        """Test a second start on the same database does not reseed."""
        config = _config(tmp_path)
        first = open_app_context(config)
        job_ids = {job["id"] for job in first.store.get_all(JOBS)}
        first.store.close()

        second = open_app_context(config)
        try:
            assert {job["id"] for job in second.store.get_all(JOBS)} == job_ids
        finally:
            second.store.close()

    def test_seeding_disabled(self, tmp_path):
        app = open_app_context(_config(tmp_path, TALENTFLOW_SEED_ON_START="false"))
        try:
            assert app.store.count(JOBS) == 0
        finally:
            app.store.close()


class TestServerTools:
    def test_server_name(self):
        assert mcp.name

    def test_all_tools_registered(self):
        tools = asyncio.run(mcp.list_tools())
        assert {tool.name for tool in tools} == TOOL_NAMES

    def test_job_tools(self, app):
        ctx = _ctx(app)

        listed = get_jobs_tool(ctx, page_size=2)
        created = create_job_tool(ctx, title="Site Reliability Engineer", tags=["SRE"])
        moved = reorder_jobs_tool(ctx, from_order=4, to_order=0)

        assert len(listed["data"]) == 2
        assert listed["pagination"]["total_pages"] == 2
        assert created["job"]["order"] == 4
        assert moved == {"success": True, "moved_count": 5}
        assert get_jobs_tool(ctx)["data"][0]["id"] == created["job"]["id"]

    def test_candidate_stage_change(self, app):
        ctx = _ctx(app)
        candidate = app.store.get_all(CANDIDATES)[0]
        target = "rejected" if candidate["stage"] != "rejected" else "hired"

        updated = update_candidate_tool(ctx, candidate["id"], {"stage": target})
        events = get_candidate_timeline_tool(ctx, candidate["id"])["events"]

        assert updated["candidate"]["stage"] == target
        assert events[-1]["stage"] == target

    def test_errors_are_returned(self, app):
        failing = AppContext(store=app.store, network=SimulatedNetwork(failure_rate=1.0))

        result = create_job_tool(_ctx(failing), title="Never stored")

        assert result["error"]["code"] == "TRANSIENT_WRITE"
        assert app.store.count(JOBS) == 4

    def test_missing_assessment(self, app):
        assert get_assessment_tool(_ctx(app), "job-2")["assessment"] is None
