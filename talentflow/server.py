#!/usr/bin/env python3
"""
MCP Server entry point for TalentFlow.

Exposes job, candidate, timeline and assessment operations over a local
record store as MCP tools. The store is opened (and seeded when empty) by
the server lifespan and closed on shutdown; every tool call passes through
the simulated network, which adds latency and transient write failures.

Usage:
    python -m talentflow.server

The server runs in stdio mode by default, which is the standard transport
for MCP servers that are invoked by LLM agents.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional

from mcp.server.fastmcp import Context, FastMCP

from talentflow.config import Config, get_config
from talentflow.db.record_store import RecordStore
from talentflow.db.seed import seed_database
from talentflow.tools import assessments as assessment_tools
from talentflow.tools import candidates as candidate_tools
from talentflow.tools import jobs as job_tools
from talentflow.utils.transport import SimulatedNetwork

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Resources shared by every tool call for the life of the server."""

    store: RecordStore
    network: SimulatedNetwork


def open_app_context(config: Config) -> AppContext:
    """
    Open the record store and build the simulated network.

    Seeds the store when ``seed_on_start`` is set and the store has no jobs.
    The caller owns the returned store and must close it.
    """
    store = RecordStore(config.get_db_path_str()).open()
    try:
        if config.seed_on_start:
            summary = seed_database(
                store, job_count=config.seed_jobs, candidate_count=config.seed_candidates
            )
            logger.info(f"Seed result: {summary}")
        network = SimulatedNetwork.from_config(config)
    except BaseException:
        store.close()
        raise
    return AppContext(store=store, network=network)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Hold the record store open while the server runs."""
    app = open_app_context(get_config())
    try:
        yield app
    finally:
        app.store.close()


config = get_config()
mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "This server manages a hiring pipeline: job postings, candidates moving "
        "through stages, and per-job assessments."
        "\n\n"
        "JOBS:\n"
        "Use get_jobs to search and page through jobs, get_job to fetch one, "
        "create_job and update_job to edit postings, and reorder_jobs to move a job "
        "to a new position in the board order."
        "\n\n"
        "CANDIDATES:\n"
        "Use get_candidates to search and page through candidates, get_candidate to "
        "fetch one, create_candidate to register an applicant, update_candidate to "
        "edit details or move the candidate to another stage, and "
        "get_candidate_timeline to read the candidate's history."
        "\n\n"
        "ASSESSMENTS:\n"
        "Use get_assessment and save_assessment to read and replace a job's assessment, "
        "submit_assessment_response to store a candidate's validated answers, and "
        "get_assessment_responses to read them back."
        "\n\n"
        "Writes can fail transiently with TRANSIENT_WRITE (retryable=true); nothing is "
        "persisted by a failed write, so the same call can simply be retried."
    ),
    lifespan=app_lifespan,
)


def _app(ctx: Context) -> AppContext:
    return ctx.request_context.lifespan_context


@mcp.tool(
    name="get_jobs",
    description=(
        "List jobs with optional search (title or tag), status filter, sort "
        "('order', 'title', 'created_at') and page-based pagination."
    ),
)
def get_jobs_tool(
    ctx: Context,
    search: Optional[str] = None,
    status: Optional[str] = None,
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    sort: Optional[str] = None,
) -> dict:
    """
    List jobs.

    Args:
        search: Case-insensitive substring matched against title and tags.
        status: Filter by status ('active' or 'archived').
        page: 1-based page number (default 1).
        page_size: Jobs per page, 1-1000 (default 10).
        sort: 'order' (default), 'title' (A-Z) or 'created_at' (newest first).

    Returns:
        {"data": [...], "pagination": {"page", "page_size", "total", "total_pages"}}
    """
    app = _app(ctx)
    args = {"search": search, "status": status, "page": page, "page_size": page_size, "sort": sort}
    return job_tools.get_jobs(args, app.store, app.network)


@mcp.tool(name="get_job", description="Fetch one job by id.")
def get_job_tool(ctx: Context, job_id: str) -> dict:
    app = _app(ctx)
    return job_tools.get_job({"job_id": job_id}, app.store, app.network)


@mcp.tool(
    name="create_job",
    description="Create a job posting; it is placed at the end of the board order.",
)
def create_job_tool(
    ctx: Context,
    title: str,
    description: Optional[str] = None,
    status: Optional[str] = None,
    tags: Optional[list[str]] = None,
    requirements: Optional[list[str]] = None,
) -> dict:
    """
    Create a job.

    Args:
        title: Job title (required, non-empty). The slug is derived from it.
        description: Free-text description.
        status: 'active' (default) or 'archived'.
        tags: Distinct tag strings.
        requirements: Ordered requirement strings.

    Returns:
        {"job": {...}} with generated id, slug, order and timestamps
    """
    app = _app(ctx)
    args = {
        "title": title,
        "description": description,
        "status": status,
        "tags": tags,
        "requirements": requirements,
    }
    return job_tools.create_job(args, app.store, app.network)


@mcp.tool(
    name="update_job",
    description=(
        "Update a job's title, description, status, tags or requirements. "
        "Changing the title regenerates the slug."
    ),
)
def update_job_tool(ctx: Context, job_id: str, updates: dict[str, Any]) -> dict:
    app = _app(ctx)
    return job_tools.update_job({"job_id": job_id, "updates": updates}, app.store, app.network)


@mcp.tool(
    name="reorder_jobs",
    description=(
        "Move the job at position from_order to position to_order; jobs in between "
        "shift by one so positions stay 0..n-1."
    ),
)
def reorder_jobs_tool(ctx: Context, from_order: int, to_order: int) -> dict:
    app = _app(ctx)
    args = {"from_order": from_order, "to_order": to_order}
    return job_tools.reorder_jobs(args, app.store, app.network)


@mcp.tool(
    name="get_candidates",
    description=(
        "List candidates, most recently updated first, with optional search (name or "
        "email), stage filter, job filter and page-based pagination."
    ),
)
def get_candidates_tool(
    ctx: Context,
    search: Optional[str] = None,
    stage: Optional[str] = None,
    job_id: Optional[str] = None,
    page: Optional[int] = None,
    page_size: Optional[int] = None,
) -> dict:
    """
    List candidates.

    Args:
        search: Case-insensitive substring matched against name and email.
        stage: One of applied, screen, tech, offer, hired, rejected.
        job_id: Only candidates who applied to this job.
        page: 1-based page number (default 1).
        page_size: Candidates per page, 1-1000 (default 50).
    """
    app = _app(ctx)
    args = {
        "search": search,
        "stage": stage,
        "job_id": job_id,
        "page": page,
        "page_size": page_size,
    }
    return candidate_tools.get_candidates(args, app.store, app.network)


@mcp.tool(name="get_candidate", description="Fetch one candidate by id.")
def get_candidate_tool(ctx: Context, candidate_id: str) -> dict:
    app = _app(ctx)
    return candidate_tools.get_candidate({"candidate_id": candidate_id}, app.store, app.network)


@mcp.tool(
    name="create_candidate",
    description="Register a new applicant for an existing job, starting in stage 'applied'.",
)
def create_candidate_tool(
    ctx: Context, name: str, email: str, job_id: str, resume: Optional[str] = None
) -> dict:
    app = _app(ctx)
    args = {"name": name, "email": email, "job_id": job_id, "resume": resume}
    return candidate_tools.create_candidate(args, app.store, app.network)


@mcp.tool(
    name="update_candidate",
    description=(
        "Update a candidate's name, email, stage or resume. A stage change is recorded "
        "on the candidate's timeline in the same transaction."
    ),
)
def update_candidate_tool(ctx: Context, candidate_id: str, updates: dict[str, Any]) -> dict:
    app = _app(ctx)
    args = {"candidate_id": candidate_id, "updates": updates}
    return candidate_tools.update_candidate(args, app.store, app.network)


@mcp.tool(
    name="get_candidate_timeline",
    description="Return a candidate's timeline events in the order they happened.",
)
def get_candidate_timeline_tool(ctx: Context, candidate_id: str) -> dict:
    app = _app(ctx)
    args = {"candidate_id": candidate_id}
    return candidate_tools.get_candidate_timeline(args, app.store, app.network)


@mcp.tool(
    name="get_assessment",
    description="Fetch a job's assessment; 'assessment' is null when none exists yet.",
)
def get_assessment_tool(ctx: Context, job_id: str) -> dict:
    app = _app(ctx)
    return assessment_tools.get_assessment({"job_id": job_id}, app.store, app.network)


@mcp.tool(
    name="save_assessment",
    description=(
        "Create or replace a job's assessment: a title and sections of questions "
        "(single-choice, multi-choice, short-text, long-text, numeric, file-upload)."
    ),
)
def save_assessment_tool(ctx: Context, job_id: str, assessment: dict[str, Any]) -> dict:
    app = _app(ctx)
    args = {"job_id": job_id, "assessment": assessment}
    return assessment_tools.save_assessment(args, app.store, app.network)


@mcp.tool(
    name="submit_assessment_response",
    description=(
        "Validate a candidate's answers against the job's assessment and store them. "
        "Invalid answers are reported per question id."
    ),
)
def submit_assessment_response_tool(
    ctx: Context, job_id: str, candidate_id: str, responses: dict[str, Any]
) -> dict:
    app = _app(ctx)
    args = {"job_id": job_id, "candidate_id": candidate_id, "responses": responses}
    return assessment_tools.submit_assessment_response(args, app.store, app.network)


@mcp.tool(
    name="get_assessment_responses",
    description="Return a candidate's submitted assessment responses, optionally for one job.",
)
def get_assessment_responses_tool(
    ctx: Context, candidate_id: str, job_id: Optional[str] = None
) -> dict:
    app = _app(ctx)
    args = {"candidate_id": candidate_id, "job_id": job_id}
    return assessment_tools.get_assessment_responses(args, app.store, app.network)


def main():
    """Main entry point for the MCP server."""
    config.setup_logging()

    logger.info(f"Starting {config.server_name}")

    for warning in config.validate():
        logger.warning(f"Configuration warning: {warning}")

    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
