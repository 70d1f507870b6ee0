"""
Unit Tests for TaskApiClient

Uses httpx.MockTransport in place of a running server.
"""

import json

import httpx
import pytest

from models.extraction_models import ExtractedTaskCandidate
from services.review_session import ReviewSession
from services.task_api_client import TaskApiClient, TaskApiError


def make_client(handler):
    return TaskApiClient(
        "http://testserver", token="token-123", transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_extract_tasks_sends_transcript_with_bearer_token():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"tasks": [{
            "task_description": "update the database schema",
            "assignee": "John",
            "due_date": "Friday",
            "priority": "P3",
        }]})

    async with make_client(handler) as client:
        tasks = await client.extract_tasks("John will update the database schema by Friday.")

    assert seen["auth"] == "Bearer token-123"
    assert seen["body"] == {"transcript": "John will update the database schema by Friday."}
    assert tasks == [ExtractedTaskCandidate(
        description="update the database schema", assignee="John", due_date_text="Friday"
    )]


@pytest.mark.asyncio
async def test_extract_tasks_no_tasks_found():
    def handler(request):
        return httpx.Response(200, json={"tasks": [], "message": "No tasks found"})

    async with make_client(handler) as client:
        assert await client.extract_tasks("Small talk only.") == []


@pytest.mark.asyncio
async def test_error_response_raises_with_detail():
    def handler(request):
        return httpx.Response(502, json={"detail": "Failed to extract tasks"})

    async with make_client(handler) as client:
        with pytest.raises(TaskApiError) as exc_info:
            await client.extract_tasks("text")

    assert exc_info.value.status_code == 502
    assert exc_info.value.detail == "Failed to extract tasks"


@pytest.mark.asyncio
async def test_list_tasks_passes_priority_filter():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[])

    async with make_client(handler) as client:
        await client.list_tasks(priority="P1")

    assert seen["params"] == {"priority": "P1"}


@pytest.mark.asyncio
async def test_review_session_approves_through_client():
    """approve_all sends the whole working set in one bulk-create request."""
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        return httpx.Response(201, json=[{"id": "1"}, {"id": "2"}])

    session = ReviewSession([
        ExtractedTaskCandidate(description="A", assignee="Ana", due_date_text="Friday"),
    ])
    session.append()
    session.edit(1, "task_description", "Hand-written task")

    async with make_client(handler) as client:
        created = await session.approve_all(client.create_tasks)

    assert len(requests) == 1
    assert [t["task_description"] for t in requests[0]["tasks"]] == ["A", "Hand-written task"]
    assert created == [{"id": "1"}, {"id": "2"}]
    assert len(session) == 0


@pytest.mark.asyncio
async def test_review_session_kept_when_server_rejects():
    def handler(request):
        return httpx.Response(500, json={"detail": "Failed to create tasks"})

    session = ReviewSession([
        ExtractedTaskCandidate(description="A", assignee="Ana", due_date_text="Friday"),
    ])

    async with make_client(handler) as client:
        with pytest.raises(TaskApiError):
            await session.approve_all(client.create_tasks)

    assert len(session) == 1
