"""Integration tests for timer endpoints."""
import asyncio
from datetime import datetime

import pytest

API = "/api"


@pytest.mark.asyncio
class TestTimerStart:
    """Tests for POST /timer/start."""

    async def test_start_timer_success(self, app_client, login, make_task):
        """Test starting a timer on an owned task."""
        headers = await login("start@example.com")
        task_id = await make_task(headers)

        response = await app_client.post(
            f"{API}/timer/start",
            json={"taskId": task_id, "description": "Working on feature"},
            headers=headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["taskId"] == task_id
        assert data["description"] == "Working on feature"
        assert data["task"]["id"] == task_id
        assert data["task"]["project"]["client"]["name"] == "Acme"
        assert data["endTime"] is None

    async def test_start_timer_without_body(self, app_client, login):
        """Test task and description are optional."""
        headers = await login("nobody@example.com")

        response = await app_client.post(f"{API}/timer/start", headers=headers)

        assert response.status_code == 201
        assert response.json()["taskId"] is None

    async def test_start_timer_with_running_timer(self, app_client, login):
        """Test starting timer when one is already running fails."""
        headers = await login("twice@example.com")
        await app_client.post(f"{API}/timer/start", json={}, headers=headers)

        response = await app_client.post(f"{API}/timer/start", json={}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"].startswith("You already have a timer running")

    async def test_start_timer_with_unknown_task(self, app_client, login):
        """Test starting timer with a non-existent task fails."""
        headers = await login("unknown@example.com")

        response = await app_client.post(
            f"{API}/timer/start",
            json={"taskId": "64b7f0000000000000000000"},
            headers=headers,
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}

    async def test_start_timer_with_foreign_task(self, app_client, login, make_task):
        """Test another user's task is indistinguishable from a missing one."""
        owner = await login("owner@example.com")
        task_id = await make_task(owner)
        intruder = await login("intruder@example.com")

        response = await app_client.post(
            f"{API}/timer/start",
            json={"taskId": task_id},
            headers=intruder,
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}

    async def test_concurrent_starts_leave_one_running(self, app_client, login):
        """Test racing start requests produce exactly one running timer."""
        headers = await login("race@example.com")

        responses = await asyncio.gather(*[
            app_client.post(f"{API}/timer/start", json={}, headers=headers)
            for _ in range(5)
        ])

        statuses = sorted(r.status_code for r in responses)
        assert statuses.count(201) == 1
        assert statuses.count(400) == 4

        entries = await app_client.get(f"{API}/time-entries", headers=headers)
        assert len([e for e in entries.json() if e["endTime"] is None]) == 1

    async def test_start_timer_requires_auth(self, app_client):
        """Test that starting timer requires authentication."""
        response = await app_client.post(f"{API}/timer/start", json={})

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}


@pytest.mark.asyncio
class TestTimerStop:
    """Tests for POST /timer/stop."""

    async def test_running_stop_scenario(self, app_client, login, make_task):
        """Test start is refused while running, stop closes the entry, running is then null."""
        headers = await login("scenario@example.com")
        task_id = await make_task(headers)
        started = await app_client.post(
            f"{API}/timer/start", json={"taskId": task_id}, headers=headers
        )
        entry_id = started.json()["id"]

        second = await app_client.post(f"{API}/timer/start", json={}, headers=headers)
        assert second.status_code == 400

        stopped = await app_client.post(f"{API}/timer/stop", headers=headers)
        assert stopped.status_code == 200
        data = stopped.json()
        assert data["id"] == entry_id
        assert data["endTime"] is not None
        assert data["endTime"].endswith("Z")
        assert datetime.fromisoformat(data["endTime"]) > datetime.fromisoformat(data["startTime"])
        assert data["task"]["project"]["client"]["name"] == "Acme"

        running = await app_client.get(f"{API}/time-entries/running", headers=headers)
        assert running.status_code == 200
        assert running.json() is None

    async def test_stop_entry_started_in_the_future(self, app_client, login):
        """Test stopping an open entry with a future start still ends after it starts."""
        headers = await login("future@example.com")
        created = await app_client.post(
            f"{API}/time-entries",
            json={"startTime": "2999-01-01T09:00:00Z"},
            headers=headers,
        )

        response = await app_client.post(f"{API}/timer/stop", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == created.json()["id"]
        assert datetime.fromisoformat(data["endTime"]) > datetime.fromisoformat(data["startTime"])

    async def test_stop_timer_no_running_timer(self, app_client, login):
        """Test stopping timer when none is running fails."""
        headers = await login("idle@example.com")

        response = await app_client.post(f"{API}/timer/stop", headers=headers)

        assert response.status_code == 404
        assert response.json() == {"error": "No running timer found"}

    async def test_stop_timer_requires_auth(self, app_client):
        """Test that stopping timer requires authentication."""
        response = await app_client.post(f"{API}/timer/stop")

        assert response.status_code == 401
