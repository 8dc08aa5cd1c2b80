"""Integration tests for client, project and task endpoints."""
import pytest

API = "/api"


@pytest.mark.asyncio
class TestClients:
    """Tests for /clients."""

    async def test_create_list_rename(self, app_client, login):
        headers = await login("clients@example.com")

        for name in ("Zeta Corp", "  Acme  "):
            created = await app_client.post(
                f"{API}/clients", json={"name": name}, headers=headers
            )
            assert created.status_code == 201

        listed = await app_client.get(f"{API}/clients", headers=headers)
        assert [c["name"] for c in listed.json()] == ["Acme", "Zeta Corp"]

        client_id = listed.json()[0]["id"]
        renamed = await app_client.put(
            f"{API}/clients/{client_id}", json={"name": "Acme Ltd"}, headers=headers
        )
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Acme Ltd"

    async def test_blank_name(self, app_client, login):
        headers = await login("blank@example.com")

        response = await app_client.post(
            f"{API}/clients", json={"name": "   "}, headers=headers
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Client name is required"}

    async def test_foreign_client_is_not_found(self, app_client, login):
        owner = await login("client-owner@example.com")
        other = await login("client-other@example.com")
        created = await app_client.post(
            f"{API}/clients", json={"name": "Private"}, headers=owner
        )
        client_id = created.json()["id"]

        fetched = await app_client.get(f"{API}/clients/{client_id}", headers=other)
        projects = await app_client.post(
            f"{API}/clients/{client_id}/projects", json={"name": "Sneaky"}, headers=other
        )

        assert fetched.status_code == 404
        assert fetched.json() == {"error": "Client not found"}
        assert projects.status_code == 404

    async def test_requires_auth(self, app_client):
        response = await app_client.get(f"{API}/clients")

        assert response.status_code == 401


@pytest.mark.asyncio
class TestCascade:
    """Deleting catalog items removes children and detaches entries."""

    async def test_delete_client_cascades(self, app_client, login, make_task):
        headers = await login("cascade@example.com")
        task_id = await make_task(headers)
        entry = await app_client.post(
            f"{API}/time-entries",
            json={
                "startTime": "2024-01-01T09:00:00Z",
                "endTime": "2024-01-01T10:00:00Z",
                "taskId": task_id,
            },
            headers=headers,
        )
        task = await app_client.get(f"{API}/tasks/{task_id}", headers=headers)
        project_id = task.json()["projectId"]
        project = await app_client.get(f"{API}/projects/{project_id}", headers=headers)
        client_id = project.json()["clientId"]

        deleted = await app_client.delete(f"{API}/clients/{client_id}", headers=headers)
        assert deleted.json() == {"success": True}

        assert (await app_client.get(f"{API}/projects/{project_id}", headers=headers)).status_code == 404
        assert (await app_client.get(f"{API}/tasks/{task_id}", headers=headers)).status_code == 404

        kept = await app_client.get(
            f"{API}/time-entries/{entry.json()['id']}", headers=headers
        )
        assert kept.status_code == 200
        assert kept.json()["taskId"] is None

    async def test_delete_task_detaches_entries(self, app_client, login, make_task):
        headers = await login("detach@example.com")
        task_id = await make_task(headers)
        started = await app_client.post(
            f"{API}/timer/start", json={"taskId": task_id}, headers=headers
        )

        deleted = await app_client.delete(f"{API}/tasks/{task_id}", headers=headers)
        running = await app_client.get(f"{API}/time-entries/running", headers=headers)

        assert deleted.status_code == 200
        assert running.json()["id"] == started.json()["id"]
        assert running.json()["taskId"] is None


@pytest.mark.asyncio
class TestProjectsAndTasks:
    """Tests for nested project and task routes."""

    async def test_list_nested(self, app_client, login, make_task):
        headers = await login("nested@example.com")
        task_id = await make_task(headers, name="Build")
        task = await app_client.get(f"{API}/tasks/{task_id}", headers=headers)
        project_id = task.json()["projectId"]

        await app_client.post(
            f"{API}/projects/{project_id}/tasks", json={"name": "Analyse"}, headers=headers
        )
        tasks = await app_client.get(f"{API}/projects/{project_id}/tasks", headers=headers)

        assert [t["name"] for t in tasks.json()] == ["Analyse", "Build"]

    async def test_foreign_task_routes(self, app_client, login, make_task):
        owner = await login("task-owner2@example.com")
        task_id = await make_task(owner)
        other = await login("task-other2@example.com")

        renamed = await app_client.put(
            f"{API}/tasks/{task_id}", json={"name": "Mine"}, headers=other
        )
        deleted = await app_client.delete(f"{API}/tasks/{task_id}", headers=other)

        assert renamed.status_code == 404
        assert renamed.json() == {"error": "Task not found"}
        assert deleted.status_code == 404
