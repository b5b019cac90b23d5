"""Integration tests for API endpoints.

These tests drive the tracker end-to-end through FastAPI with an in-memory
database and a fake clock.
"""

import asyncio
from datetime import datetime

import httpx
from anyio.to_thread import current_default_thread_limiter


class TestStateEndpoints:
    """Read-only views of the tracker."""

    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_initial_state(self, test_client):
        response = test_client.get("/state")
        assert response.status_code == 200
        data = response.json()
        assert data["lastDate"] == "2024-01-01"
        assert data["lastWeek"] == "2023-12-31"
        assert [t["id"] for t in data["tasks"]] == [1, 2, 3, 4]
        assert data["tasks"][0]["completedCount"] == 0

    def test_initial_progress(self, test_client):
        data = test_client.get("/progress").json()
        assert data["completed"] == 0
        assert data["total"] == 4
        assert data["streak"] == 0
        assert len(data["history"]) == 7


class TestProgressEndpoints:
    """toggle / increment / decrement."""

    def test_toggle_all_meets_goal(self, test_client):
        for task_id in (1, 2, 3):
            response = test_client.post(f"/tasks/{task_id}/toggle")
            assert response.status_code == 200
        assert response.json()["progress"]["history"][-1]["percent"] == 75

        data = test_client.post("/tasks/4/toggle").json()
        assert data["task"]["completedCount"] == 1
        assert data["progress"]["completed"] == 4
        assert data["progress"]["streak"] == 1

        state = test_client.get("/state").json()
        assert state["history"]["2024-01-01"] == {"completedCount": 4, "total": 4, "goalMet": True}

    def test_increment_and_decrement(self, test_client):
        test_client.post("/tasks/1/increment")
        data = test_client.post("/tasks/1/increment").json()
        assert data["task"]["completedCount"] == 2
        data = test_client.post("/tasks/1/decrement").json()
        assert data["task"]["completedCount"] == 1

    def test_unknown_task_is_404(self, test_client):
        assert test_client.post("/tasks/99/toggle").status_code == 404
        assert test_client.post("/tasks/99/increment").status_code == 404
        assert test_client.post("/tasks/99/decrement").status_code == 404

    def test_day_rollover_on_next_request(self, test_client, clock):
        for task_id in (1, 2, 3, 4):
            test_client.post(f"/tasks/{task_id}/toggle")
        clock.set(datetime(2024, 1, 2, 7, 0))
        tasks = test_client.get("/tasks").json()["tasks"]
        assert [t["completedCount"] for t in tasks] == [0, 0, 0, 1]


class TestTaskEndpoints:
    """Task management endpoints."""

    def test_create_task(self, test_client):
        response = test_client.post(
            "/tasks",
            json={"label": "Coffee chat", "target": 2, "frequency": "weekly", "externalUrl": "calendly.com/me"},
        )
        assert response.status_code == 201
        task = response.json()["task"]
        assert task["id"] == 5
        assert task["frequency"] == "weekly"
        assert task["externalUrl"] == "https://calendly.com/me"

    def test_create_task_validation(self, test_client):
        assert test_client.post("/tasks", json={"label": ""}).status_code == 422
        assert test_client.post("/tasks", json={"label": "x", "target": 0}).status_code == 422
        assert test_client.post("/tasks", json={"label": "   "}).status_code == 422

    def test_update_task(self, test_client):
        test_client.post("/tasks/1/toggle")
        response = test_client.patch("/tasks/1", json={"target": 1, "label": "Apply to 1 job"})
        assert response.status_code == 200
        task = response.json()["task"]
        assert task["target"] == 1
        assert task["completedCount"] == 1
        assert task["label"] == "Apply to 1 job"

    def test_update_clears_linked_view_with_null(self, test_client):
        task = test_client.patch("/tasks/1", json={"linkedView": None}).json()["task"]
        assert task["linkedView"] is None
        assert task["label"] == "Apply to 3 jobs"

    def test_update_omitted_linked_view_is_kept(self, test_client):
        task = test_client.patch("/tasks/2", json={"label": "Solve 2 problems"}).json()["task"]
        assert task["linkedView"] == "leetcode"

    def test_update_missing_task(self, test_client):
        assert test_client.patch("/tasks/42", json={"label": "x"}).status_code == 404

    def test_delete_and_restore_defaults(self, test_client):
        response = test_client.delete("/tasks/3")
        assert response.status_code == 200
        assert [t["id"] for t in response.json()["tasks"]] == [1, 2, 4]
        assert [t["id"] for t in test_client.get("/tasks").json()["tasks"]] == [1, 2, 4]

        tasks = test_client.post("/tasks/restore-defaults").json()["tasks"]
        assert [t["id"] for t in tasks] == [1, 2, 4, 3]

    def test_delete_missing_task(self, test_client):
        assert test_client.delete("/tasks/42").status_code == 404

    def test_reorder(self, test_client):
        response = test_client.put("/tasks/order", json={"taskIds": [2, 1, 4, 3]})
        assert response.status_code == 200
        assert [t["id"] for t in test_client.get("/tasks").json()["tasks"]] == [2, 1, 4, 3]

    def test_reorder_rejects_partial_order(self, test_client):
        assert test_client.put("/tasks/order", json={"taskIds": [2, 1]}).status_code == 422

    def test_reset_all(self, test_client):
        test_client.post("/tasks", json={"label": "Extra"})
        test_client.post("/tasks/1/toggle")
        data = test_client.post("/reset").json()
        assert data["history"] == {}
        assert [t["id"] for t in data["tasks"]] == [1, 2, 3, 4]


class TestSettingsEndpoints:
    """Default view settings."""

    def test_default_settings(self, test_client):
        assert test_client.get("/settings").json() == {"defaultView": "checklist"}

    def test_update_settings(self, test_client):
        response = test_client.put("/settings", json={"defaultView": "resume"})
        assert response.status_code == 200
        assert test_client.get("/settings").json() == {"defaultView": "resume"}

    def test_invalid_view(self, test_client):
        assert test_client.put("/settings", json={"defaultView": "inbox"}).status_code == 422


class TestLifespan:
    """Startup work runs through the lifespan handler."""

    def test_lifespan_creates_writer_lock(self, test_client):
        assert isinstance(test_client.app.state.writer_lock, asyncio.Lock)


class TestConcurrency:
    """Requests queued behind the writer lock do not hold worker threads."""

    def test_more_writers_than_worker_threads(self, api_app):
        async def scenario():
            current_default_thread_limiter().total_tokens = 2
            async with api_app.router.lifespan_context(api_app):
                transport = httpx.ASGITransport(app=api_app)
                async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
                    responses = await asyncio.wait_for(
                        asyncio.gather(*(client.post(f"/tasks/{task_id}/toggle") for task_id in (1, 2, 3, 4))),
                        timeout=5,
                    )
                    state = (await client.get("/state")).json()
            return responses, state

        responses, state = asyncio.run(scenario())
        assert [r.status_code for r in responses] == [200, 200, 200, 200]
        # Serialized writers: no toggle was lost
        assert [t["completedCount"] for t in state["tasks"]] == [3, 1, 2, 1]
        assert state["history"]["2024-01-01"]["goalMet"] is True


class TestJobEndpoints:
    """Job applications and their contacts."""

    def _create(self, test_client, **overrides):
        body = {"title": "Backend Engineer", "company": "Acme", "postUrl": "acme.com/jobs/1"}
        body.update(overrides)
        return test_client.post("/jobs", json=body)

    def test_empty_list(self, test_client):
        assert test_client.get("/jobs").json() == {"jobs": []}

    def test_create_job(self, test_client):
        response = self._create(test_client)
        assert response.status_code == 201
        job = response.json()
        assert job["id"] == 1
        assert job["status"] == "saved"
        assert job["postUrl"] == "https://acme.com/jobs/1"
        assert job["contacts"] == []
        assert [j["title"] for j in test_client.get("/jobs").json()["jobs"]] == ["Backend Engineer"]

    def test_title_and_company_required(self, test_client):
        assert self._create(test_client, title="").status_code == 422
        assert self._create(test_client, company="  ").status_code == 422
        assert test_client.post("/jobs", json={"title": "Only title"}).status_code == 422

    def test_update_status(self, test_client):
        job_id = self._create(test_client).json()["id"]
        response = test_client.patch(f"/jobs/{job_id}", json={"status": "interview"})
        assert response.status_code == 200
        assert test_client.get(f"/jobs/{job_id}").json()["status"] == "interview"

    def test_unknown_status_rejected(self, test_client):
        job_id = self._create(test_client).json()["id"]
        assert test_client.patch(f"/jobs/{job_id}", json={"status": "hired"}).status_code == 422

    def test_missing_job(self, test_client):
        assert test_client.get("/jobs/9").status_code == 404
        assert test_client.patch("/jobs/9", json={"title": "x"}).status_code == 404
        assert test_client.delete("/jobs/9").status_code == 404

    def test_delete_job(self, test_client):
        first = self._create(test_client).json()["id"]
        second = self._create(test_client, title="Data Engineer").json()["id"]
        response = test_client.delete(f"/jobs/{first}")
        assert response.status_code == 200
        assert [j["id"] for j in response.json()["jobs"]] == [second]

    def test_contacts(self, test_client):
        job_id = self._create(test_client).json()["id"]
        response = test_client.post(f"/jobs/{job_id}/contacts", json={"name": "Dana", "linkedin": "linkedin.com/in/dana"})
        assert response.status_code == 201
        contact = response.json()
        assert contact["status"] == "none"
        assert contact["linkedin"] == "https://linkedin.com/in/dana"

        updated = test_client.patch(f"/jobs/{job_id}/contacts/{contact['id']}", json={"status": "messaged"})
        assert updated.json()["status"] == "messaged"

        job = test_client.delete(f"/jobs/{job_id}/contacts/{contact['id']}").json()
        assert job["contacts"] == []
        assert test_client.delete(f"/jobs/{job_id}/contacts/{contact['id']}").status_code == 404

    def test_reset_all_keeps_jobs(self, test_client):
        self._create(test_client)
        test_client.post("/reset")
        assert len(test_client.get("/jobs").json()["jobs"]) == 1
