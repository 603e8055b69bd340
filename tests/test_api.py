"""
Exercise Tracker — HTTP API Tests
==================================

What:  End-to-end behaviour of every endpoint through the ASGI app.
How:   HTTPX AsyncClient + ASGITransport against a temporary SQLite store.
"""

import uuid

import pytest
from sqlalchemy import func, select

from exercise_tracker.dates import format_calendar_date, today
from exercise_tracker.models.exercise import Exercise


async def _create_user(client, username="fcc_test"):
    response = await client.post("/api/users", data={"username": username})
    assert response.status_code == 201
    return response.json()


class TestStaticPage:

    @pytest.mark.asyncio
    async def test_index_served(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Exercise tracker" in response.text

    @pytest.mark.asyncio
    async def test_public_assets_served(self, test_client):
        response = await test_client.get("/public/style.css")
        assert response.status_code == 200


class TestUsers:

    @pytest.mark.asyncio
    async def test_create_user_form(self, test_client):
        body = await _create_user(test_client)
        assert body["username"] == "fcc_test"
        assert uuid.UUID(body["id"])

    @pytest.mark.asyncio
    async def test_create_user_json_trims(self, test_client):
        response = await test_client.post("/api/users", json={"username": "  jane  "})
        assert response.status_code == 201
        assert response.json()["username"] == "jane"

    @pytest.mark.asyncio
    async def test_blank_username_rejected(self, test_client):
        response = await test_client.post("/api/users", data={"username": "   "})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_missing_body_rejected(self, test_client):
        response = await test_client.post("/api/users")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_json_rejected(self, test_client):
        response = await test_client.post(
            "/api/users",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, test_client):
        await _create_user(test_client, "dup")
        response = await test_client.post("/api/users", data={"username": "dup"})
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_list_contains_each_user_once(self, test_client):
        created = [await _create_user(test_client, name) for name in ("ann", "ben")]

        response = await test_client.get("/api/users")

        assert response.status_code == 200
        users = response.json()
        assert users == created
        assert [u["username"] for u in users].count("ann") == 1


class TestExercises:

    @pytest.mark.asyncio
    async def test_fcc_scenario(self, test_client):
        user = await _create_user(test_client, "fcc_test")

        added = await test_client.post(
            f"/api/users/{user['id']}/exercises",
            data={"description": "test run", "duration": "30", "date": "2023-01-15"},
        )
        assert added.status_code == 201
        assert added.json() == {
            "id": user["id"],
            "username": "fcc_test",
            "description": "test run",
            "duration": 30,
            "date": "Sun Jan 15 2023",
        }

        logs = await test_client.get(f"/api/users/{user['id']}/logs")
        assert logs.status_code == 200
        assert logs.json() == {
            "username": "fcc_test",
            "count": 1,
            "id": user["id"],
            "log": [{"description": "test run", "duration": 30, "date": "Sun Jan 15 2023"}],
        }

    @pytest.mark.asyncio
    async def test_omitted_date_is_today(self, test_client):
        user = await _create_user(test_client)

        response = await test_client.post(
            f"/api/users/{user['id']}/exercises",
            json={"description": "walk", "duration": 15},
        )

        assert response.status_code == 201
        assert response.json()["date"] == format_calendar_date(today())

    @pytest.mark.asyncio
    async def test_unknown_user_not_found_and_nothing_stored(self, test_client, database):
        response = await test_client.post(
            f"/api/users/{uuid.uuid4()}/exercises",
            data={"description": "ghost", "duration": "10"},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        async with database.session() as session:
            total = await session.execute(select(func.count(Exercise.id)))
            assert total.scalar() == 0

    @pytest.mark.asyncio
    async def test_malformed_user_id_not_found(self, test_client):
        response = await test_client.post(
            "/api/users/not-an-id/exercises",
            data={"description": "ghost", "duration": "10"},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_user_checked_before_body(self, test_client):
        response = await test_client.post(f"/api/users/{uuid.uuid4()}/exercises", data={})
        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"description": "run", "duration": "abc"},
            {"description": "run", "duration": "0"},
            {"description": "", "duration": "10"},
            {"description": "x" * 101, "duration": "10"},
            {"duration": "10"},
            {"description": "run", "duration": "99999999999999999999"},
        ],
    )
    async def test_invalid_exercise_rejected(self, test_client, body):
        user = await _create_user(test_client)

        response = await test_client.post(f"/api/users/{user['id']}/exercises", data=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_boolean_duration_rejected(self, test_client):
        user = await _create_user(test_client)

        response = await test_client.post(
            f"/api/users/{user['id']}/exercises",
            json={"description": "run", "duration": True},
        )

        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["field"] == "duration"


class TestLogs:

    async def _seed(self, client):
        user = await _create_user(client, "logger")
        for day in (3, 1, 2, 5, 4):
            response = await client.post(
                f"/api/users/{user['id']}/exercises",
                data={"description": f"day {day}", "duration": str(day * 10), "date": f"2024-01-0{day}"},
            )
            assert response.status_code == 201
        return user

    @pytest.mark.asyncio
    async def test_log_sorted_by_date(self, test_client):
        user = await self._seed(test_client)

        body = (await test_client.get(f"/api/users/{user['id']}/logs")).json()

        assert [e["description"] for e in body["log"]] == [f"day {d}" for d in range(1, 6)]
        assert body["count"] == 5

    @pytest.mark.asyncio
    async def test_from_to_inclusive(self, test_client):
        user = await self._seed(test_client)

        response = await test_client.get(
            f"/api/users/{user['id']}/logs",
            params={"from": "2024-01-02", "to": "2024-01-04"},
        )

        body = response.json()
        assert [e["date"] for e in body["log"]] == [
            "Tue Jan 02 2024",
            "Wed Jan 03 2024",
            "Thu Jan 04 2024",
        ]
        assert body["count"] == 3

    @pytest.mark.asyncio
    async def test_limit_applied_and_count_matches_log(self, test_client):
        user = await self._seed(test_client)

        body = (
            await test_client.get(f"/api/users/{user['id']}/logs", params={"limit": "2"})
        ).json()

        assert len(body["log"]) == 2
        assert body["count"] == 2

    @pytest.mark.asyncio
    async def test_malformed_bounds_and_limit_ignored(self, test_client):
        user = await self._seed(test_client)

        response = await test_client.get(
            f"/api/users/{user['id']}/logs",
            params={"from": "garbage", "to": "2024-01-02", "limit": "zero"},
        )

        assert response.status_code == 200
        assert [e["description"] for e in response.json()["log"]] == ["day 1", "day 2"]

    @pytest.mark.asyncio
    async def test_limit_beyond_int64_returns_full_log(self, test_client):
        user = await self._seed(test_client)

        response = await test_client.get(
            f"/api/users/{user['id']}/logs",
            params={"limit": "99999999999999999999"},
        )

        assert response.status_code == 200
        assert response.json()["count"] == 5

    @pytest.mark.asyncio
    async def test_unknown_user_logs_not_found(self, test_client):
        response = await test_client.get(f"/api/users/{uuid.uuid4()}/logs")
        assert response.status_code == 404


class TestPlumbing:

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/users", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/users")
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_health_reports_store(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_store_routes_unavailable_without_database(self, test_client):
        from exercise_tracker.main import app

        app.state.database = None
        response = await test_client.get("/api/users")

        assert response.status_code == 503
        assert response.json()["error"] == "store_unavailable"

    @pytest.mark.asyncio
    async def test_store_write_failure_is_server_error(self, test_client, drop_table):
        user = await _create_user(test_client)
        await drop_table(Exercise.__table__)

        response = await test_client.post(
            f"/api/users/{user['id']}/exercises",
            data={"description": "run", "duration": "10"},
            headers={"X-Request-ID": "write-fail"},
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": "server_error",
            "message": "An internal error occurred. Please try again later.",
            "request_id": "write-fail",
        }

    @pytest.mark.asyncio
    async def test_store_read_failure_is_server_error(self, test_client, drop_table):
        user = await _create_user(test_client)
        await drop_table(Exercise.__table__)

        response = await test_client.get(f"/api/users/{user['id']}/logs")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert body["request_id"] == response.headers["X-Request-ID"]
