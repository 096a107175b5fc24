"""API tests for todo endpoints."""

from fastapi.testclient import TestClient


class TestServiceEndpoints:
    def test_root_endpoint(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Todo API is running"
        assert data["environment"] == "test"

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "memory"

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Route GET /api/nothing-here not found",
            "error": "not_found",
        }

    def test_request_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestTodoAPI:
    def test_end_to_end(self, client: TestClient, register) -> None:
        headers = register("alice", "alice@x.com", "pw123")["headers"]

        created = client.post("/api/todos", json={"title": "buy milk"}, headers=headers)
        assert created.status_code == 201
        todo = created.json()["data"]
        assert todo["priority"] == "medium"
        assert todo["completed"] is False
        assert todo["category"] == "general"
        assert "createdAt" in todo and "updatedAt" in todo

        toggled = client.patch(f"/api/todos/{todo['id']}/toggle", headers=headers)
        assert toggled.status_code == 200
        assert toggled.json()["data"]["completed"] is True

        stats = client.get("/api/todos/stats", headers=headers).json()["data"]
        assert stats["total"] == 1
        assert stats["completed"] == 1
        assert stats["pending"] == 0
        assert stats["completionRate"] == 100
        assert stats["priorityStats"] == [{"priority": "medium", "count": 1}]
        assert stats["categoryStats"] == [{"category": "general", "count": 1}]

    def test_create_validation(self, client: TestClient, register) -> None:
        headers = register()["headers"]
        missing = client.post("/api/todos", json={"description": "No title"}, headers=headers)
        assert missing.status_code == 400
        assert missing.json()["field"] == "title"

        blank = client.post("/api/todos", json={"title": "   "}, headers=headers)
        assert blank.status_code == 400

        bad_priority = client.post("/api/todos", json={"title": "x", "priority": "urgent"}, headers=headers)
        assert bad_priority.status_code == 400
        assert bad_priority.json()["error"] == "validation_error"

    def test_create_with_all_fields(self, client: TestClient, register) -> None:
        headers = register()["headers"]
        body = {
            "title": "Report",
            "description": "Quarterly numbers",
            "priority": "high",
            "dueDate": "2030-01-31T17:00:00Z",
            "tags": ["work", "finance"],
            "category": "work",
        }
        todo = client.post("/api/todos", json=body, headers=headers).json()["data"]
        assert todo["priority"] == "high"
        assert todo["dueDate"].startswith("2030-01-31T17:00:00")
        assert todo["tags"] == ["work", "finance"]
        assert todo["category"] == "work"

    def test_get_update_delete(self, client: TestClient, register) -> None:
        headers = register()["headers"]
        todo_id = client.post(
            "/api/todos",
            json={"title": "Original", "description": "details"},
            headers=headers,
        ).json()["data"]["id"]

        fetched = client.get(f"/api/todos/{todo_id}", headers=headers)
        assert fetched.status_code == 200
        assert fetched.json()["data"]["title"] == "Original"

        updated = client.put(
            f"/api/todos/{todo_id}",
            json={"title": "Updated", "completed": True},
            headers=headers,
        ).json()["data"]
        assert updated["title"] == "Updated"
        assert updated["completed"] is True
        assert updated["description"] == "details"

        cleared = client.put(f"/api/todos/{todo_id}", json={"description": None}, headers=headers)
        assert cleared.json()["data"]["description"] == ""

        bad = client.put(f"/api/todos/{todo_id}", json={"priority": "urgent"}, headers=headers)
        assert bad.status_code == 400

        deleted = client.delete(f"/api/todos/{todo_id}", headers=headers)
        assert deleted.status_code == 200
        assert deleted.json() == {"success": True, "message": "Todo removed"}

        assert client.get(f"/api/todos/{todo_id}", headers=headers).status_code == 404
        assert client.delete(f"/api/todos/{todo_id}", headers=headers).status_code == 404

    def test_malformed_id_is_not_found(self, client: TestClient, register) -> None:
        headers = register()["headers"]
        response = client.get("/api/todos/12345", headers=headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Todo not found"

    def test_ownership_isolation(self, client: TestClient, register) -> None:
        alice = register("alice", "alice@x.com")["headers"]
        bob = register("bob", "bob@x.com")["headers"]
        todo_id = client.post("/api/todos", json={"title": "alice only"}, headers=alice).json()["data"]["id"]

        missing = client.get("/api/todos/000000000000000000000000", headers=bob)
        for response in (
            client.get(f"/api/todos/{todo_id}", headers=bob),
            client.put(f"/api/todos/{todo_id}", json={"title": "mine now"}, headers=bob),
            client.patch(f"/api/todos/{todo_id}/toggle", headers=bob),
            client.delete(f"/api/todos/{todo_id}", headers=bob),
        ):
            assert response.status_code == 404
            assert response.json() == missing.json()

        assert client.get("/api/todos", headers=bob).json()["data"]["pagination"]["total"] == 0
        still_there = client.get(f"/api/todos/{todo_id}", headers=alice).json()["data"]
        assert still_there["title"] == "alice only"
        assert still_there["completed"] is False

    def test_listing_pagination_and_filters(self, client: TestClient, register) -> None:
        headers = register()["headers"]
        for i in range(12):
            body = {"title": f"Todo {i}", "priority": "high" if i % 3 == 0 else "low"}
            client.post("/api/todos", json=body, headers=headers)

        page = client.get("/api/todos", params={"page": 2, "limit": 5}, headers=headers).json()
        assert page["success"] is True
        assert page["count"] == 5
        assert len(page["data"]["todos"]) == 5
        assert page["data"]["pagination"] == {"page": 2, "limit": 5, "total": 12, "pages": 3}

        normalized = client.get("/api/todos", params={"page": "abc", "limit": "-1"}, headers=headers).json()
        assert normalized["data"]["pagination"]["page"] == 1
        assert normalized["data"]["pagination"]["limit"] == 10

        high = client.get("/api/todos", params={"priority": "high"}, headers=headers).json()
        assert high["data"]["pagination"]["total"] == 4
        assert all(todo["priority"] == "high" for todo in high["data"]["todos"])

        searched = client.get("/api/todos", params={"search": "todo 1"}, headers=headers).json()
        assert {todo["title"] for todo in searched["data"]["todos"]} == {"Todo 1", "Todo 10", "Todo 11"}

        ordered = client.get(
            "/api/todos",
            params={"sortBy": "title", "sortOrder": "asc", "limit": 3},
            headers=headers,
        ).json()
        assert [todo["title"] for todo in ordered["data"]["todos"]] == ["Todo 0", "Todo 1", "Todo 10"]

    def test_completed_filter(self, client: TestClient, register) -> None:
        headers = register()["headers"]
        ids = [
            client.post("/api/todos", json={"title": f"t{i}"}, headers=headers).json()["data"]["id"]
            for i in range(3)
        ]
        client.patch(f"/api/todos/{ids[0]}/toggle", headers=headers)

        done = client.get("/api/todos", params={"completed": "true"}, headers=headers).json()["data"]
        assert [todo["id"] for todo in done["todos"]] == [ids[0]]
        pending = client.get("/api/todos", params={"completed": "false"}, headers=headers).json()["data"]
        assert pending["pagination"]["total"] == 2

        bad = client.get("/api/todos", params={"completed": "maybe"}, headers=headers)
        assert bad.status_code == 400

    def test_sort_by_due_date_mixes_naive_and_offset_values(self, client: TestClient, register) -> None:
        headers = register()["headers"]
        for title, due in (
            ("later", "2030-03-01T00:00:00"),
            ("sooner", "2030-01-01T00:00:00Z"),
            ("middle", "2030-02-01T02:00:00+02:00"),
            ("undated", None),
        ):
            response = client.post("/api/todos", json={"title": title, "dueDate": due}, headers=headers)
            assert response.status_code == 201

        listed = client.get(
            "/api/todos",
            params={"sortBy": "dueDate", "sortOrder": "asc"},
            headers=headers,
        )
        assert listed.status_code == 200
        todos = listed.json()["data"]["todos"]
        assert [todo["title"] for todo in todos] == ["undated", "sooner", "middle", "later"]
        assert todos[3]["dueDate"].startswith("2030-03-01T00:00:00")
        assert todos[3]["dueDate"].endswith("Z") or todos[3]["dueDate"].endswith("+00:00")
        assert todos[2]["dueDate"].startswith("2030-02-01T00:00:00")

    def test_stats_for_new_user(self, client: TestClient, register) -> None:
        headers = register()["headers"]
        stats = client.get("/api/todos/stats", headers=headers).json()["data"]
        assert stats == {
            "total": 0,
            "completed": 0,
            "pending": 0,
            "completionRate": 0,
            "priorityStats": [],
            "categoryStats": [],
        }
