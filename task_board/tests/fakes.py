"""In-memory fakes shared by the board tests."""

import json
from datetime import datetime, timedelta, timezone

import httpx

from task_board.models import Task


API_BASE = "http://tasks.test/api"
T0 = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


class FakeTaskServer:
    """In-memory stand-in for the task service behind ``httpx.MockTransport``.

    ``fail`` holds ``(method, task_id)`` pairs (task_id None for the
    collection) that should answer 500 instead of succeeding.
    """

    def __init__(self) -> None:
        self.tasks: dict[int, dict] = {}
        self.next_id = 1
        self.requests: list[tuple[str, str, dict]] = []
        self.fail: set[tuple[str, object]] = set()

    def add(self, title: str, completed: bool = False) -> dict:
        task_id = self.next_id
        self.next_id += 1
        task = {
            "id": task_id,
            "title": title,
            "completed": completed,
            "created_at": (T0 + timedelta(minutes=task_id)).isoformat(),
        }
        self.tasks[task_id] = task
        return task

    def count(self, method: str) -> int:
        return sum(1 for m, _, _ in self.requests if m == method)

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        path = request.url.path.removeprefix("/api")
        self.requests.append((request.method, path, body))

        if path == "/health":
            return httpx.Response(200, json={"ok": True})

        parts = path.strip("/").split("/")
        task_id = int(parts[1]) if len(parts) > 1 else None
        if (request.method, task_id) in self.fail:
            return httpx.Response(500, json={"error": "database error"})

        if task_id is None:
            if request.method == "GET":
                ordered = sorted(self.tasks.values(), key=lambda t: t["id"], reverse=True)
                return httpx.Response(200, json=ordered)
            if request.method == "POST":
                if not body.get("title"):
                    return httpx.Response(400, json={"error": "title required"})
                task = self.add(body["title"])
                return httpx.Response(201, json={"id": task["id"], "title": task["title"], "completed": False})

        task = self.tasks.get(task_id)
        if task is None:
            return httpx.Response(404, json={"error": "Task not found"})
        if request.method == "PUT":
            task.update({k: v for k, v in body.items() if k in ("title", "completed")})
            return httpx.Response(200, json={k: task[k] for k in ("id", "title", "completed")})
        if request.method == "DELETE":
            del self.tasks[task_id]
            return httpx.Response(204)
        return httpx.Response(405)


def make_task(task_id: int, title: str, completed: bool = False, minutes: int = 0) -> Task:
    return Task(
        id=task_id,
        title=title,
        completed=completed,
        created_at=T0 + timedelta(minutes=minutes or task_id),
    )

