import json
from datetime import UTC, datetime

import httpx
import pytest

from quickadd.nlp.parser import QuickAddParser

# A Monday
NOW = datetime(2025, 6, 30, 12, 0, tzinfo=UTC)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture(scope="session")
def parser() -> QuickAddParser:
    return QuickAddParser()


class FakeVikunja:
    """In-memory stand-in for the Vikunja API, served through httpx.MockTransport."""

    def __init__(self):
        self.projects = [
            {"id": -1, "title": "Work"},  # saved filter
            {"id": 7, "title": "Work"},
            {"id": 3, "title": "Home"},
        ]
        self.labels = [{"id": 5, "title": "Shopping"}]
        self.users = {"john": [{"id": 9, "username": "John"}]}
        self.fail_paths: set[str] = set()
        self.calls: list[tuple[str, str, dict | None]] = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/v1")
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, path, body))

        if path in self.fail_paths:
            return httpx.Response(500, json={"message": "boom"})

        if request.method == "GET" and path == "/projects":
            return httpx.Response(200, json=self.projects)
        if request.method == "PUT" and path.startswith("/projects/") and path.endswith("/tasks"):
            project_id = int(path.split("/")[2])
            return httpx.Response(200, json={"id": 42, "project_id": project_id, "done": False, **body})
        if request.method == "GET" and path == "/labels":
            return httpx.Response(200, json=self.labels)
        if request.method == "PUT" and path == "/labels":
            label = {"id": 100 + len(self.labels), "title": body["title"]}
            self.labels.append(label)
            return httpx.Response(200, json=label)
        if request.method == "GET" and path.startswith("/users/search/"):
            return httpx.Response(200, json=self.users.get(path.rsplit("/", 1)[1], []))
        if request.method == "PUT" and path.startswith("/tasks/"):
            return httpx.Response(200, json={})
        return httpx.Response(404, json={"message": "not found"})

    def calls_to(self, method: str, path: str) -> list[dict | None]:
        return [body for m, p, body in self.calls if m == method and p == path]


@pytest.fixture()
def fake_vikunja() -> FakeVikunja:
    return FakeVikunja()
