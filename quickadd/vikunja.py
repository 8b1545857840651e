"""Async Vikunja API client used to turn a parsed quick-add line into a task.

Only the endpoints quick add needs are wrapped: projects, labels, user
search, task creation and attaching labels/assignees to a task. Requests
are not retried.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from .config import settings
from .nlp.parser import QuickAddParser, get_parser
from .schemas import ParsedTask, RepeatInterval

logger = logging.getLogger(__name__)

FALLBACK_PROJECT_ID = 1

# Seconds per repeat unit; Vikunja stores repeats as "repeat_after" seconds
_REPEAT_SECONDS = {
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "month": 30 * 86400,
    "year": 365 * 86400,
}


class VikunjaError(Exception):
    """An API call to Vikunja failed (transport error or non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def repeat_after_seconds(interval: RepeatInterval | None) -> int | None:
    """Map 'every 2 weeks' to Vikunja's repeat_after; None for units it can't express."""
    if interval is None:
        return None
    unit = interval.interval_type.lower()
    if unit.endswith("s"):
        unit = unit[:-1]
    seconds = _REPEAT_SECONDS.get(unit)
    if seconds is None:
        logger.debug("Repeat unit %r has no fixed length, not sending repeat_after", interval.interval_type)
        return None
    return seconds * interval.amount


def task_payload(parsed: ParsedTask) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": parsed.title,
        "done": False,
        "priority": parsed.priority,
        "due_date": parsed.due_date.isoformat() if parsed.due_date else None,
    }
    repeat_after = repeat_after_seconds(parsed.repeat_interval)
    if repeat_after:
        payload["repeat_after"] = repeat_after
    return payload


class VikunjaClient:
    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float | None = None,
        parser: QuickAddParser | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.parser = parser or get_parser()
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/api/v1",
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout if timeout is not None else settings.http_timeout,
            transport=transport,
        )
        logger.debug("Created VikunjaClient for %s (token length %d)", self.base_url, len(token))

    async def __aenter__(self) -> VikunjaClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise VikunjaError(f"{method} {path} returned HTTP {status}: {e.response.text}", status) from e
        except httpx.HTTPError as e:
            raise VikunjaError(f"{method} {path} failed: {e}") from e
        return resp.json()

    # projects

    async def find_project_id(self, name: str) -> int | None:
        wanted = name.strip().lower()
        projects = await self._request("GET", "/projects")
        for p in projects:
            # saved filters show up as projects with negative ids
            if p["id"] > 0 and p["title"].strip().lower() == wanted:
                return p["id"]
        logger.debug("No project titled %r among %d projects", name, len(projects))
        return None

    async def resolve_default_project(self, ref: str | int) -> int:
        """Accept a project id or name; unknown names fall back to project 1."""
        try:
            return int(ref)
        except ValueError:
            pass
        try:
            project_id = await self.find_project_id(str(ref))
        except VikunjaError as e:
            logger.warning("Error looking up project %r: %s, using project %d", ref, e, FALLBACK_PROJECT_ID)
            return FALLBACK_PROJECT_ID
        if project_id is None:
            logger.warning("Project %r not found, using project %d", ref, FALLBACK_PROJECT_ID)
            return FALLBACK_PROJECT_ID
        return project_id

    # labels

    async def find_label(self, name: str) -> dict | None:
        labels = await self._request("GET", "/labels")
        return next((lb for lb in labels if lb["title"].lower() == name.lower()), None)

    async def create_label(self, name: str) -> dict:
        return await self._request("PUT", "/labels", json={"title": name})

    async def ensure_label(self, name: str) -> dict:
        label = await self.find_label(name)
        if label is not None:
            return label
        logger.debug("Creating label %r", name)
        return await self.create_label(name)

    # users

    async def find_user(self, username: str) -> dict | None:
        users = await self._request("GET", f"/users/search/{username}")
        return next((u for u in users or [] if u["username"].lower() == username.lower()), None)

    # tasks

    async def create_task(self, project_id: int, payload: dict[str, Any]) -> dict:
        logger.debug("PUT /projects/%d/tasks %s", project_id, payload)
        return await self._request("PUT", f"/projects/{project_id}/tasks", json=payload)

    async def add_label_to_task(self, task_id: int, label_id: int) -> None:
        await self._request("PUT", f"/tasks/{task_id}/labels", json={"label_id": label_id})

    async def add_assignee_to_task(self, task_id: int, user_id: int) -> None:
        await self._request("PUT", f"/tasks/{task_id}/assignees", json={"user_id": user_id})

    async def create_task_with_magic(
        self,
        text: str,
        default_project_id: int,
        now: datetime | None = None,
    ) -> dict:
        """Parse ``text`` and create the task it describes.

        The project named with +project is used when it exists, otherwise
        ``default_project_id``. Labels are created on demand; assignees must
        already exist. A label or assignee that can't be attached is logged
        and skipped; failing to create the task itself raises VikunjaError.
        """
        parsed = self.parser.parse(text, now=now)
        logger.debug(
            "Parsed task - title: %r, labels: %s, project: %s, priority: %s",
            parsed.title,
            parsed.labels,
            parsed.project,
            parsed.priority,
        )

        project_id = default_project_id
        if parsed.project:
            try:
                found = await self.find_project_id(parsed.project)
            except VikunjaError as e:
                logger.warning("Error looking up project %r: %s, using default %d", parsed.project, e, project_id)
            else:
                if found is None:
                    logger.info("Project %r not found, using default %d", parsed.project, project_id)
                else:
                    project_id = found

        task = await self.create_task(project_id, task_payload(parsed))
        task_id = task["id"]
        logger.debug("Task created with id %s in project %d", task_id, project_id)

        for name in parsed.labels:
            try:
                label = await self.ensure_label(name)
                await self.add_label_to_task(task_id, label["id"])
            except VikunjaError as e:
                logger.warning("Could not add label %r to task %s: %s", name, task_id, e)

        for username in parsed.assignees:
            try:
                user = await self.find_user(username)
                if user is None:
                    logger.warning("No user named %r, not assigning task %s", username, task_id)
                    continue
                await self.add_assignee_to_task(task_id, user["id"])
            except VikunjaError as e:
                logger.warning("Could not assign %r to task %s: %s", username, task_id, e)

        return task
