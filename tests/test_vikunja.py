import httpx
import pytest

from quickadd.schemas import RepeatInterval
from quickadd.vikunja import VikunjaClient, VikunjaError, repeat_after_seconds


def make_client(fake) -> VikunjaClient:
    return VikunjaClient("http://vikunja.test/", "secret", transport=fake.transport)


@pytest.mark.parametrize(
    "interval, expected",
    [
        (None, None),
        (RepeatInterval(amount=2, interval_type="days"), 2 * 86400),
        (RepeatInterval(amount=1, interval_type="week"), 7 * 86400),
        (RepeatInterval(amount=3, interval_type="Hours"), 3 * 3600),
        (RepeatInterval(amount=1, interval_type="monday"), None),
    ],
)
def test_repeat_after_seconds(interval, expected):
    assert repeat_after_seconds(interval) == expected


@pytest.mark.asyncio
async def test_requests_carry_token():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with VikunjaClient("http://vikunja.test", "secret", transport=httpx.MockTransport(handler)) as client:
        await client.find_label("x")
    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert str(seen[0].url) == "http://vikunja.test/api/v1/labels"


@pytest.mark.asyncio
async def test_find_project_skips_saved_filters(fake_vikunja):
    async with make_client(fake_vikunja) as client:
        assert await client.find_project_id("  work ") == 7
        assert await client.find_project_id("Nope") is None


@pytest.mark.asyncio
async def test_resolve_default_project(fake_vikunja):
    async with make_client(fake_vikunja) as client:
        assert await client.resolve_default_project("12") == 12
        assert await client.resolve_default_project("home") == 3
        assert await client.resolve_default_project("Nope") == 1
        fake_vikunja.fail_paths.add("/projects")
        assert await client.resolve_default_project("home") == 1


@pytest.mark.asyncio
async def test_ensure_label_finds_or_creates(fake_vikunja):
    async with make_client(fake_vikunja) as client:
        assert (await client.ensure_label("shopping"))["id"] == 5
        created = await client.ensure_label("errands")
    assert created["title"] == "errands"
    assert fake_vikunja.calls_to("PUT", "/labels") == [{"title": "errands"}]


@pytest.mark.asyncio
async def test_http_errors_become_vikunja_errors(fake_vikunja):
    fake_vikunja.fail_paths.add("/labels")
    async with make_client(fake_vikunja) as client:
        with pytest.raises(VikunjaError) as exc:
            await client.find_label("x")
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_transport_errors_become_vikunja_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with VikunjaClient("http://vikunja.test", "secret", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(VikunjaError) as exc:
            await client.find_user("john")
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_create_task_with_magic(fake_vikunja, now):
    async with make_client(fake_vikunja) as client:
        task = await client.create_task_with_magic(
            "Buy groceries *shopping *errands @john @ghost +work tomorrow !2 every 2 weeks", 1, now=now
        )

    assert task["id"] == 42
    assert task["project_id"] == 7
    [payload] = fake_vikunja.calls_to("PUT", "/projects/7/tasks")
    assert payload == {
        "title": "Buy groceries",
        "done": False,
        "priority": 2,
        "due_date": "2025-07-01T23:59:59+00:00",
        "repeat_after": 14 * 86400,
    }
    assert fake_vikunja.calls_to("PUT", "/tasks/42/labels") == [{"label_id": 5}, {"label_id": 101}]
    # ghost has no account, only john is assigned
    assert fake_vikunja.calls_to("PUT", "/tasks/42/assignees") == [{"user_id": 9}]


@pytest.mark.asyncio
async def test_unknown_project_uses_default(fake_vikunja, now):
    async with make_client(fake_vikunja) as client:
        task = await client.create_task_with_magic("Fix fence +garden", 3, now=now)
    assert task["project_id"] == 3
    [payload] = fake_vikunja.calls_to("PUT", "/projects/3/tasks")
    assert payload["title"] == "Fix fence"
    assert payload["due_date"] is None
    assert "repeat_after" not in payload


@pytest.mark.asyncio
async def test_label_failures_do_not_fail_the_task(fake_vikunja, now):
    fake_vikunja.fail_paths.update({"/labels", "/projects"})
    async with make_client(fake_vikunja) as client:
        task = await client.create_task_with_magic("Fix fence *outside +garden", 3, now=now)
    assert task["id"] == 42
    assert fake_vikunja.calls_to("PUT", "/tasks/42/labels") == []


@pytest.mark.asyncio
async def test_task_creation_failure_raises(fake_vikunja, now):
    fake_vikunja.fail_paths.add("/projects/1/tasks")
    async with make_client(fake_vikunja) as client:
        with pytest.raises(VikunjaError):
            await client.create_task_with_magic("Fix fence", 1, now=now)
