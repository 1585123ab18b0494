"""Error rendering tests — shapes, localization, and the generic 500."""

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import PASSWORD, make_settings, unique_email
from tasktrack.db.engine import Database
from tasktrack.errors import TaskNotFoundError, validation_messages
from tasktrack.main import create_app
from tasktrack.messages import translate
from tasktrack.services.task_service import TaskRepository


@pytest.fixture
async def broken_client(tmp_path):
    """An app whose database file cannot be opened."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'db.sqlite'}"
    settings = make_settings(database_url=url)
    database = Database(url)
    app = create_app(settings=settings, database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    await database.dispose()


@pytest.fixture
async def ja_client(database):
    app = create_app(settings=make_settings(locale="ja"), database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.mark.asyncio
async def test_database_failure_is_generic_500(broken_client):
    r = await broken_client.post(
        "/api/auth/register", json={"email": unique_email(), "password": PASSWORD}
    )
    assert r.status_code == 500
    assert r.json() == {"error": "A server error occurred."}
    assert "sqlite" not in r.text.lower()


@pytest.mark.asyncio
async def test_health_reports_degraded_database(broken_client):
    r = await broken_client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "degraded"
    assert r.json()["database"].startswith("error")


@pytest.mark.asyncio
async def test_unknown_route_uses_error_shape(client):
    r = await client.get("/api/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Not found."}


@pytest.mark.asyncio
async def test_wrong_method_uses_error_shape(client):
    r = await client.delete("/api/auth/me")
    assert r.status_code == 405
    assert r.json() == {"error": "Method not allowed."}


@pytest.mark.asyncio
async def test_malformed_json_is_400(auth_client):
    r = await auth_client.post(
        "/api/tasks",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.asyncio
async def test_japanese_locale(ja_client):
    r = await ja_client.get("/api/tasks")
    assert r.json() == {"error": "認証が必要です。"}

    r = await ja_client.post(
        "/api/auth/register", json={"email": "bad", "password": "abc"}
    )
    fields = r.json()["fields"]
    assert fields["email"] == "正しいメールアドレスを入力してください。"
    assert fields["password"] == "パスワードは6文字以上で入力してください。"


def test_translate_falls_back_to_english():
    assert translate("tasks.not_found", "fr") == "Task not found."
    assert translate("no.such.key") == "no.such.key"
    assert translate("tasks.bulk_updated", "ja", count=3) == "3件のタスクのステータスを更新しました。"


def test_app_error_carries_status_and_key():
    err = TaskNotFoundError()
    assert err.status_code == 404
    assert translate(err.message_key) == "Task not found."


def test_validation_messages_one_per_field():
    errors = [
        {"loc": ("body", "title"), "type": "string_too_long", "msg": "x", "ctx": {"max_length": 100}},
        {"loc": ("body", "title"), "type": "missing", "msg": "y"},
        {"loc": ("query", "page"), "type": "greater_than_equal", "msg": "Input should be >= 1"},
    ]
    assert validation_messages(errors, "en") == {
        "title": "Title must be at most 100 characters.",
        "page": "Input should be >= 1",
    }


@pytest.fixture
async def lenient_client(app):
    """A logged-in client that receives 500 responses instead of raising."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        r = await c.post(
            "/api/auth/register", json={"email": unique_email(), "password": PASSWORD}
        )
        assert r.status_code == 201
        yield c


@pytest.mark.asyncio
async def test_unexpected_exception_is_json_500(lenient_client, monkeypatch):
    async def refuse(self, **kwargs):
        raise OSError("connection refused")

    monkeypatch.setattr(TaskRepository, "list_tasks", refuse)
    r = await lenient_client.get("/api/tasks")
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("application/json")
    assert r.json() == {"error": "Failed to fetch tasks."}
    assert "refused" not in r.text


@pytest.mark.asyncio
async def test_failure_message_names_the_operation(lenient_client, monkeypatch):
    async def fail(self, *args, **kwargs):
        raise OverflowError("int too large")

    monkeypatch.setattr(TaskRepository, "create_task", fail)
    r = await lenient_client.post("/api/tasks", json={"title": "x"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to create the task."}


@pytest.mark.asyncio
async def test_japanese_failure_and_session_messages(database, monkeypatch):
    app = create_app(settings=make_settings(locale="ja"), database=database)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        r = await c.get("/api/auth/me")
        assert r.json() == {"error": "認証されていません。"}

        await c.post(
            "/api/auth/register", json={"email": unique_email(), "password": PASSWORD}
        )

        async def fail(self, *args, **kwargs):
            raise OSError("connection refused")

        monkeypatch.setattr(TaskRepository, "delete_task", fail)
        r = await c.delete("/api/tasks/00000000-0000-0000-0000-000000000001")
        assert r.status_code == 500
        assert r.json() == {"error": "タスクの削除に失敗しました。"}


@pytest.mark.asyncio
async def test_japanese_missing_credentials(ja_client):
    r = await ja_client.post("/api/auth/register", json={})
    assert r.status_code == 400
    assert r.json()["fields"] == {
        "email": "メールアドレスは必須です。",
        "password": "パスワードは必須です。",
    }


def test_validation_messages_localize_unmapped_errors():
    errors = [
        {"loc": ("body", "taskIds"), "type": "list_type", "msg": "Input should be a valid list"},
        {"loc": ("body", "status"), "type": "missing", "msg": "Field required"},
    ]
    assert validation_messages(errors, "ja") == {
        "taskIds": "値が正しくありません。",
        "status": "この項目は必須です。",
    }
