"""API tests: lifespan hooks and the answer endpoints via ``TestClient``."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from answerbook.api.app import create_app
from answerbook.models import Reply


@pytest.fixture()
def session():
    s = MagicMock(name="session")
    s.start = AsyncMock()
    s.stop = AsyncMock()
    s.is_running = True
    return s


@pytest.fixture()
def client(session):
    app = create_app(session=session)
    with TestClient(app) as c:
        yield c


class TestLifespan:
    def test_start_and_stop_bound_to_app(self, session) -> None:
        app = create_app(session=session)
        with TestClient(app):
            session.start.assert_awaited_once()
            session.stop.assert_not_awaited()
        session.stop.assert_awaited_once()


class TestHealthEndpoint:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "browser_running": True}


class TestPromptEndpoint:
    def test_default_prompt(self, client: TestClient) -> None:
        resp = client.get("/answer/prompt")
        assert resp.status_code == 200
        assert resp.json()["text"] == "在心中默念你的问题，等待答案之书给你答案。"

    def test_suppressed_prompt(self, monkeypatch, session) -> None:
        monkeypatch.setenv("ANSWERBOOK_ANSWER__SEND_PROMPT", "false")
        with TestClient(create_app(session=session)) as c:
            assert c.get("/answer/prompt").status_code == 204


class TestAnswerEndpoint:
    def test_text_reply(self, client: TestClient) -> None:
        client.app.state.book.answer = AsyncMock(return_value=Reply(text="HELLO\n你 好 "))

        resp = client.get("/answer", params={"mode": "bilingual_upper_spaced"})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == "HELLO\n你 好 "
        client.app.state.book.answer.assert_awaited_once_with("bilingual_upper_spaced")

    def test_image_reply(self, client: TestClient) -> None:
        client.app.state.book.answer = AsyncMock(return_value=Reply(image=b"\xff\xd8jpeg", mime_type="image/jpeg"))

        resp = client.get("/answer")

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/jpeg"
        assert resp.content == b"\xff\xd8jpeg"

    def test_failure_maps_to_502(self, client: TestClient) -> None:
        client.app.state.book.answer = AsyncMock(return_value=None)

        resp = client.get("/answer")

        assert resp.status_code == 502
