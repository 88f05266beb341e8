"""CLI tests via ``typer.testing.CliRunner``."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from answerbook.cli.app import app
from answerbook.models import Reply


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


class TestOpenCommand:
    def test_prints_prompt_and_text(self, runner: CliRunner) -> None:
        with patch("answerbook.cli.answer_cmd._open_once", AsyncMock(return_value=Reply(text="YES\n是 的 "))):
            result = runner.invoke(app, ["open", "--mode", "bilingual_upper_spaced"])

        assert result.exit_code == 0, result.output
        assert "在心中默念你的问题" in result.output
        assert "YES" in result.output

    def test_writes_image(self, runner: CliRunner, tmp_path) -> None:
        target = tmp_path / "answer.jpg"
        reply = Reply(image=b"\xff\xd8", mime_type="image/jpeg")
        with patch("answerbook.cli.answer_cmd._open_once", AsyncMock(return_value=reply)):
            result = runner.invoke(app, ["open", "--output", str(target)])

        assert result.exit_code == 0, result.output
        assert target.read_bytes() == b"\xff\xd8"

    def test_failure_exit_code(self, runner: CliRunner) -> None:
        with patch("answerbook.cli.answer_cmd._open_once", AsyncMock(return_value=None)):
            result = runner.invoke(app, ["open"])

        assert result.exit_code == 1

    def test_suppressed_prompt(self, runner: CliRunner, monkeypatch) -> None:
        monkeypatch.setenv("ANSWERBOOK_ANSWER__SEND_PROMPT", "false")
        with patch("answerbook.cli.answer_cmd._open_once", AsyncMock(return_value=Reply(text="no"))):
            result = runner.invoke(app, ["open"])

        assert "在心中默念你的问题" not in result.output


class TestOpenOnce:
    @pytest.mark.anyio
    async def test_session_stopped_after_answer(self) -> None:
        from answerbook.cli.answer_cmd import _open_once

        with patch("answerbook.browser.session.BrowserSessionManager.start", AsyncMock()) as start, patch(
            "answerbook.browser.session.BrowserSessionManager.stop", AsyncMock()
        ) as stop, patch("answerbook.book.AnswerBook.answer", AsyncMock(side_effect=RuntimeError("boom"))):
            with pytest.raises(RuntimeError):
                await _open_once("chinese")

        start.assert_awaited_once()
        stop.assert_awaited_once()

    @pytest.mark.anyio
    async def test_launch_failure_returns_none(self) -> None:
        from answerbook.cli.answer_cmd import _open_once

        with patch(
            "answerbook.browser.session.BrowserSessionManager.start",
            AsyncMock(side_effect=RuntimeError("Executable doesn't exist")),
        ), patch("answerbook.book.AnswerBook.answer", AsyncMock()) as answer:
            assert await _open_once("chinese") is None

        answer.assert_not_awaited()

    def test_launch_failure_exits_cleanly(self, runner: CliRunner) -> None:
        with patch(
            "answerbook.browser.session.BrowserSessionManager.start",
            AsyncMock(side_effect=RuntimeError("Executable doesn't exist")),
        ):
            result = runner.invoke(app, ["open", "--mode", "chinese"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, RuntimeError)
        assert "Could not open the book" in result.output


class TestServeCommand:
    def test_binds_configured_host_and_port(self, runner: CliRunner, monkeypatch) -> None:
        monkeypatch.setenv("ANSWERBOOK_API__PORT", "9100")
        with patch("uvicorn.run") as run:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0, result.output
        assert run.call_args.kwargs == {"host": "0.0.0.0", "port": 9100}

    def test_flags_override_settings(self, runner: CliRunner) -> None:
        with patch("uvicorn.run") as run:
            result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "8200"])

        assert result.exit_code == 0, result.output
        assert run.call_args.kwargs == {"host": "127.0.0.1", "port": 8200}


class TestModesCommand:
    def test_lists_all_modes(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["modes"])
        assert result.exit_code == 0
        assert "bilingual_upper_spaced" in result.output
        assert "图片模式" in result.output


class TestSettingsCommands:
    def test_validate_ok(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["settings", "validate"])
        assert result.exit_code == 0
        assert "Settings are valid" in result.output

    def test_validate_unknown_mode(self, runner: CliRunner, monkeypatch) -> None:
        monkeypatch.setenv("ANSWERBOOK_ANSWER__MODE", "sideways")
        result = runner.invoke(app, ["settings", "validate"])
        assert result.exit_code == 1

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("answerbook ")
