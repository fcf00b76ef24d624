"""
Tests for the coursegraph command line.
"""

import pytest
from click.testing import CliRunner

from coursegraph_backend.cli import tokens as token_commands
from coursegraph_backend.cli.cli import cli
from coursegraph_backend.repositories import RedisTokenRepository


@pytest.fixture
def runner(monkeypatch, Session, mock_cache, world):
    monkeypatch.setattr(token_commands, "get_session_factory", lambda: Session)
    monkeypatch.setattr(token_commands, "RedisTokenRepository", lambda: RedisTokenRepository(cache=mock_cache))
    return CliRunner()


class TestTokenCommands:

    def test_issue(self, runner, tokens, world):
        result = runner.invoke(cli, ["token", "issue", str(world["student_id"])])

        assert result.exit_code == 0
        entry = tokens.get_token(result.output.strip())
        assert entry is not None
        assert entry.user_id == world["student_id"]

    def test_issue_for_unknown_user(self, runner, mock_cache):
        result = runner.invoke(cli, ["token", "issue", "987654"])

        assert result.exit_code == 1
        assert "not found" in result.output
        assert mock_cache.call_log == []

    def test_revoke(self, runner, mock_cache, world):
        issued = runner.invoke(cli, ["token", "issue", str(world["teacher_id"])])
        assert issued.exit_code == 0

        result = runner.invoke(cli, ["token", "revoke", str(world["teacher_id"])])

        assert result.exit_code == 0
        assert mock_cache.remaining_ttl(f"token:{world['teacher_id']}") is None


class TestDbCommands:

    def test_init(self, monkeypatch):
        calls = []
        from coursegraph_backend.cli import db as db_commands
        monkeypatch.setattr(db_commands, "init_db", lambda: calls.append("init"))

        result = CliRunner().invoke(cli, ["db", "init"])

        assert result.exit_code == 0
        assert calls == ["init"]
