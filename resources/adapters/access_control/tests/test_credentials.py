"""Tests for durable token persistence in ``.env`` files."""

from __future__ import annotations

from pathlib import Path

from resources.adapters.access_control.credentials import DotenvCredentialStore

_KEY = "PRESENCE_COMPONENTS__ADAPTER__ACCESS_CONTROL__TOKEN"


def test_persist_creates_missing_env_file(tmp_path: Path) -> None:
    """The token line is written even when no ``.env`` exists yet."""
    env_file = tmp_path / "conf" / ".env"
    store = DotenvCredentialStore(env_file=env_file, key=_KEY)

    store.persist_token("abc123")

    assert f"{_KEY}=abc123" in env_file.read_text(encoding="utf-8")


def test_persist_replaces_existing_token_and_keeps_other_lines(tmp_path: Path) -> None:
    """Only the token line changes; unrelated settings survive."""
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"PRESENCE_LOGGING__LEVEL=DEBUG\n{_KEY}=old\n", encoding="utf-8"
    )
    store = DotenvCredentialStore(env_file=env_file, key=_KEY)

    store.persist_token("new")

    lines = env_file.read_text(encoding="utf-8").splitlines()
    assert "PRESENCE_LOGGING__LEVEL=DEBUG" in lines
    assert f"{_KEY}=new" in lines
    assert f"{_KEY}=old" not in lines
