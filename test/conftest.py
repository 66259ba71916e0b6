"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from chat_render.models import User
from chat_render.theme import Theme, get_theme


@pytest.fixture
def alice() -> User:
    return User("alice")


@pytest.fixture
def bob() -> User:
    return User("bob")


@pytest.fixture
def mono() -> Theme:
    """Theme with a single bold name style, a dim system style and quoting."""
    return get_theme("mono")


@pytest.fixture
def write_chat_log(tmp_path: Path) -> Callable[[list[Any]], Path]:
    """Write entries (dicts, or raw strings for malformed lines) to a JSONL file."""

    def _write(entries: list[Any]) -> Path:
        path = tmp_path / "chat.jsonl"
        with open(path, "w", encoding="utf-8") as f:
            for entry in entries:
                line = entry if isinstance(entry, str) else json.dumps(entry)
                f.write(line + "\n")
        return path

    return _write
