#!/usr/bin/env python3
"""Test cases for chat log loading and date filtering."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from chat_render.loader import filter_messages_by_date, load_chat_log
from chat_render.models import (
    AnnounceMsg,
    CommandMsg,
    EmoteMsg,
    MessageKind,
    MOTDMsg,
    PrivateMsg,
    PublicMsg,
    SystemMsg,
    User,
)


class TestLoadChatLog:
    """Tests for load_chat_log()."""

    def test_loads_every_kind(self, write_chat_log):
        path = write_chat_log(
            [
                {"type": "public", "from": "alice", "body": "hi"},
                {"type": "emote", "from": "alice", "body": "waves"},
                {"type": "private", "from": "alice", "to": "bob", "body": "psst"},
                {"type": "system", "to": "bob", "body": "ok"},
                {"type": "announce", "body": "bob joined"},
                {"type": "motd", "body": "welcome"},
            ]
        )
        messages = load_chat_log(path)

        assert [type(m) for m in messages] == [
            PublicMsg,
            EmoteMsg,
            PrivateMsg,
            SystemMsg,
            AnnounceMsg,
            MOTDMsg,
        ]
        private = messages[2]
        assert isinstance(private, PrivateMsg)
        assert private.to == User("bob")
        system = messages[3]
        assert isinstance(system, SystemMsg)
        assert system.to == User("bob")

    def test_logged_command_comes_back_as_command(self, write_chat_log):
        path = write_chat_log([{"type": "public", "from": "alice", "body": "/nick x"}])
        (msg,) = load_chat_log(path)
        assert isinstance(msg, CommandMsg)
        assert msg.kind is MessageKind.COMMAND
        assert msg.command == "/nick"
        assert msg.args == ("x",)

    def test_timestamps_are_applied(self, write_chat_log):
        path = write_chat_log(
            [
                {
                    "type": "public",
                    "from": "alice",
                    "body": "/away",
                    "timestamp": "2020-01-01T10:00:00Z",
                },
                {
                    "type": "motd",
                    "body": "hi",
                    "timestamp": "2020-01-02T08:30:00Z",
                },
            ]
        )
        command, motd = load_chat_log(path)
        assert command.timestamp == datetime(2020, 1, 1, 10, tzinfo=timezone.utc)
        assert motd.timestamp == datetime(2020, 1, 2, 8, 30, tzinfo=timezone.utc)

    def test_system_without_recipient(self, write_chat_log):
        path = write_chat_log([{"type": "system", "body": "ok"}])
        (msg,) = load_chat_log(path)
        assert isinstance(msg, SystemMsg)
        assert msg.to is None

    def test_bad_lines_are_skipped_with_warning(self, write_chat_log, caplog):
        path = write_chat_log(
            [
                "{not json",
                {"type": "shout", "body": "HI"},
                '["a", "list"]',
                {"type": "private", "from": "alice", "body": "no recipient"},
                "",
                {"type": "announce", "body": "still here"},
            ]
        )
        with caplog.at_level(logging.WARNING, logger="chat_render.loader"):
            messages = load_chat_log(path)

        assert len(messages) == 1
        assert messages[0].body == "still here"
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 4
        assert "Line 1" in warnings[0].getMessage()
        assert "not a JSON object" in warnings[2].getMessage()
        assert "errors.pydantic" not in caplog.text

    def test_empty_file(self, write_chat_log):
        assert load_chat_log(write_chat_log([])) == []


class TestFilterMessagesByDate:
    """Tests for filter_messages_by_date()."""

    @pytest.fixture
    def messages(self, alice: User):
        return [
            PublicMsg(
                body, alice, timestamp=datetime(2020, 1, day, 10, tzinfo=timezone.utc)
            )
            for day, body in [(1, "one"), (2, "two"), (3, "three")]
        ]

    def test_no_bounds_returns_everything(self, messages):
        assert filter_messages_by_date(messages) == messages

    def test_since(self, messages):
        result = filter_messages_by_date(messages, since="2020-01-02")
        assert [m.body for m in result] == ["two", "three"]

    def test_until(self, messages):
        result = filter_messages_by_date(messages, until="2020-01-01 12:00")
        assert [m.body for m in result] == ["one"]

    def test_since_and_until(self, messages):
        result = filter_messages_by_date(
            messages, since="2020-01-02", until="2020-01-02 23:00"
        )
        assert [m.body for m in result] == ["two"]

    def test_today_covers_the_whole_day(self, alice: User):
        now = datetime.now(timezone.utc)
        early = now.replace(hour=0, minute=0, second=1, microsecond=0)
        old = now - timedelta(days=3)
        messages = [
            PublicMsg("old", alice, timestamp=old),
            PublicMsg("early", alice, timestamp=early),
        ]
        result = filter_messages_by_date(messages, since="today")
        assert [m.body for m in result] == ["early"]

    def test_unparsable_date(self, messages):
        with pytest.raises(ValueError, match="Could not parse since"):
            filter_messages_by_date(messages, since="xyzzy plugh")
