#!/usr/bin/env python3
"""Load chat logs from JSONL files and filter them by date."""

import json
import logging
import re
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import dateparser
from pydantic import TypeAdapter, ValidationError

from .models import (
    AnnounceEntry,
    AnnounceMsg,
    ChatEntry,
    EmoteEntry,
    EmoteMsg,
    Message,
    MOTDEntry,
    MOTDMsg,
    PrivateEntry,
    PrivateMsg,
    PublicEntry,
    SystemEntry,
    SystemMsg,
    User,
)
from .parser import parse_input

logger = logging.getLogger(__name__)

_entry_adapter: TypeAdapter[ChatEntry] = TypeAdapter(ChatEntry)


def create_message(entry: ChatEntry) -> Message:
    """Create a message from a validated chat log entry.

    Public entries go through ``parse_input`` so logged commands come back
    as command messages.
    """
    stamp: dict[str, Any] = {}
    if entry.timestamp is not None:
        stamp["timestamp"] = entry.timestamp

    if isinstance(entry, PublicEntry):
        msg = parse_input(entry.body, User(entry.sender))
        if stamp:
            msg = replace(msg, **stamp)
        return msg
    if isinstance(entry, EmoteEntry):
        return EmoteMsg(entry.body, User(entry.sender), **stamp)
    if isinstance(entry, PrivateEntry):
        return PrivateMsg(entry.body, User(entry.sender), User(entry.to), **stamp)
    if isinstance(entry, SystemEntry):
        to = User(entry.to) if entry.to else None
        return SystemMsg(entry.body, to, **stamp)
    if isinstance(entry, AnnounceEntry):
        return AnnounceMsg(entry.body, **stamp)
    if isinstance(entry, MOTDEntry):
        return MOTDMsg(entry.body, **stamp)
    raise TypeError(f"Unhandled chat log entry: {type(entry).__name__}")


def load_chat_log(path: Path) -> list[Message]:
    """Load a JSONL chat log.

    Lines that are not valid JSON objects or not recognised entries are
    logged and skipped.
    """
    messages: list[Message] = []

    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                entry_dict = json.loads(line)
                if not isinstance(entry_dict, dict):
                    logger.warning("Line %d of %s is not a JSON object", line_no, path)
                    continue
                entry = _entry_adapter.validate_python(entry_dict)
                messages.append(create_message(entry))
            except json.JSONDecodeError as e:
                logger.warning(
                    "Line %d of %s | JSON decode error: %s", line_no, path, e
                )
            except ValidationError as e:
                err_no_url = re.sub(
                    r"    For further information visit https://errors.pydantic(.*)\n?",
                    "",
                    str(e),
                )
                logger.warning("Line %d of %s | %s", line_no, path, err_no_url)

    logger.debug("Loaded %d messages from %s", len(messages), path)
    return messages


def _parse_date(value: str, label: str) -> datetime:
    dateparser_settings: Any = {"TIMEZONE": "UTC", "RETURN_AS_TIMEZONE_AWARE": False}
    parsed = dateparser.parse(value, settings=dateparser_settings)
    if not parsed:
        raise ValueError(f"Could not parse {label}: {value}")
    return parsed


def filter_messages_by_date(
    messages: list[Message],
    since: Optional[str] = None,
    until: Optional[str] = None,
) -> list[Message]:
    """Keep messages whose timestamp falls within ``since``..``until``.

    Both bounds accept natural language such as "2 hours ago" or
    "yesterday"; "today" and "yesterday" cover the whole day.

    Raises:
        ValueError: If a bound cannot be parsed.
    """
    if not since and not until:
        return messages

    since_dt = None
    until_dt = None
    if since:
        since_dt = _parse_date(since, "since")
        if since in ("today", "yesterday") or "days ago" in since:
            since_dt = since_dt.replace(hour=0, minute=0, second=0, microsecond=0)
    if until:
        until_dt = _parse_date(until, "until")
        if until in ("today", "yesterday") or "days ago" in until:
            until_dt = until_dt.replace(
                hour=23, minute=59, second=59, microsecond=999999
            )

    filtered: list[Message] = []
    for message in messages:
        # dateparser returns naive UTC datetimes
        message_dt = message.timestamp
        if message_dt.tzinfo:
            message_dt = message_dt.astimezone(timezone.utc).replace(tzinfo=None)
        if since_dt and message_dt < since_dt:
            continue
        if until_dt and message_dt > until_dt:
            continue
        filtered.append(message)
    return filtered
