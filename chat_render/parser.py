#!/usr/bin/env python3
"""Parse user input into messages.

- parse_command: Split a ``/command arg ...`` body into a CommandMsg
- parse_input: Top-level entry point for a line typed by a user
"""

from typing import Optional

from .models import CommandMsg, PublicMsg, User


def parse_command(msg: PublicMsg) -> Optional[CommandMsg]:
    """Extract a command from a public message whose body starts with ``/``.

    Fields are split on runs of whitespace; quoting is not supported. A bare
    ``/`` is a command with no arguments.

    Returns:
        The command message, or None when the body is not a command.
    """
    if not msg.body.startswith("/"):
        return None

    fields = msg.body.split()
    command, args = fields[0], tuple(fields[1:])
    return CommandMsg(
        msg.body,
        msg.from_user,
        msg.original_from,
        name=command,
        args=args,
        timestamp=msg.timestamp,
    )


def parse_input(body: str, from_user: User) -> PublicMsg:
    """Turn a line typed by ``from_user`` into a command or public message.

    A line that starts with a slash only after leading spaces is not a
    command. The spaces and exactly one slash are stripped, so an indented
    "//shrug" sends the text "/shrug".
    """
    msg = PublicMsg(body, from_user)
    cmd = parse_command(msg)
    if cmd is not None:
        return cmd

    stripped = body.lstrip(" ")
    if stripped.startswith("/"):
        return PublicMsg(stripped[1:], from_user, timestamp=msg.timestamp)

    return msg