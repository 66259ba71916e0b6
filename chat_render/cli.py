#!/usr/bin/env python3
"""CLI interface for chat-render."""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Optional

import click

from .ansi import strip_ansi
from .highlight import highlight_pattern
from .loader import filter_messages_by_date, load_chat_log
from .models import Message, User, UserConfig
from .parser import parse_input
from .renderer import render_for, render_self
from .theme import DEFAULT_THEME_NAME, DEFAULT_THEMES


def build_config(
    name: str,
    config_path: Optional[Path] = None,
    theme: Optional[str] = None,
    highlight: Optional[str] = None,
    bell: bool = False,
    api_mode: bool = False,
) -> UserConfig:
    """Build the viewer configuration from an optional JSON file and flags.

    Flags override values from the file. Without an explicit theme the
    default theme is used, and without a highlight pattern the viewer's own
    name is highlighted.

    Raises:
        ValueError: If the file is not a JSON object or fails validation.
    """
    data: dict[str, Any] = {}
    if config_path is not None:
        loaded = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(loaded, dict):
            raise ValueError(f"{config_path} must contain a JSON object")
        data.update(loaded)

    if theme is not None:
        data["theme"] = theme
    if highlight is not None:
        data["highlight"] = highlight
    if bell:
        data["bell"] = True
    if api_mode:
        data["api_mode"] = True

    data.setdefault("theme", DEFAULT_THEME_NAME)
    if "highlight" not in data:
        data["highlight"] = highlight_pattern(name)

    return UserConfig.model_validate(data)


def _is_own(msg: Message, name: str) -> bool:
    sender: Optional[User] = getattr(msg, "from_user", None)
    return sender is not None and sender.name == name


def _read_stdin(user: User) -> Iterable[Message]:
    stdin = click.get_text_stream("stdin")
    for line in stdin:
        line = line.rstrip("\r\n")
        if line.strip():
            yield parse_input(line, user)


@click.command()
@click.argument(
    "input_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    required=False,
)
@click.option(
    "-n",
    "--name",
    envvar="USER",
    default="anonymous",
    show_default=True,
    help="Your user name; used as sender for stdin lines and highlighted by default.",
)
@click.option(
    "--theme",
    type=click.Choice(list(DEFAULT_THEMES)),
    default=None,
    help=f"Color theme (default: {DEFAULT_THEME_NAME}).",
)
@click.option(
    "--highlight",
    type=str,
    default=None,
    help="Regular expression to highlight in message bodies (default: your name).",
)
@click.option(
    "--bell",
    is_flag=True,
    help="Append a terminal bell to messages that contain a highlight.",
)
@click.option(
    "--api-mode",
    is_flag=True,
    help="Pass message bodies through raw: no markup, no highlighting.",
)
@click.option(
    "--self",
    "echo",
    is_flag=True,
    help="Render your own messages in the echo form ([name] body).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help="JSON file with viewer configuration (theme, highlight, bell, api_mode).",
)
@click.option(
    "--since",
    type=str,
    help='Only show log messages from this date/time (e.g., "2 hours ago", "yesterday").',
)
@click.option(
    "--until",
    type=str,
    help='Only show log messages up to this date/time (e.g., "1 hour ago", "today").',
)
@click.option(
    "--plain",
    is_flag=True,
    help="Strip all escape sequences from the output.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug logging and show full traceback on errors.",
)
@click.version_option(package_name="chat-render")
def main(
    input_path: Optional[Path],
    name: str,
    theme: Optional[str],
    highlight: Optional[str],
    bell: bool,
    api_mode: bool,
    echo: bool,
    config_path: Optional[Path],
    since: Optional[str],
    until: Optional[str],
    plain: bool,
    debug: bool,
) -> None:
    """Render chat messages with inline markup for the terminal.

    INPUT_PATH: JSONL chat log to render. If not provided, each line read from
    standard input is rendered as a message typed by --name.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        cfg = build_config(name, config_path, theme, highlight, bell, api_mode)

        messages: Iterable[Message]
        if input_path is not None:
            messages = filter_messages_by_date(load_chat_log(input_path), since, until)
        else:
            messages = _read_stdin(User(name))

        for msg in messages:
            if echo and _is_own(msg, name):
                text = render_self(msg, cfg)
            else:
                text = render_for(msg, cfg)
            if plain:
                text = strip_ansi(text)
            click.echo(text, color=True)

    except (ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        if debug:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
