#!/usr/bin/env python3
"""Render messages as terminal text.

Every message kind is rendered by the same function, which looks up the
kind's decoration in the tables below:

- sender kinds (public, command, emote, private) get a prefix, the sender
  name and a separator in front of the body;
- system kinds (system, announce, MOTD) get a fixed prefix and are wrapped
  in the theme's system color;
- a plain ``Msg`` renders as its body.

The body goes through the markup engine and keyword highlighting only
when a viewer configuration is supplied (``render_for``/``render_self``).
"""

from typing import Optional, Union, cast

from .ansi import BEL
from .highlight import apply_highlight
from .markup import render_markdown
from .models import (
    SENDER_KINDS,
    SYSTEM_KINDS,
    EmoteMsg,
    Message,
    MessageKind,
    PrivateMsg,
    PublicMsg,
    UserConfig,
)
from .theme import Theme

SenderMsg = Union[PublicMsg, EmoteMsg, PrivateMsg]

# (prefix, separator) around the sender name
SENDER_DECORATIONS: dict[MessageKind, tuple[str, str]] = {
    MessageKind.PUBLIC: ("", ": "),
    MessageKind.COMMAND: ("", ": "),
    MessageKind.EMOTE: ("** ", " "),
    MessageKind.PRIVATE: ("[PM from ", "] "),
}
# Echo of the viewer's own message
SELF_DECORATION = ("[", "] ")

SYSTEM_PREFIXES: dict[MessageKind, str] = {
    MessageKind.SYSTEM: "-> ",
    MessageKind.ANNOUNCE: " * ",
    MessageKind.MOTD: " ",
}


def _sender_name(msg: SenderMsg, theme: Optional[Theme]) -> str:
    name = msg.from_user.name
    if theme is None:
        return name
    colored = theme.color_name(msg.from_user)
    if (
        msg.kind is MessageKind.EMOTE
        and theme.quote_names
        and any(c.isspace() for c in name)
    ):
        colored = f'"{colored}"'
    return colored


def _render_body(
    body: str,
    theme: Optional[Theme],
    cfg: Optional[UserConfig],
    do_highlight: bool,
) -> str:
    if cfg is None or cfg.api_mode:
        return body

    body = render_markdown(body)
    if do_highlight and theme is not None and cfg.highlight is not None:
        body, matched = apply_highlight(body, cfg.highlight, theme)
        if matched and cfg.bell:
            body += BEL
    return body


def _render(
    msg: Message,
    theme: Optional[Theme],
    cfg: Optional[UserConfig],
    echo: bool = False,
) -> str:
    kind = msg.kind

    if kind in SYSTEM_KINDS:
        text = SYSTEM_PREFIXES[kind] + msg.body
        return text if theme is None else theme.color_sys(text)

    if kind in SENDER_KINDS:
        sender = cast(SenderMsg, msg)
        prefix, sep = SELF_DECORATION if echo else SENDER_DECORATIONS[kind]
        body = _render_body(sender.body, theme, cfg, do_highlight=not echo)
        return prefix + _sender_name(sender, theme) + sep + body

    return msg.body


def render_message(msg: Message, theme: Optional[Theme] = None) -> str:
    """Render a message without viewer configuration.

    The body is shown as typed; only the decoration is themed.
    """
    return _render(msg, theme, None)


def render_for(msg: Message, cfg: UserConfig) -> str:
    """Render a message for a viewer with the given configuration."""
    return _render(msg, cfg.theme, cfg)


def render_self(msg: Message, cfg: UserConfig) -> str:
    """Render the viewer's own message echoed back to them.

    Uses the ``[name] body`` form and never highlights.
    """
    return _render(msg, cfg.theme, cfg, echo=True)


def message_string(msg: Message) -> str:
    """Plain string form of a message, as used by ``str(msg)``."""
    if msg.kind in (MessageKind.PUBLIC, MessageKind.COMMAND):
        sender = cast(PublicMsg, msg)
        return f"{sender.from_user.name}: {sender.body}"
    return render_message(msg)
