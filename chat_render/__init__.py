"""Terminal rendering for chat messages.

Re-exports the main entry points from the package modules.
"""

from .markup import render_markdown
from .models import (
    AnnounceMsg,
    CommandMsg,
    EmoteMsg,
    Message,
    MessageKind,
    MOTDMsg,
    Msg,
    PrivateMsg,
    PublicMsg,
    SystemMsg,
    User,
    UserConfig,
)
from .parser import parse_command, parse_input
from .renderer import message_string, render_for, render_message, render_self
from .theme import Theme, get_theme

__all__ = [
    # markup
    "render_markdown",
    # models
    "AnnounceMsg",
    "CommandMsg",
    "EmoteMsg",
    "Message",
    "MessageKind",
    "MOTDMsg",
    "Msg",
    "PrivateMsg",
    "PublicMsg",
    "SystemMsg",
    "User",
    "UserConfig",
    # parser
    "parse_command",
    "parse_input",
    # renderer
    "message_string",
    "render_for",
    "render_message",
    "render_self",
    # theme
    "Theme",
    "get_theme",
]
