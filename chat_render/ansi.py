#!/usr/bin/env python3
"""ANSI escape codes used by the chat renderer.

This module collects the Select Graphic Rendition (SGR) codes emitted by
the markup engine and the themes, plus helpers to strip escape sequences
back out of rendered text (for plain output and for tests).
"""

import re

ESC = "\x1b"

RESET = f"{ESC}[0m"
BEL = "\x07"

BOLD_ON = f"{ESC}[1m"
BOLD_OFF = f"{ESC}[22m"
ITALIC_ON = f"{ESC}[3m"
ITALIC_OFF = f"{ESC}[23m"
STRIKE_ON = f"{ESC}[9m"
STRIKE_OFF = f"{ESC}[29m"
CODE_ON = f"{ESC}[48;5;22m"
CODE_OFF = f"{ESC}[49m"

# OSC 8 hyperlinks, terminated with ST (ESC \)
HYPERLINK_CLOSE = f"{ESC}]8;;{ESC}\\"


def hyperlink_open(url: str) -> str:
    """Return the OSC 8 sequence that starts a hyperlink to ``url``."""
    return f"{ESC}]8;;{url}{ESC}\\"


def sgr(code: str) -> str:
    """Return the SGR escape for a raw parameter string such as ``"38;5;12"``."""
    return f"{ESC}[{code}m"


_ANSI_PATTERNS = [
    r"\x1b\][0-9]*;[^\x07\x1b]*;[^\x07\x1b]*(?:\x07|\x1b\\)",  # OSC 8 hyperlink
    r"\x1b\][0-9]*;[^\x07\x1b]*(?:\x07|\x1b\\)",  # Other OSC
    r"\x1b\[[0-9;?=]*[A-Za-z@]",  # CSI, including SGR
]
_ANSI_RE = re.compile("|".join(_ANSI_PATTERNS))
_ANSI_SPLIT_RE = re.compile(f"({_ANSI_RE.pattern})")
_SGR_RE = re.compile(r"\x1b\[[0-9;]*m")


def split_ansi(text: str) -> list[str]:
    """Split ``text`` into alternating visible text and escape sequences.

    Even indexes hold visible text (possibly empty), odd indexes hold one
    escape sequence each.
    """
    return _ANSI_SPLIT_RE.split(text)


def is_sgr(escape: str) -> bool:
    """Whether ``escape`` is a complete SGR sequence such as ``ESC[1m``."""
    return _SGR_RE.fullmatch(escape) is not None


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences (SGR, CSI and OSC) from ``text``.

    The bell character is removed as well, so the result is the text a
    user would actually see on screen.
    """
    return _ANSI_RE.sub("", text).replace(BEL, "")
