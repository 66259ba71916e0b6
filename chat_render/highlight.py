"""Keyword highlighting for rendered message bodies.

Highlighting runs on text that has already been through the markup
engine. Patterns are only matched against the visible text between
escape sequences, never against the sequences themselves.
"""

import re
from re import Pattern

from .ansi import RESET, is_sgr, split_ansi
from .theme import Theme


def highlight_pattern(name: str) -> Pattern[str]:
    """Build a case-insensitive pattern matching ``name`` as a whole word.

    The name is captured as group 1, which is what gets highlighted.
    """
    return re.compile(rf"(?<!\w)({re.escape(name)})(?!\w)", re.IGNORECASE)


def apply_highlight(
    body: str, pattern: Pattern[str], theme: Theme
) -> tuple[str, bool]:
    """Wrap every match of ``pattern`` in the theme's highlight style.

    Patterns without a capture group highlight the whole match. The
    highlight style ends in a full reset, so the SGR attributes active at
    the match (bold, code background, ...) are emitted again after it.

    Returns:
        The new body and whether anything matched.
    """
    group = 1 if pattern.groups else 0
    out: list[str] = []
    # SGR escapes seen since the last full reset
    active: list[str] = []
    matched = False

    for i, part in enumerate(split_ansi(body)):
        if i % 2:
            out.append(part)
            if part in (RESET, "\x1b[m"):
                active.clear()
            elif is_sgr(part):
                active.append(part)
            continue
        restore = "".join(active)
        part, count = pattern.subn(
            lambda m: theme.highlight(m.group(group)) + restore, part
        )
        matched = matched or count > 0
        out.append(part)

    return "".join(out), matched
