#!/usr/bin/env python3
"""Inline markup to ANSI conversion for chat messages.

Supported markup:
- ``*italic*`` / ``_italic_`` (fungible)
- ``**bold**`` / ``__bold__`` (fungible)
- ``~~strikethrough~~``
- inline code between backticks, which suppresses emphasis inside it
- ``[text](url)`` links, rendered as OSC 8 hyperlinks
- ``:alias:`` emoji
- backslash escapes for ``* _ ~ ` \\``

Rendering never fails: unbalanced or stray markers degrade to literal text
or to a span left open, and every result ends with a full SGR reset so no
attribute outlives the message.

The text goes through several passes. Earlier passes hand information to
the scanner by inserting sentinel characters taken from the Unicode
noncharacter block, which is reserved for process-internal use and is
removed from the input before anything else happens.
"""

import re
from enum import Flag, auto
from typing import Callable, Optional

from .aliases import replace_aliases
from .ansi import (
    BOLD_OFF,
    BOLD_ON,
    CODE_OFF,
    CODE_ON,
    HYPERLINK_CLOSE,
    ITALIC_OFF,
    ITALIC_ON,
    RESET,
    STRIKE_OFF,
    STRIKE_ON,
    hyperlink_open,
)

# -- Sentinels ----------------------------------------------------------------

# Protected span emitted by the link pass; its contents are copied verbatim.
LINK_OPEN = "\ufdd0"
LINK_CLOSE = "\ufdd1"
# Escaped double markers (``\**``, ``\__``, ``\~~``).
LITERAL_STARS = "\ufdd2"
LITERAL_UNDERSCORES = "\ufdd3"
LITERAL_TILDES = "\ufdd4"
# Double markers collapsed to a single token before scanning.
BOLD_STARS = "\ufdd5"
BOLD_UNDERSCORES = "\ufdd6"
STRIKE_TILDES = "\ufdd7"

SENTINELS = frozenset(
    {
        LINK_OPEN,
        LINK_CLOSE,
        LITERAL_STARS,
        LITERAL_UNDERSCORES,
        LITERAL_TILDES,
        BOLD_STARS,
        BOLD_UNDERSCORES,
        STRIKE_TILDES,
    }
)
_SENTINEL_TABLE = {ord(c): None for c in SENTINELS}

# Source text of every marker token, used whenever a token is not acted on.
_SOURCE_TEXT = {
    LITERAL_STARS: "**",
    LITERAL_UNDERSCORES: "__",
    LITERAL_TILDES: "~~",
    BOLD_STARS: "**",
    BOLD_UNDERSCORES: "__",
    STRIKE_TILDES: "~~",
}
_LITERALS = {
    LITERAL_STARS: "**",
    LITERAL_UNDERSCORES: "__",
    LITERAL_TILDES: "~~",
}
_DOUBLE_MARKERS = {"*": BOLD_STARS, "_": BOLD_UNDERSCORES, "~": STRIKE_TILDES}
_ESCAPED_DOUBLES = {
    "*": LITERAL_STARS,
    "_": LITERAL_UNDERSCORES,
    "~": LITERAL_TILDES,
}

BOLD_MARKERS = frozenset({BOLD_STARS, BOLD_UNDERSCORES})
ITALIC_MARKERS = frozenset({"*", "_"})
ESCAPABLE = frozenset("*_~`\\")
CLOSING_PUNCTUATION = frozenset(".,;:")

# Markers of another style sitting right next to a marker count as a word
# boundary, so ``**_both_**`` opens and closes both spans.
_BOLD_NEIGHBORS = ITALIC_MARKERS | {STRIKE_TILDES}
_ITALIC_NEIGHBORS = BOLD_MARKERS | {STRIKE_TILDES}

LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^) ]+)\)")


class Span(Flag):
    """Formatting attributes that can be active while scanning."""

    BOLD = auto()
    ITALIC = auto()
    STRIKETHROUGH = auto()
    CODE = auto()


_SPAN_CODES = {
    Span.BOLD: (BOLD_ON, BOLD_OFF),
    Span.ITALIC: (ITALIC_ON, ITALIC_OFF),
    Span.STRIKETHROUGH: (STRIKE_ON, STRIKE_OFF),
    Span.CODE: (CODE_ON, CODE_OFF),
}


# -- Pre-passes ---------------------------------------------------------------


def strip_sentinels(text: str) -> str:
    """Remove any internal sentinel characters from untrusted input."""
    if not any(c in SENTINELS for c in text):
        return text
    return text.translate(_SENTINEL_TABLE)


def _link_replacement(match: "re.Match[str]") -> str:
    text, url = match.group(1), match.group(2)
    return (
        LINK_OPEN
        + hyperlink_open(url)
        + LINK_CLOSE
        + text
        + LINK_OPEN
        + HYPERLINK_CLOSE
        + LINK_CLOSE
    )


def extract_links(text: str) -> str:
    """Replace ``[text](url)`` with a hyperlink whose escapes are protected.

    The hyperlink escapes (and with them the URL) are wrapped in
    ``LINK_OPEN``/``LINK_CLOSE`` so the scanner copies them untouched. The
    display text stays outside the protected spans and may carry markup.
    """
    return LINK_PATTERN.sub(_link_replacement, text)


def _substitute_markers(text: str) -> str:
    """Collapse double markers and escaped double markers into tokens.

    A backslash keeps the character after it, so an escaped ``*`` never
    pairs up with its neighbour. Protected spans are copied as-is.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == LINK_OPEN:
            end = text.find(LINK_CLOSE, i)
            if end == -1:
                out.append(text[i:])
                break
            out.append(text[i : end + 1])
            i = end + 1
            continue
        if c == "\\" and i + 1 < n:
            nxt = text[i + 1]
            if nxt in _ESCAPED_DOUBLES and text[i + 2 : i + 3] == nxt:
                out.append(_ESCAPED_DOUBLES[nxt])
                i += 3
                continue
            if nxt != LINK_OPEN:
                out.append(text[i : i + 2])
                i += 2
                continue
        if c in _DOUBLE_MARKERS and text[i + 1 : i + 2] == c:
            out.append(_DOUBLE_MARKERS[c])
            i += 2
            continue
        out.append(c)
        i += 1
    return "".join(out)


# -- Boundary predicates ------------------------------------------------------


def _is_blank(c: Optional[str]) -> bool:
    """Start/end of input or whitespace."""
    return c is None or c.isspace()


def opens_span(
    prev: Optional[str], nxt: Optional[str], neighbors: frozenset[str]
) -> bool:
    """Whether a marker between ``prev`` and ``nxt`` may open a span."""
    return (_is_blank(prev) or prev in neighbors) and not _is_blank(nxt)


def closes_span(
    prev: Optional[str], nxt: Optional[str], neighbors: frozenset[str]
) -> bool:
    """Whether a marker between ``prev`` and ``nxt`` may close a span."""
    return not _is_blank(prev) and (
        _is_blank(nxt) or nxt in CLOSING_PUNCTUATION or nxt in neighbors
    )


def opens_code(prev: Optional[str], nxt: Optional[str]) -> bool:
    """A backtick opens code after start/whitespace, before a non-backtick."""
    return _is_blank(prev) and nxt is not None and nxt != "`"


def _toggle(spans: Span, span: Span, out: list[str]) -> Span:
    spans ^= span
    on, off = _SPAN_CODES[span]
    out.append(on if span in spans else off)
    return spans


# -- Scanner ------------------------------------------------------------------


def _scan(tokens: str) -> str:
    out: list[str] = []
    spans = Span(0)
    escaped = False
    protected = False
    last = len(tokens) - 1

    for i, c in enumerate(tokens):
        if protected:
            if c == LINK_CLOSE:
                protected = False
            else:
                out.append(_LITERALS.get(c, c))
            continue
        if c == LINK_OPEN:
            if escaped:
                out.append("\\")
                escaped = False
            protected = True
            continue
        if escaped:
            escaped = False
            if c in ESCAPABLE:
                out.append(c)
            else:
                out.append("\\" + _SOURCE_TEXT.get(c, c))
            continue
        if c == LINK_CLOSE:
            continue

        if Span.CODE in spans:
            if c == "`":
                spans = _toggle(spans, Span.CODE, out)
            else:
                out.append(_SOURCE_TEXT.get(c, c))
            continue

        prev = tokens[i - 1] if i > 0 else None
        nxt = tokens[i + 1] if i < last else None

        if c == "\\":
            escaped = True
        elif c == "`" and opens_code(prev, nxt):
            spans = _toggle(spans, Span.CODE, out)
        elif c == STRIKE_TILDES:
            spans = _toggle(spans, Span.STRIKETHROUGH, out)
        elif c in BOLD_MARKERS and (
            closes_span(prev, nxt, _BOLD_NEIGHBORS)
            if Span.BOLD in spans
            else opens_span(prev, nxt, _BOLD_NEIGHBORS)
        ):
            spans = _toggle(spans, Span.BOLD, out)
        elif c in ITALIC_MARKERS and (
            closes_span(prev, nxt, _ITALIC_NEIGHBORS)
            if Span.ITALIC in spans
            else opens_span(prev, nxt, _ITALIC_NEIGHBORS)
        ):
            spans = _toggle(spans, Span.ITALIC, out)
        else:
            out.append(_SOURCE_TEXT.get(c, c))

    if escaped:
        out.append("\\")
    out.append(RESET)
    return "".join(out)


def render_markdown(
    body: str, aliases: Callable[[str], str] = replace_aliases
) -> str:
    """Render inline chat markup in ``body`` as ANSI-styled text.

    Args:
        body: Raw message body.
        aliases: Emoji alias substitution applied before parsing.

    Returns:
        The styled text, always terminated by a full SGR reset.
    """
    text = strip_sentinels(aliases(body))
    text = extract_links(text)
    return _scan(_substitute_markers(text))
