"""Terminal color themes.

A theme decides how user names, system messages and highlighted keywords
are colored. Name colors are picked from the theme's palette by a stable
hash of the user's id, so a user keeps the same color across sessions.
"""

import zlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .ansi import RESET, sgr

if TYPE_CHECKING:
    from .models import User


@dataclass(frozen=True)
class Style:
    """A single SGR style, e.g. ``"38;5;12"`` or ``"1"``."""

    code: str

    def format(self, text: str) -> str:
        if not self.code:
            return text
        return f"{sgr(self.code)}{text}{RESET}"


@dataclass(frozen=True)
class Theme:
    """Color scheme applied to names, system text and highlights."""

    id: str
    sys: Style
    highlight_style: Style
    names: tuple[Style, ...] = field(default_factory=tuple)
    # Wrap names containing whitespace in quotes so they read as one word
    quote_names: bool = False

    def color_name(self, user: "User") -> str:
        """Return the user's name in its palette color."""
        if not self.names:
            return user.name
        idx = zlib.crc32(user.id.encode("utf-8")) % len(self.names)
        return self.names[idx].format(user.name)

    def color_sys(self, text: str) -> str:
        return self.sys.format(text)

    def highlight(self, text: str) -> str:
        return self.highlight_style.format(text)


def _palette(codes: list[int]) -> tuple[Style, ...]:
    return tuple(Style(f"38;5;{code}") for code in codes)


# 256-color entries that read well on both dark and light backgrounds
# fmt: off
_COLORS_256 = [
    1, 2, 3, 4, 5, 6, 9, 10, 11, 12, 13, 14,
    33, 39, 45, 69, 75, 81, 99, 105, 111, 129, 135, 141,
    161, 167, 173, 179, 185, 197, 203, 209, 215, 221,
]
# fmt: on

DEFAULT_THEMES: dict[str, Theme] = {
    "colors": Theme(
        id="colors",
        sys=Style("38;5;245"),
        highlight_style=Style("48;5;11;38;5;16"),
        names=_palette(_COLORS_256),
    ),
    "mono": Theme(
        id="mono",
        sys=Style("2"),
        highlight_style=Style("7"),
        names=(Style("1"),),
        quote_names=True,
    ),
    "hacker": Theme(
        id="hacker",
        sys=Style("38;5;22"),
        highlight_style=Style("48;5;22;38;5;46"),
        names=_palette([46, 40, 34, 82, 118]),
    ),
}

DEFAULT_THEME_NAME = "colors"


def get_theme(name: str) -> Theme:
    """Look up a built-in theme by name.

    Raises:
        KeyError: If no theme has that name.
    """
    try:
        return DEFAULT_THEMES[name]
    except KeyError:
        raise KeyError(
            f"Unknown theme {name!r}; choose from {', '.join(DEFAULT_THEMES)}"
        ) from None
