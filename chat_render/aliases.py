"""Emoji alias substitution (``:smile:`` -> glyph)."""

import emoji


def replace_aliases(text: str) -> str:
    """Replace recognised ``:alias:`` tokens with their Unicode emoji.

    Unknown aliases are left untouched.
    """
    if ":" not in text:
        return text
    return emoji.emojize(text, language="alias")
