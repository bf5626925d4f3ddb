"""XML entity encoding for text placed into OOXML parts."""

from __future__ import annotations

# Order matters: "&" must be escaped first so the ampersands introduced by
# the other entities are not escaped a second time.
_ENCODE_ORDER = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

_DOUBLE_ESCAPED = (
    ("&amp;amp;", "&amp;"),
    ("&amp;lt;", "&lt;"),
    ("&amp;gt;", "&gt;"),
    ("&amp;quot;", "&quot;"),
    ("&amp;apos;", "&apos;"),
)


def encode(text) -> str:
    """Escape XML reserved characters.

    Handles: & < > " '

    Non-string input (including None) yields an empty string.
    """
    if not text or not isinstance(text, str):
        return ""
    for char, entity in _ENCODE_ORDER:
        text = text.replace(char, entity)
    return text


def decode(text) -> str:
    """Reverse :func:`encode`.

    ``&amp;`` is decoded last so ``&amp;lt;`` comes back as the literal
    text ``&lt;`` rather than ``<``.
    """
    if not text or not isinstance(text, str):
        return ""
    for char, entity in reversed(_ENCODE_ORDER):
        text = text.replace(entity, char)
    return text


def repair_double_escaping(text) -> str:
    """Collapse the five double-escaped entity forms to single-escaped.

    One pass per sequence, no recursion: ``&amp;amp;amp;`` becomes
    ``&amp;amp;``, not ``&amp;``.
    """
    if not text or not isinstance(text, str):
        return ""
    for doubled, single in _DOUBLE_ESCAPED:
        text = text.replace(doubled, single)
    return text
