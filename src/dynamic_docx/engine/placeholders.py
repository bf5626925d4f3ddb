"""Placeholder search and substitution over raw WordprocessingML text.

Every search pattern the generator uses lives here, so the rest of the
package never builds a regex against document markup itself.

Three surface forms of a token ``name`` are recognised:

1. bracketed: ``{{name}}`` anywhere in the markup;
2. bare run: ``<w:t>name</w:t>``, the name as the whole text of a run;
3. split run: ``<w:t>na_me</w:t>``, the name's letters with non-alphabetic
   filler between them, left behind when Word breaks a token for
   proofing or formatting marks.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping

from .entities import encode, repair_double_escaping

logger = logging.getLogger(__name__)

_BRACKETED_RE = re.compile(r"\{\{([^}]+)\}\}")
# Opening tags only; a self-closing <w:p ./> or <w:t ./> is not an opener.
_TEXT_OPEN = r"<w:t(?:\s[^>]*)?(?<!/)>"
_PARAGRAPH_OPEN = r"<w:p(?:\s[^>]*)?(?<!/)>"
# Body of a paragraph that never runs past its own closing tag.
_IN_PARAGRAPH = r"(?:(?!</w:p>).)*?"


def bracketed(name: str) -> str:
    """Return the bracketed form of a token name."""
    return "{{" + name + "}}"


def normalize_token(name) -> str:
    """Token name without surrounding whitespace or ``{{ }}`` braces."""
    name = str(name or "").strip()
    if name.startswith("{{") and name.endswith("}}"):
        name = name[2:-2].strip()
    return name


def replace_all(text: str, search: str, replacement: str) -> str:
    """Replace every literal occurrence of ``search`` (case-sensitive)."""
    if not isinstance(text, str):
        return text
    if not search:
        return text
    return text.replace(search, replacement)


# ---------------------------------------------------------------------------
# Pattern builders
# ---------------------------------------------------------------------------

def _bare_run_pattern(name: str) -> re.Pattern:
    return re.compile(f"({_TEXT_OPEN}){re.escape(name)}</w:t>")


def _split_run_pattern(name: str) -> re.Pattern:
    filler = "[^a-zA-Z]*"
    body = filler.join(re.escape(ch) for ch in name)
    return re.compile(rf"({_TEXT_OPEN})\s*{body}\s*</w:t>", re.IGNORECASE)


def _paragraph_pattern(inner: str) -> re.Pattern:
    return re.compile(
        f"{_PARAGRAPH_OPEN}{_IN_PARAGRAPH}{inner}{_IN_PARAGRAPH}</w:p>",
        re.DOTALL,
    )


# ---------------------------------------------------------------------------
# Text substitution
# ---------------------------------------------------------------------------

def _replace_token(markup: str, name: str, escaped_value: str) -> str:
    """Run the three replacement passes without the final repair."""
    if not name:
        return markup

    result = replace_all(markup, bracketed(name), escaped_value)

    # re.sub treats backslashes in a replacement string as escapes;
    # a function replacement inserts the value verbatim.
    def _keep_open_tag(m: re.Match) -> str:
        return f"{m.group(1)}{escaped_value}</w:t>"

    result = _bare_run_pattern(name).sub(_keep_open_tag, result)
    result = _split_run_pattern(name).sub(_keep_open_tag, result)
    return result


def substitute(markup: str, name: str, raw_value) -> str:
    """Replace token ``name`` with ``raw_value`` in all three surface forms.

    The value is XML-escaped here; callers pass plain text. A final
    double-escaping repair runs over the whole result.
    """
    if not isinstance(markup, str):
        return ""
    result = _replace_token(markup, name, encode(raw_value))
    return repair_double_escaping(result)


def apply_placeholders(markup: str, placeholders: Mapping[str, str]) -> str:
    """Substitute every entry of ``placeholders`` then repair once."""
    if not isinstance(markup, str):
        return ""
    result = markup
    for name, value in placeholders.items():
        result = _replace_token(result, name, encode(value))
    return repair_double_escaping(result)


def extract_token_names(markup: str) -> set[str]:
    """Return every distinct token name written in ``{{name}}`` form."""
    if not isinstance(markup, str):
        return set()
    return set(_BRACKETED_RE.findall(markup))


def contains_token(markup: str, names: Iterable[str]) -> bool:
    """True when any name appears bracketed or as a bare text run."""
    for name in names:
        if bracketed(name) in markup or _bare_run_pattern(name).search(markup):
            return True
    return False


# ---------------------------------------------------------------------------
# Block substitution (tables, drawings)
# ---------------------------------------------------------------------------

def replace_table_token(markup: str, name: str, table_xml: str) -> str:
    """Swap the paragraph holding a table token for ``table_xml``.

    A ``w:tbl`` cannot live inside a ``w:p``, so the whole paragraph goes.
    The bracketed form is tried first, then a paragraph whose run is the
    bare name, then any leftover ``{{name}}`` literal.
    """
    if not name:
        return markup

    def _table(_m: re.Match) -> str:
        return table_xml

    token = re.escape(bracketed(name))
    result, count = _paragraph_pattern(token).subn(_table, markup)
    if count:
        logger.debug("Table %s replaced %d paragraph(s)", name, count)
        return result

    bare = f"{_TEXT_OPEN}{re.escape(name)}</w:t>"
    result, count = _paragraph_pattern(bare).subn(_table, markup)
    if count:
        logger.debug("Table %s replaced %d bare-name paragraph(s)", name, count)
        return result

    return replace_all(markup, bracketed(name), table_xml)


def replace_image_token(markup: str, name: str, inline_xml) -> str:
    """Put a drawing where an image token sits.

    ``inline_xml`` is either a fragment or a zero-argument callable that
    returns a fresh fragment per occurrence (drawing ids must differ).

    A ``w:drawing`` is run content, not text, so a token inside
    ``<w:t>before{{name}}after</w:t>`` is cut out of the text element:
    ``<w:t xml:space="preserve">before</w:t><w:drawing/><w:t xml:space="preserve">after</w:t>``.
    The surrounding text keeps its edge spaces; an empty side is dropped.
    """
    if not name:
        return markup

    make = inline_xml if callable(inline_xml) else (lambda: inline_xml)

    in_text = re.compile(
        f"{_TEXT_OPEN}([^<]*?){re.escape(bracketed(name))}([^<]*?)</w:t>"
    )

    def _text(segment: str) -> str:
        return f'<w:t xml:space="preserve">{segment}</w:t>' if segment else ""

    def _split(m: re.Match) -> str:
        return f"{_text(m.group(1))}{make()}{_text(m.group(2))}"

    # A text element holding the token twice needs a second sweep.
    result = markup
    while True:
        result, count = in_text.subn(_split, result)
        if not count:
            break

    result = re.sub(
        f"{_TEXT_OPEN}{re.escape(name)}</w:t>",
        lambda _m: make(),
        result,
    )

    token = bracketed(name)
    while token in result:
        result = result.replace(token, make(), 1)
    return result
