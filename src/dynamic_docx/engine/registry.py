"""Text-level edits to the relationship and content-type registries.

Uses string-level manipulation instead of ElementTree to avoid namespace
rewriting that can break strict OOXML parsers.
"""

from __future__ import annotations

import re

RELATIONSHIPS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

_RELATIONSHIPS_CLOSE = "</Relationships>"
_TYPES_CLOSE = "</Types>"
_REL_ID_RE = re.compile(r'\bId="([^"]+)"')


def empty_relationships() -> str:
    """Minimal relationships part for a header/footer that has none."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<Relationships xmlns="{RELATIONSHIPS_NS}">'
        f"{_RELATIONSHIPS_CLOSE}"
    )


def insert_before_tag(xml: str, tag: str, content: str) -> str:
    """Insert ``content`` before the first occurrence of ``tag``."""
    index = xml.find(tag)
    if index == -1:
        return xml
    return xml[:index] + content + xml[index:]


def insert_after_tag(xml: str, tag: str, content: str) -> str:
    """Insert ``content`` right after the first occurrence of ``tag``."""
    index = xml.find(tag)
    if index == -1:
        return xml
    end = index + len(tag)
    return xml[:end] + content + xml[end:]


def replace_between_tags(xml: str, start_tag: str, end_tag: str, replacement: str) -> str:
    """Replace whatever sits between ``start_tag`` and the next ``end_tag``."""
    start = xml.find(start_tag)
    if start == -1:
        return xml
    end = xml.find(end_tag, start + len(start_tag))
    if end == -1:
        return xml
    return xml[: start + len(start_tag)] + replacement + xml[end:]


def add_relationship(rels_xml: str, relationship_xml: str) -> str:
    """Append a ``Relationship`` element before ``</Relationships>``."""
    if _RELATIONSHIPS_CLOSE not in rels_xml:
        # Self-closing <Relationships .../> -> open + inject + close
        return re.sub(
            r"(<Relationships\b[^>]*?)\s*/>",
            lambda m: f"{m.group(1)}>{relationship_xml}{_RELATIONSHIPS_CLOSE}",
            rels_xml,
            count=1,
        )
    return insert_before_tag(rels_xml, _RELATIONSHIPS_CLOSE, relationship_xml + "\n")


def extract_relationship_ids(rels_xml: str) -> list[str]:
    """Every ``Id="..."`` value in a relationships part, in document order."""
    if not rels_xml:
        return []
    return _REL_ID_RE.findall(rels_xml)


def add_content_type(types_xml: str, extension: str, content_type: str) -> str:
    """Declare a ``Default`` content type unless the extension already has one."""
    if f'Extension="{extension}"' in types_xml:
        return types_xml
    declaration = f'<Default Extension="{extension}" ContentType="{content_type}"/>'
    return insert_before_tag(types_xml, _TYPES_CLOSE, declaration + "\n")
