"""Image relationship and inline drawing fragments."""

from __future__ import annotations

import logging
import posixpath
import re
import secrets
import string
from typing import Collection
from urllib.parse import urlparse

from ..config.settings import settings
from .entities import encode
from .units import EMU_PER_INCH

logger = logging.getLogger(__name__)

IMAGE_RELATIONSHIP_TYPE = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"
)

IMAGE_CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
}

DEFAULT_IMAGE_SIZE = EMU_PER_INCH
DEFAULT_EXTENSION = "png"

# Fallback ids start above the handful of rIds a fresh template already uses.
_FALLBACK_ID_BASE = 100

_MAGIC_NUMBERS = (
    (b"\x89PNG\r\n\x1a\n", "png"),
    (b"\xff\xd8\xff", "jpeg"),
    (b"GIF87a", "gif"),
    (b"GIF89a", "gif"),
    (b"BM", "bmp"),
)

_DOC_PR_ID_RE = re.compile(r'<wp:docPr\b[^>]*?\bid="(\d+)"')


# ---------------------------------------------------------------------------
# Fragments
# ---------------------------------------------------------------------------

def render_relationship(rel_id: str, filename: str) -> str:
    """Relationship entry binding ``rel_id`` to ``media/<filename>``."""
    return (
        f'<Relationship Id="{rel_id}" Type="{IMAGE_RELATIONSHIP_TYPE}"'
        f' Target="media/{filename}"/>'
    )


def render_inline(
    rel_id: str,
    width_emu: int | None = None,
    height_emu: int | None = None,
    name: str = "Picture",
    drawing_id: int = 1,
) -> str:
    """Inline ``w:drawing`` of ``width_emu`` x ``height_emu`` showing ``rel_id``.

    Height defaults to the width; width defaults to one inch.
    """
    if not width_emu:
        width_emu = DEFAULT_IMAGE_SIZE
    if not height_emu:
        height_emu = width_emu
    name = encode(name)
    return (
        "<w:drawing>"
        '<wp:inline distT="0" distB="0" distL="0" distR="0">'
        f'<wp:extent cx="{width_emu}" cy="{height_emu}"/>'
        '<wp:effectExtent l="0" t="0" r="0" b="0"/>'
        f'<wp:docPr id="{drawing_id}" name="{name}"/>'
        "<wp:cNvGraphicFramePr>"
        '<a:graphicFrameLocks xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main"'
        ' noChangeAspect="1"/>'
        "</wp:cNvGraphicFramePr>"
        '<a:graphic xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main">'
        '<a:graphicData uri="http://schemas.openxmlformats.org/drawingml/2006/picture">'
        '<pic:pic xmlns:pic="http://schemas.openxmlformats.org/drawingml/2006/picture">'
        "<pic:nvPicPr>"
        f'<pic:cNvPr id="{drawing_id}" name="{name}"/>'
        "<pic:cNvPicPr/>"
        "</pic:nvPicPr>"
        "<pic:blipFill>"
        f'<a:blip r:embed="{rel_id}" cstate="print"/>'
        "<a:stretch><a:fillRect/></a:stretch>"
        "</pic:blipFill>"
        "<pic:spPr>"
        "<a:xfrm>"
        '<a:off x="0" y="0"/>'
        f'<a:ext cx="{width_emu}" cy="{height_emu}"/>'
        "</a:xfrm>"
        '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>'
        "</pic:spPr>"
        "</pic:pic>"
        "</a:graphicData>"
        "</a:graphic>"
        "</wp:inline>"
        "</w:drawing>"
    )


def next_drawing_id(markup: str) -> int:
    """One above the highest ``wp:docPr`` id already in ``markup``."""
    ids = [int(v) for v in _DOC_PR_ID_RE.findall(markup or "")]
    return max(ids, default=0) + 1


# ---------------------------------------------------------------------------
# Relationship ids
# ---------------------------------------------------------------------------

def generate_image_id() -> str:
    """Random id of the form ``rId`` + two uppercase letters + four digits."""
    letters = "".join(secrets.choice(string.ascii_uppercase) for _ in range(2))
    digits = "".join(secrets.choice(string.digits) for _ in range(4))
    return f"rId{letters}{digits}"


def assign_relationship_id(
    requested: str | None,
    taken: Collection[str],
    index: int,
    max_random_attempts: int | None = None,
) -> str:
    """Pick a relationship id for image ``index`` that is not in ``taken``.

    An explicit ``requested`` id wins when free. Otherwise a few random
    candidates are tried, then ``rId{100 + index + n}`` for n = 1, 2, ...
    until one is free, so the loop always ends. The number of random
    tries defaults to ``settings.image_max_random_id_attempts``.
    """
    if requested:
        if requested not in taken:
            return requested
        logger.warning("Relationship id %s already in use; generating another", requested)

    if max_random_attempts is None:
        max_random_attempts = settings.image_max_random_id_attempts

    for _ in range(max(0, max_random_attempts)):
        candidate = generate_image_id()
        if candidate not in taken:
            return candidate

    counter = 1
    candidate = f"rId{_FALLBACK_ID_BASE + index + counter}"
    while candidate in taken:
        counter += 1
        candidate = f"rId{_FALLBACK_ID_BASE + index + counter}"
    return candidate


# ---------------------------------------------------------------------------
# Media naming
# ---------------------------------------------------------------------------

def _suffix(path: str) -> str:
    return posixpath.splitext(path.replace("\\", "/"))[1].lower().lstrip(".")


def sniff_extension(data: bytes | None) -> str | None:
    """Guess an image extension from the leading bytes."""
    if not data:
        return None
    for magic, ext in _MAGIC_NUMBERS:
        if data.startswith(magic):
            return ext
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    return None


def infer_extension(
    data: bytes | None = None,
    path: str | None = None,
    url: str | None = None,
) -> str:
    """File extension for an image: path suffix, URL suffix, then magic bytes.

    Falls back to ``png``.
    """
    if path:
        return _suffix(str(path)) or DEFAULT_EXTENSION
    if url:
        return _suffix(urlparse(url).path) or DEFAULT_EXTENSION
    return sniff_extension(data) or DEFAULT_EXTENSION


def image_content_type(extension: str) -> str:
    ext = extension.lower().lstrip(".")
    return IMAGE_CONTENT_TYPES.get(ext, "image/png")


def image_filename(index: int, extension: str, taken: Collection[str] = ()) -> str:
    """``image{index+1}.{ext}``, bumped past names already in ``taken``."""
    n = index + 1
    name = f"image{n}.{extension}"
    while name in taken:
        n += 1
        name = f"image{n}.{extension}"
    return name
