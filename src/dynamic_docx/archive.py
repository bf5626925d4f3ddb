"""In-memory DOCX package: read entries, overlay edits, write a new archive.

The loaded template is never modified. Edits collected for one pass are
written over the original entries when the archive is rebuilt, so a pass
that fails leaves nothing behind.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from pathlib import Path

from .errors import InvalidTemplateError, TemplateNotFoundError

logger = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"
DOCUMENT_RELS_PART = "word/_rels/document.xml.rels"
CONTENT_TYPES_PART = "[Content_Types].xml"
MEDIA_DIR = "word/media/"

_HEADER_RE = re.compile(r"^word/header\d+\.xml$")
_FOOTER_RE = re.compile(r"^word/footer\d+\.xml$")


def rels_part_for(part_name: str) -> str:
    """Relationships part that belongs to ``part_name``.

    ``word/header1.xml`` -> ``word/_rels/header1.xml.rels``
    """
    folder, _, filename = part_name.rpartition("/")
    prefix = f"{folder}/" if folder else ""
    return f"{prefix}_rels/{filename}.rels"


class TemplatePackage:
    """Read-only view of a template archive."""

    def __init__(self, data: bytes):
        try:
            with zipfile.ZipFile(io.BytesIO(data), "r") as zf:
                self._infos = zf.infolist()
                self._entries = {info.filename: zf.read(info.filename) for info in self._infos}
        except zipfile.BadZipFile as e:
            raise InvalidTemplateError(f"Template is not a valid ZIP/DOCX archive: {e}") from e

    @classmethod
    def from_path(cls, path: str | Path) -> TemplatePackage:
        p = Path(path)
        if not p.is_file():
            raise TemplateNotFoundError(f"Template file not found: {path}")
        logger.info("Loading template %s", p)
        return cls(p.read_bytes())

    def names(self) -> list[str]:
        return [info.filename for info in self._infos]

    def has(self, name: str) -> bool:
        return name in self._entries

    def read(self, name: str) -> bytes:
        return self._entries[name]

    def read_text(self, name: str) -> str:
        """Read an entry as UTF-8, falling back to latin-1."""
        raw = self._entries[name]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return raw.decode("latin-1")

    def header_parts(self) -> list[str]:
        return [n for n in self.names() if _HEADER_RE.match(n)]

    def footer_parts(self) -> list[str]:
        return [n for n in self.names() if _FOOTER_RE.match(n)]

    def media_names(self) -> set[str]:
        """Filenames already under ``word/media/``."""
        return {n[len(MEDIA_DIR):] for n in self.names() if n.startswith(MEDIA_DIR)}

    def build(self, updates: dict[str, bytes]) -> bytes:
        """Write a new archive with ``updates`` applied.

        Original entries keep their order and ZipInfo metadata; entries in
        ``updates`` that the template lacks are appended at the end.
        """
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as output_zip:
            for info in self._infos:
                content = updates.get(info.filename, self._entries[info.filename])
                output_zip.writestr(info, content)
            for name, content in updates.items():
                if name not in self._entries:
                    output_zip.writestr(name, content)
        return buffer.getvalue()
