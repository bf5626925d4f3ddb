"""Request objects passed into a generation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .engine.placeholders import normalize_token
from .engine.tables import TableStyle


@dataclass(frozen=True)
class TableColumn:
    name: str
    key: str = ""
    width: int | None = None  # twips (1440 = 1 inch)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TableColumn:
        return cls(
            name=str(data.get("name", "")),
            key=str(data.get("key", "") or ""),
            width=data.get("width"),
        )


@dataclass(frozen=True)
class TableSpec:
    """A generated table and the token it replaces."""

    placeholder: str
    columns: tuple[TableColumn, ...]
    rows: tuple[tuple[str, ...], ...] = ()
    style: TableStyle | None = None

    @classmethod
    def build(
        cls,
        placeholder: str,
        headers: Iterable[TableColumn | Mapping[str, Any]],
        rows: Iterable[Iterable[Any]] = (),
        style: TableStyle | Mapping[str, Any] | None = None,
    ) -> TableSpec:
        """Build a spec from dicts or objects, freezing the row data."""
        columns = tuple(
            h if isinstance(h, TableColumn) else TableColumn.from_dict(h)
            for h in headers
        )
        frozen_rows = tuple(tuple("" if c is None else str(c) for c in row) for row in rows)
        if style is not None and not isinstance(style, TableStyle):
            style = TableStyle.from_dict(style)
        return cls(
            placeholder=normalize_token(placeholder),
            columns=columns,
            rows=frozen_rows,
            style=style,
        )


@dataclass(frozen=True)
class ImageSpec:
    """An image and the token it replaces.

    Supply one of ``data``, ``path`` or ``url``; when several are set the
    first non-empty in that order wins. Sizes are in EMU.
    """

    placeholder: str
    data: bytes | None = None
    path: str | None = None
    url: str | None = None
    width: int | None = None
    height: int | None = None
    id: str | None = None


@dataclass(frozen=True)
class PreparedImage:
    """An ImageSpec resolved to bytes, a relationship id and markup."""

    placeholder: str
    id: str
    data: bytes
    extension: str
    filename: str
    width: int
    height: int
    name: str
    relationship_xml: str
    inline_xml: str

    @property
    def media_path(self) -> str:
        return f"word/media/{self.filename}"


@dataclass
class GenerationRequest:
    """Everything one generation pass substitutes into a template.

    Setters merge into the existing state and return ``self`` for chaining.
    """

    data: dict[str, str] = field(default_factory=dict)
    header_data: dict[str, str] = field(default_factory=dict)
    footer_data: dict[str, str] = field(default_factory=dict)
    images: list[ImageSpec] = field(default_factory=list)
    tables: list[TableSpec] = field(default_factory=list)

    def set_data(self, data: Mapping[str, Any]) -> GenerationRequest:
        self.data.update(_as_text(data))
        return self

    def set_header(self, data: Mapping[str, Any]) -> GenerationRequest:
        self.header_data.update(_as_text(data))
        return self

    def set_footer(self, data: Mapping[str, Any]) -> GenerationRequest:
        self.footer_data.update(_as_text(data))
        return self

    def set_images(self, images: Iterable[ImageSpec]) -> GenerationRequest:
        self.images.extend(images)
        return self

    def add_table(self, table: TableSpec) -> GenerationRequest:
        self.tables.append(table)
        return self

    def header_placeholders(self) -> dict[str, str]:
        return {**self.data, **self.header_data}

    def footer_placeholders(self) -> dict[str, str]:
        return {**self.data, **self.footer_data}

    def copy(self) -> GenerationRequest:
        return GenerationRequest(
            data=dict(self.data),
            header_data=dict(self.header_data),
            footer_data=dict(self.footer_data),
            images=list(self.images),
            tables=list(self.tables),
        )


def _as_text(data: Mapping[str, Any]) -> dict[str, str]:
    return {str(k): "" if v is None else str(v) for k, v in data.items()}
