"""WordprocessingML table fragments built from column definitions and rows."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping, Sequence

from .entities import encode

# Width used for a grid column / cell when the column does not declare one.
DEFAULT_COLUMN_WIDTH = 2000

_BORDER_EDGES = ("top", "left", "bottom", "right", "insideH", "insideV")
_PADDING_SIDES = ("top", "left", "bottom", "right")


@dataclass(frozen=True)
class TableStyle:
    """Table styling options. ``None`` means "use the default".

    Colors are hex without ``#``; font size is in half-points; heights and
    padding in twips; border size in eighths of a point.
    """

    header_bg_color: str | None = None
    header_text_color: str | None = None
    border_color: str | None = None
    font_size: int | None = None
    font_family: str | None = None
    header_height: int | None = None
    row_height: int | None = None
    table_align: str | None = None
    cell_padding: int | None = None
    border_size: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> TableStyle:
        """Build a style from snake_case or camelCase keys; unknown keys are ignored."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)


DEFAULT_TABLE_STYLE = TableStyle(
    header_bg_color="C9DAF8",
    header_text_color="000000",
    border_color="auto",
    font_size=24,  # 12pt
    font_family="Times New Roman",
    header_height=400,
    row_height=350,
    table_align="center",
    cell_padding=100,
    border_size=4,
)


def _snake_case(key: str) -> str:
    out = []
    for ch in key:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def merge_style(override: TableStyle | Mapping[str, Any] | None) -> TableStyle:
    """Overlay the set fields of ``override`` on :data:`DEFAULT_TABLE_STYLE`."""
    if override is None:
        return DEFAULT_TABLE_STYLE
    if not isinstance(override, TableStyle):
        override = TableStyle.from_dict(override)
    changes = {k: v for k, v in asdict(override).items() if v is not None}
    return replace(DEFAULT_TABLE_STYLE, **changes)


# ---------------------------------------------------------------------------
# Fragment builders
# ---------------------------------------------------------------------------

def _run_props(style: TableStyle, header: bool) -> str:
    font = encode(style.font_family)
    parts = [f'<w:rFonts w:ascii="{font}" w:hAnsi="{font}"/>']
    if header:
        parts.append("<w:b/>")
        parts.append(f'<w:color w:val="{style.header_text_color}"/>')
    parts.append(f'<w:sz w:val="{style.font_size}"/>')
    parts.append(f'<w:szCs w:val="{style.font_size}"/>')
    return "<w:rPr>" + "".join(parts) + "</w:rPr>"


def _cell_text(value) -> str:
    return "" if value is None else str(value)


def _cell_margins(padding) -> str:
    sides = "".join(
        f'<w:{side} w:w="{padding}" w:type="dxa"/>' for side in _PADDING_SIDES
    )
    return f"<w:tcMar>{sides}</w:tcMar>"


def build_table_cell(text, width, style: TableStyle, header: bool = False) -> str:
    """Build XML for a single table cell."""
    rpr = _run_props(style, header)
    shading = (
        f'<w:shd w:val="clear" w:color="auto" w:fill="{style.header_bg_color}"/>'
        if header
        else ""
    )
    justify = '<w:jc w:val="center"/>' if header else ""
    return (
        "<w:tc>"
        "<w:tcPr>"
        f'<w:tcW w:w="{width}" w:type="dxa"/>'
        f"{shading}"
        f"{_cell_margins(style.cell_padding)}"
        '<w:vAlign w:val="center"/>'
        "</w:tcPr>"
        "<w:p>"
        f"<w:pPr>{justify}{rpr}</w:pPr>"
        f'<w:r>{rpr}<w:t xml:space="preserve">{encode(_cell_text(text))}</w:t></w:r>'
        "</w:p>"
        "</w:tc>"
    )


def build_header_row(columns: Sequence, widths: Sequence[int], style: TableStyle) -> str:
    cells = "".join(
        build_table_cell(_column_name(col), widths[i], style, header=True)
        for i, col in enumerate(columns)
    )
    return (
        "<w:tr>"
        f'<w:trPr><w:trHeight w:val="{style.header_height}"/><w:tblHeader/></w:trPr>'
        f"{cells}"
        "</w:tr>"
    )


def build_data_row(cells: Sequence, widths: Sequence[int], style: TableStyle) -> str:
    """One data row. Cells past the column count are dropped; short rows stay short."""
    body = "".join(
        build_table_cell(value, widths[i], style)
        for i, value in enumerate(list(cells)[: len(widths)])
    )
    return (
        "<w:tr>"
        f'<w:trPr><w:trHeight w:val="{style.row_height}"/></w:trPr>'
        f"{body}"
        "</w:tr>"
    )


def _column_name(col) -> str:
    if isinstance(col, Mapping):
        return col.get("name", "")
    return getattr(col, "name", "")


def _column_width(col):
    if isinstance(col, Mapping):
        width = col.get("width")
    else:
        width = getattr(col, "width", None)
    return width or DEFAULT_COLUMN_WIDTH


def render_table(
    columns: Sequence,
    rows: Sequence[Sequence],
    style: TableStyle | Mapping[str, Any] | None = None,
) -> str:
    """Build XML for a table with a header row and data rows.

    Args:
        columns: Column definitions (objects or dicts with ``name`` and
            optional ``width`` in twips).
        rows: Row cell values; each row is rendered up to ``len(columns)``.
        style: Overrides merged over :data:`DEFAULT_TABLE_STYLE`.

    Returns:
        A ``<w:tbl>`` fragment. Style values are interpolated unchanged.
    """
    merged = merge_style(style)
    widths = [_column_width(col) for col in columns]

    grid_cols = "".join(f'<w:gridCol w:w="{w}"/>' for w in widths)
    borders = "".join(
        f'<w:{edge} w:val="single" w:sz="{merged.border_size}" w:space="0"'
        f' w:color="{merged.border_color}"/>'
        for edge in _BORDER_EDGES
    )
    header_row = build_header_row(columns, widths, merged)
    data_rows = "".join(build_data_row(row, widths, merged) for row in rows)

    return (
        "<w:tbl>"
        "<w:tblPr>"
        '<w:tblStyle w:val="TableGrid"/>'
        '<w:tblW w:w="5000" w:type="pct"/>'
        f'<w:jc w:val="{merged.table_align}"/>'
        f"<w:tblBorders>{borders}</w:tblBorders>"
        '<w:tblLayout w:type="fixed"/>'
        "</w:tblPr>"
        f"<w:tblGrid>{grid_cols}</w:tblGrid>"
        f"{header_row}{data_rows}"
        "</w:tbl>"
    )
