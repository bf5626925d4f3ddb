"""Markup engine: entity codec, placeholder matcher and fragment builders.

Everything in this package is a pure function over strings.
"""

from .entities import decode, encode, repair_double_escaping
from .images import (
    assign_relationship_id,
    image_content_type,
    infer_extension,
    render_inline,
    render_relationship,
)
from .placeholders import (
    apply_placeholders,
    contains_token,
    extract_token_names,
    replace_image_token,
    replace_table_token,
    substitute,
)
from .registry import add_content_type, add_relationship, extract_relationship_ids
from .tables import DEFAULT_TABLE_STYLE, TableStyle, render_table
from .units import cm_to_emu, inches_to_emu, pixels_to_emu

__all__ = [
    "encode",
    "decode",
    "repair_double_escaping",
    "substitute",
    "apply_placeholders",
    "extract_token_names",
    "contains_token",
    "replace_table_token",
    "replace_image_token",
    "render_table",
    "TableStyle",
    "DEFAULT_TABLE_STYLE",
    "render_relationship",
    "render_inline",
    "assign_relationship_id",
    "infer_extension",
    "image_content_type",
    "add_relationship",
    "add_content_type",
    "extract_relationship_ids",
    "pixels_to_emu",
    "inches_to_emu",
    "cm_to_emu",
]
