"""Fill DOCX templates with text, tables and images."""

from .engine.tables import DEFAULT_TABLE_STYLE, TableStyle
from .engine.units import cm_to_emu, inches_to_emu, pixels_to_emu
from .errors import (
    DocxGeneratorError,
    GenerationError,
    ImageSourceError,
    InvalidTemplateError,
    TemplateNotFoundError,
    TemplateNotLoadedError,
)
from .generator import DocxGenerator, generate_document
from .models import GenerationRequest, ImageSpec, PreparedImage, TableColumn, TableSpec

__version__ = "0.1.0"

__all__ = [
    "DocxGenerator",
    "generate_document",
    "GenerationRequest",
    "TableSpec",
    "TableColumn",
    "TableStyle",
    "DEFAULT_TABLE_STYLE",
    "ImageSpec",
    "PreparedImage",
    "DocxGeneratorError",
    "TemplateNotLoadedError",
    "TemplateNotFoundError",
    "InvalidTemplateError",
    "ImageSourceError",
    "GenerationError",
    "pixels_to_emu",
    "inches_to_emu",
    "cm_to_emu",
]
