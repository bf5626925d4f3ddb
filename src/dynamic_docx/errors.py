"""Exceptions raised by the generator."""


class DocxGeneratorError(Exception):
    """Base class for every error raised by dynamic_docx."""


class TemplateNotLoadedError(DocxGeneratorError):
    """generate() was called before a template was loaded."""


class TemplateNotFoundError(DocxGeneratorError, FileNotFoundError):
    """The template path does not exist."""


class InvalidTemplateError(DocxGeneratorError):
    """The template is not a readable ZIP/DOCX archive."""


class ImageSourceError(DocxGeneratorError, ValueError):
    """An image had no source, or its bytes could not be read or fetched."""


class GenerationError(DocxGeneratorError):
    """A generation pass failed; the original exception is chained."""
