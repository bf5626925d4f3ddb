"""Template-driven DOCX generation.

Usage:
    generator = DocxGenerator()
    generator.load_template("template.docx")
    generator.set_data({"name": "John", "company": "Acme"})
    await generator.save("output.docx")

A pass reads the template's document, header and footer parts, substitutes
placeholders, tables and images, then writes a new archive. The template
held by the generator is left untouched, so ``generate()`` can run again
with different data.
"""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

import httpx

from .archive import (
    CONTENT_TYPES_PART,
    DOCUMENT_PART,
    DOCUMENT_RELS_PART,
    TemplatePackage,
    rels_part_for,
)
from .engine.images import (
    DEFAULT_IMAGE_SIZE,
    assign_relationship_id,
    image_content_type,
    image_filename,
    infer_extension,
    next_drawing_id,
    render_inline,
    render_relationship,
)
from .engine.placeholders import (
    apply_placeholders,
    contains_token,
    extract_token_names,
    normalize_token,
    replace_image_token,
    replace_table_token,
)
from .engine.registry import (
    add_content_type,
    add_relationship,
    empty_relationships,
    extract_relationship_ids,
)
from .engine.tables import render_table
from .errors import DocxGeneratorError, GenerationError, TemplateNotLoadedError
from .models import GenerationRequest, ImageSpec, PreparedImage, TableSpec
from .sources import resolve_image_bytes

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Image preparation
# ---------------------------------------------------------------------------

async def prepare_images(
    specs: Iterable[ImageSpec],
    existing_ids: Iterable[str],
    existing_media: Iterable[str] = (),
    client: httpx.AsyncClient | None = None,
) -> list[PreparedImage]:
    """Resolve every image in order, assigning ids that never repeat.

    Each image's id check sees the ids of all images before it, so this
    runs strictly one image at a time.
    """
    taken_ids = set(existing_ids)
    taken_media = set(existing_media)
    prepared: list[PreparedImage] = []

    for index, spec in enumerate(specs):
        data = await resolve_image_bytes(spec, client=client)
        extension = infer_extension(data=data, path=spec.path, url=spec.url)
        filename = image_filename(index, extension, taken_media)
        rel_id = assign_relationship_id(spec.id, taken_ids, index)
        width = spec.width or DEFAULT_IMAGE_SIZE
        height = spec.height or width
        name = f"Image {index + 1}"

        taken_ids.add(rel_id)
        taken_media.add(filename)
        prepared.append(
            PreparedImage(
                placeholder=spec.placeholder,
                id=rel_id,
                data=data,
                extension=extension,
                filename=filename,
                width=width,
                height=height,
                name=name,
                relationship_xml=render_relationship(rel_id, filename),
                inline_xml=render_inline(rel_id, width, height, name),
            )
        )
        logger.info(
            "Prepared image %s -> %s (%s, %d bytes)",
            spec.placeholder,
            rel_id,
            filename,
            len(data),
        )

    return prepared


# ---------------------------------------------------------------------------
# Part processing
# ---------------------------------------------------------------------------

def process_tables(markup: str, tables: Iterable[TableSpec]) -> str:
    result = markup
    for table in tables:
        table_xml = render_table(table.columns, table.rows, table.style)
        result = replace_table_token(result, table.placeholder, table_xml)
    return result


def process_images(
    markup: str,
    images: Iterable[PreparedImage],
    drawing_ids: Iterator[int] | None = None,
) -> tuple[str, list[PreparedImage]]:
    """Replace image tokens with drawings.

    Args:
        markup: Part markup.
        images: Prepared images; those whose token is absent are skipped.
        drawing_ids: Shared source of ``wp:docPr`` ids. When omitted, ids
            start above the highest one already in ``markup``.

    Returns:
        The new markup and the images that were actually placed.
    """
    result = markup
    placed: list[PreparedImage] = []
    if drawing_ids is None:
        drawing_ids = itertools.count(next_drawing_id(markup))

    for image in images:
        if not contains_token(result, [image.placeholder]):
            continue

        def _inline(image=image) -> str:
            return render_inline(
                image.id, image.width, image.height, image.name, next(drawing_ids)
            )

        result = replace_image_token(result, image.placeholder, _inline)
        placed.append(image)
    return result, placed


def render_part(
    markup: str,
    placeholders: Mapping[str, str],
    tables: Iterable[TableSpec] = (),
    images: Iterable[PreparedImage] = (),
    drawing_ids: Iterator[int] | None = None,
) -> tuple[str, list[PreparedImage]]:
    """Placeholders, then tables, then images, over one part's markup."""
    result = apply_placeholders(markup, placeholders)
    result = process_tables(result, tables)
    return process_images(result, images, drawing_ids)


def _register_images(rels_xml: str, images: Iterable[PreparedImage]) -> str:
    for image in images:
        rels_xml = add_relationship(rels_xml, image.relationship_xml)
    return rels_xml


def _collect_relationship_ids(template: TemplatePackage, parts: Iterable[str]) -> list[str]:
    ids: list[str] = []
    for part in parts:
        rels = rels_part_for(part)
        if template.has(rels):
            ids.extend(extract_relationship_ids(template.read_text(rels)))
    return ids


async def generate_document(
    template: TemplatePackage,
    request: GenerationRequest,
    client: httpx.AsyncClient | None = None,
) -> bytes:
    """Run one generation pass and return the new DOCX bytes.

    Raises:
        ImageSourceError: When an image cannot be resolved.
        GenerationError: For any other failure during the pass.
    """
    try:
        headers = template.header_parts()
        footers = template.footer_parts()
        updates: dict[str, bytes] = {}

        content_parts = [p for p in (DOCUMENT_PART, *headers, *footers) if template.has(p)]
        existing_ids = _collect_relationship_ids(template, content_parts)
        # docPr ids must not repeat anywhere in the package.
        drawing_ids = itertools.count(
            max((next_drawing_id(template.read_text(p)) for p in content_parts), default=1)
        )
        images = await prepare_images(
            request.images,
            existing_ids,
            existing_media=template.media_names(),
            client=client,
        )

        if template.has(DOCUMENT_PART):
            logger.debug("Processing %s", DOCUMENT_PART)
            markup, _ = render_part(
                template.read_text(DOCUMENT_PART),
                request.data,
                tables=request.tables,
                images=images,
                drawing_ids=drawing_ids,
            )
            updates[DOCUMENT_PART] = markup.encode("utf-8")

        # Every image is registered with the document, placed or not.
        if images:
            rels_xml = (
                template.read_text(DOCUMENT_RELS_PART)
                if template.has(DOCUMENT_RELS_PART)
                else empty_relationships()
            )
            updates[DOCUMENT_RELS_PART] = _register_images(rels_xml, images).encode("utf-8")

        part_data = [(name, request.header_placeholders()) for name in headers]
        part_data += [(name, request.footer_placeholders()) for name in footers]
        for name, placeholders in part_data:
            logger.debug("Processing %s", name)
            markup, placed = render_part(
                template.read_text(name),
                placeholders,
                images=images,
                drawing_ids=drawing_ids,
            )
            updates[name] = markup.encode("utf-8")
            if placed:
                rels = rels_part_for(name)
                rels_xml = template.read_text(rels) if template.has(rels) else empty_relationships()
                updates[rels] = _register_images(rels_xml, placed).encode("utf-8")

        if images and template.has(CONTENT_TYPES_PART):
            types_xml = template.read_text(CONTENT_TYPES_PART)
            for ext in dict.fromkeys(img.extension for img in images):
                types_xml = add_content_type(types_xml, ext, image_content_type(ext))
            updates[CONTENT_TYPES_PART] = types_xml.encode("utf-8")

        for image in images:
            updates[image.media_path] = image.data

        output = template.build(updates)
    except DocxGeneratorError:
        raise
    except Exception as e:
        raise GenerationError(f"Failed to generate document: {e}") from e

    logger.info(
        "Generated document (%d bytes, %d table(s), %d image(s))",
        len(output),
        len(request.tables),
        len(images),
    )
    return output


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------

class DocxGenerator:
    """Chained front end over :class:`GenerationRequest` and :func:`generate_document`."""

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._template: TemplatePackage | None = None
        self._request = GenerationRequest()
        self._client = client

    @property
    def request(self) -> GenerationRequest:
        return self._request

    def load_template(self, source: str | Path | bytes) -> DocxGenerator:
        """Load a template from a file path or raw DOCX bytes."""
        if isinstance(source, (bytes, bytearray)):
            self._template = TemplatePackage(bytes(source))
        else:
            self._template = TemplatePackage.from_path(source)
        return self

    def is_template_loaded(self) -> bool:
        return self._template is not None

    def set_data(self, data: Mapping[str, Any]) -> DocxGenerator:
        self._request.set_data(data)
        return self

    def set_header(self, data: Mapping[str, Any]) -> DocxGenerator:
        self._request.set_header(data)
        return self

    def set_footer(self, data: Mapping[str, Any]) -> DocxGenerator:
        self._request.set_footer(data)
        return self

    def set_images(self, images: Iterable[ImageSpec | Mapping[str, Any]]) -> DocxGenerator:
        """Queue images; dicts use the keys placeholder, buffer/path/url, width, height, id."""
        self._request.set_images(
            img if isinstance(img, ImageSpec) else _image_spec_from_dict(img) for img in images
        )
        return self

    def add_table(
        self,
        placeholder: str | TableSpec,
        headers: Iterable[Any] = (),
        rows: Iterable[Iterable[Any]] = (),
        style: Any = None,
    ) -> DocxGenerator:
        """Queue a table, either as a ready TableSpec or from its parts."""
        if isinstance(placeholder, TableSpec):
            table = placeholder
        else:
            table = TableSpec.build(placeholder, headers, rows, style)
        self._request.add_table(table)
        return self

    def reset(self) -> DocxGenerator:
        """Drop queued data, images and tables; the template stays loaded."""
        self._request = GenerationRequest()
        return self

    def list_placeholders(self) -> list[str]:
        """Bracketed token names found in the body, headers and footers."""
        template = self._require_template()
        names: set[str] = set()
        parts = [DOCUMENT_PART, *template.header_parts(), *template.footer_parts()]
        for part in parts:
            if template.has(part):
                names |= extract_token_names(template.read_text(part))
        return sorted(names)

    async def generate(self) -> bytes:
        """Generate the DOCX and return it as bytes."""
        template = self._require_template()
        return await generate_document(template, self._request.copy(), client=self._client)

    async def save(self, output_path: str | Path) -> Path:
        """Generate and write the DOCX, creating parent directories."""
        data = await self.generate()
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("Saved %s (%d bytes)", path, len(data))
        return path

    def _require_template(self) -> TemplatePackage:
        if self._template is None:
            raise TemplateNotLoadedError("No template loaded. Call load_template() first.")
        return self._template


def _image_spec_from_dict(data: Mapping[str, Any]) -> ImageSpec:
    return ImageSpec(
        placeholder=normalize_token(data["placeholder"]),
        data=data.get("buffer") or data.get("data"),
        path=str(data["path"]) if data.get("path") else None,
        url=data.get("url"),
        width=data.get("width"),
        height=data.get("height"),
        id=data.get("id"),
    )
