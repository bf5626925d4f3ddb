"""Render a DOCX template from a JSON job file.

Usage:
    dynamic-docx <template_docx> <job_json> <output_docx>
    dynamic-docx <template_docx> --list-placeholders

Job JSON format:
{
  "data": {"title": "Q1 Report"},
  "header": {"headerTitle": "Confidential"},
  "footer": {"footerText": "Page 1"},
  "tables": [
    {"placeholder": "itemsTable",
     "headers": [{"name": "Item", "key": "item", "width": 3000}],
     "rows": [["Pens"]],
     "style": {"headerBgColor": "4472C4", "borderSize": 8}}
  ],
  "images": [
    {"placeholder": "logo", "path": "logo.png", "width": 914400},
    {"placeholder": "badge", "base64": "iVBORw0KGgo..."}
  ]
}
"""

import asyncio
import base64
import binascii
import json
import logging
import sys
from pathlib import Path

from .errors import DocxGeneratorError
from .generator import DocxGenerator
from .models import ImageSpec
from .engine.placeholders import normalize_token
from .utils import setup_logging

logger = logging.getLogger(__name__)


def load_job(job_path: str) -> dict:
    """Read a job file; relative image paths resolve against its folder."""
    path = Path(job_path)
    with open(path, "r", encoding="utf-8") as f:
        job = json.load(f)
    if not isinstance(job, dict):
        raise ValueError(f"Job file must contain a JSON object: {job_path}")

    logger.debug("Loaded job %s (keys: %s)", job_path, ", ".join(job))

    base_dir = path.parent
    for image in job.get("images", []) or []:
        if image.get("path") and not Path(image["path"]).is_absolute():
            image["path"] = str(base_dir / image["path"])
    return job


def _image_from_job(item: dict) -> ImageSpec:
    data = None
    if item.get("base64"):
        try:
            data = base64.b64decode(item["base64"], validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 image data for {item.get('placeholder')}") from e
    return ImageSpec(
        placeholder=normalize_token(item.get("placeholder", "")),
        data=data,
        path=item.get("path"),
        url=item.get("url"),
        width=item.get("width"),
        height=item.get("height"),
        id=item.get("id"),
    )


def build_generator(template_path: str, job: dict) -> DocxGenerator:
    generator = DocxGenerator().load_template(template_path)
    generator.set_data(job.get("data", {}) or {})
    generator.set_header(job.get("header", {}) or {})
    generator.set_footer(job.get("footer", {}) or {})
    for table in job.get("tables", []) or []:
        generator.add_table(
            table.get("placeholder", ""),
            headers=table.get("headers", []),
            rows=table.get("rows", []),
            style=table.get("style"),
        )
    generator.set_images(_image_from_job(item) for item in job.get("images", []) or [])
    return generator


def main() -> int:
    """CLI entry point.

    Returns:
        Exit code: 0 on success, 1 on failure.
    """
    args = sys.argv[1:]

    list_only = False
    if "--list-placeholders" in args:
        list_only = True
        args.remove("--list-placeholders")

    if (list_only and len(args) != 1) or (not list_only and len(args) != 3):
        print(
            "Usage: dynamic-docx <template_docx> <job_json> <output_docx>\n"
            "       dynamic-docx <template_docx> --list-placeholders",
            file=sys.stderr,
        )
        return 1

    setup_logging()

    try:
        if list_only:
            generator = DocxGenerator().load_template(args[0])
            for name in generator.list_placeholders():
                print(name)
            return 0

        template_path, job_path, output_path = args
        job = load_job(job_path)
        generator = build_generator(template_path, job)
        result_path = asyncio.run(generator.save(output_path))
        print(f"DOCX created: {result_path}")
        return 0

    except DocxGeneratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
