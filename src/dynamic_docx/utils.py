"""Logging helpers and small text utilities."""

import logging
import re
import sys
from typing import Optional

from bs4 import BeautifulSoup

from .config.settings import settings
from .engine.entities import encode

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(
    level: int | None = None,
    format_string: Optional[str] = None,
) -> None:
    """Set up global logging configuration.

    Args:
        level: Logging level override (default: from settings.log_level)
        format_string: Custom format string (optional)
    """
    if level is None:
        level = LOG_LEVEL_MAP.get(settings.log_level.upper(), logging.INFO)

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

_STRIP_TAGS = ("script", "style")
_SPACE_RE = re.compile(r"\s+")


def strip_html(html) -> str:
    """Text content of an HTML fragment with whitespace collapsed.

    ``script`` and ``style`` bodies are dropped along with every tag.
    """
    if not html or not isinstance(html, str):
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_STRIP_TAGS):
        tag.decompose()
    text = soup.get_text()
    return _SPACE_RE.sub(" ", text).strip()


def wrap_with_preserve_space(text) -> str:
    """Wrap text in a ``<w:t>`` element that keeps leading/trailing spaces."""
    return f'<w:t xml:space="preserve">{encode(text)}</w:t>'
