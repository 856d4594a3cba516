"""Identifier parsing and filename sanitization.

Turns raw OCR text into a serial-number-like identifier and makes any
identifier safe to use as a filename inside an archive.

Example:
    >>> parse_serial("SN:\\n  4471 AB2290X7  ")
    'AB2290X7'
    >>> sanitize_identifier("ABC/123 v2")
    'ABC_123_v2'
"""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_\-]")


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and strip the ends."""
    return _WHITESPACE.sub(" ", text or "").strip()


def parse_serial(
    text: str,
    min_length: int = 6,
    max_length: int = 24,
    token_count: int = 4,
) -> Optional[str]:
    """Pick an identifier out of recognized text.

    The first run of `min_length` to `max_length` ASCII letters/digits wins.
    The search is unanchored, so a longer run yields its first `max_length`
    characters. Without such a run, the first `token_count` words are joined
    with underscores.

    Args:
        text: Raw OCR text.
        min_length: Shortest accepted run.
        max_length: Longest accepted run.
        token_count: Number of words used by the fallback.

    Returns:
        Identifier string, or None if the text is blank.
    """
    normalized = normalize_whitespace(text)
    if not normalized:
        return None

    match = re.search(f"[A-Za-z0-9]{{{min_length},{max_length}}}", normalized)
    if match:
        logger.debug(f"Serial-shaped run found: '{match.group(0)}'")
        return match.group(0)

    tokens = normalized.split(" ")[:token_count]
    logger.debug(f"No serial-shaped run, using leading tokens: {tokens}")
    return "_".join(tokens)


def sanitize_identifier(identifier: str, max_length: int = 64) -> str:
    """Make an identifier filesystem and archive safe.

    Every character outside ``[A-Za-z0-9_-]`` becomes an underscore and the
    result is cut to `max_length`. Applying it twice changes nothing.

    Raises:
        ValueError: If the identifier is empty.
    """
    if not identifier:
        raise ValueError("Cannot sanitize an empty identifier")

    return _UNSAFE_CHARS.sub("_", identifier)[:max_length]


def build_filename(identifier: str, extension: str = ".png") -> str:
    """Append the output extension to a sanitized identifier."""
    if not extension.startswith("."):
        extension = f".{extension}"
    return f"{identifier}{extension}"
