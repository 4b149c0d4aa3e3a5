"""Locate and read the metadata header at the top of a markdown post."""

from __future__ import annotations

import re
from typing import Tuple

_BLOCK_RE = re.compile(r"---\r?\n(.*?)\r?\n---", re.DOTALL)
_TITLE_RE = re.compile(r"^title:[ \t]*[\"']?(.+?)[\"']?\s*$", re.MULTILINE)
_DESCRIPTION_RE = re.compile(r"^description:[ \t]*[\"']?(.+?)[\"']?\s*$", re.MULTILINE)


class FrontmatterError(Exception):
    """Base class for problems with a post's metadata header."""


class NotFoundError(FrontmatterError):
    """Raised when a document does not start with a metadata header."""


class SchemaError(FrontmatterError):
    """Raised when a metadata header is present but fails validation."""


def split_frontmatter(text: str) -> Tuple[str, str]:
    """Return ``(header, body)``; the header must open the document."""
    match = _BLOCK_RE.match(text)
    if not match:
        raise NotFoundError("No frontmatter found")
    body = text[match.end():]
    return match.group(1), body.lstrip("\r\n")


def parse_frontmatter(text: str) -> Tuple[str, str]:
    """Extract ``title`` and ``description`` from a document header.

    Only the first line-anchored match of each key counts. Values may be
    wrapped in single or double quotes, which are stripped. Missing keys
    yield an empty string.
    """
    header, _ = split_frontmatter(text)
    title = _TITLE_RE.search(header)
    description = _DESCRIPTION_RE.search(header)
    return (
        title.group(1) if title else "",
        description.group(1) if description else "",
    )
