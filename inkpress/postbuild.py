"""Regex rewrites applied to generated HTML files once the build is done.

These run after every other step, so the final (published) image ``src`` is
known. ``href`` and ``src`` are only recognised as whole attribute names, so
``data-href`` or ``data-src`` are never mistaken for them. Regular expressions
cannot parse arbitrary markup: an image separated from its anchor by other
elements, or a quoted attribute value that itself contains `` src="``, is not
handled the way a tree transform would.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, List

logger = logging.getLogger("inkpress")

HTML_SUFFIX = ".html"

_LINKED_IMAGE_RE = re.compile(
    r'<a\s+([^>]*(?<![\w-])href=")[^"]*("[^>]*>)\s*(<img\s+[^>]*(?<![\w-])src=")([^"]*)("[^>]*>)\s*</a>'
)
_IMAGE_RE = re.compile(r"(<a\s[^>]*>)?(\s*)<img\s+([^>]*)>(\s*)(</a>)?")
_SRC_RE = re.compile(r'(?<![\w-])src="([^"]*)"')


def fix_image_links(html: str) -> str:
    """Point anchors that directly wrap an image at the image's ``src``."""
    return _LINKED_IMAGE_RE.sub(
        lambda m: f"<a {m.group(1)}{m.group(4)}{m.group(2)}{m.group(3)}{m.group(4)}{m.group(5)}</a>",
        html,
    )


def _link_image(match: re.Match) -> str:
    open_a, leading, attrs, trailing, close_a = match.groups()
    if open_a or close_a:
        return match.group(0)
    src = _SRC_RE.search(attrs)
    if not src or not src.group(1):
        return match.group(0)
    return (
        f'{leading}<a href="{src.group(1)}" target="_blank" rel="noopener noreferrer">'
        f"<img {attrs}></a>{trailing}"
    )


def link_images(html: str) -> str:
    """Wrap bare images in an anchor that opens the image in a new tab.

    Images with an anchor directly around them, and images without a
    ``src``, are left as they are, so running this twice changes nothing.
    """
    return _IMAGE_RE.sub(_link_image, html)


def rewrite_html_files(root: Path, rewrite: Callable[[str], str]) -> List[Path]:
    """Apply ``rewrite`` to every HTML file under ``root``, depth first.

    Files are written back only when their content changed.
    """
    changed: List[Path] = []
    for entry in Path(root).iterdir():
        if entry.is_dir():
            changed.extend(rewrite_html_files(entry, rewrite))
        elif entry.name.endswith(HTML_SUFFIX):
            content = entry.read_text(encoding="utf-8")
            updated = rewrite(content)
            if updated != content:
                entry.write_text(updated, encoding="utf-8")
                logger.debug("Rewrote image links in %s", entry)
                changed.append(entry)
    return changed
