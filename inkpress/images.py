"""Publish images referenced by posts into the output directory."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup
from filetype import guess

from .utils import is_local_reference, slugify

logger = logging.getLogger("inkpress")

ALLOWED_IMAGE_TYPES = {"png", "jpg", "gif", "webp", "bmp", "tif", "avif"}


def detect_image_format(data: bytes) -> Optional[str]:
    """Extension to publish ``data`` under, judged by its file signature.

    Returns None for anything that is not one of ``ALLOWED_IMAGE_TYPES``, so a
    renamed text file or an icon never ends up in the asset directory.
    """
    kind = guess(data)
    if kind is None or not kind.mime.startswith("image/"):
        return None
    extension = "jpg" if kind.extension == "jpeg" else kind.extension.lower()
    return extension if extension in ALLOWED_IMAGE_TYPES else None


class AssetPublisher:
    """Copy local images next to a post into ``<output>/_assets`` and rewrite ``src``.

    Files are renamed to ``<stem>-<hash>.<ext>``, so the published ``src`` is
    only known after this step has run.
    """

    def __init__(self, output_dir: Path, url_prefix: str = "/_assets/") -> None:
        self.asset_dir = Path(output_dir) / url_prefix.strip("/")
        self.url_prefix = url_prefix
        self._published: Dict[Path, str] = {}

    def _publish_file(self, source: Path) -> Optional[str]:
        if source in self._published:
            return self._published[source]

        data = source.read_bytes()
        extension = detect_image_format(data)
        if extension is None:
            logger.warning("Skipping %s: not a supported image", source)
            return None

        digest = hashlib.sha1(data).hexdigest()[:8]
        filename = f"{slugify(source.stem, fallback='image')[:60]}-{digest}.{extension}"
        self.asset_dir.mkdir(parents=True, exist_ok=True)
        (self.asset_dir / filename).write_bytes(data)

        url = self.url_prefix + filename
        self._published[source] = url
        logger.debug("Published %s as %s", source, url)
        return url

    def publish(self, soup: BeautifulSoup, base_dir: Path) -> int:
        """Rewrite local image sources in ``soup``; returns how many changed."""
        rewritten = 0
        for img in soup.find_all("img"):
            src = img.get("src")
            if not src or not is_local_reference(src):
                continue
            source = (Path(base_dir) / unquote(src)).resolve()
            if not source.is_file():
                logger.warning("Image %s referenced from %s does not exist", src, base_dir)
                continue
            url = self._publish_file(source)
            if url:
                img["src"] = url
                rewritten += 1
        return rewritten
