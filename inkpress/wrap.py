"""Wrap rendered images in links, either on the document tree or post-build.

Tree transforms operate on a parsed ``BeautifulSoup`` document in place while
a post is rendered. Text rewrites (see :mod:`inkpress.postbuild`) run over the
written HTML files at the end of the build. An :class:`ImageWrapStrategy`
pairs the two so the build can select one by name.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from .postbuild import fix_image_links, link_images

logger = logging.getLogger("inkpress")

LIGHTBOX_PREFIX = "lightbox-"


def _is_wrapped(img: Tag) -> bool:
    return img.parent is not None and img.parent.name == "a"


def wrap_images_in_links(soup: BeautifulSoup) -> int:
    """Wrap each unlinked image in an anchor that opens it in a new tab."""
    wrapped = 0
    for img in soup.find_all("img"):
        if _is_wrapped(img):
            continue
        src = img.get("src")
        if not src:
            continue
        anchor = soup.new_tag(
            "a",
            attrs={
                "href": src,
                "target": "_blank",
                "rel": "noopener noreferrer",
                "class": "image-link",
            },
        )
        img.wrap(anchor)
        wrapped += 1
    return wrapped


def _lightbox_overlay(soup: BeautifulSoup, img: Tag, lightbox_id: str) -> Tag:
    overlay = soup.new_tag("div", attrs={"id": lightbox_id, "class": "lightbox"})
    close = soup.new_tag(
        "a",
        attrs={
            "href": "#_",
            "class": "lightbox-close",
            "aria-label": "Close lightbox",
        },
    )
    full_size = soup.new_tag("img", attrs={"alt": img.get("alt", "")})
    if img.get("src"):
        full_size["src"] = img["src"]
    close.append(full_size)
    overlay.append(close)
    return overlay


def wrap_images_in_lightbox(soup: BeautifulSoup) -> int:
    """Replace each unlinked image with a trigger link and a hidden overlay.

    The trigger points at ``#lightbox-{n}`` and the overlay carries that id,
    where ``n`` is the image's position among transformed images in document
    order. Both hold their own copy of the image.
    """
    images = [img for img in soup.find_all("img") if not _is_wrapped(img)]

    # Reverse order keeps sibling positions of earlier images stable.
    for index in range(len(images) - 1, -1, -1):
        img = images[index]
        lightbox_id = f"{LIGHTBOX_PREFIX}{index}"
        trigger = soup.new_tag(
            "a", attrs={"href": f"#{lightbox_id}", "class": "image-trigger"}
        )
        trigger.append(copy.copy(img))
        overlay = _lightbox_overlay(soup, img, lightbox_id)
        img.replace_with(trigger, overlay)
    return len(images)


TreeTransform = Callable[[BeautifulSoup], int]
TextRewrite = Callable[[str], str]


@dataclass
class ImageWrapStrategy:
    """One way of making images clickable."""

    name: str
    tree_transform: Optional[TreeTransform] = None
    text_rewrites: List[TextRewrite] = field(default_factory=list)

    def apply_tree(self, soup: BeautifulSoup) -> int:
        if self.tree_transform is None:
            return 0
        return self.tree_transform(soup)

    def apply_text(self, html: str) -> str:
        for rewrite in self.text_rewrites:
            html = rewrite(html)
        return html


STRATEGIES: Dict[str, ImageWrapStrategy] = {
    "lightbox": ImageWrapStrategy("lightbox", tree_transform=wrap_images_in_lightbox),
    # Asset publishing rewrites src after the tree pass, so the hrefs are
    # corrected once the files are written.
    "link": ImageWrapStrategy(
        "link", tree_transform=wrap_images_in_links, text_rewrites=[fix_image_links]
    ),
    "postbuild": ImageWrapStrategy("postbuild", text_rewrites=[link_images]),
    "none": ImageWrapStrategy("none"),
}


def get_strategy(name: str) -> ImageWrapStrategy:
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown image mode {name!r}; expected one of: {', '.join(STRATEGIES)}"
        ) from None
