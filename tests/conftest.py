"""
Pytest configuration and fixtures for the site generator tests.
"""

from pathlib import Path

import pytest

from inkpress.config import SiteConfig

# Smallest byte sequence filetype recognises as a PNG.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 32


def _post_text(title, description, pub_date="2024-01-01", extra="", body=""):
    return (
        "---\n"
        f"title: \"{title}\"\n"
        f"description: {description}\n"
        f"pubDate: {pub_date}\n"
        f"{extra}"
        "---\n\n"
        f"{body}\n"
    )


@pytest.fixture
def write_post():
    """Write a post as ``<slug>.md`` or, with ``folder=True``, ``<slug>/index.md``."""

    def _write(directory: Path, slug: str, title="A title", description="A description",
               pub_date="2024-01-01", extra="", body="Hello.", folder=False) -> Path:
        if folder:
            path = directory / slug / "index.md"
        else:
            path = directory / f"{slug}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_post_text(title, description, pub_date, extra, body), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def site_root(tmp_path: Path, write_post) -> Path:
    """A small project: three posts, one image, one folder without an index."""
    blog = tmp_path / "content" / "blog"
    blog.mkdir(parents=True)

    write_post(blog, "first-post", title="First Post", description="The first one",
               pub_date="2024-01-01", body="Plain text only.")

    second = write_post(blog, "second", title="Second Post", description="Has a photo",
                        pub_date="2024-03-01", body="Look:\n\n![A photo](./photo.png)",
                        folder=True)
    (second.parent / "photo.png").write_bytes(PNG_BYTES)

    lightbox = write_post(
        blog,
        "example-lightbox-test",
        title="Lightbox Example",
        description="Two images",
        pub_date="2024-02-01",
        body="![One](./photo.png)\n\nText between.\n\n![Two](https://example.org/two.jpg)",
        folder=True,
    )
    (lightbox.parent / "photo.png").write_bytes(PNG_BYTES)

    (blog / "no-index").mkdir()

    public = tmp_path / "public"
    public.mkdir()
    (public / "favicon.svg").write_text("<svg/>", encoding="utf-8")
    return tmp_path


@pytest.fixture
def offline_config(site_root: Path) -> SiteConfig:
    return SiteConfig.for_root(site_root, offline=True)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
