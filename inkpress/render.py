"""Markdown and page rendering helpers."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

import markdown as md_lib
from bs4 import BeautifulSoup
from jinja2 import Environment, PackageLoader, select_autoescape

from .config import SiteConfig
from .images import AssetPublisher
from .models import Post
from .wrap import ImageWrapStrategy

logger = logging.getLogger("inkpress")

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]
SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

_environment: Optional[Environment] = None


def template_environment() -> Environment:
    global _environment
    if _environment is None:
        _environment = Environment(
            loader=PackageLoader("inkpress", "templates"),
            autoescape=select_autoescape(["html"]),
        )
    return _environment


def render_markdown(text: str) -> str:
    return md_lib.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def render_post_body(
    post: Post,
    strategy: ImageWrapStrategy,
    assets: AssetPublisher,
) -> str:
    """Render a post's markdown, wrap its images, then publish local assets.

    The wrap runs before assets are published, so tree-built links still
    point at the source-relative ``src``; the ``link`` strategy corrects
    them after the build.
    """
    soup = BeautifulSoup(render_markdown(post.body), "html.parser")
    wrapped = strategy.apply_tree(soup)
    published = assets.publish(soup, post.source_path.parent)
    logger.debug(
        "Rendered %s (%d image(s) wrapped, %d asset(s) published)",
        post.slug,
        wrapped,
        published,
    )
    return soup.decode()


def render_page(template: str, config: SiteConfig, **context) -> str:
    return template_environment().get_template(template).render(
        site_url=config.site_url,
        site_title=config.site_title,
        site_description=config.site_description,
        **context,
    )


def render_robots(config: SiteConfig) -> str:
    """Allow crawling on production only, pointing crawlers at the sitemap."""
    if config.production:
        return f"User-agent: *\nAllow: /\n\nSitemap: {config.site_url}sitemap-index.xml\n"
    return "User-agent: *\nDisallow: /\n"


def render_sitemap(urls: Iterable[Tuple[str, Optional[dt.date]]]) -> str:
    items: List[str] = []
    for url, lastmod in urls:
        entry = [f"<url><loc>{escape(url)}</loc>"]
        if lastmod:
            entry.append(f"<lastmod>{lastmod.isoformat()}</lastmod>")
        entry.append("</url>")
        items.append("".join(entry))
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<urlset xmlns="{SITEMAP_NS}">',
            *items,
            "</urlset>",
            "",
        ]
    )


def render_sitemap_index(sitemaps: Sequence[str]) -> str:
    entries = [f"<sitemap><loc>{escape(url)}</loc></sitemap>" for url in sitemaps]
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<sitemapindex xmlns="{SITEMAP_NS}">',
            *entries,
            "</sitemapindex>",
            "",
        ]
    )
