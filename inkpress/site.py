"""High-level orchestration for building the site and running post-build hooks."""

from __future__ import annotations

import asyncio
import logging
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import SiteConfig
from .fixtures import generate_fixtures
from .github import fetch_showcase
from .images import AssetPublisher
from .models import Post, Showcase
from .postbuild import rewrite_html_files
from .posts import get_filtered_sorted_posts, load_posts
from .render import (
    render_page,
    render_post_body,
    render_robots,
    render_sitemap,
    render_sitemap_index,
)
from .wrap import get_strategy

logger = logging.getLogger("inkpress")

HOME_POST_COUNT = 5


@dataclass
class BuildResult:
    """What a build wrote."""

    output_dir: Path
    pages: List[Path] = field(default_factory=list)
    listed_posts: List[Post] = field(default_factory=list)
    rewritten: List[Path] = field(default_factory=list)
    fixture_path: Optional[Path] = None
    total_seconds: float = 0.0


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def prepare_output_dir(config: SiteConfig) -> None:
    """Start from an empty output directory seeded with the public files."""
    if config.output_dir.exists():
        shutil.rmtree(config.output_dir)
    if config.public_dir.is_dir():
        shutil.copytree(config.public_dir, config.output_dir)
        logger.debug("Copied %s to %s", config.public_dir, config.output_dir)
    config.output_dir.mkdir(parents=True, exist_ok=True)


def run_postbuild(config: SiteConfig, result: BuildResult) -> None:
    """Hooks that need the finished output tree."""
    strategy = get_strategy(config.image_mode)
    if strategy.text_rewrites:
        result.rewritten = rewrite_html_files(config.output_dir, strategy.apply_text)
        logger.info(
            "Image links (%s): rewrote %d file(s)", strategy.name, len(result.rewritten)
        )
    result.fixture_path = generate_fixtures(config)


def build_site(config: SiteConfig, showcase: Optional[Showcase] = None) -> BuildResult:
    """Render every page into ``config.output_dir``.

    ``showcase`` may be supplied to skip the GitHub fetch.
    """
    start = time.perf_counter()
    strategy = get_strategy(config.image_mode)
    posts = load_posts(config.content_dir, config.default_author)
    if showcase is None:
        showcase = asyncio.run(fetch_showcase(config))

    prepare_output_dir(config)
    out = config.output_dir
    result = BuildResult(output_dir=out)
    assets = AssetPublisher(out)

    for post in posts:
        body = render_post_body(post, strategy, assets)
        html = render_page("post.html", config, post=post, body=body)
        result.pages.append(_write(out / "blog" / post.slug / "index.html", html))

    listed = get_filtered_sorted_posts(posts, config)
    result.listed_posts = listed
    result.pages.append(
        _write(out / "blog" / "index.html", render_page("blog_list.html", config, posts=listed))
    )
    result.pages.append(
        _write(
            out / "index.html",
            render_page(
                "index.html",
                config,
                posts=listed[:HOME_POST_COUNT],
                showcase=showcase,
            ),
        )
    )

    urls = [(config.site_url, None), (f"{config.site_url}blog/", None)]
    urls.extend((f"{config.site_url}blog/{post.slug}/", post.pub_date) for post in listed)
    _write(out / "sitemap-0.xml", render_sitemap(urls))
    _write(out / "sitemap-index.xml", render_sitemap_index([f"{config.site_url}sitemap-0.xml"]))
    _write(out / "robots.txt", render_robots(config))

    run_postbuild(config, result)
    result.total_seconds = time.perf_counter() - start
    logger.info(
        "Built %d page(s) for %d post(s) in %.2fs",
        len(result.pages),
        len(posts),
        result.total_seconds,
    )
    return result
