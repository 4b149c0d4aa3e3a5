"""Discover, load and order the blog posts under a content directory."""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Tuple

import yaml

from .config import SiteConfig
from .frontmatter import SchemaError, parse_frontmatter, split_frontmatter
from .models import Post, PostMetadata

logger = logging.getLogger("inkpress")

MARKDOWN_SUFFIX = ".md"
INDEX_DOCUMENT = "index.md"


class DuplicateSlugError(ValueError):
    """Raised when two files under the content directory map to one slug."""


def discover_post_files(root: Path) -> Iterator[Tuple[str, Path]]:
    """Yield ``(slug, path)`` for each post in directory-listing order.

    A post is either ``<slug>.md`` or ``<slug>/index.md``. Directories without
    an index document are skipped silently, as is anything else. Two entries
    with the same slug raise :class:`DuplicateSlugError`.
    """
    seen: Dict[str, Path] = {}
    for entry in Path(root).iterdir():
        if entry.is_dir():
            path = entry / INDEX_DOCUMENT
            slug = entry.name
        elif entry.suffix == MARKDOWN_SUFFIX:
            path = entry
            slug = entry.stem
        else:
            continue
        if not path.exists():
            logger.debug("Skipping %s: no %s", entry, INDEX_DOCUMENT)
            continue
        if slug in seen:
            raise DuplicateSlugError(f"Duplicate slug '{slug}': {seen[slug]} and {path}")
        seen[slug] = path
        yield slug, path


def enumerate_posts(root: Path) -> List[PostMetadata]:
    """Return slug, title and description for every post under ``root``."""
    posts: List[PostMetadata] = []
    for slug, path in discover_post_files(root):
        title, description = parse_frontmatter(path.read_text(encoding="utf-8"))
        posts.append(PostMetadata(slug=slug, title=title, description=description))
    return posts


def _require_string(meta: dict, key: str, path: Path) -> str:
    value = meta.get(key)
    if not isinstance(value, str):
        raise SchemaError(f"{path}: '{key}' must be a string, got {value!r}")
    return value


def _coerce_date(value: Any, path: Path) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise SchemaError(f"{path}: 'pubDate' is not a valid date: {value!r}")


def load_post(slug: str, path: Path, default_author: str) -> Post:
    """Read a post file and validate its header against the blog schema."""
    header, body = split_frontmatter(path.read_text(encoding="utf-8"))
    try:
        meta = yaml.safe_load(header) or {}
    except yaml.YAMLError as exc:
        raise SchemaError(f"{path}: invalid YAML header: {exc}") from exc
    if not isinstance(meta, dict):
        raise SchemaError(f"{path}: header must be a mapping")

    if "pubDate" not in meta:
        raise SchemaError(f"{path}: 'pubDate' is required")

    author = meta.get("author", default_author)
    if not isinstance(author, str):
        raise SchemaError(f"{path}: 'author' must be a string, got {author!r}")

    tags = meta.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise SchemaError(f"{path}: 'tags' must be a list of strings")

    draft = meta.get("draft", False)
    if not isinstance(draft, bool):
        raise SchemaError(f"{path}: 'draft' must be a boolean, got {draft!r}")

    return Post(
        slug=slug,
        source_path=path,
        title=_require_string(meta, "title", path),
        description=_require_string(meta, "description", path),
        pub_date=_coerce_date(meta["pubDate"], path),
        author=author,
        body=body,
        tags=tags,
        draft=draft,
    )


def load_posts(root: Path, default_author: str) -> List[Post]:
    posts = [load_post(slug, path, default_author) for slug, path in discover_post_files(root)]
    logger.info("Loaded %d post(s) from %s", len(posts), root)
    return posts


def filter_posts(posts: List[Post], config: SiteConfig) -> List[Post]:
    """Hide example and draft posts from listings on production deployments."""
    if not config.production:
        return list(posts)
    return [post for post in posts if "example" not in post.slug and not post.draft]


def sort_posts_by_date(posts: List[Post]) -> List[Post]:
    """Newest first."""
    return sorted(posts, key=lambda post: post.pub_date, reverse=True)


def get_filtered_sorted_posts(posts: List[Post], config: SiteConfig) -> List[Post]:
    return sort_posts_by_date(filter_posts(posts, config))
