"""Snapshot post metadata so tests can run without the network."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from .config import SiteConfig
from .models import PostMetadata
from .posts import enumerate_posts

logger = logging.getLogger("inkpress")


def generate_fixtures(config: SiteConfig) -> Optional[Path]:
    """Write ``posts.json`` for offline builds; does nothing otherwise."""
    if not config.offline:
        return None
    posts = enumerate_posts(config.content_dir)
    path = config.fixture_path
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [asdict(post) for post in posts]
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Generated %s with %d posts", path, len(posts))
    return path


def load_fixtures(path: Path) -> List[PostMetadata]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return [PostMetadata(**item) for item in data]
