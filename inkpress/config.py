"""Configuration objects and constants for the site generator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_SITE_URL = "https://example.com/"
DEFAULT_SITE_TITLE = "Blog"
DEFAULT_AUTHOR = "Site Author"
DEFAULT_IMAGE_MODE = "lightbox"
GITHUB_API_URL = "https://api.github.com"


@dataclass
class SiteConfig:
    """Top-level settings that control building and post-processing."""

    root: Path
    content_dir: Path
    output_dir: Path
    public_dir: Path
    fixture_path: Path
    showcase_path: Path
    site_url: str = DEFAULT_SITE_URL
    site_title: str = DEFAULT_SITE_TITLE
    site_description: str = ""
    default_author: str = DEFAULT_AUTHOR
    image_mode: str = DEFAULT_IMAGE_MODE
    github_token: Optional[str] = None
    offline: bool = False
    production: bool = False
    request_timeout: float = 15.0

    def __post_init__(self) -> None:
        if not self.site_url.endswith("/"):
            self.site_url += "/"

    @classmethod
    def for_root(cls, root: Path, **overrides) -> "SiteConfig":
        """Build a config with the conventional project layout under ``root``."""
        root = Path(root)
        values = dict(
            root=root,
            content_dir=root / "content" / "blog",
            output_dir=root / "dist",
            public_dir=root / "public",
            fixture_path=root / "tests" / "fixtures" / "posts.json",
            showcase_path=root / "reposhowcase.json",
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_env(
        cls,
        root: Path,
        environ: Optional[Mapping[str, str]] = None,
        **overrides,
    ) -> "SiteConfig":
        """Read deployment settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        values = dict(
            site_url=env.get("SITE_URL") or DEFAULT_SITE_URL,
            site_title=env.get("SITE_TITLE") or DEFAULT_SITE_TITLE,
            image_mode=env.get("INKPRESS_IMAGE_MODE") or DEFAULT_IMAGE_MODE,
            github_token=env.get("GITHUB_TOKEN") or None,
            offline=env.get("PUBLIC_SKIP_GITHUB_API") == "true",
            production=env.get("VERCEL_ENV") == "production",
        )
        values.update(overrides)
        return cls.for_root(root, **values)
