"""Data models used throughout the build pipeline."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class PostMetadata:
    """Slug, title and description of a post, as stored in test fixtures."""

    slug: str
    title: str
    description: str


@dataclass
class Post:
    """A fully validated blog post."""

    slug: str
    source_path: Path
    title: str
    description: str
    pub_date: dt.date
    author: str
    body: str
    tags: List[str] = field(default_factory=list)
    draft: bool = False


@dataclass
class RepoInfo:
    """Subset of the GitHub repository payload shown on the home page."""

    full_name: str
    name: str
    description: Optional[str]
    html_url: str
    stargazers_count: int
    language: Optional[str]


@dataclass
class Showcase:
    """Repositories featured on the home page."""

    repos: List[RepoInfo]
    self_repo: Optional[str]
