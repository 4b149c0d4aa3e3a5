"""Fetch repository metadata for the home page showcase."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import requests

from .config import GITHUB_API_URL, SiteConfig
from .models import RepoInfo, Showcase

logger = logging.getLogger("inkpress")


class RepoFetchError(RuntimeError):
    """Raised when the API does not return a repository."""


def load_showcase_config(path: Path) -> Dict[str, object]:
    """Read ``{"repos": [...], "self": ...}``; a missing file means no showcase."""
    if not path.exists():
        logger.debug("No showcase config at %s", path)
        return {"repos": [], "self": None}
    data = json.loads(path.read_text(encoding="utf-8"))
    return {"repos": list(data.get("repos", [])), "self": data.get("self")}


def build_headers(token: Optional[str]) -> Dict[str, str]:
    if not token:
        return {}
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
    }


def fetch_repo(name: str, headers: Dict[str, str], timeout: float) -> RepoInfo:
    try:
        resp = requests.get(f"{GITHUB_API_URL}/repos/{name}", headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("Failed to fetch repo %s: %s", name, exc)
        raise RepoFetchError(f"Couldn't fetch repo: {name} - {exc}") from exc
    if not resp.ok:
        logger.error("Error fetching repo: %s", name)
        raise RepoFetchError(f"Couldn't fetch repo: {name} - {resp.text}")
    data = resp.json()
    return RepoInfo(
        full_name=data.get("full_name", name),
        name=data.get("name", name.split("/")[-1]),
        description=data.get("description"),
        html_url=data.get("html_url", f"https://github.com/{name}"),
        stargazers_count=int(data.get("stargazers_count") or 0),
        language=data.get("language"),
    )


async def fetch_showcase(config: SiteConfig) -> Showcase:
    """Request every configured repository at once; one failure fails all."""
    showcase = load_showcase_config(config.showcase_path)
    names: List[str] = showcase["repos"]  # type: ignore[assignment]
    if config.offline:
        logger.info("Offline build: skipping GitHub API for %d repo(s)", len(names))
        return Showcase(repos=[], self_repo=showcase["self"])  # type: ignore[arg-type]

    headers = build_headers(config.github_token)
    if not headers:
        logger.debug("GITHUB_TOKEN not set; using unauthenticated requests")
    repos = await asyncio.gather(
        *(
            asyncio.to_thread(fetch_repo, name, headers, config.request_timeout)
            for name in names
        )
    )
    return Showcase(repos=list(repos), self_repo=showcase["self"])  # type: ignore[arg-type]
