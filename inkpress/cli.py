"""Command-line entry point for the site generator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, Sequence

from .config import SiteConfig
from .fixtures import generate_fixtures
from .frontmatter import FrontmatterError
from .github import RepoFetchError
from .postbuild import fix_image_links, link_images, rewrite_html_files
from .posts import enumerate_posts
from .site import build_site
from .wrap import STRATEGIES

logger = logging.getLogger("inkpress.cli")

REWRITES = {"link": link_images, "fix": fix_image_links}


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return ("build",)
    first = argv[0]
    if first in commands or first in ("-h", "--help"):
        return argv
    return ("build", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        type=Path,
        help="Project directory containing content/, public/ and reposhowcase.json",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_build_arguments(parser: argparse.ArgumentParser) -> None:
    _add_common_arguments(parser)
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory where the site is written (default: <root>/dist)",
    )
    parser.add_argument(
        "--image-mode",
        choices=sorted(STRATEGIES),
        default=None,
        help="How images are made clickable (default: INKPRESS_IMAGE_MODE or lightbox)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the GitHub API and write test fixtures, like PUBLIC_SKIP_GITHUB_API=true",
    )
    parser.add_argument(
        "--production",
        action="store_true",
        help="Hide example and draft posts from listings, like VERCEL_ENV=production",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build a static blog from markdown posts.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", help="Render the site")
    _add_build_arguments(build_parser)

    posts_parser = subparsers.add_parser("posts", help="Print post metadata as JSON")
    _add_common_arguments(posts_parser)

    fixtures_parser = subparsers.add_parser(
        "fixtures", help="Write tests/fixtures/posts.json from the content directory"
    )
    _add_common_arguments(fixtures_parser)

    rewrite_parser = subparsers.add_parser(
        "rewrite-images", help="Rewrite image links in an already built directory"
    )
    rewrite_parser.add_argument("directory", type=Path, help="Built site directory")
    rewrite_parser.add_argument(
        "--mode",
        choices=sorted(REWRITES),
        default="link",
        help="'link' wraps bare images, 'fix' points existing image links at the image src",
    )
    rewrite_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _run_build(args: argparse.Namespace) -> None:
    overrides = {}
    if args.output is not None:
        overrides["output_dir"] = args.output.resolve()
    if args.image_mode:
        overrides["image_mode"] = args.image_mode
    if args.offline:
        overrides["offline"] = True
    if args.production:
        overrides["production"] = True
    config = SiteConfig.from_env(args.root.resolve(), **overrides)

    result = build_site(config)
    logger.info("Site written to %s", result.output_dir)
    if result.fixture_path:
        logger.info("Fixtures written to %s", result.fixture_path)


def _run_posts(args: argparse.Namespace) -> None:
    config = SiteConfig.from_env(args.root.resolve())
    posts = enumerate_posts(config.content_dir)
    sys.stdout.write(json.dumps([asdict(post) for post in posts], indent=2, ensure_ascii=False))
    sys.stdout.write("\n")


def _run_fixtures(args: argparse.Namespace) -> None:
    config = SiteConfig.from_env(args.root.resolve(), offline=True)
    path = generate_fixtures(config)
    logger.info("Fixtures written to %s", path)


def _run_rewrite(args: argparse.Namespace) -> None:
    changed = rewrite_html_files(args.directory, REWRITES[args.mode])
    logger.info("Rewrote %d file(s) under %s", len(changed), args.directory)


COMMANDS = {
    "build": _run_build,
    "posts": _run_posts,
    "fixtures": _run_fixtures,
    "rewrite-images": _run_rewrite,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    try:
        COMMANDS[args.command](args)
    except (FrontmatterError, RepoFetchError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
