import re
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from inkpress.config import SiteConfig
from inkpress.fixtures import load_fixtures
from inkpress.frontmatter import NotFoundError
from inkpress.models import RepoInfo, Showcase
from inkpress.posts import enumerate_posts
from inkpress.site import build_site

ASSET_SRC = re.compile(r"/_assets/photo-[0-9a-f]{8}\.png")


def _page(config: SiteConfig, *parts: str) -> BeautifulSoup:
    path = config.output_dir.joinpath(*parts)
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def test_blog_list_shows_every_post_newest_first(offline_config: SiteConfig) -> None:
    build_site(offline_config)

    listing = _page(offline_config, "blog", "index.html")
    slugs = [item["data-slug"] for item in listing.select("li.post-item")]
    assert slugs == ["second", "example-lightbox-test", "first-post"]

    fixtures = load_fixtures(offline_config.fixture_path)
    titles = {a.get_text(strip=True) for a in listing.select("li.post-item a")}
    assert titles == {post.title for post in fixtures}


def test_every_post_gets_a_page(offline_config: SiteConfig) -> None:
    result = build_site(offline_config)

    for slug in ("first-post", "second", "example-lightbox-test"):
        page = _page(offline_config, "blog", slug, "index.html")
        assert page.find("h1") is not None
    assert not (offline_config.output_dir / "blog" / "no-index").exists()
    assert len(result.pages) == 5


def test_lightbox_markup(offline_config: SiteConfig) -> None:
    build_site(offline_config)

    page = _page(offline_config, "blog", "example-lightbox-test", "index.html")
    triggers = page.select(".post-body a.image-trigger")
    lightboxes = page.select(".post-body div.lightbox")
    assert len(triggers) == 2
    assert len(lightboxes) == 2
    assert [t["href"] for t in triggers] == ["#lightbox-0", "#lightbox-1"]
    assert len(page.select(".lightbox-close")) == 2
    assert ASSET_SRC.fullmatch(triggers[0].img["src"])
    assert ASSET_SRC.fullmatch(lightboxes[0].img["src"])
    assert triggers[1].img["src"] == "https://example.org/two.jpg"
    assert "lightbox:target" in page.find("style").get_text()


def test_link_mode_points_links_at_published_images(site_root: Path) -> None:
    config = SiteConfig.for_root(site_root, offline=True, image_mode="link")

    result = build_site(config)

    page = _page(config, "blog", "second", "index.html")
    link = page.select_one(".post-body a.image-link")
    assert ASSET_SRC.fullmatch(link.img["src"])
    assert link["href"] == link.img["src"]
    assert config.output_dir / "blog" / "second" / "index.html" in result.rewritten


def test_postbuild_mode_wraps_images_after_publishing(site_root: Path) -> None:
    config = SiteConfig.for_root(site_root, offline=True, image_mode="postbuild")

    build_site(config)

    page = _page(config, "blog", "second", "index.html")
    image = page.select_one(".post-body img")
    assert image.parent.name == "a"
    assert image.parent["href"] == image["src"]
    assert image.parent["target"] == "_blank"
    assert ASSET_SRC.fullmatch(image["src"])


def test_published_assets_and_public_files(offline_config: SiteConfig) -> None:
    build_site(offline_config)

    out = offline_config.output_dir
    assert (out / "favicon.svg").read_text(encoding="utf-8") == "<svg/>"
    # Both posts ship the same photo.png bytes, so they share one published file.
    published = list((out / "_assets").iterdir())
    assert len(published) == 1
    assert ASSET_SRC.fullmatch("/_assets/" + published[0].name)


def test_fixtures_written_on_offline_build(offline_config: SiteConfig) -> None:
    result = build_site(offline_config)

    assert result.fixture_path == offline_config.fixture_path
    assert load_fixtures(result.fixture_path) == enumerate_posts(offline_config.content_dir)


def test_robots_and_sitemap_outside_production(offline_config: SiteConfig) -> None:
    build_site(offline_config)

    out = offline_config.output_dir
    assert (out / "robots.txt").read_text(encoding="utf-8") == "User-agent: *\nDisallow: /\n"
    sitemap = (out / "sitemap-0.xml").read_text(encoding="utf-8")
    assert "https://example.com/blog/second/" in sitemap
    assert "<lastmod>2024-03-01</lastmod>" in sitemap
    assert "https://example.com/sitemap-0.xml" in (out / "sitemap-index.xml").read_text(
        encoding="utf-8"
    )


def test_production_hides_examples_from_listings(site_root: Path) -> None:
    config = SiteConfig.for_root(
        site_root, offline=True, production=True, site_url="https://blog.example.net/"
    )

    result = build_site(config)

    assert [post.slug for post in result.listed_posts] == ["second", "first-post"]
    listing = _page(config, "blog", "index.html")
    assert "example-lightbox-test" not in {li["data-slug"] for li in listing.select("li.post-item")}
    assert (config.output_dir / "blog" / "example-lightbox-test" / "index.html").exists()
    robots = (config.output_dir / "robots.txt").read_text(encoding="utf-8")
    assert robots == (
        "User-agent: *\nAllow: /\n\nSitemap: https://blog.example.net/sitemap-index.xml\n"
    )
    assert "example-lightbox-test" not in (config.output_dir / "sitemap-0.xml").read_text(
        encoding="utf-8"
    )


def test_home_page_shows_supplied_showcase(site_root: Path) -> None:
    config = SiteConfig.for_root(site_root)
    showcase = Showcase(
        repos=[
            RepoInfo(
                full_name="octo/tool",
                name="tool",
                description="A <useful> tool",
                html_url="https://github.com/octo/tool",
                stargazers_count=42,
                language="Python",
            )
        ],
        self_repo="octo/site",
    )

    result = build_site(config, showcase=showcase)

    home = _page(config, "index.html")
    repo = home.select_one("li.repo")
    assert repo.a["href"] == "https://github.com/octo/tool"
    assert "A <useful> tool" in repo.get_text()
    assert home.select_one("footer a")["href"] == "https://github.com/octo/site"
    assert [a.get_text() for a in home.select(".latest-posts a")] == [
        "Second Post",
        "Lightbox Example",
        "First Post",
    ]
    assert result.fixture_path is None


def test_rebuild_clears_stale_output(offline_config: SiteConfig) -> None:
    stale = offline_config.output_dir / "blog" / "removed" / "index.html"
    stale.parent.mkdir(parents=True)
    stale.write_text("old", encoding="utf-8")

    build_site(offline_config)

    assert not stale.exists()


def test_post_without_header_fails_the_build(offline_config: SiteConfig) -> None:
    (offline_config.content_dir / "broken.md").write_text("No header\n", encoding="utf-8")
    with pytest.raises(NotFoundError):
        build_site(offline_config)
