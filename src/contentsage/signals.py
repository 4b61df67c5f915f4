"""Markup, URL and text predicates for video, podcast, infographic and gallery content."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from contentsage.models import Platform

VIDEO_EMBED_HOSTS = (
    "youtube.com/embed",
    "youtube-nocookie.com",
    "youtu.be",
    "player.vimeo.com",
    "vimeo.com/video",
    "tiktok.com/embed",
    "dailymotion.com/embed",
    "fast.wistia",
    "loom.com/embed",
    "facebook.com/plugins/video",
    "players.brightcove.net",
    "jwplayer",
)

PODCAST_EMBED_HOSTS = (
    "open.spotify.com/embed",
    "embed.podcasts.apple.com",
    "anchor.fm",
    "soundcloud.com",
    "buzzsprout.com",
    "libsyn.com",
    "podbean.com",
    "simplecast.com",
    "megaphone.fm",
    "transistor.fm",
    "captivate.fm",
    "spreaker.com",
)

PODCAST_URL_INDICATORS = (
    "podcast",
    "episode",
    "anchor.fm",
    "soundcloud.com",
    "spotify.com/show",
    "spotify.com/episode",
    "buzzsprout.com",
    "libsyn.com",
    "podbean.com",
    "simplecast.com",
    "transistor.fm",
)

PODCAST_TEXT_PHRASES = (
    "listen to",
    "listen now",
    "new episode",
    "latest episode",
    "podcast",
    "open.spotify.com",
    "podcasts.apple.com",
    "anchor.fm",
    "soundcloud.com",
)

VIDEO_META_SELECTORS = (
    'meta[property="og:video"]',
    'meta[property="og:video:url"]',
    'meta[property="og:video:secure_url"]',
    'meta[name="twitter:player"]',
    'meta[property="twitter:player"]',
    'meta[name="twitter:card"][content="player"]',
)

# Player chrome that each platform renders around native video posts.
SOCIAL_VIDEO_MARKERS: dict[Platform, tuple[str, ...]] = {
    Platform.X: ('[data-testid="videoPlayer"]', '[data-testid="videoComponent"]'),
    Platform.INSTAGRAM: ('[aria-label*="Video"]', 'meta[property="og:type"][content="video"]'),
    Platform.FACEBOOK: ("[data-video-id]", 'div[data-pagelet*="Video"]'),
    Platform.LINKEDIN: (".feed-shared-linkedin-video", ".update-components-linkedin-video", "[data-test-id*='video']"),
    Platform.THREADS: ("[data-pressable-container] video",),
}

VIDEO_URL_PATTERNS = ("/video/", "/videos/", "/reel/")

INFOGRAPHIC_SELECTORS = (
    '[class*="infographic"]',
    '[id*="infographic"]',
    'img[alt*="infographic" i]',
    'img[src*="infographic" i]',
)

CHART_SELECTORS = (
    "canvas",
    '[class*="chart"]',
    '[class~="graph"]',
    '[class*="-graph"]',
    '[class*="data-viz"]',
    '[class*="dataviz"]',
)

GALLERY_SELECTORS = (
    ".gallery",
    ".slideshow",
    '[class*="gallery"]',
    '[class*="carousel"]',
    '[class*="slider"]',
    '[class*="slideshow"]',
    "[data-gallery]",
)

MIN_SVG_SIZE = 100


@dataclass
class PageContext:
    """Everything a predicate may inspect about one page."""

    soup: BeautifulSoup
    url: str
    hostname: str
    platform: Platform
    title: str = ""

    @cached_property
    def text(self) -> str:
        return self.soup.get_text(" ", strip=True).lower()

    @cached_property
    def url_lower(self) -> str:
        return self.url.lower()


def _any_selector(soup: BeautifulSoup, selectors: tuple[str, ...]) -> bool:
    return any(soup.select_one(selector) is not None for selector in selectors)


def _iframe_sources(soup: BeautifulSoup) -> list[str]:
    return [str(node.get("src", "")).lower() for node in soup.find_all("iframe")]


def has_video_markup(ctx: PageContext) -> bool:
    """Video tag, a known video-embedding iframe, or video player meta."""

    if ctx.soup.find("video") is not None:
        return True
    if any(host in src for src in _iframe_sources(ctx.soup) for host in VIDEO_EMBED_HOSTS):
        return True
    return _any_selector(ctx.soup, VIDEO_META_SELECTORS)


def has_social_video(ctx: PageContext) -> bool:
    if has_video_markup(ctx):
        return True
    if _any_selector(ctx.soup, SOCIAL_VIDEO_MARKERS.get(ctx.platform, ())):
        return True
    return any(pattern in ctx.url_lower for pattern in VIDEO_URL_PATTERNS)


def has_audio_markup(ctx: PageContext) -> bool:
    """Audio tag or a known podcast-embedding iframe."""

    if ctx.soup.find("audio") is not None:
        return True
    return any(host in src for src in _iframe_sources(ctx.soup) for host in PODCAST_EMBED_HOSTS)


def url_indicates_podcast(ctx: PageContext) -> bool:
    return any(
        indicator in ctx.url_lower or indicator in ctx.hostname
        for indicator in PODCAST_URL_INDICATORS
    )


def title_indicates_podcast(ctx: PageContext) -> bool:
    title = ctx.title.lower()
    return "podcast" in title or "episode" in title


def has_social_podcast(ctx: PageContext) -> bool:
    return has_audio_markup(ctx) or url_indicates_podcast(ctx)


def is_podcast_page(ctx: PageContext) -> bool:
    return has_audio_markup(ctx) or url_indicates_podcast(ctx) or title_indicates_podcast(ctx)


def text_mentions_podcast(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in PODCAST_TEXT_PHRASES)


def has_explicit_infographic(ctx: PageContext) -> bool:
    """Infographic markup, or "infographic" in the URL or title."""

    if "infographic" in ctx.url_lower or "infographic" in ctx.title.lower():
        return True
    return _any_selector(ctx.soup, INFOGRAPHIC_SELECTORS)


def _svg_dimension(value: object) -> float:
    if not value:
        return 0.0
    digits = str(value).strip().lower().removesuffix("px")
    try:
        return float(digits)
    except ValueError:
        return 0.0


def has_sized_svg(soup: BeautifulSoup) -> bool:
    for svg in soup.find_all("svg"):
        width = _svg_dimension(svg.get("width"))
        height = _svg_dimension(svg.get("height"))
        if width >= MIN_SVG_SIZE and height >= MIN_SVG_SIZE:
            return True
    return False


def has_visualization(ctx: PageContext) -> bool:
    """Chart or graph elements, or an SVG large enough to carry a figure."""

    return _any_selector(ctx.soup, CHART_SELECTORS) or has_sized_svg(ctx.soup)


def has_pinterest_signal(ctx: PageContext) -> bool:
    if ctx.platform is Platform.PINTEREST:
        return True
    return _any_selector(ctx.soup, ('img[src*="pinimg.com"]', 'a[href*="pinterest.com/pin"]'))


def is_infographic_page(ctx: PageContext) -> bool:
    if has_explicit_infographic(ctx):
        return True
    return "infographic" in ctx.text and has_visualization(ctx)


def has_social_infographic(ctx: PageContext, social_text: str) -> bool:
    """Infographic check for social posts; Pinterest counts as a visual signal here only."""

    if has_explicit_infographic(ctx):
        return True
    if "infographic" not in social_text.lower():
        return False
    return has_visualization(ctx) or has_pinterest_signal(ctx)


def has_gallery_markup(ctx: PageContext) -> bool:
    return _any_selector(ctx.soup, GALLERY_SELECTORS)


def is_pdf_url(ctx: PageContext) -> bool:
    path = urlparse(ctx.url).path.lower()
    if path.endswith(".pdf"):
        return True
    segments = [segment for segment in path.split("/") if segment]
    return any(segment == "pdf" or segment.endswith(".pdf") for segment in segments)
