"""Title, body and social-post text extraction from parsed HTML."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from bs4 import BeautifulSoup, Tag
from loguru import logger

from contentsage.config import ClassifierConfig
from contentsage.dates import iter_json_ld
from contentsage.models import Platform


@dataclass(frozen=True)
class SocialStrategy:
    """Ordered selectors tried for a platform's post text."""

    selectors: tuple[str, ...]
    min_length_attr: str = "social_min_text_length"


_X_STRATEGY = SocialStrategy(
    selectors=(
        '[data-testid="tweetText"]',
        'article div[lang]',
        "div[lang]",
        ".tweet-text",
        '[data-testid="tweet"] div[dir="auto"]',
    ),
    min_length_attr="x_min_text_length",
)

_META_POST_STRATEGY = SocialStrategy(
    selectors=(
        '[data-testid="post_message"]',
        'div[data-ad-preview="message"]',
        'div[data-ad-comet-preview="message"]',
        ".userContent",
        "h1._ap3a",
        "div._a9zs",
        "span._aacl",
        '[class*="Caption"]',
    ),
)

_LINKEDIN_STRATEGY = SocialStrategy(
    selectors=(
        ".feed-shared-text",
        ".feed-shared-update-v2__description",
        ".update-components-text",
        ".share-update-card__update-text",
        '[data-test-id="main-feed-activity-card__commentary"]',
        ".attributed-text-segment-list__content",
    ),
)

SOCIAL_SELECTORS: dict[Platform, SocialStrategy] = {
    Platform.X: _X_STRATEGY,
    Platform.INSTAGRAM: _META_POST_STRATEGY,
    Platform.FACEBOOK: _META_POST_STRATEGY,
    Platform.LINKEDIN: _LINKEDIN_STRATEGY,
    Platform.THREADS: SocialStrategy(selectors=()),
}

POST_CONTAINER_SELECTORS = (
    '[data-testid="tweet"]',
    ".feed-shared-update-v2",
    '[role="article"]',
    '[data-pagelet="FeedUnit"]',
    ".post-content",
)

_METRIC_LINE_RE = re.compile(r"^[\d,.]+(?:[KMBT]|[KMBT]\+)?$", re.IGNORECASE)
_UI_ACTION_LINE_RE = re.compile(
    r"^(?:Like|Likes|Reply|Replies|Retweet|Retweets|Repost|Reposts|Quote|Quotes|"
    r"Share|Bookmark|Bookmarks|Views|Follow|Translate post|Show more|·)$",
    re.IGNORECASE,
)
_METRIC_PHRASE_RE = re.compile(
    r"\b[\d,.]+[KMBT]?\s+(?:Views|Likes|Retweets|Reposts|Replies|Quotes|Bookmarks)\b",
    re.IGNORECASE,
)
_SHORT_LINK_RE = re.compile(r"https?://t\.co/\S+", re.IGNORECASE)
_MENTION_GAP_RE = re.compile(r"([@#])\s+(?=\w)")
_GLUED_MENTION_RE = re.compile(r"(?<=[.,;:!?)])(?=[@#]\w)")
_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _node_text(node: Tag) -> str:
    return collapse_whitespace(node.get_text(" ", strip=True))


def extract_title(soup: BeautifulSoup) -> str:
    """Document title, else the first h1, else an empty string."""

    title_node = soup.find("title")
    title = _node_text(title_node) if title_node is not None else ""
    if not title:
        heading = soup.find("h1")
        title = _node_text(heading) if heading is not None else ""
    return title


def extract_main_text(soup: BeautifulSoup, limit: int) -> str:
    """Text of the first article element, else the body, truncated to limit."""

    container = soup.find("article") or soup.body or soup
    return container.get_text().strip()[:limit]


def clean_x_text(raw_text: str) -> str:
    """Drop X interface chrome from post text and normalize spacing."""

    kept: list[str] = []
    for line in raw_text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if _UI_ACTION_LINE_RE.match(stripped) or _METRIC_LINE_RE.fullmatch(stripped):
            continue
        kept.append(stripped)

    text = " ".join(kept)
    text = _SHORT_LINK_RE.sub(" ", text)
    text = _METRIC_PHRASE_RE.sub(" ", text)
    text = _MENTION_GAP_RE.sub(r"\1", text)
    text = _GLUED_MENTION_RE.sub(" ", text)
    return collapse_whitespace(text)


def _from_selectors(soup: BeautifulSoup, selectors: tuple[str, ...], min_length: int) -> str:
    for selector in selectors:
        for node in soup.select(selector):
            text = node.get_text("\n", strip=True)
            if len(collapse_whitespace(text)) > min_length:
                return text
    return ""


def _from_meta_description(soup: BeautifulSoup, min_length: int) -> str:
    for selector in ('meta[name="description"]', 'meta[property="og:description"]'):
        node = soup.select_one(selector)
        if node is None:
            continue
        content = str(node.get("content") or "").strip()
        if len(content) > min_length:
            return content
    return ""


def _from_json_ld(soup: BeautifulSoup, min_length: int) -> str:
    for item in iter_json_ld(soup):
        candidates = [item.get("articleBody"), item.get("text")]
        for key in ("mainEntity", "sharedContent"):
            nested = item.get(key)
            if isinstance(nested, dict):
                candidates.extend([nested.get("articleBody"), nested.get("text")])
        for candidate in candidates:
            if isinstance(candidate, str) and len(candidate.strip()) > min_length:
                return candidate.strip()
    return ""


def _from_shortest_article(soup: BeautifulSoup, min_length: int) -> str:
    # Surrounding UI wrappers are longer than the post itself.
    texts = [node.get_text("\n", strip=True) for node in soup.find_all("article")]
    meaningful = [text for text in texts if len(collapse_whitespace(text)) > min_length]
    if not meaningful:
        return ""
    return min(meaningful, key=len)


def _from_main(soup: BeautifulSoup, min_length: int) -> str:
    main = soup.find("main")
    if main is None:
        return ""
    text = main.get_text("\n", strip=True)
    return text if len(collapse_whitespace(text)) > min_length else ""


def _from_post_container(soup: BeautifulSoup, min_length: int) -> str:
    return _from_selectors(soup, POST_CONTAINER_SELECTORS, min_length)


def _from_body(soup: BeautifulSoup, min_length: int) -> str:
    body = soup.body or soup
    return body.get_text("\n", strip=True)


FALLBACK_TIERS: list[tuple[str, Callable[[BeautifulSoup, int], str]]] = [
    ("meta description", _from_meta_description),
    ("json-ld", _from_json_ld),
    ("shortest article", _from_shortest_article),
    ("main", _from_main),
    ("post container", _from_post_container),
    ("body", _from_body),
]


def extract_social_text(
    soup: BeautifulSoup,
    platform: Platform,
    config: ClassifierConfig | None = None,
) -> str:
    """Best-effort post text for a social platform page, or an empty string."""

    config = config or ClassifierConfig()
    strategy = SOCIAL_SELECTORS.get(platform, SocialStrategy(selectors=()))
    min_length = getattr(config, strategy.min_length_attr)

    tiers: list[tuple[str, Callable[[BeautifulSoup, int], str]]] = [
        ("selectors", lambda doc, size: _from_selectors(doc, strategy.selectors, size)),
        *FALLBACK_TIERS,
    ]

    raw_text = ""
    for name, tier in tiers:
        try:
            raw_text = tier(soup, min_length)
        except Exception as exc:
            logger.debug("Social extraction tier {!r} failed for {}: {}", name, platform.value, exc)
            continue
        if raw_text:
            logger.debug("Social text for {} taken from {}", platform.value, name)
            break

    if platform is Platform.X:
        text = clean_x_text(raw_text)
    else:
        text = collapse_whitespace(raw_text)
    return text[: config.social_content_limit]
