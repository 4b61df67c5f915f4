"""Publication-date extraction with per-platform fallback chains."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterator

from dateutil import parser as date_parser
from dateutil.parser import isoparse
from loguru import logger

from contentsage.input import parse_status_id
from contentsage.models import Platform

if TYPE_CHECKING:
    from bs4 import BeautifulSoup

Clock = Callable[[], datetime]

X_EPOCH_MS = 1288834974657
X_TIMESTAMP_SHIFT_BITS = 22

META_DATE_SELECTORS = [
    'meta[property="article:published_time"]',
    'meta[name="publication_date"]',
    'meta[name="date"]',
    'meta[name="DC.date.issued"]',
    "time[datetime]",
    'meta[property="og:published_time"]',
    'meta[itemprop="datePublished"]',
]

_MONTHS = (
    "January|February|March|April|May|June|July|August|September|October|November|December"
)
_SHORT_MONTHS = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec"

_TEXT_DATE_PATTERNS = [
    re.compile(
        rf"\d{{1,2}}:\d{{2}}\s?(?:AM|PM)\s*·\s*(?:{_SHORT_MONTHS})\.?\s+\d{{1,2}},\s+\d{{4}}",
        re.IGNORECASE,
    ),
    re.compile(rf"\b(?:{_MONTHS})\s+\d{{1,2}},\s+\d{{4}}\b", re.IGNORECASE),
    re.compile(rf"\b\d{{1,2}}\s+(?:{_MONTHS})\s+\d{{4}}\b", re.IGNORECASE),
]
_TIME_PREFIX_RE = re.compile(r"^\d{1,2}:\d{2}\s?(?:AM|PM)\s*·\s*", re.IGNORECASE)
_JSON_LD_DATE_KEYS = ("datePublished", "dateCreated")
# Fields dateutil fills from these defaults were absent from the input.
_LOOSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 1))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def decode_snowflake_id(
    snowflake_id: str,
    epoch_ms: int = X_EPOCH_MS,
    shift_bits: int = X_TIMESTAMP_SHIFT_BITS,
) -> int:
    """Return the millisecond Unix timestamp embedded in a snowflake id."""

    if not snowflake_id or not snowflake_id.isdigit():
        raise ValueError(f"Snowflake id must be numeric, got '{snowflake_id}'")
    return (int(snowflake_id) >> shift_bits) + epoch_ms


def to_utc_date(raw_value: str | None) -> str | None:
    """Parse a date-like string and return its UTC calendar date, or None."""

    if not raw_value or not raw_value.strip():
        return None

    value = raw_value.strip()
    try:
        parsed = isoparse(value)
    except (ValueError, OverflowError):
        try:
            parsed = _parse_loose_date(value)
        except (ValueError, OverflowError) as exc:
            logger.debug("Skipping unparseable date candidate {!r}: {}", value, exc)
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc).date().isoformat()
    except (ValueError, OverflowError) as exc:
        logger.debug("Skipping out-of-range date candidate {!r}: {}", value, exc)
        return None


def _parse_loose_date(value: str) -> datetime:
    """Parse a free-form date; a missing day becomes 1, a missing year or month is an error."""

    parsed = date_parser.parse(value, default=_LOOSE_DEFAULTS[0])
    check = date_parser.parse(value, default=_LOOSE_DEFAULTS[1])
    if (parsed.year, parsed.month) != (check.year, check.month):
        raise ValueError(f"'{value}' has no year or month")
    return parsed


def _first_valid(candidates: Iterator[str | None]) -> str | None:
    for candidate in candidates:
        posted_date = to_utc_date(candidate)
        if posted_date:
            return posted_date
    return None


def _time_element_candidates(soup: "BeautifulSoup") -> Iterator[str | None]:
    for node in soup.select("time, [datetime]"):
        yield node.get("datetime")


def _text_pattern_candidates(soup: "BeautifulSoup") -> Iterator[str | None]:
    text = soup.get_text(" ", strip=True)
    for pattern in _TEXT_DATE_PATTERNS:
        for match in pattern.finditer(text):
            yield _TIME_PREFIX_RE.sub("", match.group(0))


def iter_json_ld(soup: "BeautifulSoup") -> Iterator[dict]:
    """Yield every JSON-LD object on the page, flattening lists and @graph."""

    for script in soup.select('script[type="application/ld+json"]'):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.debug("Skipping malformed JSON-LD block: {}", exc)
            continue

        stack = [data]
        while stack:
            item = stack.pop(0)
            if isinstance(item, list):
                stack.extend(item)
            elif isinstance(item, dict):
                yield item
                graph = item.get("@graph")
                if isinstance(graph, list):
                    stack.extend(graph)


def _json_ld_candidates(soup: "BeautifulSoup") -> Iterator[str | None]:
    for item in iter_json_ld(soup):
        for key in _JSON_LD_DATE_KEYS:
            value = item.get(key)
            if isinstance(value, str):
                yield value
        main_entity = item.get("mainEntity")
        if isinstance(main_entity, dict):
            for key in _JSON_LD_DATE_KEYS:
                value = main_entity.get(key)
                if isinstance(value, str):
                    yield value


def _snowflake_candidates(url: str) -> Iterator[str | None]:
    status_id = parse_status_id(url)
    if status_id is None:
        return
    try:
        timestamp_ms = decode_snowflake_id(status_id)
        moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError) as exc:
        logger.debug("Could not decode status id {}: {}", status_id, exc)
        return
    yield moment.isoformat()


def _meta_candidates(soup: "BeautifulSoup") -> Iterator[str | None]:
    for selector in META_DATE_SELECTORS:
        node = soup.select_one(selector)
        if node is None:
            continue
        yield node.get("content") or node.get("datetime")


def _x_date_methods(soup: "BeautifulSoup", url: str) -> list[Iterator[str | None]]:
    return [
        _time_element_candidates(soup),
        _text_pattern_candidates(soup),
        _json_ld_candidates(soup),
        _snowflake_candidates(url),
    ]


def extract_posted_date(
    soup: "BeautifulSoup",
    url: str,
    platform: Platform,
    clock: Clock = utc_now,
) -> str:
    """Best-guess publication date as YYYY-MM-DD, falling back to today (UTC)."""

    if platform is Platform.X:
        for method in _x_date_methods(soup, url):
            posted_date = _first_valid(method)
            if posted_date:
                return posted_date

    posted_date = _first_valid(_meta_candidates(soup))
    if posted_date:
        return posted_date

    now = clock()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    logger.debug("No publication date found for {}; using today", url)
    return now.astimezone(timezone.utc).date().isoformat()
