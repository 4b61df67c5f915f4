"""URL parsing, platform detection and URL-file ingestion utilities."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from contentsage.models import Platform, UrlInput

# Ordered: the first matching domain wins.
_PLATFORM_DOMAINS: list[tuple[tuple[str, ...], Platform]] = [
    (("twitter.com", "x.com"), Platform.X),
    (("instagram.com",), Platform.INSTAGRAM),
    (("facebook.com",), Platform.FACEBOOK),
    (("linkedin.com",), Platform.LINKEDIN),
    (("youtube.com", "youtu.be"), Platform.YOUTUBE),
    (("tiktok.com",), Platform.TIKTOK),
    (("threads.net",), Platform.THREADS),
    (("vimeo.com",), Platform.VIMEO),
    (("pinterest.com",), Platform.PINTEREST),
    (("medium.com",), Platform.MEDIUM),
]


class InvalidUrlError(ValueError):
    """Raised when a URL cannot be parsed into a scheme and hostname."""


def parse_hostname(url: str) -> str:
    """Return the lower-cased hostname of an absolute URL."""

    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid URL '{url}': {exc}") from exc

    if not parsed.scheme or not hostname:
        raise InvalidUrlError(f"Invalid URL '{url}': expected an absolute URL")
    return hostname.lower()


def detect_platform(url: str) -> Platform:
    """Map a URL's hostname onto a known platform, defaulting to website."""

    hostname = parse_hostname(url)
    for domains, platform in _PLATFORM_DOMAINS:
        if any(domain in hostname for domain in domains):
            return platform
    return Platform.WEBSITE


def parse_status_id(url: str) -> str | None:
    """Extract the numeric status id from an X/Twitter URL, if there is one."""

    parsed = urlparse(url.strip())
    parts = [part for part in parsed.path.split("/") if part]
    for index, part in enumerate(parts):
        if part == "status" and index + 1 < len(parts):
            status_id = parts[index + 1]
            if status_id.isdigit():
                return status_id
            return None
    return None


def load_url_file(path: Path) -> list[UrlInput]:
    """Load and validate URLs from a text file (one URL per line)."""

    if not path.exists() or not path.is_file():
        raise ValueError(f"URL file not found: {path}")

    seen: set[str] = set()
    items: list[UrlInput] = []

    for line_number, raw_line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        try:
            platform = detect_platform(line)
        except InvalidUrlError as exc:
            raise ValueError(f"Invalid URL at line {line_number}: {exc}") from exc

        if line in seen:
            continue

        seen.add(line)
        status_id = parse_status_id(line) if platform is Platform.X else None
        items.append(UrlInput(url=line, platform=platform, status_id=status_id))

    if not items:
        raise ValueError("No valid URLs found in URL file")

    return items
