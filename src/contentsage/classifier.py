"""Classification orchestration for contentsage."""

from __future__ import annotations

from pathlib import Path

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from contentsage.config import ClassifierConfig
from contentsage.dates import Clock, extract_posted_date, utc_now
from contentsage.extractor import extract_main_text, extract_social_text, extract_title
from contentsage.fetcher import FetchError, fetch_html, render_html
from contentsage.formats import classify_format
from contentsage.input import detect_platform, load_url_file, parse_hostname
from contentsage.models import (
    SOCIAL_PLATFORMS,
    BatchReport,
    ClassificationInput,
    ClassificationResult,
    ContentFormat,
)
from contentsage.signals import (
    PageContext,
    has_social_infographic,
    has_social_podcast,
    has_social_video,
    text_mentions_podcast,
)


def classify(
    html: str,
    url: str,
    config: ClassifierConfig | None = None,
    *,
    clock: Clock = utc_now,
) -> ClassificationResult:
    """Classify already-fetched markup for url.

    Only an invalid url is fatal; every other ambiguity resolves to a default.
    """

    config = config or ClassifierConfig()
    platform = detect_platform(url)
    soup = BeautifulSoup(html, "html.parser")

    title = extract_title(soup)
    posted_date = extract_posted_date(soup, url, platform, clock)
    ctx = PageContext(
        soup=soup,
        url=url,
        hostname=parse_hostname(url),
        platform=platform,
        title=title,
    )

    if platform in SOCIAL_PLATFORMS:
        has_video = has_social_video(ctx)
        has_podcast = has_social_podcast(ctx)
        social_text = extract_social_text(soup, platform, config)
        has_infographic = has_social_infographic(ctx, social_text)
        if not has_podcast and text_mentions_podcast(social_text):
            has_podcast = True

        result = ClassificationResult(
            title=title,
            posted_date=posted_date,
            format=ContentFormat.SOCIAL,
            platform=platform,
            content=social_text or extract_main_text(soup, config.content_limit),
            needs_ai_title=True,
            has_video=has_video,
            has_infographic=has_infographic,
            has_podcast=has_podcast,
        )
    else:
        decision = classify_format(ctx)
        result = ClassificationResult(
            title=title,
            posted_date=posted_date,
            format=decision.format,
            platform=platform,
            content=extract_main_text(soup, config.content_limit),
            needs_ai_title=not title,
            has_video=decision.has_video,
            has_infographic=decision.has_infographic,
            has_podcast=decision.has_podcast,
        )

    logger.info(
        "Classified {} as {} on {} (posted {})",
        url,
        result.format.value,
        result.platform.value,
        result.posted_date,
    )
    return result


def classify_input(
    item: ClassificationInput,
    config: ClassifierConfig | None = None,
    *,
    clock: Clock = utc_now,
) -> ClassificationResult:
    return classify(item.html, item.url, config, clock=clock)


def classify_url(
    url: str,
    config: ClassifierConfig | None = None,
    *,
    render: bool = False,
    client: httpx.Client | None = None,
    clock: Clock = utc_now,
) -> ClassificationResult:
    """Fetch url and classify it; fetch failures propagate as FetchError."""

    config = config or ClassifierConfig()
    detect_platform(url)
    if render:
        html = render_html(url, config)
    else:
        html = fetch_html(url, config, client=client)
    return classify(html, url, config, clock=clock)


def classify_batch(
    *,
    url_file: Path,
    config: ClassifierConfig | None = None,
    render: bool = False,
    continue_on_error: bool = False,
    client: httpx.Client | None = None,
) -> BatchReport:
    """Classify every URL listed in url_file."""

    config = config or ClassifierConfig()
    inputs = load_url_file(url_file)

    results: dict[str, ClassificationResult] = {}
    failures: list[str] = []

    for item in inputs:
        try:
            results[item.url] = classify_url(item.url, config, render=render, client=client)
        except FetchError as exc:
            message = f"{item.url}: {exc}"
            if continue_on_error:
                failures.append(message)
                continue
            raise

    return BatchReport(
        total=len(inputs),
        succeeded=len(results),
        failed=len(failures),
        results=results,
        failures=failures,
    )
