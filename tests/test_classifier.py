from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from contentsage.classifier import classify, classify_batch, classify_input, classify_url
from contentsage.fetcher import FetchError
from contentsage.input import InvalidUrlError
from contentsage.models import ClassificationInput, ContentFormat, Platform


def _clock() -> datetime:
    return datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def test_linkedin_post_scenario() -> None:
    html = (
        "<html><head><title>Acme on LinkedIn</title></head>"
        '<body><div class="feed-shared-text">Check out our new product!</div></body></html>'
    )
    result = classify(html, "https://www.linkedin.com/posts/acme_launch-activity-123", clock=_clock)

    assert result.format == ContentFormat.SOCIAL
    assert result.platform == Platform.LINKEDIN
    assert result.has_video is False
    assert result.has_podcast is False
    assert result.has_infographic is False
    assert result.needs_ai_title is True
    assert result.content == "Check out our new product!"
    assert result.title == "Acme on LinkedIn"


def test_blog_article_truncated_to_content_limit() -> None:
    html = f"<html><head><title>Long read</title></head><body><article>{'x' * 6000}</article></body></html>"
    result = classify(html, "https://blog.example.com/posts/long-read", clock=_clock)

    assert result.format == ContentFormat.ARTICLE
    assert result.platform == Platform.WEBSITE
    assert len(result.content) == 5000
    assert result.needs_ai_title is False


def test_published_time_meta_round_trip() -> None:
    html = '<meta property="article:published_time" content="2023-09-04T10:00:00Z">'
    result = classify(html, "https://example.com/news/item", clock=_clock)

    assert result.posted_date == "2023-09-04"


def test_missing_date_defaults_to_clock() -> None:
    result = classify("<p>undated</p>", "https://example.com/a", clock=_clock)

    assert result.posted_date == "2025-01-15"


def test_x_status_snowflake_scenario() -> None:
    result = classify("<html><body></body></html>", "https://x.com/user/status/1565402536254500865", clock=_clock)

    assert result.posted_date == "2022-09-01"
    assert result.format == ContentFormat.SOCIAL
    assert result.platform == Platform.X


def test_video_on_non_social_platform() -> None:
    html = "<title>Demo</title><body><video src='demo.mp4'></video><div class='gallery'></div></body>"
    result = classify(html, "https://example.com/demo", clock=_clock)

    assert result.format == ContentFormat.VIDEO
    assert result.has_video is True
    assert result.has_podcast is False


def test_youtube_is_video_without_markup() -> None:
    result = classify("<title>Clip</title>", "https://www.youtube.com/watch?v=abc", clock=_clock)

    assert result.platform == Platform.YOUTUBE
    assert result.format == ContentFormat.VIDEO
    assert result.has_video is True


def test_social_video_stays_social() -> None:
    html = (
        '<article><div data-testid="tweetText">Watch our launch keynote now</div>'
        '<div data-testid="videoPlayer"></div></article>'
    )
    result = classify(html, "https://x.com/acme/status/1", clock=_clock)

    assert result.format == ContentFormat.SOCIAL
    assert result.has_video is True
    assert result.needs_ai_title is True


def test_social_podcast_upgraded_from_post_text() -> None:
    html = '<div data-testid="tweetText">New episode is out, go listen to it today</div>'
    result = classify(html, "https://x.com/acme/status/1", clock=_clock)

    assert result.format == ContentFormat.SOCIAL
    assert result.has_podcast is True
    assert result.content == "New episode is out, go listen to it today"


def test_social_infographic_from_text_and_chart() -> None:
    html = (
        '<div class="feed-shared-text">Our 2024 infographic on hiring trends</div>'
        '<div class="chart-wrapper"></div>'
    )
    result = classify(html, "https://www.linkedin.com/posts/acme-1", clock=_clock)

    assert result.format == ContentFormat.SOCIAL
    assert result.has_infographic is True


def test_social_content_falls_back_to_page_text() -> None:
    result = classify("", "https://www.instagram.com/p/abc/", clock=_clock)

    assert result.format == ContentFormat.SOCIAL
    assert result.content == ""
    assert result.needs_ai_title is True


def test_invalid_url_is_fatal() -> None:
    with pytest.raises(InvalidUrlError):
        classify("<p>x</p>", "example.com/no-scheme", clock=_clock)


def test_classification_is_idempotent() -> None:
    html = (
        "<title>Podcast 7</title><audio></audio>"
        '<meta name="DC.date.issued" content="2022-02-02">'
    )
    url = "https://example.com/shows/7"

    first = classify(html, url, clock=_clock)
    second = classify(html, url, clock=_clock)

    assert first == second
    assert first.format == ContentFormat.PODCAST
    assert first.posted_date == "2022-02-02"


def test_classify_input() -> None:
    item = ClassificationInput(html="<title>Hi</title>", url="https://example.com/hi")

    assert classify_input(item).title == "Hi"


def test_payload_uses_camel_case_keys() -> None:
    payload = classify("<title>T</title>", "https://example.com/t", clock=_clock).as_payload()

    assert payload == {
        "title": "T",
        "postedDate": "2025-01-15",
        "format": "article",
        "platform": "website",
        "content": "T",
        "needsAiTitle": False,
        "hasVideo": False,
        "hasInfographic": False,
        "hasPodcast": False,
    }


def test_post_record_mapping() -> None:
    result = classify("<title>T</title><video></video>", "https://example.com/t", clock=_clock)

    row = result.to_post_record(url="https://example.com/t", user_id="user-1", description="About T").as_row()
    assert row == {
        "url": "https://example.com/t",
        "title": "T",
        "description": "About T",
        "posted_date": "2025-01-15",
        "format": "video",
        "platform": "website",
        "status": "POSTED",
        "user_id": "user-1",
        "has_video": True,
        "has_infographic": False,
        "has_podcast": False,
    }

    with_org = result.to_post_record(url="https://example.com/t", user_id="user-1", organization_id="org-9")
    assert with_org.as_row()["organization_id"] == "org-9"


def _client(pages: dict[str, tuple[int, str]]) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        status, body = pages.get(str(request.url), (404, "missing"))
        return httpx.Response(status, text=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_classify_url_fetches_and_classifies() -> None:
    client = _client({"https://example.com/a": (200, "<title>Fetched</title><audio></audio>")})

    result = classify_url("https://example.com/a", client=client, clock=_clock)

    assert result.title == "Fetched"
    assert result.format == ContentFormat.PODCAST


def test_classify_batch_continue_on_error(tmp_path: Path) -> None:
    url_file = tmp_path / "urls.txt"
    url_file.write_text("https://example.com/a\nhttps://example.com/gone\n", encoding="utf-8")
    client = _client({"https://example.com/a": (200, "<title>A</title>")})

    report = classify_batch(url_file=url_file, continue_on_error=True, client=client)

    assert report.total == 2
    assert report.succeeded == 1
    assert report.failed == 1
    assert list(report.results) == ["https://example.com/a"]
    assert report.failures[0].startswith("https://example.com/gone")


def test_classify_batch_stops_on_first_error(tmp_path: Path) -> None:
    url_file = tmp_path / "urls.txt"
    url_file.write_text("https://example.com/gone\n", encoding="utf-8")

    with pytest.raises(FetchError):
        classify_batch(url_file=url_file, client=_client({}))


def test_classify_input_uses_injected_clock() -> None:
    item = ClassificationInput(html="<p>undated</p>", url="https://example.com/undated")

    assert classify_input(item, clock=_clock).posted_date == "2025-01-15"
