"""Retrieve raw HTML for a URL over HTTP or through a headless browser."""

from __future__ import annotations

import httpx
from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from contentsage.config import ClassifierConfig


class FetchError(RuntimeError):
    """Raised when a page cannot be retrieved."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FetchTimeoutError(FetchError):
    """Raised when retrieving a page exceeds the configured timeout."""


def fetch_html(
    url: str,
    config: ClassifierConfig | None = None,
    *,
    client: httpx.Client | None = None,
) -> str:
    """Fetch url and return its body text; non-2xx responses raise FetchError."""

    config = config or ClassifierConfig()
    headers = {"User-Agent": config.user_agent}

    owns_client = client is None
    if client is None:
        client = httpx.Client(
            timeout=config.fetch_timeout_seconds,
            follow_redirects=config.follow_redirects,
        )

    try:
        logger.debug("Fetching {}", url)
        response = client.get(url, headers=headers, timeout=config.fetch_timeout_seconds)
        response.raise_for_status()
    except httpx.TimeoutException as exc:
        logger.warning("Timed out fetching {} after {}s", url, config.fetch_timeout_seconds)
        raise FetchTimeoutError(
            url, f"Timed out fetching '{url}' after {config.fetch_timeout_seconds}s"
        ) from exc
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        logger.warning("Fetch failed ({}): {}", status, url)
        raise FetchError(
            url,
            f"Failed to fetch URL: {status} {exc.response.reason_phrase}",
            status_code=status,
        ) from exc
    except httpx.HTTPError as exc:
        logger.warning("Fetch failed for {}: {}", url, exc)
        raise FetchError(url, f"Failed to fetch '{url}': {exc}") from exc
    finally:
        if owns_client:
            client.close()

    return response.text


def render_html(url: str, config: ClassifierConfig | None = None, *, headless: bool = True) -> str:
    """Load url in headless Chromium and return the rendered DOM markup."""

    config = config or ClassifierConfig()
    timeout_ms = int(config.fetch_timeout_seconds * 1000)

    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=headless)
            try:
                context = browser.new_context(user_agent=config.user_agent)
                page = context.new_page()
                response = page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
                if response is not None and not response.ok:
                    raise FetchError(
                        url,
                        f"Failed to fetch URL: {response.status} {response.status_text}",
                        status_code=response.status,
                    )
                return page.content()
            finally:
                browser.close()
    except PlaywrightTimeoutError as exc:
        logger.warning("Timed out rendering {}", url)
        raise FetchTimeoutError(url, f"Timed out rendering '{url}'") from exc
    except PlaywrightError as exc:
        logger.warning("Render failed for {}: {}", url, exc)
        raise FetchError(url, f"Failed to render '{url}': {exc}") from exc
