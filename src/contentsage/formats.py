"""Priority-ordered format rules for non-social pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from loguru import logger

from contentsage.models import VIDEO_PLATFORMS, ContentFormat
from contentsage.signals import (
    PageContext,
    has_gallery_markup,
    has_video_markup,
    is_infographic_page,
    is_pdf_url,
    is_podcast_page,
)

Predicate = Callable[[PageContext], bool]


@dataclass(frozen=True)
class FormatRule:
    name: str
    predicate: Predicate
    format: ContentFormat
    flag: str | None = None


@dataclass(frozen=True)
class FormatDecision:
    format: ContentFormat
    rule: str | None = None
    has_video: bool = False
    has_podcast: bool = False
    has_infographic: bool = False


def _is_video_page(ctx: PageContext) -> bool:
    return ctx.platform in VIDEO_PLATFORMS or has_video_markup(ctx)


FORMAT_RULES: list[FormatRule] = [
    FormatRule("video", _is_video_page, ContentFormat.VIDEO, flag="has_video"),
    FormatRule("podcast", is_podcast_page, ContentFormat.PODCAST, flag="has_podcast"),
    FormatRule("infographic", is_infographic_page, ContentFormat.INFOGRAPHIC, flag="has_infographic"),
    FormatRule("gallery", has_gallery_markup, ContentFormat.GALLERY),
    FormatRule("pdf", is_pdf_url, ContentFormat.PDF),
]


def _rule_matches(rule: FormatRule, ctx: PageContext) -> bool:
    try:
        return rule.predicate(ctx)
    except Exception as exc:
        logger.debug("Format rule {} failed for {}: {}", rule.name, ctx.url, exc)
        return False


def classify_format(ctx: PageContext, rules: list[FormatRule] | None = None) -> FormatDecision:
    """Return the first matching rule's format, or article when none fire."""

    for rule in FORMAT_RULES if rules is None else rules:
        if not _rule_matches(rule, ctx):
            continue
        flags = {rule.flag: True} if rule.flag else {}
        return FormatDecision(format=rule.format, rule=rule.name, **flags)
    return FormatDecision(format=ContentFormat.ARTICLE)
