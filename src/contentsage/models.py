"""Domain models used by contentsage."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    WEBSITE = "website"
    X = "X"
    INSTAGRAM = "Instagram"
    FACEBOOK = "Facebook"
    LINKEDIN = "LinkedIn"
    YOUTUBE = "YouTube"
    TIKTOK = "TikTok"
    THREADS = "Threads"
    VIMEO = "Vimeo"
    PINTEREST = "Pinterest"
    MEDIUM = "Medium"


SOCIAL_PLATFORMS = frozenset(
    {Platform.X, Platform.INSTAGRAM, Platform.FACEBOOK, Platform.LINKEDIN, Platform.THREADS}
)
VIDEO_PLATFORMS = frozenset({Platform.YOUTUBE, Platform.TIKTOK, Platform.VIMEO})


class ContentFormat(str, Enum):
    ARTICLE = "article"
    SOCIAL = "social"
    VIDEO = "video"
    PODCAST = "podcast"
    INFOGRAPHIC = "infographic"
    GALLERY = "gallery"
    PDF = "pdf"


class ClassificationInput(BaseModel):
    """Raw markup for one URL, as handed to the classifier."""

    model_config = ConfigDict(frozen=True)

    html: str
    url: str


class UrlInput(BaseModel):
    """A user-provided URL from a batch file with its detected platform."""

    url: str
    platform: Platform
    status_id: str | None = None


class PostRecord(BaseModel):
    """Persistence-shaped row handed to the posts store."""

    url: str
    title: str
    description: str = ""
    posted_date: str
    format: ContentFormat
    platform: Platform
    status: str = "POSTED"
    user_id: str
    organization_id: str | None = None
    has_video: bool = False
    has_infographic: bool = False
    has_podcast: bool = False

    def as_row(self) -> dict:
        """Plain dict for insertion; organization_id is omitted when unset."""

        return self.model_dump(mode="json", exclude_none=True)


class ClassificationResult(BaseModel):
    """Normalized classification of a fetched page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = ""
    posted_date: str = Field(alias="postedDate")
    format: ContentFormat = ContentFormat.ARTICLE
    platform: Platform = Platform.WEBSITE
    content: str = ""
    needs_ai_title: bool = Field(default=False, alias="needsAiTitle")
    has_video: bool = Field(default=False, alias="hasVideo")
    has_infographic: bool = Field(default=False, alias="hasInfographic")
    has_podcast: bool = Field(default=False, alias="hasPodcast")

    def as_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def to_post_record(
        self,
        *,
        url: str,
        user_id: str,
        organization_id: str | None = None,
        description: str = "",
        status: str = "POSTED",
    ) -> PostRecord:
        return PostRecord(
            url=url,
            title=self.title,
            description=description,
            posted_date=self.posted_date,
            format=self.format,
            platform=self.platform,
            status=status,
            user_id=user_id,
            organization_id=organization_id or None,
            has_video=self.has_video,
            has_infographic=self.has_infographic,
            has_podcast=self.has_podcast,
        )


class BatchReport(BaseModel):
    """Final summary returned by classify_batch."""

    total: int
    succeeded: int
    failed: int
    results: dict[str, ClassificationResult] = Field(default_factory=dict)
    failures: list[str] = Field(default_factory=list)
