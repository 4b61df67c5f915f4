"""Configuration models for contentsage."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

DEFAULT_USER_AGENT = "ContentSage Bot/1.0 (https://contentsage.app)"


class ClassifierConfig(BaseModel):
    """Tunable limits for fetching and classifying a page."""

    content_limit: int = Field(default=5000, gt=0)
    social_content_limit: int = Field(default=2000, gt=0)
    x_min_text_length: int = Field(default=10, ge=0)
    social_min_text_length: int = Field(default=5, ge=0)
    fetch_timeout_seconds: float = Field(default=15.0, gt=0, le=120)
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    follow_redirects: bool = True

    @model_validator(mode="after")
    def validate_content_limits(self) -> "ClassifierConfig":
        if self.social_content_limit > self.content_limit:
            raise ValueError("social_content_limit should be <= content_limit")
        return self
