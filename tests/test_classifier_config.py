import pytest
from pydantic import ValidationError

from contentsage.config import DEFAULT_USER_AGENT, ClassifierConfig


def test_classifier_config_defaults() -> None:
    config = ClassifierConfig()
    assert config.content_limit == 5000
    assert config.social_content_limit == 2000
    assert config.x_min_text_length == 10
    assert config.social_min_text_length == 5
    assert config.fetch_timeout_seconds == 15.0
    assert config.user_agent == DEFAULT_USER_AGENT == "ContentSage Bot/1.0 (https://contentsage.app)"


def test_classifier_config_requires_social_limit_within_content_limit() -> None:
    with pytest.raises(ValidationError):
        ClassifierConfig(content_limit=1000, social_content_limit=1500)


def test_classifier_config_requires_positive_timeout() -> None:
    with pytest.raises(ValidationError):
        ClassifierConfig(fetch_timeout_seconds=0)

    with pytest.raises(ValidationError):
        ClassifierConfig(fetch_timeout_seconds=600)
