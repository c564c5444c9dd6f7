"""Tests for ContentfulOptions."""

import pytest

from contentful_graph.config import ContentfulOptions
from contentful_graph.core.links import ResolutionPolicy


def test_defaults() -> None:
    options = ContentfulOptions(space_id="space", delivery_api_key="cda")
    assert options.environment == "master"
    assert options.host == "cdn.contentful.com"
    assert options.base_url == "https://cdn.contentful.com/spaces/space/environments/master"
    assert options.access_token == "cda"
    assert options.resolution_policy is ResolutionPolicy.ON_DEMAND


def test_preview_switches_host_and_token() -> None:
    options = ContentfulOptions(space_id="space", delivery_api_key="cda", preview_api_key="cpa", use_preview_api=True)
    assert options.host == "preview.contentful.com"
    assert options.access_token == "cpa"


def test_negative_retries_are_rejected() -> None:
    with pytest.raises(ValueError):
        ContentfulOptions(space_id="space", max_number_of_rate_limit_retries=-1)


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTENTFUL_SPACE_ID", "env-space")
    monkeypatch.setenv("CONTENTFUL_DELIVERY_API_KEY", "env-token")
    monkeypatch.setenv("CONTENTFUL_ENVIRONMENT", "staging")
    monkeypatch.setenv("CONTENTFUL_USE_PREVIEW_API", "true")
    monkeypatch.setenv("CONTENTFUL_MAX_RATE_LIMIT_RETRIES", "4")
    monkeypatch.setenv("CONTENTFUL_RESOLUTION_POLICY", "eager")

    options = ContentfulOptions.from_env()

    assert options.space_id == "env-space"
    assert options.delivery_api_key == "env-token"
    assert options.environment == "staging"
    assert options.use_preview_api is True
    assert options.rate_limit_retries == 4
    assert options.resolution_policy is ResolutionPolicy.EAGER


def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CONTENTFUL_SPACE_ID", "CONTENTFUL_ENVIRONMENT", "CONTENTFUL_USE_PREVIEW_API"):
        monkeypatch.delenv(name, raising=False)
    options = ContentfulOptions.from_env()
    assert options.space_id == ""
    assert options.environment == "master"
    assert options.use_preview_api is False
