"""Tests for settings and the feed registry."""

import pytest

from cryptonews.config import Settings
from cryptonews.sources import DEFAULT_FEEDS, FeedSource, parse_feed_list

ENV_VARS = (
    "CRYPTONEWS_FEEDS",
    "CRYPTONEWS_FETCH_TIMEOUT",
    "CRYPTONEWS_MAX_ITEMS_PER_SOURCE",
    "CRYPTONEWS_CACHE_MAX_AGE",
    "CRYPTONEWS_STALE_WHILE_REVALIDATE",
    "CRYPTONEWS_USER_AGENT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()

    assert settings.feeds == DEFAULT_FEEDS
    assert len(settings.feeds) == 10
    assert settings.feeds[0] == FeedSource("https://cointelegraph.com/rss")
    assert settings.max_items_per_source == 20
    assert settings.cache_control == "s-maxage=300, stale-while-revalidate=600"


def test_from_env(monkeypatch):
    monkeypatch.setenv("CRYPTONEWS_FEEDS", "https://a.example/feed, https://b.example/rss")
    monkeypatch.setenv("CRYPTONEWS_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("CRYPTONEWS_MAX_ITEMS_PER_SOURCE", "5")
    monkeypatch.setenv("CRYPTONEWS_CACHE_MAX_AGE", "60")
    monkeypatch.setenv("CRYPTONEWS_STALE_WHILE_REVALIDATE", "120")
    monkeypatch.setenv("CRYPTONEWS_USER_AGENT", "test-agent")

    settings = Settings.from_env()

    assert settings.feeds == (FeedSource("https://a.example/feed"), FeedSource("https://b.example/rss"))
    assert settings.fetch_timeout == 2.5
    assert settings.max_items_per_source == 5
    assert settings.cache_control == "s-maxage=60, stale-while-revalidate=120"
    assert settings.user_agent == "test-agent"


def test_invalid_number(monkeypatch):
    monkeypatch.setenv("CRYPTONEWS_FETCH_TIMEOUT", "soon")
    with pytest.raises(ValueError, match="CRYPTONEWS_FETCH_TIMEOUT"):
        Settings.from_env()


def test_rejects_non_positive_timeout():
    with pytest.raises(ValueError, match="fetch_timeout"):
        Settings(fetch_timeout=0)


def test_rejects_non_positive_item_cap():
    with pytest.raises(ValueError, match="max_items_per_source"):
        Settings(max_items_per_source=0)


def test_parse_feed_list_dedupes_and_keeps_order():
    sources = parse_feed_list("https://b.example/feed,,https://a.example/feed, https://b.example/feed")
    assert [s.url for s in sources] == ["https://b.example/feed", "https://a.example/feed"]


@pytest.mark.parametrize("value", ["ftp://a.example/feed", "not a url", "https://"])
def test_parse_feed_list_rejects_invalid_urls(value):
    with pytest.raises(ValueError, match="Invalid feed URL"):
        parse_feed_list(value)
