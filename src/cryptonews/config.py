"""Runtime configuration, read from the environment."""

import os
from dataclasses import dataclass

from cryptonews.sources import DEFAULT_FEEDS, FeedSource, parse_feed_list

DEFAULT_FETCH_TIMEOUT = 8.0
DEFAULT_MAX_ITEMS_PER_SOURCE = 20
DEFAULT_CACHE_MAX_AGE = 300
DEFAULT_STALE_WHILE_REVALIDATE = 600
DEFAULT_USER_AGENT = "cryptonews/0.1 (+https://github.com/cryptonews)"


@dataclass(frozen=True)
class Settings:
    """Settings shared by the pipeline, the API and the CLI."""

    feeds: tuple[FeedSource, ...] = DEFAULT_FEEDS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_items_per_source: int = DEFAULT_MAX_ITEMS_PER_SOURCE
    cache_max_age: int = DEFAULT_CACHE_MAX_AGE
    stale_while_revalidate: int = DEFAULT_STALE_WHILE_REVALIDATE
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if self.fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be positive")
        if self.max_items_per_source <= 0:
            raise ValueError("max_items_per_source must be positive")
        if self.cache_max_age < 0 or self.stale_while_revalidate < 0:
            raise ValueError("cache durations must not be negative")

    @property
    def cache_control(self) -> str:
        return f"s-maxage={self.cache_max_age}, stale-while-revalidate={self.stale_while_revalidate}"

    @classmethod
    def from_env(cls) -> "Settings":
        feeds_value = os.environ.get("CRYPTONEWS_FEEDS", "").strip()
        return cls(
            feeds=parse_feed_list(feeds_value) if feeds_value else DEFAULT_FEEDS,
            fetch_timeout=_env_number(
                "CRYPTONEWS_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT, float
            ),
            max_items_per_source=_env_number(
                "CRYPTONEWS_MAX_ITEMS_PER_SOURCE", DEFAULT_MAX_ITEMS_PER_SOURCE, int
            ),
            cache_max_age=_env_number(
                "CRYPTONEWS_CACHE_MAX_AGE", DEFAULT_CACHE_MAX_AGE, int
            ),
            stale_while_revalidate=_env_number(
                "CRYPTONEWS_STALE_WHILE_REVALIDATE", DEFAULT_STALE_WHILE_REVALIDATE, int
            ),
            user_agent=os.environ.get("CRYPTONEWS_USER_AGENT", DEFAULT_USER_AGENT),
        )


def _env_number(name: str, default, convert):
    """Read a numeric environment variable, falling back to default when unset."""
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return convert(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None
