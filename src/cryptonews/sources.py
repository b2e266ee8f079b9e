"""Registry of the feed endpoints polled on every aggregation."""

from dataclasses import dataclass
from urllib.parse import urlparse


@dataclass(frozen=True)
class FeedSource:
    """A syndication endpoint to poll."""

    url: str


DEFAULT_FEEDS: tuple[FeedSource, ...] = (
    FeedSource("https://cointelegraph.com/rss"),
    FeedSource("https://decrypt.co/feed"),
    FeedSource("https://bitcoinmagazine.com/.rss/full/"),
    FeedSource("https://www.newsbtc.com/feed/"),
    FeedSource("https://ambcrypto.com/feed/"),
    FeedSource("https://beincrypto.com/feed/"),
    FeedSource("https://cryptoslate.com/feed/"),
    FeedSource("https://cryptopotato.com/feed/"),
    FeedSource("https://dailyhodl.com/feed/"),
    FeedSource("https://zycrypto.com/feed/"),
)


def validate_url(url: str) -> None:
    """Raise ValueError unless url is an absolute http(s) URL."""
    try:
        result = urlparse(url)
    except ValueError:
        raise ValueError(f"Invalid feed URL: {url!r}") from None
    if result.scheme not in ("http", "https") or not result.netloc:
        raise ValueError(f"Invalid feed URL: {url!r} (only http and https are supported)")


def parse_feed_list(value: str) -> tuple[FeedSource, ...]:
    """Turn a comma-separated URL list into an ordered tuple of sources.

    Blank entries are ignored and repeated URLs keep their first position.
    """
    sources: list[FeedSource] = []
    seen: set[str] = set()
    for raw in value.split(","):
        url = raw.strip()
        if not url or url in seen:
            continue
        validate_url(url)
        seen.add(url)
        sources.append(FeedSource(url))
    return tuple(sources)
