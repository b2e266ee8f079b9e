"""Conversion of raw feed entries into canonical NewsItem records."""

import base64
from collections.abc import Callable
from datetime import datetime, timezone

from cryptonews.models import NewsItem, RawFeedItem
from cryptonews.sentiment import SentimentScorer, classify, default_scorer

UNKNOWN_SOURCE = "Unknown"


def utc_now_iso() -> str:
    """Current time as ISO-8601 UTC with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_id(url: str, timestamp: str) -> str:
    """Stable identifier for a (url, timestamp) pair."""
    return base64.b64encode((url + timestamp).encode("utf-8")).decode("ascii")


def normalize(
    raw: RawFeedItem,
    source: str | None,
    scorer: SentimentScorer = default_scorer,
    clock: Callable[[], str] = utc_now_iso,
) -> NewsItem:
    """Build a NewsItem from a raw entry and the name of the feed it came from.

    The clock is read only when the entry carries no date at all.
    """
    title = raw.title or ""
    description = raw.content_snippet if raw.content_snippet is not None else raw.content or ""
    url = raw.link or ""
    timestamp = raw.iso_date or raw.pub_date or clock()

    score = scorer.score(f"{title}. {description}").score

    return NewsItem(
        id=make_id(url, timestamp),
        title=title,
        description=description,
        timestamp=timestamp,
        url=url,
        source=source or UNKNOWN_SOURCE,
        image=raw.enclosure_url or "",
        sentiment=classify(score),
        score=score,
    )
