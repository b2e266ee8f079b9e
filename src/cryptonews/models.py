"""Data models for the crypto news aggregator."""

from dataclasses import asdict, dataclass, field
from typing import Literal

Sentiment = Literal["bullish", "bearish", "neutral"]


@dataclass(frozen=True)
class RawFeedItem:
    """A single entry as read from one source's feed, before normalization."""

    title: str | None = None
    content: str | None = None
    content_snippet: str | None = None
    link: str | None = None
    iso_date: str | None = None
    pub_date: str | None = None
    enclosure_url: str | None = None


@dataclass(frozen=True)
class FetchSuccess:
    """A source that was fetched and parsed."""

    source_url: str
    feed_title: str | None
    items: list[RawFeedItem] = field(default_factory=list)


@dataclass(frozen=True)
class FetchFailure:
    """A source whose retrieval or parsing failed."""

    source_url: str
    error: str


FetchOutcome = FetchSuccess | FetchFailure


@dataclass
class NewsItem:
    """Canonical, sentiment-annotated news entry."""

    id: str
    title: str
    description: str
    timestamp: str
    url: str
    source: str
    image: str
    sentiment: Sentiment
    score: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class NewsResponse:
    """Result of one aggregation cycle as handed to the serving layer."""

    success: bool
    news: list[NewsItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "news": [item.to_dict() for item in self.news],
        }
