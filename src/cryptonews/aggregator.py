"""Fan-out fetch, normalization, dedup and ranking of news items."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx

from cryptonews.config import Settings
from cryptonews.feed_parser import fetch_all
from cryptonews.models import FetchOutcome, FetchSuccess, NewsItem, NewsResponse
from cryptonews.normalizer import normalize, utc_now_iso
from cryptonews.sentiment import SentimentScorer, default_scorer
from cryptonews.sources import FeedSource

logger = logging.getLogger(__name__)


async def aggregate(
    sources: Iterable[FeedSource] | None = None,
    *,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    scorer: SentimentScorer = default_scorer,
    clock: Callable[[], str] = utc_now_iso,
) -> list[NewsItem]:
    """Run one aggregation cycle and return news items, newest first.

    Sources that fail are left out; exceptions from anything else propagate.
    """
    settings = settings or Settings()
    sources = tuple(sources) if sources is not None else settings.feeds

    if client is None:
        async with _make_client(settings) as own_client:
            outcomes = await fetch_all(
                own_client, sources, settings.fetch_timeout, settings.max_items_per_source
            )
    else:
        outcomes = await fetch_all(
            client, sources, settings.fetch_timeout, settings.max_items_per_source
        )

    items = normalize_outcomes(outcomes, scorer=scorer, clock=clock)
    unique = dedupe(items)
    ranked = sort_newest_first(unique)

    failed = sum(1 for o in outcomes if not isinstance(o, FetchSuccess))
    logger.info(
        "Aggregated %d items from %d/%d sources (%d dropped as duplicates or missing url)",
        len(ranked),
        len(outcomes) - failed,
        len(outcomes),
        len(items) - len(unique),
    )
    if outcomes and failed == len(outcomes):
        logger.warning("All %d sources failed", failed)

    return ranked


async def collect_news(
    sources: Iterable[FeedSource] | None = None,
    *,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    scorer: SentimentScorer = default_scorer,
    clock: Callable[[], str] = utc_now_iso,
) -> NewsResponse:
    """Aggregate news for the serving layer; never raises on pipeline errors."""
    try:
        news = await aggregate(
            sources, settings=settings, client=client, scorer=scorer, clock=clock
        )
    except Exception:
        logger.exception("Failed to aggregate crypto news")
        return NewsResponse(success=False, news=[])
    return NewsResponse(success=True, news=news)


def normalize_outcomes(
    outcomes: Iterable[FetchOutcome],
    scorer: SentimentScorer = default_scorer,
    clock: Callable[[], str] = utc_now_iso,
) -> list[NewsItem]:
    """Flatten successful outcomes into NewsItems, in source then feed order."""
    items: list[NewsItem] = []
    for outcome in outcomes:
        if not isinstance(outcome, FetchSuccess):
            continue
        for raw in outcome.items:
            items.append(normalize(raw, outcome.feed_title, scorer=scorer, clock=clock))
    return items


def dedupe(items: Iterable[NewsItem]) -> list[NewsItem]:
    """Drop items without a url and repeats of an id already seen."""
    seen: set[str] = set()
    unique = []
    for item in items:
        if not item.url or item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def sort_newest_first(items: Iterable[NewsItem]) -> list[NewsItem]:
    """Stable sort by timestamp, newest first; unparsable timestamps go last."""
    return sorted(items, key=_sort_key, reverse=True)


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 or RFC 822 timestamp into an aware datetime."""
    value = value.strip()
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value)
    except ValueError:
        try:
            dt = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _sort_key(item: NewsItem) -> tuple[int, float]:
    dt = parse_timestamp(item.timestamp)
    if dt is None:
        return (0, 0.0)
    return (1, dt.timestamp())


def _make_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.fetch_timeout,
        headers={"User-Agent": settings.user_agent},
    )
