"""Concurrent RSS/Atom retrieval using httpx and feedparser."""

import asyncio
import calendar
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from time import struct_time

import feedparser
import httpx
from bs4 import BeautifulSoup

from cryptonews.config import DEFAULT_FETCH_TIMEOUT, DEFAULT_MAX_ITEMS_PER_SOURCE
from cryptonews.models import FetchFailure, FetchOutcome, FetchSuccess, RawFeedItem
from cryptonews.sources import FeedSource, validate_url

logger = logging.getLogger(__name__)


@dataclass
class ParsedFeed:
    """Result of parsing an RSS/Atom payload."""

    title: str | None
    items: list[RawFeedItem]
    warnings: list[str]


class FeedParseError(Exception):
    """Raised when a feed cannot be retrieved or parsed."""


async def fetch_all(
    client: httpx.AsyncClient,
    sources: list[FeedSource] | tuple[FeedSource, ...],
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    max_items: int = DEFAULT_MAX_ITEMS_PER_SOURCE,
) -> list[FetchOutcome]:
    """Fetch every source concurrently and wait until all have settled.

    Returns one outcome per source, in the same order as ``sources``.
    """
    return list(
        await asyncio.gather(
            *(fetch_source(client, source, timeout, max_items) for source in sources)
        )
    )


async def fetch_source(
    client: httpx.AsyncClient,
    source: FeedSource,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    max_items: int = DEFAULT_MAX_ITEMS_PER_SOURCE,
) -> FetchOutcome:
    """Fetch and parse one source, turning any failure into a FetchFailure."""
    try:
        parsed = await asyncio.wait_for(_fetch_and_parse(client, source.url), timeout)
    except asyncio.TimeoutError:
        error = f"timed out after {timeout:g}s"
    except FeedParseError as e:
        error = str(e)
    except Exception as e:
        error = f"{type(e).__name__}: {e}"
    else:
        for warning in parsed.warnings:
            logger.warning("Feed '%s': %s", source.url, warning)
        return FetchSuccess(
            source_url=source.url,
            feed_title=parsed.title,
            items=parsed.items[:max_items],
        )

    logger.warning("Feed '%s' error: %s", source.url, error)
    return FetchFailure(source_url=source.url, error=error)


async def _fetch_and_parse(client: httpx.AsyncClient, url: str) -> ParsedFeed:
    try:
        validate_url(url)
    except ValueError as e:
        raise FeedParseError(str(e)) from None

    response = await client.get(url, follow_redirects=True)
    if not response.is_success:
        raise FeedParseError(f"Could not reach URL: HTTP {response.status_code}")

    return await asyncio.to_thread(parse_feed, response.content)


def parse_feed(payload: bytes | str) -> ParsedFeed:
    """Parse an RSS or Atom document into raw feed items.

    Raises:
        FeedParseError: If the payload is not a recognizable feed.
    """
    if isinstance(payload, str):
        # feedparser treats str input as a possible URL or file path
        payload = payload.encode("utf-8")
    parsed = feedparser.parse(payload)

    if not parsed.feed.get("title") and not parsed.entries:
        raise FeedParseError("URL does not point to a valid RSS or Atom feed")

    warnings: list[str] = []
    if parsed.bozo:
        warnings.append(f"Feed has formatting issues: {parsed.get('bozo_exception')}")

    return ParsedFeed(
        title=parsed.feed.get("title") or None,
        items=_extract_items(parsed.entries, warnings),
        warnings=warnings,
    )


def _extract_items(entries: list, warnings: list[str]) -> list[RawFeedItem]:
    """Map feedparser entries to RawFeedItem, preserving feed order."""
    items = []
    for entry in entries:
        try:
            content = _entry_content(entry)
            items.append(
                RawFeedItem(
                    title=entry.get("title"),
                    content=content,
                    content_snippet=_strip_html(content),
                    link=entry.get("link"),
                    iso_date=_iso_date(entry),
                    pub_date=entry.get("published") or entry.get("updated"),
                    enclosure_url=_enclosure_url(entry),
                )
            )
        except Exception as e:
            warnings.append(f"Skipping malformed entry: {e}")
            continue
    return items


def _entry_content(entry: dict) -> str | None:
    for block in entry.get("content") or []:
        value = block.get("value")
        if value:
            return value
    return entry.get("summary") or entry.get("description") or None


def _strip_html(html: str | None) -> str | None:
    if not html:
        return None
    return " ".join(BeautifulSoup(html, "html.parser").get_text(" ").split())


def _iso_date(entry: dict) -> str | None:
    """Render the entry's parsed date as ISO-8601 UTC, e.g. 2024-01-01T00:00:00.000Z."""
    for field in ("published_parsed", "updated_parsed"):
        time_struct = entry.get(field)
        if isinstance(time_struct, struct_time):
            try:
                dt = datetime.fromtimestamp(calendar.timegm(time_struct), tz=timezone.utc)
            except (ValueError, OverflowError):
                continue
            return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return None


def _enclosure_url(entry: dict) -> str | None:
    for enclosure in entry.get("enclosures") or []:
        url = enclosure.get("href") or enclosure.get("url")
        if url:
            return url
    return None
