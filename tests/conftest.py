"""Shared test fixtures for crypto news aggregator tests."""

import httpx
import pytest


SAMPLE_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <link>https://example.com</link>
    <description>A test RSS feed</description>
    <item>
      <title>Bitcoin rally continues as ETF inflows surge</title>
      <link>https://example.com/article-1</link>
      <guid>article-1</guid>
      <description>Description of the &lt;b&gt;first&lt;/b&gt; article</description>
      <pubDate>Fri, 13 Feb 2026 10:00:00 GMT</pubDate>
      <enclosure url="https://example.com/img1.jpg" type="image/jpeg" length="1234"/>
    </item>
    <item>
      <title>Second Article</title>
      <link>https://example.com/article-2</link>
      <guid>article-2</guid>
      <description>Description of the second article</description>
      <pubDate>Fri, 13 Feb 2026 09:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

SAMPLE_ATOM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Test Atom Feed</title>
  <link href="https://example.com"/>
  <subtitle>A test Atom feed</subtitle>
  <entry>
    <title>Atom Entry 1</title>
    <link href="https://example.com/entry-1"/>
    <id>urn:uuid:entry-1</id>
    <summary>Summary of entry 1</summary>
    <updated>2026-02-13T10:00:00Z</updated>
  </entry>
</feed>"""

SAMPLE_MALFORMED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Malformed Feed</title>
    <link>https://example.com</link>
    <item>
      <title>Good Item</title>
      <guid>good-item</guid>
    </item>
    <item>
      <title>Bad Item</title>
      <!-- Missing closing tags intentionally -->
"""

SAMPLE_NOT_A_FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<html>
  <body>This is not a feed</body>
</html>"""


def build_rss(title: str | None, items: list[dict]) -> str:
    """Render a minimal RSS 2.0 document.

    Each item dict may carry title, link, description and pubDate.
    """
    parts = ['<?xml version="1.0" encoding="UTF-8"?>', '<rss version="2.0">', "<channel>"]
    if title is not None:
        parts.append(f"<title>{title}</title>")
    for item in items:
        parts.append("<item>")
        for tag in ("title", "link", "description", "pubDate"):
            if item.get(tag) is not None:
                parts.append(f"<{tag}>{item[tag]}</{tag}>")
        parts.append("</item>")
    parts.extend(["</channel>", "</rss>"])
    return "\n".join(parts)


@pytest.fixture
def sample_rss_xml():
    """Sample valid RSS 2.0 XML."""
    return SAMPLE_RSS_XML


@pytest.fixture
def sample_atom_xml():
    """Sample valid Atom XML."""
    return SAMPLE_ATOM_XML


@pytest.fixture
def sample_malformed_xml():
    """Sample malformed RSS XML."""
    return SAMPLE_MALFORMED_XML


@pytest.fixture
def sample_not_a_feed_xml():
    """Sample XML that is not a feed."""
    return SAMPLE_NOT_A_FEED_XML


@pytest.fixture
def make_client():
    """Build an httpx.AsyncClient whose responses come from a URL -> route map.

    A route is either a payload string (served with status 200), an
    httpx.Response, or an exception instance to raise.
    """

    def _make(routes: dict) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            route = routes.get(str(request.url))
            if route is None:
                return httpx.Response(404, text="not found")
            if isinstance(route, Exception):
                raise route
            if isinstance(route, httpx.Response):
                return route
            return httpx.Response(200, text=route)

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
