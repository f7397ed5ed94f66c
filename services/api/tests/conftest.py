from __future__ import annotations

from typing import List, Optional

import pytest

from app.models import Article
from app.sources.base import SourceConfig


def make_article(url: str, source: str = "Test", **overrides) -> Article:
    fields = dict(
        id=f"test-{url}",
        title="Title",
        excerpt="",
        image_url=None,
        source=source,
        source_url=url,
        category="tibet",
        region="global",
        published_at=None,
        scraped_at="2024-01-01T00:00:00+00:00",
        language="en",
    )
    fields.update(overrides)
    return Article(**fields)


class FakeSource:
    """Stands in for RssSource: returns canned articles or raises."""

    def __init__(self, name: str, articles: Optional[List[Article]] = None, error: Optional[Exception] = None):
        self.config = SourceConfig(name=name, prefix=name.lower(), url=f"http://{name.lower()}.test/feed",
                                   category="tibet", region="global")
        self.articles = articles or []
        self.error = error
        self.calls = 0

    def fetch_items(self) -> List[Article]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.articles)


@pytest.fixture
def rss_xml() -> bytes:
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example</title>
    <item>
      <title>First story</title>
      <link>https://example.com/1</link>
      <description><![CDATA[<p>Hello <b>world</b></p><img class="x" src="https://example.com/a.jpg" />]]></description>
      <content:encoded><![CDATA[<figure><img src="https://example.com/full.jpg"></figure>]]></content:encoded>
      <pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>བོད་ཀྱི་གསར་འགྱུར།</title>
      <link>https://example.com/2</link>
    </item>
    <item>
      <description>no link here</description>
    </item>
  </channel>
</rss>
""".encode("utf-8")
