"""Shared fixtures for ingestion tests."""

import pytest

from seer.sources.schemas import Source, SourceType


def make_source(
    type: SourceType,
    source_id: int = 1,
    name: str | None = None,
    url: str | None = None,
    config: dict | None = None,
) -> Source:
    return Source(
        id=source_id,
        type=type,
        name=name or type.value,
        url=url,
        config=config or {},
    )


@pytest.fixture
def rss_source() -> Source:
    return make_source(SourceType.RSS, url="https://example.com/feed.xml", name="Example")


RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example</title>
    <link>https://example.com</link>
    <description>Example feed</description>
    <item>
      <title>Looking for an alternative to Jira</title>
      <link>https://example.com/posts/1</link>
      <guid>https://example.com/posts/1</guid>
      <description>&lt;p&gt;Our team is &lt;b&gt;frustrated&lt;/b&gt; with slow tooling.&lt;/p&gt;</description>
      <pubDate>Tue, 02 Jan 2024 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Show: a tiny invoice generator</title>
      <link>https://example.com/posts/2</link>
      <description>Built over the weekend.</description>
      <pubDate>Tue, 02 Jan 2024 11:00:00 GMT</pubDate>
    </item>
    <item>
      <title></title>
      <link>https://example.com/posts/3</link>
    </item>
  </channel>
</rss>
"""
