"""Tests for the per-source adapters, with upstream HTTP mocked by respx."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import respx

from seer.errors import InvalidSourceTypeError, UpstreamFetchError
from seer.ingestion.adapters import ADAPTERS, collect, get_adapter
from seer.ingestion.adapters import devto, github, hackernews, npm, reddit, rss
from seer.ingestion.http_client import HTTPClient, RetryConfig
from seer.sources.schemas import SourceType
from tests.test_ingestion.conftest import RSS_FEED, make_source

NO_RETRY = RetryConfig(max_retries=0)


def _recent(days: int = 1) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat().replace("+00:00", "Z")


class TestRegistry:
    def test_every_source_type_has_an_adapter(self):
        assert set(ADAPTERS) == set(SourceType)

    def test_get_adapter_accepts_strings(self):
        assert get_adapter("rss") is rss.SPEC

    def test_unknown_type(self):
        with pytest.raises(InvalidSourceTypeError):
            get_adapter("gopher")


class TestHackerNews:
    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_and_transform(self):
        route = respx.get(hackernews.SEARCH_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "hits": [
                        {
                            "objectID": "39000001",
                            "title": "Ask HN: Is there a better way to track invoices?",
                            "story_text": "<p>I'm <i>frustrated</i> with spreadsheets</p>",
                            "author": "alice",
                            "points": 120,
                            "num_comments": 45,
                            "created_at": "2024-01-02T10:00:00.000Z",
                        },
                        {
                            "objectID": "39000002",
                            "title": "Show HN: Tiny CRM",
                            "url": "https://tinycrm.example.com",
                            "points": None,
                            "created_at": "2024-01-02T11:00:00.000Z",
                        },
                    ]
                },
            )
        )
        source = make_source(SourceType.HACKERNEWS, config={"queries": ["looking for"]})

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(hackernews.SPEC, source, client)

        params = route.calls.last.request.url.params
        assert params["query"] == "looking for"
        assert params["tags"] == "story"
        assert params["numericFilters"].startswith("created_at_i>")

        first, second = result.items
        assert first.external_id == "39000001"
        assert first.url == "https://news.ycombinator.com/item?id=39000001"
        assert first.body == "I'm frustrated with spreadsheets"
        assert first.metadata["points"] == 120
        assert first.published_at == datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)
        assert second.body == "https://tinycrm.example.com"
        assert second.metadata["points"] == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_one_failing_query_is_skipped(self):
        def side_effect(request):
            if request.url.params["query"] == "broken":
                return httpx.Response(400, text="bad query")
            return httpx.Response(200, json={"hits": [{"objectID": "1", "title": "Looking for a tool"}]})

        respx.get(hackernews.SEARCH_URL).mock(side_effect=side_effect)
        source = make_source(SourceType.HACKERNEWS, config={"queries": "broken, looking for"})

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(hackernews.SPEC, source, client)

        assert [i.external_id for i in result.items] == ["1"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_all_queries_failing_fails_source(self):
        respx.get(hackernews.SEARCH_URL).mock(return_value=httpx.Response(503))
        source = make_source(SourceType.HACKERNEWS, config={"queries": ["a", "b"]})

        async with HTTPClient(NO_RETRY) as client:
            with pytest.raises(UpstreamFetchError, match="All 2 hackernews requests failed"):
                await collect(hackernews.SPEC, source, client)


class TestGitHub:
    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_with_token(self):
        route = respx.get(github.SEARCH_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "items": [
                        {
                            "id": 101,
                            "full_name": "acme/deploy-bot",
                            "description": None,
                            "html_url": "https://github.com/acme/deploy-bot",
                            "stargazers_count": 340,
                            "forks_count": 12,
                            "open_issues_count": 3,
                            "language": "Go",
                            "topics": ["devops", "cli"],
                            "pushed_at": "2024-01-02T09:00:00Z",
                        }
                    ]
                },
            )
        )
        source = make_source(SourceType.GITHUB, config={"queries": ["stars:>10"], "token": "ghp_x"})

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(github.SPEC, source, client)

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer ghp_x"
        item = result.items[0]
        assert item.external_id == "101"
        assert item.title == "acme/deploy-bot"
        assert item.body == "Repository: acme/deploy-bot devops cli"
        assert item.metadata["stars"] == 340

    def test_default_queries_use_last_week(self):
        queries = github.default_queries(datetime(2024, 1, 8, tzinfo=timezone.utc))

        assert queries[0] == "stars:>10 created:>2024-01-01"


class TestNpm:
    @pytest.mark.asyncio
    @respx.mock
    async def test_skips_stale_packages(self):
        respx.get(npm.SEARCH_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "objects": [
                        {
                            "package": {
                                "name": "fresh-cli",
                                "version": "1.2.0",
                                "description": "A new CLI",
                                "keywords": ["cli"],
                                "date": _recent(2),
                                "links": {"npm": "https://www.npmjs.com/package/fresh-cli"},
                            },
                            "score": {"final": 0.7},
                        },
                        {
                            "package": {
                                "name": "old-lib",
                                "version": "0.1.0",
                                "date": _recent(90),
                            }
                        },
                    ]
                },
            )
        )
        source = make_source(SourceType.NPM, config={"queries": ["cli"]})

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(npm.SPEC, source, client)

        assert [i.external_id for i in result.items] == ["fresh-cli"]
        assert result.items[0].body == "A new CLI cli"
        assert result.items[0].metadata["search_score"] == 0.7

    def test_transform_fallback_description_and_url(self):
        source = make_source(SourceType.NPM)

        item = npm.transform(source, {"package": {"name": "bare", "version": "0.0.1"}})

        assert item.body == "npm package: bare v0.0.1"
        assert item.url == "https://www.npmjs.com/package/bare"

    @pytest.mark.asyncio
    @respx.mock
    async def test_bad_date_drops_only_that_package(self):
        respx.get(npm.SEARCH_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "objects": [
                        {"package": {"name": "good-pkg", "version": "1.0.0", "date": _recent(1)}},
                        {"package": {"name": "bad-pkg", "version": "1.0.0", "date": "not-a-date"}},
                    ]
                },
            )
        )
        source = make_source(SourceType.NPM, config={"queries": ["cli"]})

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(npm.SPEC, source, client)

        assert [i.external_id for i in result.items] == ["good-pkg"]
        assert result.stats.errors == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_unexpected_payload_skips_query(self):
        def side_effect(request):
            if request.url.params["text"] == "broken":
                return httpx.Response(200, json=["not", "an", "object"])
            return httpx.Response(
                200,
                json={"objects": [{"package": {"name": "ok-pkg", "date": _recent(1)}}]},
            )

        respx.get(npm.SEARCH_URL).mock(side_effect=side_effect)
        source = make_source(SourceType.NPM, config={"queries": ["broken", "cli"]})

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(npm.SPEC, source, client)

        assert [i.external_id for i in result.items] == ["ok-pkg"]

    def test_transform_filters_stale_package(self):
        source = make_source(SourceType.NPM, config={"max_age_days": 3})

        assert npm.transform(source, {"package": {"name": "old", "date": _recent(10)}}) is None


class TestDevTo:
    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_by_tag(self):
        route = respx.get(devto.ARTICLES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "id": 555,
                        "title": "I built a self-hosted alternative to Notion",
                        "description": "Weekend project",
                        "url": "https://dev.to/bob/notion-alt",
                        "published_at": _recent(1),
                        "public_reactions_count": 33,
                        "comments_count": 4,
                        "tag_list": "showdev, selfhosted",
                        "user": {"username": "bob"},
                    }
                ],
            )
        )
        source = make_source(SourceType.DEVTO, config={"tags": ["showdev"]})

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(devto.SPEC, source, client)

        assert route.calls.last.request.url.params["tag"] == "showdev"
        item = result.items[0]
        assert item.external_id == "555"
        assert item.metadata["reactions"] == 33
        assert item.metadata["tags"] == ["showdev", "selfhosted"]
        assert item.metadata["author"] == "bob"

    @pytest.mark.asyncio
    @respx.mock
    async def test_bad_date_drops_only_that_article(self):
        respx.get(devto.ARTICLES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[
                    {"id": 1, "title": "Show: my tool", "published_at": _recent(1)},
                    {"id": 2, "title": "Broken date", "published_at": "yesterday-ish"},
                    {"id": 3, "title": "Old news", "published_at": _recent(30)},
                ],
            )
        )
        source = make_source(SourceType.DEVTO, config={"tags": ["showdev"]})

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(devto.SPEC, source, client)

        assert [i.external_id for i in result.items] == ["1"]
        assert result.stats.errors == 1
        assert result.stats.items_filtered == 1


class TestReddit:
    def test_transform_skips_stickied(self):
        source = make_source(SourceType.REDDIT)

        assert reddit.transform(source, {"id": "x", "title": "Rules", "stickied": True}) is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_listing(self):
        respx.get("https://www.reddit.com/r/SaaS/new.json").mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": {
                        "children": [
                            {
                                "data": {
                                    "id": "abc",
                                    "title": "Would pay for a better churn dashboard",
                                    "selftext": "x" * 600,
                                    "permalink": "/r/SaaS/comments/abc/",
                                    "created_utc": 1704189600,
                                    "subreddit": "SaaS",
                                    "score": 77,
                                    "num_comments": 21,
                                }
                            }
                        ]
                    }
                },
            )
        )
        source = make_source(SourceType.REDDIT, config={"subreddits": ["SaaS"]})

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(reddit.SPEC, source, client)

        item = result.items[0]
        assert item.url == "https://reddit.com/r/SaaS/comments/abc/"
        assert len(item.body) == 503
        assert item.published_at == datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)


class TestRss:
    @pytest.mark.asyncio
    @respx.mock
    async def test_parses_feed(self, rss_source):
        respx.get("https://example.com/feed.xml").mock(
            return_value=httpx.Response(200, content=RSS_FEED)
        )

        async with HTTPClient(NO_RETRY) as client:
            result = await collect(rss.SPEC, rss_source, client)

        assert len(result.items) == 2
        assert result.stats.items_filtered == 1
        first = result.items[0]
        assert first.external_id == "https://example.com/posts/1"
        assert "frustrated" in first.body
        assert "<b>" not in first.body
        assert first.published_at == datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)
        assert result.items[1].external_id == "https://example.com/posts/2"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unreachable_feed_fails_source(self, rss_source):
        respx.get("https://example.com/feed.xml").mock(return_value=httpx.Response(404))

        async with HTTPClient(NO_RETRY) as client:
            with pytest.raises(UpstreamFetchError):
                await collect(rss.SPEC, rss_source, client)

    @pytest.mark.asyncio
    @respx.mock
    async def test_garbage_feed_fails_source(self, rss_source):
        respx.get("https://example.com/feed.xml").mock(
            return_value=httpx.Response(200, content=b"\x00not a feed at all<<<")
        )

        async with HTTPClient(NO_RETRY) as client:
            with pytest.raises(UpstreamFetchError):
                await collect(rss.SPEC, rss_source, client)

    @pytest.mark.asyncio
    async def test_missing_url_fails_source(self):
        source = make_source(SourceType.RSS, url=None)

        async with HTTPClient(NO_RETRY) as client:
            with pytest.raises(UpstreamFetchError, match="no feed URL"):
                await collect(rss.SPEC, source, client)

    def test_entry_id_falls_back_to_hash(self):
        entry = {"title": "Untitled", "published": "Tue, 02 Jan 2024 10:00:00 GMT"}

        first = rss.entry_id(entry)

        assert first == rss.entry_id(dict(entry))
        assert len(first) == 16
