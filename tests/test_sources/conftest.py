"""Shared fixtures for sources tests."""

import pytest

from seer.sources.schemas import Source, SourceType
from tests.conftest import make_source_row


@pytest.fixture
def sample_source() -> Source:
    """A user RSS source for testing."""
    return Source(
        type=SourceType.RSS,
        name="HN",
        url="https://hnrss.org/newest",
        config={"max_entries": 20},
    )


@pytest.fixture
def sample_db_row() -> dict:
    return make_source_row()


@pytest.fixture
def builtin_db_row() -> dict:
    return make_source_row(
        source_id=2,
        type="hackernews",
        name="Hacker News",
        url=None,
        is_builtin=True,
    )
