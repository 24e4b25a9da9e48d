from datetime import datetime, timedelta, timezone

import pytest

from feedcluster.news_types import NewsItem


NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_item():
    counter = {"n": 0}

    def _make(title="Title", description="Body", link=None, hours_ago=None, source_feed="https://feed.example/rss"):
        counter["n"] += 1
        published = NOW - timedelta(hours=hours_ago) if hours_ago is not None else None
        return NewsItem(
            title=title,
            link=link or f"https://news.example/{counter['n']}",
            description=description,
            published_at=published,
            source_feed=source_feed,
        )

    return _make
