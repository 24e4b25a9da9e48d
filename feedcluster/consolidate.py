from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple, Union
from xml.etree.ElementTree import Element
import logging

from .clustering import cluster_items, validate_threshold
from .news_types import (
    Cluster,
    DATE_NOT_AVAILABLE,
    DEFAULT_THRESHOLD,
    FeedDocument,
    HIGH_THRESHOLD,
    MEDIUM_THRESHOLD,
    NewsItem,
    RankedEntry,
    RankedOutput,
    Tier,
)
from .normalize import normalize_documents

logger = logging.getLogger(__name__)

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
MONTH = 30 * DAY
YEAR = 365 * DAY


def filter_items(items: List[NewsItem], include_keywords: Sequence[str] = (), exclude_domains: Sequence[str] = ()) -> List[NewsItem]:
    if not include_keywords and not exclude_domains:
        return items
    filtered: List[NewsItem] = []
    lower_keywords = [k.lower() for k in include_keywords]
    for item in items:
        link_lower = (item.link or "").lower()
        if any(dom.lower() in link_lower for dom in exclude_domains):
            continue
        if lower_keywords:
            text = f"{item.title} {item.description}".lower()
            if not any(k in text for k in lower_keywords):
                continue
        filtered.append(item)
    return filtered


def assign_tier(repeat_count: int) -> Optional[Tier]:
    if repeat_count >= HIGH_THRESHOLD:
        return Tier.HIGH
    if repeat_count >= MEDIUM_THRESHOLD:
        return Tier.MEDIUM
    if repeat_count > 1:
        return Tier.LOW
    return None


def _ago(n: int, unit: str) -> str:
    return f"{n} {unit} ago" if n == 1 else f"{n} {unit}s ago"


def relative_time(now: datetime, published_at: Optional[datetime]) -> str:
    if published_at is None:
        return DATE_NOT_AVAILABLE
    seconds = int((now - published_at).total_seconds())
    if seconds <= 1:
        return "just now"
    if seconds < MINUTE:
        return _ago(seconds, "second")
    if seconds < HOUR:
        return _ago(seconds // MINUTE, "minute")
    if seconds < DAY:
        return _ago(seconds // HOUR, "hour")
    if seconds < MONTH:
        return _ago(seconds // DAY, "day")
    if seconds < YEAR:
        return _ago(seconds // MONTH, "month")
    return _ago(seconds // YEAR, "year")


def _other_links(cluster: Cluster) -> Tuple[str, ...]:
    own = cluster.representative.link
    return tuple(m.link for m in cluster.members if m.link != own)


def _recency_key(entry: RankedEntry) -> Tuple[int, float]:
    published = entry.published_at
    if published is None:
        return (1, 0.0)
    return (0, -published.timestamp())


def make_entry(cluster: Cluster, now: datetime) -> RankedEntry:
    rep = cluster.representative
    return RankedEntry(
        item=rep,
        repeat_count=cluster.size,
        tier=assign_tier(cluster.size),
        other_links=_other_links(cluster) if cluster.size > 1 else (),
        time_label=relative_time(now, rep.published_at),
    )


def rank_clusters(clusters: Iterable[Cluster], now: datetime) -> RankedOutput:
    """Newest first, undated last, then split into repeated and unique stories.

    The sort is stable, so ranking an already ranked list again (as
    singleton clusters) keeps its order.
    """
    entries = sorted((make_entry(c, now) for c in clusters), key=_recency_key)
    output = RankedOutput()
    for entry in entries:
        (output.repeated if entry.is_repeated else output.unique).append(entry)
    return output


def process(
    feed_documents: Optional[Iterable[Union[FeedDocument, Element, None]]],
    threshold: float = DEFAULT_THRESHOLD,
    now: Optional[datetime] = None,
    include_keywords: Sequence[str] = (),
    exclude_domains: Sequence[str] = (),
    max_items_per_feed: int = 0,
) -> RankedOutput:
    """Normalize, cluster and rank a snapshot of parsed feeds.

    ``now`` must come from the caller; it is only used for the relative
    time labels. Feeds that failed to fetch or parse contribute no items.
    """
    if feed_documents is None:
        raise ValueError("feed_documents must be a sequence, got None")
    if now is None:
        raise ValueError("now must be supplied by the caller")
    threshold = validate_threshold(threshold)

    items = normalize_documents(feed_documents, max_items_per_feed=max_items_per_feed)
    items = filter_items(items, include_keywords, exclude_domains)
    clusters = cluster_items(items, threshold)
    output = rank_clusters(clusters, now)
    logger.info(
        "Processed %d items into %d repeated and %d unique stories",
        len(items), len(output.repeated), len(output.unique),
    )
    return output
