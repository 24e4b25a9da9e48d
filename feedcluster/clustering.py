from __future__ import annotations
from numbers import Real
from typing import Iterable, List, Optional
import logging

from .news_types import Cluster, DEFAULT_THRESHOLD, NewsItem
from .similarity import score

logger = logging.getLogger(__name__)


def validate_threshold(threshold) -> float:
    if isinstance(threshold, bool) or not isinstance(threshold, Real):
        raise ValueError(f"Similarity threshold must be a number between 0 and 100, got {threshold!r}")
    if not 0 <= threshold <= 100:
        raise ValueError(f"Similarity threshold must be between 0 and 100, got {threshold}")
    return float(threshold)


def _is_newer(candidate: NewsItem, current: NewsItem) -> bool:
    if candidate.published_at is None:
        return False
    if current.published_at is None:
        return True
    return candidate.published_at > current.published_at


class ClusterBuilder:
    """Mutable cluster used while the greedy pass is running."""

    def __init__(self, anchor: NewsItem):
        self.anchor = anchor
        self.members: List[NewsItem] = [anchor]
        self.representative = anchor

    def matches(self, item: NewsItem, threshold: float) -> bool:
        return score(self.anchor, item) >= threshold

    def add(self, item: NewsItem) -> None:
        self.members.append(item)
        if _is_newer(item, self.representative):
            self.representative = item

    def freeze(self) -> Cluster:
        return Cluster(anchor=self.anchor, members=tuple(self.members), representative=self.representative)


def cluster_items(items: Optional[Iterable[NewsItem]], threshold: float = DEFAULT_THRESHOLD) -> List[Cluster]:
    """Greedy single-pass clustering.

    Each item joins the first existing cluster (in creation order) whose
    anchor scores at least ``threshold`` against it, or starts a new one.
    The result depends on input order: the first item seen for a story
    anchors its cluster.
    """
    if items is None:
        raise ValueError("items must be a sequence of NewsItem, got None")
    threshold = validate_threshold(threshold)

    builders: List[ClusterBuilder] = []
    count = 0
    for item in items:
        count += 1
        for builder in builders:
            if builder.matches(item, threshold):
                builder.add(item)
                break
        else:
            builders.append(ClusterBuilder(item))

    clusters = [b.freeze() for b in builders]
    repeated = sum(1 for c in clusters if c.size > 1)
    logger.debug("Clustered %d items into %d clusters (%d repeated) at threshold %.0f", count, len(clusters), repeated, threshold)
    return clusters
