from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple
from xml.etree.ElementTree import Element


NO_DESCRIPTION = "No description available"
DATE_NOT_AVAILABLE = "date not available"

DEFAULT_THRESHOLD = 50
HIGH_THRESHOLD = 6
MEDIUM_THRESHOLD = 4


class Tier(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class NewsItem:
    title: str
    link: str
    description: str = NO_DESCRIPTION
    published_at: Optional[datetime] = None
    source_feed: str = ""
    image_url: Optional[str] = None


@dataclass(frozen=True)
class FeedDocument:
    url: str
    root: Optional[Element] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class Cluster:
    """A finished group of items reporting the same story.

    ``anchor`` is the first-seen member and is what later items were compared
    against; ``representative`` is the most recently dated member and is what
    gets displayed.
    """
    anchor: NewsItem
    members: Tuple[NewsItem, ...]
    representative: NewsItem

    @property
    def size(self) -> int:
        return len(self.members)

    @classmethod
    def singleton(cls, item: NewsItem) -> "Cluster":
        return cls(anchor=item, members=(item,), representative=item)


@dataclass(frozen=True)
class RankedEntry:
    item: NewsItem
    repeat_count: int
    tier: Optional[Tier] = None
    other_links: Tuple[str, ...] = ()
    time_label: str = DATE_NOT_AVAILABLE

    @property
    def is_repeated(self) -> bool:
        return self.repeat_count > 1

    @property
    def light_text(self) -> bool:
        # HIGH rows get a dark background in the report
        return self.tier is Tier.HIGH

    @property
    def title(self) -> str:
        return self.item.title

    @property
    def description(self) -> str:
        return self.item.description

    @property
    def link(self) -> str:
        return self.item.link

    @property
    def published_at(self) -> Optional[datetime]:
        return self.item.published_at

    @property
    def image_url(self) -> Optional[str]:
        return self.item.image_url


@dataclass
class RankedOutput:
    repeated: List[RankedEntry] = field(default_factory=list)
    unique: List[RankedEntry] = field(default_factory=list)

    @property
    def all_entries(self) -> List[RankedEntry]:
        return self.repeated + self.unique

    def __len__(self) -> int:
        return len(self.repeated) + len(self.unique)
