"""Turn parsed RSS 2.0 / Atom documents into flat lists of NewsItem."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union
from xml.etree import ElementTree as ET
import logging
import re

from bs4 import BeautifulSoup
from dateutil import parser as dateutil_parser

from .news_types import FeedDocument, NewsItem, NO_DESCRIPTION

logger = logging.getLogger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"
MEDIA_NS = "http://search.yahoo.com/mrss/"
DC_NS = "http://purl.org/dc/elements/1.1/"

ATOM = f"{{{ATOM_NS}}}"
MEDIA = f"{{{MEDIA_NS}}}"

_WHITESPACE_RE = re.compile(r"\s+")

# Zone names allowed in RFC 822 dates that dateutil does not know on its own.
RFC822_ZONES = {
    "UT": 0,
    "EST": -5 * 3600, "EDT": -4 * 3600,
    "CST": -6 * 3600, "CDT": -5 * 3600,
    "MST": -7 * 3600, "MDT": -6 * 3600,
    "PST": -8 * 3600, "PDT": -7 * 3600,
}

# Two unrelated fallback dates: a value that parses differently against
# them was missing a date field.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def _collapse(text: str | None) -> str:
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def _text(el: Optional[ET.Element]) -> Optional[str]:
    if el is None:
        return None
    value = _collapse("".join(el.itertext()))
    return value or None


def _markup(el: Optional[ET.Element]) -> Optional[str]:
    """Raw inner markup of an element: escaped text, CDATA or inline xhtml children."""
    if el is None:
        return None
    if len(el):
        parts = [el.text or ""]
        parts.extend(ET.tostring(child, encoding="unicode") for child in el)
        return "".join(parts)
    return el.text


def _attr(el: Optional[ET.Element], name: str) -> Optional[str]:
    if el is None:
        return None
    value = (el.get(name) or "").strip()
    return value or None


def strip_html(raw: str | None) -> str:
    if not raw:
        return ""
    text = raw
    if "<" in text or "&" in text:
        text = BeautifulSoup(text, "html.parser").get_text()
    return _collapse(text)


def clean_description(raw: str | None) -> str:
    return strip_html(raw) or NO_DESCRIPTION


def parse_date(text: str | None) -> Optional[datetime]:
    """Parse an RFC 822 or ISO 8601 feed date. Unparsable input gives None.

    Values missing a year, month or day are rejected instead of being
    completed from a default date.
    """
    value = (text or "").strip()
    if not value:
        return None
    try:
        parsed = dateutil_parser.parse(value, default=_DEFAULT_A, tzinfos=RFC822_ZONES)
        check = dateutil_parser.parse(value, default=_DEFAULT_B, tzinfos=RFC822_ZONES)
    except (ValueError, OverflowError) as e:
        logger.debug("Unparsable date %r: %s", value, e)
        return None
    if parsed != check:
        logger.debug("Incomplete date %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _is_img(tag) -> bool:
    # inline xhtml content serializes as <html:img>
    return tag.name.rsplit(":", 1)[-1] == "img" and bool((tag.get("src") or "").strip())


def first_img_src(markup: str | None) -> Optional[str]:
    if not markup or "<" not in markup:
        return None
    img = BeautifulSoup(markup, "html.parser").find(_is_img)
    return img.get("src").strip() if img else None


def _enclosure_url(item: ET.Element) -> Optional[str]:
    url = _attr(item.find("enclosure"), "url")
    if url:
        return url
    # Atom enclosures are links; only image ones count
    for link in item.findall(f"{ATOM}link"):
        if link.get("rel") == "enclosure" and (link.get("type") or "").startswith("image/") and _attr(link, "href"):
            return _attr(link, "href")
    return None


def extract_image(item: ET.Element, description_markup: str | None, content_markup: str | None = None) -> Optional[str]:
    media = item.find(f".//{MEDIA}content[@url]")
    url = _attr(media, "url")
    if url:
        return url
    url = _enclosure_url(item)
    if url:
        return url
    return first_img_src(description_markup) or first_img_src(content_markup)


def _make_item(title, link, description_markup, date_text, source_feed, image_url) -> Optional[NewsItem]:
    if not title or not link:
        logger.debug("Dropping entry without title/link in %s (title=%r, link=%r)", source_feed, title, link)
        return None
    return NewsItem(
        title=title,
        link=link,
        description=clean_description(description_markup),
        published_at=parse_date(date_text),
        source_feed=source_feed,
        image_url=image_url,
    )


def _rss_item(item: ET.Element, source_feed: str) -> Optional[NewsItem]:
    description = _markup(item.find("description"))
    date_text = _text(item.find("pubDate")) or _text(item.find(f"{{{DC_NS}}}date"))
    return _make_item(
        title=_text(item.find("title")),
        link=_text(item.find("link")),
        description_markup=description,
        date_text=date_text,
        source_feed=source_feed,
        image_url=extract_image(item, description),
    )


def _atom_link(entry: ET.Element) -> Optional[str]:
    links = entry.findall(f"{ATOM}link")
    for link in links:
        if link.get("rel", "alternate") == "alternate" and _attr(link, "href"):
            return _attr(link, "href")
    for link in links:
        href = _attr(link, "href")
        if href:
            return href
    return None


def _atom_entry(entry: ET.Element, source_feed: str) -> Optional[NewsItem]:
    summary = _markup(entry.find(f"{ATOM}summary"))
    content = _markup(entry.find(f"{ATOM}content"))
    date_text = _text(entry.find(f"{ATOM}published")) or _text(entry.find(f"{ATOM}updated"))
    return _make_item(
        title=_text(entry.find(f"{ATOM}title")),
        link=_atom_link(entry),
        description_markup=summary if summary and summary.strip() else content,
        date_text=date_text,
        source_feed=source_feed,
        image_url=extract_image(entry, summary, content),
    )


def _find_channel(root: ET.Element) -> Optional[ET.Element]:
    if root.tag == "channel":
        return root
    if root.tag == "rss":
        return root.find("channel")
    return None


def normalize_document(root: Optional[ET.Element], source_feed: str = "", max_items: int = 0) -> List[NewsItem]:
    """Extract every usable item of one feed, in document order.

    Unknown root elements produce an empty list. Entries that fail to
    normalize are logged and skipped without affecting their siblings.
    """
    if root is None:
        return []

    channel = _find_channel(root)
    if channel is not None:
        raw_items, convert = channel.findall("item"), _rss_item
    elif root.tag == f"{ATOM}feed":
        raw_items, convert = root.findall(f"{ATOM}entry"), _atom_entry
    else:
        logger.warning("Unrecognized feed root <%s> in %s; skipping", root.tag, source_feed or "document")
        return []

    if max_items and max_items > 0:
        raw_items = raw_items[:max_items]

    items: List[NewsItem] = []
    for raw in raw_items:
        try:
            item = convert(raw, source_feed)
        except Exception as e:
            logger.warning("Skipping malformed entry in %s: %s", source_feed or "document", e)
            continue
        if item is not None:
            items.append(item)
    logger.debug("Normalized %d/%d entries from %s", len(items), len(raw_items), source_feed or "document")
    return items


def normalize_documents(
    documents: Iterable[Union[FeedDocument, ET.Element, None]],
    max_items_per_feed: int = 0,
) -> List[NewsItem]:
    """Concatenate normalized items feed by feed, keeping the given feed order."""
    items: List[NewsItem] = []
    for doc in documents:
        if isinstance(doc, FeedDocument):
            root, source = doc.root, doc.url
        else:
            root, source = doc, ""
        try:
            items.extend(normalize_document(root, source_feed=source, max_items=max_items_per_feed))
        except Exception as e:
            logger.warning("Failed to normalize feed %s: %s", source or "document", e)
    return items


def parse_feed_bytes(data: Union[bytes, str]) -> ET.Element:
    return ET.fromstring(data)
