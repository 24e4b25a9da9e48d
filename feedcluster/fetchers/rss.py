from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional
from xml.etree.ElementTree import ParseError
import logging

import requests

from ..news_types import FeedDocument
from ..normalize import parse_feed_bytes

logger = logging.getLogger(__name__)

USER_AGENT = "feedcluster/0.1 (rss-fetcher)"


def fetch_document(url: str, session: Optional[requests.Session] = None, timeout: int = 15) -> FeedDocument:
    """Download and parse one feed. Failures give a document without a root."""
    http = session or requests
    try:
        r = http.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
        r.raise_for_status()
        root = parse_feed_bytes(r.content)
    except requests.RequestException as e:
        logger.warning("[RSS] Error fetching %s: %s", url, e)
        return FeedDocument(url=url, error=f"fetch failed: {e}")
    except ParseError as e:
        logger.warning("[RSS] Malformed XML from %s: %s", url, e)
        return FeedDocument(url=url, error=f"parse failed: {e}")
    except Exception as e:
        logger.warning("[RSS] Unexpected error reading %s: %s", url, e)
        return FeedDocument(url=url, error=f"failed: {e}")
    return FeedDocument(url=url, root=root)


def fetch_documents(urls: Iterable[str], timeout: int = 15, max_workers: int = 4) -> List[FeedDocument]:
    """Fetch feeds concurrently; results come back in the order of ``urls``.

    Each call goes through ``requests.get`` so no session is shared
    between worker threads.
    """
    targets = [u.strip() for u in urls if u and u.strip()]
    if not targets:
        return []
    with ThreadPoolExecutor(max_workers=max(1, int(max_workers or 1))) as pool:
        documents = list(pool.map(lambda u: fetch_document(u, timeout=timeout), targets))
    failed = sum(1 for d in documents if d.root is None)
    logger.info("[RSS] Fetched %d feeds (%d failed)", len(documents), failed)
    return documents
