import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Iterable, List, Optional, Sequence, Set

from .config import settings
from .models import Article
from .sources import SOURCES
from .sources.base import RssSource
from .store import ArticleStore, Snapshot

logger = logging.getLogger(__name__)

def deduplicate(articles: Iterable[Article]) -> List[Article]:
    """Drop later articles whose source_url was already seen; order is preserved."""
    seen: Set[str] = set()
    out: List[Article] = []
    for a in articles:
        if a.source_url in seen:
            continue
        seen.add(a.source_url)
        out.append(a)
    return out


class Aggregator:
    """Runs every source once per cycle and publishes the merged, deduplicated result."""

    def __init__(
        self,
        sources: Optional[Sequence[RssSource]] = None,
        store: Optional[ArticleStore] = None,
        *,
        max_workers: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.sources = list(SOURCES if sources is None else sources)
        self.store = store or ArticleStore()
        self.max_workers = max(1, int(max_workers or settings.fetch_concurrency))
        self.timeout = settings.source_timeout if timeout is None else timeout

    def collect(self) -> List[List[Article]]:
        """Fetch all sources concurrently; results come back in configuration order."""
        if not self.sources:
            return []

        ex = ThreadPoolExecutor(max_workers=min(self.max_workers, len(self.sources)))
        try:
            futs = [ex.submit(s.fetch_items) for s in self.sources]
            wait(futs, timeout=self.timeout)

            results: List[List[Article]] = []
            for s, fut in zip(self.sources, futs):
                name = s.config.name
                if not fut.done():
                    logger.error("%s RSS error: timed out after %.0fs", name, self.timeout)
                    results.append([])
                    continue
                try:
                    results.append(list(fut.result()))
                except Exception as e:
                    logger.error("%s RSS error: %s", name, e)
                    results.append([])
            return results
        finally:
            # Stuck fetches keep their thread until httpx times out; don't wait for them.
            ex.shutdown(wait=False, cancel_futures=True)

    def run_cycle(self) -> Snapshot:
        logger.info("Scraping all sources...")
        combined: List[Article] = []
        for items in self.collect():
            combined.extend(items)

        snap = self.store.publish(deduplicate(combined))
        logger.info("Total scraped: %d", len(snap.articles))
        return snap
