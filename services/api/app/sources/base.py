from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import List, Optional

from ..extractors import fetch_rss
from ..models import Article, RawEntry
from ..utils import article_id, detect_language, extract_image

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class SourceConfig:
    name: str
    prefix: str  # id prefix, unique per source
    url: str
    category: str  # "tibet" | "government" | "analysis" | "spiritual"
    region: str  # "diaspora" | "global" | "tibet"
    content_field: str = "content"  # raw entry key holding inline HTML
    fallback_title: Optional[str] = None  # None -> a missing title stays missing

class SourceParser:
    config: SourceConfig

    def __init__(self, config: SourceConfig):
        self.config = config


class RssSource(SourceParser):
    def fetch_items(self) -> List[Article]:
        """Fetch the feed and map every entry to an Article, in feed order.

        Never raises: a broken feed is logged and contributes nothing, so one
        publisher going down cannot take the snapshot with it.
        """
        name = self.config.name
        try:
            entries = fetch_rss(self.config.url)
        except Exception as e:
            logger.error("%s RSS error: %s", name, e)
            return []

        scraped_at = dt.datetime.now(dt.timezone.utc).isoformat()
        out: List[Article] = []
        for entry in entries:
            link = (entry.get("link") or "").strip()
            if not link:
                logger.warning("%s: skipping entry without link (title=%r)", name, entry.get("title"))
                continue
            out.append(self.to_article(entry, link=link, scraped_at=scraped_at))

        logger.info("%s scraped: %d", name, len(out))
        return out

    def to_article(self, entry: RawEntry, *, link: str, scraped_at: str) -> Article:
        cfg = self.config
        title = entry.get("title")
        if not title and cfg.fallback_title is not None:
            title = cfg.fallback_title
        return Article(
            id=article_id(cfg.prefix, link),
            title=title,
            excerpt=entry.get("snippet") or "",
            image_url=extract_image(entry.get(cfg.content_field)),
            source=cfg.name,
            source_url=link,
            category=cfg.category,
            region=cfg.region,
            published_at=entry.get("pub_date") or None,
            scraped_at=scraped_at,
            language=detect_language(title),
        )
