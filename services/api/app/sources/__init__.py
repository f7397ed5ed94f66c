from __future__ import annotations

from typing import Dict, List

from .base import SourceConfig, SourceParser, RssSource

# Publisher table. Order matters: it is the aggregation order, and the first
# source to carry a given link wins deduplication.
SOURCES: List[RssSource] = [
    RssSource(SourceConfig(
        name="Phayul", prefix="phayul", url="https://www.phayul.com/feed/",
        category="tibet", region="diaspora", fallback_title="Untitled",
    )),
    RssSource(SourceConfig(
        name="RFA Tibetan", prefix="rfa", url="https://www.rfa.org/tibetan/rss",
        category="tibet", region="global",
    )),
    RssSource(SourceConfig(
        name="VOA Tibetan", prefix="voa", url="https://www.voatibetan.com/rss?tab=all",
        category="tibet", region="global",
    )),
    RssSource(SourceConfig(
        name="CTA", prefix="cta", url="https://tibet.net/feed/",
        category="government", region="tibet",
    )),
    RssSource(SourceConfig(
        name="Tibet Sun", prefix="tibetsun", url="https://www.tibetsun.com/feed/",
        category="tibet", region="global",
    )),
    RssSource(SourceConfig(
        name="Tibet Post International", prefix="tpi",
        url="https://www.thetibetpost.com/en?format=feed&type=rss",
        category="tibet", region="global",
    )),
    RssSource(SourceConfig(
        name="Tibetan Review", prefix="tibrev", url="https://www.tibetanreview.net/feed/",
        category="analysis", region="global",
    )),
    RssSource(SourceConfig(
        name="Dalai Lama Office", prefix="dl", url="https://www.dalailama.com/news/rss",
        category="spiritual", region="tibet",
    )),
    RssSource(SourceConfig(
        name="High Peaks Pure Earth", prefix="hppe", url="https://highpeakspureearth.com/feed/",
        category="analysis", region="global", content_field="content_encoded",
    )),
    RssSource(SourceConfig(
        name="Tibet Express", prefix="texpress", url="https://tibetexpress.net/feed/",
        category="tibet", region="diaspora",
    )),
]

# Registry keyed by source name
REGISTRY: Dict[str, SourceParser] = {s.config.name: s for s in SOURCES}

def list_source_names() -> List[str]:
    return list(REGISTRY.keys())

def get_parser(source_name: str) -> SourceParser:
    try:
        return REGISTRY[source_name]
    except KeyError:
        raise KeyError(f"Unknown source: {source_name}")
