from __future__ import annotations

"""Published article snapshot.

The snapshot is the only state shared between the refresh job and the HTTP
readers. It is an immutable value and is replaced by a single attribute
assignment, so a reader holding a reference always sees one complete cycle.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from .models import Article


@dataclass(frozen=True)
class Snapshot:
    articles: Tuple[Article, ...] = ()
    refreshed_at: Optional[str] = None
    per_source: Dict[str, int] = field(default_factory=dict)


EMPTY_SNAPSHOT = Snapshot()


class ArticleStore:
    def __init__(self) -> None:
        self._snapshot: Snapshot = EMPTY_SNAPSHOT

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def articles(self) -> Tuple[Article, ...]:
        return self._snapshot.articles

    def publish(self, articles: Iterable[Article]) -> Snapshot:
        items = tuple(articles)
        per_source: Dict[str, int] = {}
        for a in items:
            per_source[a.source] = per_source.get(a.source, 0) + 1
        snap = Snapshot(
            articles=items,
            refreshed_at=dt.datetime.now(dt.timezone.utc).replace(microsecond=0).isoformat(),
            per_source=per_source,
        )
        self._snapshot = snap
        return snap
