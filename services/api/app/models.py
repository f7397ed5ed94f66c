from __future__ import annotations

"""Shared lightweight types.

Feed entries travel from the extractor to the sources as plain dicts
(`RawEntry`); sources turn them into immutable `Article` records.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

# Keys: link, title, snippet, content, content_encoded, pub_date (None when absent).
RawEntry = Dict[str, Any]


class Article(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: Optional[str] = None
    excerpt: str = ""
    image_url: Optional[str] = None
    source: str
    source_url: str
    category: str
    region: str
    published_at: Optional[str] = None
    scraped_at: str
    language: str


class ArticlesOut(BaseModel):
    articles: List[Article]
