import re
import base64
from typing import Optional

_TIBETAN_RE = re.compile(r"[\u0F00-\u0FFF]")
_IMG_SRC_RE = re.compile(r'<img[^>]+src="([^">]+)"')

def detect_language(text: Optional[str]) -> str:
    """Coarse language tag: "bo" when any Tibetan-block character is present, else "en"."""
    if not text:
        return "en"
    return "bo" if _TIBETAN_RE.search(text) else "en"

def extract_image(html: Optional[str]) -> Optional[str]:
    """First ``<img src="...">`` in an HTML fragment.

    Pattern match only; malformed markup simply yields no match.
    """
    if not html:
        return None
    m = _IMG_SRC_RE.search(html)
    return m.group(1) if m else None

def article_id(prefix: str, url: str) -> str:
    return f"{prefix}-{base64.b64encode(url.encode('utf-8')).decode('ascii')}"

def normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()
