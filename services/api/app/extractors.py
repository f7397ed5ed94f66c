import httpx
from bs4 import BeautifulSoup
from typing import List, Optional
from .config import settings
from .models import RawEntry
from .utils import normalize_whitespace

# RSS/Atom is parsed with the standard library XML parser; BeautifulSoup is
# only used to flatten inline HTML into plain-text snippets.
import xml.etree.ElementTree as ET
import urllib.parse as up


class FeedFetchError(Exception):
    """Raised when no variant of a feed URL could be downloaded."""


def _client():
    return httpx.Client(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
        follow_redirects=True,
    )

def _rss_url_variants(url: str) -> List[str]:
    """Generate conservative URL variants for RSS endpoints.

    Some publishers intermittently refuse connections on certain schemes/hosts
    (e.g., HTTPS vs HTTP, with/without 'www'). We try a small, deterministic set
    of alternatives before failing. The original URL always comes first.
    """
    url = (url or "").strip()
    if not url:
        return []

    parts = up.urlsplit(url)
    scheme = (parts.scheme or "https").lower()
    netloc = parts.netloc or ""
    path = parts.path or ""
    query = parts.query or ""

    if not netloc:
        return [url]

    def with_netloc(nl: str, sch: Optional[str] = None) -> str:
        return up.urlunsplit(((sch or scheme), nl, path, query, ""))

    variants: List[str] = [url]

    host = netloc.split("@", 1)[-1]
    port = ""
    if ":" in host:
        host, port = host.rsplit(":", 1)
        port = ":" + port if port else ""
    host_l = host.lower()

    if scheme == "https":
        variants.append(with_netloc(netloc, sch="http"))
    elif scheme == "http":
        variants.append(with_netloc(netloc, sch="https"))

    # www flip
    h2 = host_l[4:] if host_l.startswith("www.") else "www." + host_l
    variants.append(with_netloc(h2 + port))
    variants.append(with_netloc(h2 + port, sch="http"))

    # Trailing slash variants (path-only)
    variants2: List[str] = []
    for v in variants:
        pv = up.urlsplit(v)
        variants2.append(v)
        p = pv.path or ""
        if not p.endswith("/"):
            variants2.append(up.urlunsplit((pv.scheme, pv.netloc, p + "/", pv.query, "")))

    out: List[str] = []
    seen: set[str] = set()
    for v in variants2:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out

def download_feed(url: str) -> bytes:
    last_err: Optional[Exception] = None
    with _client() as c:
        for u in _rss_url_variants(url):
            try:
                r = c.get(u)
                r.raise_for_status()
                return r.content
            except (httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout) as e:
                last_err = e
                continue
            except httpx.HTTPStatusError as e:
                # No point hammering variants on 4xx/5xx.
                last_err = e
                break
    raise FeedFetchError(f"RSS fetch failed: {url} ({last_err})")


def _strip_ns(tag: str) -> str:
    return tag.split('}', 1)[1] if tag.startswith('{') and '}' in tag else tag

def _raw_text(node: Optional[ET.Element]) -> Optional[str]:
    if node is None:
        return None
    return node.text or ""

def _find_child(parent: ET.Element, names: List[str]) -> Optional[ET.Element]:
    for ch in list(parent):
        if _strip_ns(ch.tag) in names:
            return ch
    return None

def _find_children(parent: ET.Element, name: str) -> List[ET.Element]:
    return [ch for ch in list(parent) if _strip_ns(ch.tag) == name]

def _first_text(parent: ET.Element, names: List[str]) -> Optional[str]:
    for name in names:
        val = _raw_text(_find_child(parent, [name]))
        if val:
            return val.strip()
    return None

def html_to_snippet(html: Optional[str]) -> Optional[str]:
    if not html:
        return None
    text = BeautifulSoup(html, "lxml").get_text(" ", strip=True)
    return normalize_whitespace(text) or None

def _entry_link(e: ET.Element) -> Optional[str]:
    # RSS <link>text</link>, Atom <link rel="alternate" href="..."/>
    for link_el in _find_children(e, "link"):
        rel = link_el.attrib.get("rel", "alternate")
        href = (link_el.attrib.get("href") or "").strip()
        if href and rel == "alternate":
            return href
        txt = (link_el.text or "").strip()
        if txt:
            return txt
    guid = _find_child(e, ["guid"])
    if guid is not None and guid.attrib.get("isPermaLink", "true") == "true":
        txt = (guid.text or "").strip()
        if txt.startswith("http"):
            return txt
    return None

def _parse_entry(e: ET.Element) -> RawEntry:
    title_el = _find_child(e, ["title"])
    title = normalize_whitespace(title_el.text or "") if title_el is not None else None

    # RSS keeps inline HTML in <description>; Atom in <content> or <summary>.
    content = _first_text(e, ["description", "content", "summary"])

    content_encoded = None
    for ch in list(e):
        if _strip_ns(ch.tag) == "encoded" and ch.text:
            content_encoded = ch.text.strip()
            break

    pub_date = _first_text(e, ["pubDate", "published", "updated", "date"])

    return {
        "link": _entry_link(e),
        "title": title,
        "snippet": html_to_snippet(content),
        "content": content,
        "content_encoded": content_encoded,
        "pub_date": pub_date,
    }

def parse_feed(data: bytes) -> List[RawEntry]:
    """Parse an RSS 2.0 / RSS 1.0 / Atom document into raw entries, in feed order.

    Raises xml.etree.ElementTree.ParseError on malformed XML.
    """
    root = ET.fromstring(data)
    root_tag = _strip_ns(root.tag)

    entries: List[ET.Element] = []
    if root_tag == "rss":
        channel = _find_child(root, ["channel"])
        entries = _find_children(channel if channel is not None else root, "item")
    elif root_tag == "feed":
        entries = _find_children(root, "entry")
    else:
        # RDF (RSS 1.0) keeps items beside the channel
        entries = _find_children(root, "item") or _find_children(root, "entry")

    return [_parse_entry(e) for e in entries]

def fetch_rss(url: str) -> List[RawEntry]:
    return parse_feed(download_feed(url))
