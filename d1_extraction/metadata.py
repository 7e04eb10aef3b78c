"""
Page metadata scraper

A pluggable chain of single-field extractors. Every extractor is run; for each
field the first extractor in chain order that returns a value wins. An
extractor that raises is logged and skipped.
"""
import json
from typing import Any, Dict, List, Optional, Protocol, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from core.logging import get_logger

from .base import collapse_whitespace, meta_content

logger = get_logger(__name__, domain="d1")

METADATA_FIELDS = ("title", "description", "author", "image", "publisher", "lang", "url", "logo")


class FieldExtractor(Protocol):
    """One capability in the metadata chain"""

    field: str

    def extract(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        ...


class MetaTagExtractor:
    """<meta name|property=key content=...>"""

    def __init__(self, field: str, *, name: Optional[str] = None, prop: Optional[str] = None, absolute: bool = False):
        self.field = field
        self.name = name
        self.prop = prop
        self.absolute = absolute

    def extract(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        value = meta_content(soup, name=self.name, prop=self.prop)
        if value and self.absolute:
            return urljoin(url, value)
        return value


class TitleTagExtractor:
    field = "title"

    def extract(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        if soup.title is None:
            return None
        return collapse_whitespace(soup.title.get_text()) or None


class FirstHeadingExtractor:
    field = "title"

    def extract(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        h1 = soup.find("h1")
        return (collapse_whitespace(h1.get_text(" ")) or None) if h1 else None


class LinkRelExtractor:
    """href of the first <link rel=...> matching any of ``rels``"""

    def __init__(self, field: str, rels: Sequence[str]):
        self.field = field
        self.rels = [r.lower() for r in rels]

    def extract(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        for link in soup.find_all("link", href=True):
            rel = link.get("rel") or []
            rel_values = [r.lower() for r in (rel if isinstance(rel, list) else rel.split())]
            if any(r in rel_values for r in self.rels):
                return urljoin(url, link["href"])
        return None


class HtmlLangExtractor:
    field = "lang"

    def extract(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        html = soup.find("html")
        lang = html.get("lang") if html else None
        return lang.strip() if isinstance(lang, str) and lang.strip() else None


class JsonLdFieldExtractor:
    """First JSON-LD object carrying one of ``keys``; nested {name|url} objects are unwrapped"""

    def __init__(self, field: str, keys: Sequence[str]):
        self.field = field
        self.keys = keys

    def extract(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
            try:
                data = json.loads(script.string or "")
            except ValueError:
                continue
            for obj in _walk(data):
                for key in self.keys:
                    value = _scalar(obj.get(key))
                    if value:
                        return value
        return None


def _walk(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, list):
        return [o for item in data for o in _walk(item)]
    if isinstance(data, dict):
        return [data] + _walk(data.get("@graph", []))
    return []


def _scalar(value: Any) -> Optional[str]:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get("name") or value.get("url")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


DEFAULT_CHAIN: List[FieldExtractor] = [
    MetaTagExtractor("title", prop="og:title"),
    MetaTagExtractor("title", name="twitter:title"),
    TitleTagExtractor(),
    FirstHeadingExtractor(),
    MetaTagExtractor("description", prop="og:description"),
    MetaTagExtractor("description", name="twitter:description"),
    MetaTagExtractor("description", name="description"),
    MetaTagExtractor("author", name="author"),
    MetaTagExtractor("author", prop="article:author"),
    JsonLdFieldExtractor("author", ["author"]),
    MetaTagExtractor("image", prop="og:image", absolute=True),
    MetaTagExtractor("image", name="twitter:image", absolute=True),
    JsonLdFieldExtractor("image", ["image"]),
    MetaTagExtractor("publisher", prop="og:site_name"),
    MetaTagExtractor("publisher", name="application-name"),
    JsonLdFieldExtractor("publisher", ["publisher"]),
    HtmlLangExtractor(),
    MetaTagExtractor("lang", prop="og:locale"),
    MetaTagExtractor("url", prop="og:url", absolute=True),
    LinkRelExtractor("url", ["canonical"]),
    JsonLdFieldExtractor("logo", ["logo"]),
    LinkRelExtractor("logo", ["apple-touch-icon", "icon", "shortcut"]),
]


class MetadataScraper:
    """Runs a chain of field extractors and merges first-non-absent-wins"""

    def __init__(self, chain: Optional[List[FieldExtractor]] = None):
        self.chain = list(DEFAULT_CHAIN if chain is None else chain)

    def scrape(self, soup: BeautifulSoup, url: str) -> Dict[str, Optional[str]]:
        result: Dict[str, Optional[str]] = {name: None for name in METADATA_FIELDS}
        for extractor in self.chain:
            try:
                value = extractor.extract(soup, url)
            except Exception as e:
                logger.warning(f"Metadata extractor {type(extractor).__name__}({extractor.field}) failed: {e!r}")
                continue
            if value and result.get(extractor.field) is None:
                result[extractor.field] = value
        if result["url"] is None:
            result["url"] = url
        return result


def scrape_metadata(soup: BeautifulSoup, url: str) -> Dict[str, Optional[str]]:
    return MetadataScraper().scrape(soup, url)
