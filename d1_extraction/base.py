"""
Shared helpers for extractors
"""
import re
from typing import Callable, Iterable, List, Optional, TypeVar

from bs4 import BeautifulSoup, Tag
from bs4.element import PreformattedString

from core.exceptions import PartialExtractionFailure
from core.logging import get_logger

logger = get_logger(__name__, domain="d1")

T = TypeVar("T")

_WHITESPACE = re.compile(r"\s+")
_HIDDEN_TAGS = ["script", "style", "noscript", "iframe", "template"]


def parse_html(html: str) -> BeautifulSoup:
    """Parse a document with the stdlib-backed parser"""
    return BeautifulSoup(html, "html.parser")


def safe_extract(name: str, extractor: Callable[..., T], default: T, *args, **kwargs) -> T:
    """
    Run one extractor, substituting ``default`` if it fails

    A failing extractor never aborts the pipeline; the failure is logged as a
    PartialExtractionFailure.
    """
    try:
        return extractor(*args, **kwargs)
    except PartialExtractionFailure as e:
        logger.warning(f"Extractor {name} failed: {e.message}")
    except Exception as e:
        logger.warning(f"Extractor {name} failed: {PartialExtractionFailure(name, repr(e)).message}")
    return default


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def body_text(soup: BeautifulSoup) -> str:
    """Text of <body> (or the whole document) with whitespace collapsed"""
    root = soup.body or soup
    return collapse_whitespace(root.get_text(" "))


def visible_text(soup: BeautifulSoup) -> str:
    """Body text with script/style/noscript/iframe content removed, without mutating ``soup``"""
    root = soup.body or soup
    parts: List[str] = []
    for node in root.find_all(string=True):
        if isinstance(node, PreformattedString) or node.find_parent(_HIDDEN_TAGS):
            continue
        parts.append(str(node))
    return collapse_whitespace(" ".join(parts))


def element_label(el: Tag, attrs: Iterable[str] = ("aria-label",)) -> str:
    """Element text, falling back to the given attributes in order"""
    text = el.get_text(" ", strip=True)
    if text:
        return text
    for attr in attrs:
        value = el.get(attr)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def meta_content(soup: BeautifulSoup, *, name: Optional[str] = None, prop: Optional[str] = None) -> Optional[str]:
    """content of <meta name=...> or <meta property=...>, case-insensitive on the key"""
    attr, key = ("name", name) if name else ("property", prop)
    if not key:
        return None
    tag = soup.find("meta", attrs={attr: re.compile(rf"^{re.escape(key)}$", re.I)})
    if tag is None:
        return None
    content = tag.get("content")
    return content.strip() if isinstance(content, str) and content.strip() else None


def links_matching(
    soup: BeautifulSoup,
    href_parts: Iterable[str] = (),
    texts: Iterable[str] = (),
) -> List[Tag]:
    """<a> elements whose href contains any ``href_parts`` or whose text contains any ``texts``"""
    href_parts = [h.lower() for h in href_parts]
    texts = [t.lower() for t in texts]
    matches = []
    for a in soup.find_all("a"):
        href = (a.get("href") or "").lower()
        if href_parts and any(part in href for part in href_parts):
            matches.append(a)
            continue
        if texts:
            label = a.get_text(" ", strip=True).lower()
            if any(t in label for t in texts):
                matches.append(a)
    return matches
