"""
On-page signals: HTML metrics, social tags, site sections and third-party widgets
"""
import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from .base import body_text, links_matching, meta_content, visible_text

SOCIAL_PLATFORMS = ("facebook", "twitter", "instagram", "linkedin", "youtube", "tiktok")

SUPPORT_WIDGETS = {
    "intercom": re.compile(r"widget\.intercom\.io|Intercom\('boot'"),
    "crisp": re.compile(r"client\.crisp\.chat", re.I),
    "tawk": re.compile(r"embed\.tawk\.to", re.I),
    "zendesk": re.compile(r"zendesk|zdassets", re.I),
    "drift": re.compile(r"js\.driftt\.com", re.I),
    "gorgias": re.compile(r"gorgias", re.I),
}

CRM_INDICATORS = {
    "hubspot": re.compile(r"hs-scripts|hubspot\.com|hubspot\.net", re.I),
    "mailchimp": re.compile(r"list-manage\.com|mc\.embed\.mailchimp\.com", re.I),
    "activecampaign": re.compile(r"activehosted\.com|activecampaign", re.I),
    "marketo": re.compile(r"mktoForms2|mktorest", re.I),
}

BLOG_LINK_PARTS = ("/blog", "/news", "/posts", "/articles")


def _title(soup: BeautifulSoup) -> Optional[str]:
    tag = soup.find("title")
    text = tag.get_text(strip=True) if tag else ""
    return text or None


def html_metrics(soup: BeautifulSoup) -> Dict[str, Any]:
    h1 = soup.find("h1")
    h1_text = h1.get_text(" ", strip=True) if h1 else ""
    images = soup.find_all("img")
    return {
        "title": _title(soup),
        "description": meta_content(soup, name="description"),
        "h1_text": h1_text or None,
        "h1_present": any(tag.get_text(strip=True) for tag in soup.find_all("h1")),
        "wordCount": len(body_text(soup).split()),
        "links": len(soup.find_all("a")),
        "images": len(images),
        "missingAlt": sum(1 for img in images if not img.has_attr("alt")),
    }


def open_graph(soup: BeautifulSoup) -> Dict[str, Optional[str]]:
    return {
        "ogTitle": meta_content(soup, prop="og:title"),
        "ogDescription": meta_content(soup, prop="og:description"),
        "ogImage": meta_content(soup, prop="og:image"),
        "twitterCard": meta_content(soup, name="twitter:card"),
        "twitterImage": meta_content(soup, name="twitter:image"),
    }


def social_profiles(soup: BeautifulSoup) -> Dict[str, Any]:
    """First profile link per platform and a presence score of 20 per platform"""
    profiles: Dict[str, str] = {}
    for platform in SOCIAL_PLATFORMS:
        link = soup.find("a", href=lambda h, p=platform: bool(h) and f"{p}.com" in h.lower())
        if link is not None:
            profiles[platform] = link["href"]
    return {"profiles": profiles, "presenceScore": min(100, len(profiles) * 20)}


def site_pages(soup: BeautifulSoup) -> Dict[str, bool]:
    return {
        "hasPricing": bool(links_matching(soup, ["pricing"], ["pricing"])),
        "hasCareers": bool(links_matching(soup, ["careers", "jobs"], ["careers", "jobs"])),
        "hasBlog": bool(links_matching(soup, ["/blog", "/news", "/articles"], ["blog"])),
    }


def detect_widgets(html: str) -> Dict[str, Dict[str, bool]]:
    return {
        "support": {name: bool(p.search(html)) for name, p in SUPPORT_WIDGETS.items()},
        "crm": {name: bool(p.search(html)) for name, p in CRM_INDICATORS.items()},
    }


def has_newsletter(soup: BeautifulSoup) -> bool:
    return soup.find("input", attrs={"type": re.compile(r"^email$", re.I)}) is not None


def blog_link_count(soup: BeautifulSoup) -> int:
    return len(links_matching(soup, BLOG_LINK_PARTS))


def has_alternate_languages(soup: BeautifulSoup) -> bool:
    """hreflang alternates or a declared document language"""
    if soup.find("link", attrs={"rel": "alternate", "hreflang": True}):
        return True
    html_tag = soup.find("html")
    return bool(html_tag and html_tag.get("lang"))


def heading_outline(soup: BeautifulSoup) -> List[Dict[str, str]]:
    return [
        {"tag": tag.name, "text": tag.get_text(" ", strip=True)}
        for tag in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"])
    ]


def clean_content(soup: BeautifulSoup) -> Dict[str, Any]:
    """Visible text and heading outline for downstream summarization"""
    return {"cleanText": visible_text(soup), "headers": heading_outline(soup)}


def canonical_link(soup: BeautifulSoup) -> Optional[str]:
    link = soup.find("link", attrs={"rel": "canonical", "href": True})
    href = link["href"].strip() if link else ""
    return href or None
