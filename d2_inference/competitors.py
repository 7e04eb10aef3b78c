"""
Competitor discovery from keywords, comparison links and "alternative to" phrases
"""
import re
from typing import Any, Dict, Iterable, List
from urllib.parse import unquote

from bs4 import BeautifulSoup

COMPETITOR_TABLE: Dict[str, List[str]] = {
    "crm": ["HubSpot", "Salesforce", "Zoho CRM"],
    "task management": ["Asana", "Trello", "ClickUp", "Jira"],
    "ecommerce": ["Shopify", "BigCommerce", "Magento"],
    "analytics": ["Google Analytics", "Mixpanel", "Amplitude"],
    "payment": ["Stripe", "PayPal", "Square"],
}

ALTERNATIVE_TO = re.compile(r"alternative to ([a-z0-9 \-]+)", re.I)
MAX_COMPETITORS = 20
METHOD = "keyword + link-pattern heuristics"


def _comparison_slugs(soup: BeautifulSoup) -> List[str]:
    """Last path segment of /vs/ links and of links whose text reads "vs" """
    slugs = []
    for a in soup.find_all("a", href=True):
        href = a["href"]
        text = a.get_text(" ", strip=True)
        if "/vs/" not in href and "vs " not in text and "vs." not in text:
            continue
        last = href.split("/")[-1]
        if last:
            slugs.append(unquote(re.sub(r"[-_]", " ", last)))
    return slugs


def discover_competitors(keywords: Iterable[str], html: str, soup: BeautifulSoup) -> Dict[str, Any]:
    text = html.lower()
    keywords = list(keywords)
    found: List[str] = []

    def add(name: str) -> None:
        if name and name not in found:
            found.append(name)

    for key, names in COMPETITOR_TABLE.items():
        if key in text or any(key in k for k in keywords):
            for name in names:
                add(name)

    for slug in _comparison_slugs(soup):
        add(slug)

    for match in ALTERNATIVE_TO.finditer(text):
        add(match.group(1).strip())

    return {"likelyCompetitors": found[:MAX_COMPETITORS], "method": METHOD}
