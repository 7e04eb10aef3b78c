"""
Call-to-action counting and page type classification
"""
import re
from typing import Any, Dict, List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .base import element_label
from .structured_data import has_type

CTA_VOCABULARY = re.compile(r"buy|order|add to cart|subscribe|get started|checkout|pricing", re.I)

# (page type, path pattern) in precedence order; "landing" is the fallback
PAGE_TYPE_RULES = [
    ("product", re.compile(r"/product|/item/", re.I)),
    ("article", re.compile(r"/blog|/article|/post", re.I)),
]


def count_ctas(soup: BeautifulSoup) -> int:
    """Links, buttons and submit inputs whose text/aria-label/value matches the CTA vocabulary"""
    count = 0
    for el in soup.select("a, button, input[type=submit]"):
        label = element_label(el, ("aria-label", "value"))
        if CTA_VOCABULARY.search(label):
            count += 1
    return count


def classify_page_type(url: str, has_product_ld: bool = False) -> str:
    """product > article > homepage > landing"""
    path = urlparse(url).path.lower() or "/"
    if has_product_ld or PAGE_TYPE_RULES[0][1].search(path):
        return "product"
    if PAGE_TYPE_RULES[1][1].search(path):
        return "article"
    if path == "/":
        return "homepage"
    return "landing"


def detect_conversion(soup: BeautifulSoup, json_ld: List[Dict[str, Any]], url: str) -> Dict[str, Any]:
    has_product_ld = has_type(json_ld, "product")
    has_cart = bool(soup.select('a[href*="cart"], a[href*="checkout"], [class*="cart"]'))
    return {
        "ctaCount": count_ctas(soup),
        "forms": len(soup.find_all("form")),
        "hasProductLd": has_product_ld,
        "pageType": classify_page_type(url, has_product_ld),
        "hasCart": has_cart,
        "isEcommerce": has_product_ld or has_cart,
    }
