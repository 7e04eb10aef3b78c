"""
Static accessibility signals

A cheap proxy computed from markup alone. It is not a WCAG audit; the
optional axe-core auditor in d3_assessment provides the real violation list.
"""
from typing import Any, Dict

from bs4 import BeautifulSoup

from .base import element_label

LANDMARK_TAGS = ("main", "article", "section", "nav", "header", "footer")


def detect_accessibility(soup: BeautifulSoup) -> Dict[str, Any]:
    aria_count = len(soup.select("[aria-label], [aria-hidden], [role]"))
    unlabeled_buttons = sum(
        1 for button in soup.find_all("button") if not element_label(button, ("aria-label", "title"))
    )
    links_without_text = sum(1 for a in soup.find_all("a") if not element_label(a, ("aria-label",)))
    semantic_tags = {tag: len(soup.find_all(tag)) for tag in LANDMARK_TAGS}

    signals = {
        "ariaCount": aria_count,
        "unlabeledButtons": unlabeled_buttons,
        "linksWithoutText": links_without_text,
        "semanticTags": semantic_tags,
    }
    signals["signalScore"] = accessibility_signal_score(signals)
    return signals


def accessibility_signal_score(signals: Dict[str, Any]) -> int:
    """100 minus fixed deductions for unlabeled controls and missing ARIA"""
    deductions = 0
    if signals.get("unlabeledButtons", 0) > 5:
        deductions += 25
    if signals.get("linksWithoutText", 0) > 10:
        deductions += 25
    if signals.get("ariaCount", 0) < 1:
        deductions += 20
    return max(0, 100 - deductions)
