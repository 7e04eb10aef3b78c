"""
JSON-LD structured data extraction
"""
import json
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from core.logging import get_logger

logger = get_logger(__name__, domain="d1")


def extract_json_ld(soup: BeautifulSoup) -> List[Dict[str, Any]]:
    """
    Parse every application/ld+json block into one flat list of objects

    Top-level arrays are spread and ``@graph`` wrappers are replaced by their
    members. Blocks that are not valid JSON are dropped.
    """
    blocks: List[Dict[str, Any]] = []
    for script in soup.find_all("script", attrs={"type": lambda t: t and t.strip().lower() == "application/ld+json"}):
        raw = script.string or script.get_text() or ""
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.debug("Dropping invalid JSON-LD block")
            continue
        blocks.extend(_flatten(parsed))
    return blocks


def _flatten(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, list):
        return [obj for item in data for obj in _flatten(item)]
    if not isinstance(data, dict):
        return []
    graph = data.get("@graph")
    if isinstance(graph, list):
        members = [obj for item in graph for obj in _flatten(item)]
        # a wrapper that also carries its own @type is kept alongside its members
        return ([data] if "@type" in data else []) + members
    return [data]


def structured_data_types(blocks: List[Dict[str, Any]]) -> List[str]:
    """Distinct lowercase @type values in first-seen order"""
    seen: List[str] = []
    for block in blocks:
        types = block.get("@type")
        for t in types if isinstance(types, list) else [types]:
            if t is None:
                continue
            value = str(t).lower()
            if value not in seen:
                seen.append(value)
    return seen


def has_type(blocks: List[Dict[str, Any]], needle: str) -> bool:
    """Case-insensitive substring search over the serialized blocks"""
    needle = needle.lower()
    return any(needle in json.dumps(block, default=str).lower() for block in blocks)
