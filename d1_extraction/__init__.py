"""
D1 Extraction - pure extractors over raw HTML, the parsed tree and headers

Every extractor is independent; a failure in one is recovered by
``safe_extract`` and never aborts the analysis.
"""

from .accessibility import accessibility_signal_score, detect_accessibility
from .base import parse_html, safe_extract, visible_text
from .conversion import classify_page_type, detect_conversion
from .headers import detect_hosting, detect_security, security_score
from .keywords import extract_keywords
from .metadata import MetadataScraper, scrape_metadata
from .sitemap import probe_robots, probe_site, probe_sitemap
from .structured_data import extract_json_ld, structured_data_types
from .techstack import detect_technologies

__all__ = [
    "accessibility_signal_score",
    "detect_accessibility",
    "parse_html",
    "safe_extract",
    "visible_text",
    "classify_page_type",
    "detect_conversion",
    "detect_hosting",
    "detect_security",
    "security_score",
    "extract_keywords",
    "MetadataScraper",
    "scrape_metadata",
    "probe_robots",
    "probe_site",
    "probe_sitemap",
    "extract_json_ld",
    "structured_data_types",
    "detect_technologies",
]
