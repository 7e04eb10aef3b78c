"""
Root conftest.py for all tests
Provides shared HTML fixtures and draft analysis builders
"""
import os
import sys

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from core.config import get_settings
from d5_audit.models import AnalysisResult
from tests.fixtures.pages import PLAIN_HTML, SAAS_HTML, STORE_HTML


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; tests that patch the environment need a fresh instance"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def plain_html():
    return PLAIN_HTML


@pytest.fixture
def store_html():
    return STORE_HTML


@pytest.fixture
def saas_html():
    return SAAS_HTML


def build_draft(**sections) -> AnalysisResult:
    """
    Minimal but realistic draft result; keyword arguments replace whole
    sections (camelCase keys)
    """
    document = {
        "url": "https://example.com/",
        "domain": "example.com",
        "canonical": "https://example.com/",
        "pageType": "homepage",
        "siteSignals": {"hasSitemap": True, "sitemapUrl": "https://example.com/sitemap.xml"},
        "security": {"hasCSP": True, "hasHSTS": True, "hasXFrame": False, "hasXSSProtection": False},
        "hosting": {"vercel": False, "cloudflare": False},
        "htmlMetrics": {
            "title": "Example",
            "description": "An example page",
            "h1_present": True,
            "images": 4,
        },
        "metadata": {"title": "Example"},
        "openGraph": {"ogTitle": "Example"},
        "content": {"keywords": ["example", "domain"], "headers": [{"tag": "h1", "text": "Example"}]},
        "resources": {
            "domNodes": 400,
            "resourcesCount": 30,
            "totalImageKB": 500.0,
            "totalJsKB": 300.0,
            "thirdPartyRequests": 5,
            "thirdPartyScripts": 2,
        },
        "performance": None,
        "social": {"profiles": {}, "presenceScore": 0},
        "conversionSignals": {"hasCheckout": False},
        "accessibility": {"ariaCount": 3, "unlabeledButtons": 0, "linksWithoutText": 0, "signalScore": 100},
        "summarySignals": {
            "seoScore": 100,
            "accessibilityScore": 100,
            "securityScore": 66,
            "performanceEstimate": None,
        },
        "businessInsights": {
            "businessModel": {"inferredModel": "saas"},
            "pricing": {"isSubscription": True, "hasTransparentPricing": False},
            "trafficEstimate": {
                "estimatedTrafficClass": "Small (<50k/mo)",
                "indicators": {"pagesIndexed": 12, "blogPostsEstimate": 0},
            },
        },
    }
    document.update(sections)
    return AnalysisResult.from_dict(document)


@pytest.fixture
def make_draft():
    return build_draft
