"""
Analysis coordinator

Fetches a page, runs every extractor over the shared parsed tree, probes
sitemap/robots and the optional deep audits concurrently, runs inference,
assembles the draft AnalysisResult and sanitizes it.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from core.config import get_settings
from core.exceptions import AnalysisTimeout
from core.logging import get_logger
from core.utils import extract_host, normalize_url
from d0_gateway.fetcher import fetch_page
from d0_gateway.types import FetchOptions, PageFetch
from d1_extraction import page_signals
from d1_extraction.accessibility import detect_accessibility
from d1_extraction.base import parse_html, safe_extract, visible_text
from d1_extraction.conversion import detect_conversion
from d1_extraction.headers import detect_hosting, detect_security, security_score
from d1_extraction.keywords import extract_keywords
from d1_extraction.metadata import METADATA_FIELDS, scrape_metadata
from d1_extraction.sitemap import EMPTY_ROBOTS, EMPTY_SITEMAP, probe_site
from d1_extraction.structured_data import extract_json_ld, structured_data_types
from d1_extraction.techstack import detect_technologies
from d2_inference.insights import detect_business_insights
from d2_inference.traffic import TrafficThresholds
from d2_inference.types import InferenceInputs
from d3_assessment.coordinator import DeepAuditReport, run_deep_audits
from d4_imputation.heuristics import seo_checklist_score
from d4_imputation.sanitize import sanitize

from .models import AnalysisOptions, AnalysisResult, empty_resources

logger = get_logger(__name__, domain="d5")

Fetcher = Callable[[str, FetchOptions], Awaitable[PageFetch]]
DeepAuditRunner = Callable[[str], Awaitable[DeepAuditReport]]


async def _no_deep_audit(url: str) -> DeepAuditReport:
    return DeepAuditReport()


async def _probe(url: str) -> Dict[str, Dict[str, Any]]:
    try:
        return await probe_site(url)
    except Exception as e:
        logger.warning(f"Sitemap/robots probe failed for {url}: {e!r}")
        return {"sitemap": dict(EMPTY_SITEMAP), "robots": dict(EMPTY_ROBOTS)}


async def analyze_website(
    url: str,
    options: Optional[AnalysisOptions] = None,
    fetcher: Fetcher = fetch_page,
    deep_audit_runner: DeepAuditRunner = run_deep_audits,
) -> AnalysisResult:
    """
    Produce a sanitized digital audit of one page

    Args:
        url: Page URL; https:// is added when no scheme is given
        options: Deep audit, resource collection and forced render flags (defaults from settings)
        fetcher: Fetch implementation (swappable in tests)
        deep_audit_runner: Deep audit implementation (swappable in tests)

    Returns:
        AnalysisResult

    Raises:
        ValidationError: the URL is empty or malformed
        FetchFailure: no HTML could be retrieved
    """
    settings = get_settings()
    options = options or AnalysisOptions.from_settings(settings)
    normalized = normalize_url(url)
    log = logger.with_context(url=normalized)

    page = await fetcher(
        normalized,
        FetchOptions(collect_resources=options.collect_resources, force_render=options.force_render),
    )
    log.info(f"Fetched {len(page.html)} chars via {page.source.value}")

    audits = deep_audit_runner(normalized) if options.run_deep_audit else _no_deep_audit(normalized)
    probes, deep = await asyncio.gather(_probe(normalized), audits)

    draft = build_draft(normalized, page, probes, deep)
    result = sanitize(draft)

    result = result.model_copy(
        update={
            "analyzed_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "version": settings.schema_version,
        }
    )
    log.info(
        f"Analysis complete: model={result.business_insights.get('businessModel', {}).get('inferredModel')} "
        f"corrections={len(result.imputation_log)}"
    )
    return result


def build_draft(
    url: str,
    page: PageFetch,
    probes: Dict[str, Dict[str, Any]],
    deep: DeepAuditReport,
) -> AnalysisResult:
    """Run extractors and inference and assemble the unsanitized result"""
    html = page.html
    soup = parse_html(html)
    sitemap = probes["sitemap"]
    robots = probes["robots"]

    json_ld = safe_extract("jsonLd", extract_json_ld, [], soup)
    metadata = safe_extract("metadata", scrape_metadata, {name: None for name in METADATA_FIELDS}, soup, url)
    keywords = safe_extract("keywords", lambda: extract_keywords(visible_text(soup)), [])
    tech = safe_extract("techStack", detect_technologies, {"categories": {}, "analytics": []}, html)
    conversion = safe_extract(
        "conversion",
        detect_conversion,
        {"ctaCount": 0, "forms": 0, "hasProductLd": False, "pageType": "landing", "hasCart": False, "isEcommerce": False},
        soup,
        json_ld,
        url,
    )
    social = safe_extract("social", page_signals.social_profiles, {"profiles": {}, "presenceScore": 0}, soup)
    widgets = safe_extract("widgets", page_signals.detect_widgets, {"support": {}, "crm": {}}, html)
    accessibility = safe_extract("accessibility", detect_accessibility, {}, soup)
    open_graph = safe_extract("openGraph", page_signals.open_graph, {}, soup)
    site_pages = safe_extract("sitePages", page_signals.site_pages, {}, soup)
    security = safe_extract("security", detect_security, {}, page.headers)
    hosting = safe_extract("hosting", detect_hosting, {}, page.headers)
    html_metrics = safe_extract("htmlMetrics", page_signals.html_metrics, {}, soup)
    clean = safe_extract("cleanText", page_signals.clean_content, {"cleanText": "", "headers": []}, soup)
    canonical = safe_extract("canonical", page_signals.canonical_link, None, soup)
    blog_links = safe_extract("blogLinks", page_signals.blog_link_count, 0, soup)
    multi_language = safe_extract("languages", page_signals.has_alternate_languages, False, soup)
    newsletter = safe_extract("newsletter", page_signals.has_newsletter, False, soup)

    summary = page.resource_summary
    resources = summary.to_dict() if summary else empty_resources()
    # totals cover only what loaded before the render deadline
    resources["renderTimedOut"] = page.render_timed_out

    insights = detect_business_insights(
        InferenceInputs(
            html=html,
            soup=soup,
            url=url,
            tech=tech,
            conversion=conversion,
            json_ld=json_ld,
            site_pages=site_pages,
            keywords=keywords,
            resource_summary=summary,
            hosting=hosting,
            support=widgets["support"],
            crm=widgets["crm"],
            social_profiles=social["profiles"],
            metadata=metadata,
            sitemap_pages=sitemap.get("pages"),
            blog_links=blog_links,
            multi_language=multi_language,
        ),
        TrafficThresholds.from_settings(),
    )

    title = html_metrics.get("title")
    description = html_metrics.get("description")

    return AnalysisResult(
        url=url,
        domain=extract_host(url) or "",
        canonical=canonical,
        page_type=conversion["pageType"],
        site_signals={
            "hasSitemap": bool(sitemap.get("sitemapUrl")),
            "sitemapUrl": sitemap.get("sitemapUrl"),
            "pagesIndexedEstimate": sitemap.get("pages"),
            "sitemapLatestDate": sitemap.get("latestSitemapDate"),
            "robots": bool(robots.get("robots")),
            "crawlAllowed": robots.get("crawlAllowed", True),
            "analytics": tech.get("analytics", []),
            "ssl_valid": url.startswith("https://"),
        },
        security=security,
        hosting=hosting,
        html_metrics=html_metrics,
        metadata=metadata,
        open_graph=open_graph,
        seo={
            "titleLength": len(title or ""),
            "metaDescLength": len(description or ""),
            "h1_present": bool(html_metrics.get("h1_present")),
            "structuredDataTypes": structured_data_types(json_ld),
        },
        content={
            "keywords": keywords,
            "contentFreshness": {"latest": sitemap.get("latestSitemapDate")},
            "ctaCount": conversion["ctaCount"],
            "wordCount": html_metrics.get("wordCount"),
            "images": html_metrics.get("images"),
            "missingAlt": html_metrics.get("missingAlt"),
            "techStack": tech.get("categories", {}),
            "cleanText": clean["cleanText"],
            "headers": clean["headers"],
        },
        resources=resources,
        performance=deep.performance,
        accessibility_audit=deep.accessibility,
        social=social,
        conversion_signals={
            "hasCheckout": conversion["hasCart"],
            "hasNewsletter": newsletter,
            "ctaCount": conversion["ctaCount"],
            "forms": conversion["forms"],
            "pricingPage": site_pages.get("hasPricing", False),
            "careersPage": site_pages.get("hasCareers", False),
            "blog": site_pages.get("hasBlog", False),
        },
        support_widgets=widgets["support"],
        crm_indicators=widgets["crm"],
        accessibility=accessibility,
        summary_signals={
            "seoScore": seo_checklist_score(
                title,
                description,
                keywords,
                sitemap.get("sitemapUrl"),
                html_metrics.get("h1_present"),
            ),
            "accessibilityScore": accessibility.get("signalScore"),
            "securityScore": security_score(security),
            "performanceEstimate": None,
        },
        business_insights=insights,
    )


async def analyze_website_with_timeout(
    url: str,
    options: Optional[AnalysisOptions] = None,
    timeout: Optional[float] = None,
    **kwargs,
) -> AnalysisResult:
    """
    analyze_website bounded by a caller-side timeout

    Raises:
        AnalysisTimeout: the analysis did not finish within ``timeout`` seconds
    """
    timeout = timeout or get_settings().analysis_timeout
    try:
        return await asyncio.wait_for(analyze_website(url, options, **kwargs), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise AnalysisTimeout(url, timeout) from e
