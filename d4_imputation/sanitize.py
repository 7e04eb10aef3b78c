"""
Sanitize & impute pass

Repairs missing, invalid or inconsistent fields of a draft AnalysisResult
with documented fallback heuristics and records every correction in
``_imputed`` and ``imputationLog``. The pass is total (it never raises),
deterministic and idempotent: sanitizing a sanitized result changes nothing.
"""
from typing import Callable, List, Tuple

from core.logging import get_logger
from core.utils import clamp, is_number, round_half_up, to_number
from d2_inference.traffic import TrafficThresholds, classify_traffic
from d2_inference.types import BusinessModel, TrafficClass
from d5_audit.models import (
    PERFORMANCE_METRIC_FIELDS,
    PERFORMANCE_SCORE_FIELDS,
    RESOURCE_FIELDS,
    SUMMARY_SCORE_FIELDS,
    AnalysisResult,
)

from .builder import ImputationBuilder
from .heuristics import (
    DEFAULT_ACCESSIBILITY_SCORE,
    IMAGE_KB_PER_IMAGE,
    JS_KB_PER_RESOURCE,
    resource_performance_estimate,
    seo_checklist_score,
    tidy_number,
)

logger = get_logger(__name__, domain="d4")

HEADING_COUNT_HIGH_TRAFFIC = 200
ACCESSIBILITY_BLEND_FLAG_DIFF = 20

# (path, is a score) for every field that must hold a number
NUMERIC_FIELDS: List[Tuple[str, bool]] = (
    [(f"summarySignals.{name}", True) for name in SUMMARY_SCORE_FIELDS]
    + [(f"performance.{name}", True) for name in PERFORMANCE_SCORE_FIELDS]
    + [(f"performance.{name}", False) for name in PERFORMANCE_METRIC_FIELDS]
    + [(f"resources.{name}", False) for name in RESOURCE_FIELDS]
    + [("accessibility.signalScore", True), ("social.presenceScore", True)]
)

# score fields outside summarySignals that must also end up in [0, 100] or null
EXTRA_SCORE_FIELDS = [path for path, is_score in NUMERIC_FIELDS if is_score and not path.startswith("summarySignals.")]

WATCHED_FIELDS = ("canonical", "metadata.title", "openGraph.ogTitle", "htmlMetrics.title")


def _fmt(value) -> str:
    return str(tidy_number(value))


def coerce_numbers(b: ImputationBuilder) -> None:
    """Step 0: numeric strings become numbers; unparseable scores become null"""
    for path, is_score in NUMERIC_FIELDS:
        section, _, name = path.partition(".")
        if not isinstance(b.get(section), dict):
            continue
        value = b.get(path)
        # NaN and inf are numbers here; later steps treat them as invalid
        if value is None or (isinstance(value, (int, float)) and not isinstance(value, bool)):
            continue
        try:
            b.set(path, to_number(value))
        except (TypeError, ValueError):
            if is_score:
                b.set(path, None)
                b.note(f"{path} could not be read as a number ({value!r}) -> set to null.")
            else:
                b.note(f"{path} could not be read as a number ({value!r}) -> left unchanged.")


def normalize_scores(b: ImputationBuilder) -> None:
    """Step 1: clamp summary scores; recompute seoScore from the checklist when unusable"""
    summary = b.section("summarySignals")

    for name in SUMMARY_SCORE_FIELDS:
        if name == "seoScore":
            continue
        value = summary.get(name)
        if value is None:
            continue
        if not is_number(value):
            summary[name] = None
            b.note(f"{name} is not a finite number -> set to null.")
        elif not 0 <= value <= 100:
            summary[name] = clamp(value)
            b.note(f"{name} out of range ({_fmt(value)}) -> clamped to {_fmt(summary[name])}.")

    seo = summary.get("seoScore")
    if not is_number(seo) or not 0 <= seo <= 100:
        score = seo_checklist_score(
            b.get("htmlMetrics.title"),
            b.get("htmlMetrics.description"),
            b.get("content.keywords"),
            b.get("siteSignals.hasSitemap"),
            b.get("htmlMetrics.h1_present"),
        )
        summary["seoScore"] = score
        b.estimated(
            "seoScore",
            "heuristic: title/meta/h1/keywords/sitemap",
            f"seoScore missing/invalid -> estimated {score} using title/meta/h1/keywords/sitemap heuristic.",
        )


def reconcile_accessibility(b: ImputationBuilder) -> None:
    """Step 2: blend the static accessibility score with the external audit score"""
    summary = b.section("summarySignals")

    current = summary.get("accessibilityScore")
    if not is_number(current):
        current = None
    if current is not None and "accessibilityScore" in b.imputed:
        # already reconciled by an earlier pass
        return

    static = b.get("accessibility.signalScore")
    stand_in = not is_number(static)
    if stand_in:
        # a present summary value stands in for the missing static signal
        static = current

    external = b.get("performance.accessibilityScore")
    if not is_number(external):
        external = None

    if static is not None and external is not None:
        blended = tidy_number((static + external) / 2)
        diff = tidy_number(abs(static - external))
        summary["accessibilityScore"] = clamp(blended)
        if diff > ACCESSIBILITY_BLEND_FLAG_DIFF:
            b.estimated(
                "accessibilityScore",
                f"blend heuristic avg({_fmt(static)}, {_fmt(external)}) due to diff {_fmt(diff)}",
                f"accessibilityScore and external audit differ by {_fmt(diff)} -> blended to {_fmt(blended)}.",
            )
        elif stand_in:
            b.estimated(
                "accessibilityScore",
                f"blend heuristic avg({_fmt(static)}, {_fmt(external)}) of summary score and external audit",
                f"accessibilityScore blended with external audit to {_fmt(blended)}.",
            )
        else:
            b.note(f"accessibilityScore blended with external audit to {_fmt(blended)}.")
    elif current is not None:
        if static != current:
            b.note(
                f"accessibilityScore {_fmt(current)} kept; static accessibility signals score {_fmt(static)}."
            )
    elif static is not None:
        summary["accessibilityScore"] = clamp(static)
        b.estimated(
            "accessibilityScore",
            "from static accessibility signals",
            f"accessibilityScore missing -> used static accessibility signalScore = {_fmt(static)}.",
        )
    elif external is not None:
        summary["accessibilityScore"] = clamp(external)
        b.estimated(
            "accessibilityScore",
            "from external audit accessibilityScore",
            f"accessibilityScore missing -> used external audit accessibilityScore = {_fmt(external)}.",
        )
    else:
        summary["accessibilityScore"] = DEFAULT_ACCESSIBILITY_SCORE
        b.estimated(
            "accessibilityScore",
            f"fallback default {DEFAULT_ACCESSIBILITY_SCORE}",
            f"accessibilityScore missing -> defaulted to {DEFAULT_ACCESSIBILITY_SCORE}.",
        )


def derive_security(b: ImputationBuilder) -> None:
    """Step 3: securityScore from header flags when missing"""
    summary = b.section("summarySignals")
    if is_number(summary.get("securityScore")):
        return
    security = b.get("security") or {}
    score = (
        (33 if security.get("hasCSP") else 0)
        + (33 if security.get("hasHSTS") else 0)
        + (34 if security.get("hasXFrame") else 0)
    )
    summary["securityScore"] = score
    b.estimated(
        "securityScore",
        "derived from security headers flags",
        "securityScore missing -> derived from security header flags.",
    )


def backfill_resources(b: ImputationBuilder) -> None:
    """Step 5: estimate image and script weight from counts"""
    resources = b.section("resources")

    images = b.get("htmlMetrics.images")
    if resources.get("totalImageKB") is None and is_number(images):
        estimate = round_half_up(images * IMAGE_KB_PER_IMAGE)
        resources["totalImageKB"] = estimate
        b.estimated(
            "totalImageKB",
            f"images_count * {IMAGE_KB_PER_IMAGE}KB (images={_fmt(images)})",
            f"totalImageKB missing -> estimated {estimate} KB from {_fmt(images)} img(s) * {IMAGE_KB_PER_IMAGE}KB.",
        )

    count = resources.get("resourcesCount")
    if resources.get("totalJsKB") is None and is_number(count):
        estimate = round_half_up(count * JS_KB_PER_RESOURCE)
        resources["totalJsKB"] = estimate
        b.estimated(
            "totalJsKB",
            f"resources_count * {JS_KB_PER_RESOURCE}KB (resources={_fmt(count)})",
            f"totalJsKB missing -> estimated {estimate} KB from resourcesCount * {JS_KB_PER_RESOURCE}KB.",
        )


def estimate_performance(b: ImputationBuilder) -> None:
    """Step 4: performanceEstimate from the external audit, else measured resource totals"""
    summary = b.section("summarySignals")
    if is_number(summary.get("performanceEstimate")):
        return

    external = b.get("performance.performanceScore")
    if is_number(external):
        summary["performanceEstimate"] = clamp(external)
        b.estimated(
            "performanceEstimate",
            "external audit performanceScore",
            f"performanceEstimate missing -> used external audit performanceScore = {_fmt(external)}.",
        )
        return

    # weights back-filled by an earlier pass are not measurements
    js_kb = None if "totalJsKB" in b.imputed else b.get("resources.totalJsKB")
    image_kb = None if "totalImageKB" in b.imputed else b.get("resources.totalImageKB")
    dom_nodes = b.get("resources.domNodes")
    estimate = resource_performance_estimate(js_kb, image_kb, dom_nodes)
    if estimate is not None:
        summary["performanceEstimate"] = estimate
        b.estimated(
            "performanceEstimate",
            "heuristic from totalJsKB/totalImageKB/domNodes",
            f"performanceEstimate missing -> heuristically estimated {_fmt(estimate)} "
            f"from jsKB={_fmt(js_kb)}, imgKB={_fmt(image_kb)}, dom={_fmt(dom_nodes)}.",
        )
    else:
        summary["performanceEstimate"] = None
        b.gap(
            "performanceEstimate",
            "no performance audit and no resource metrics",
            "performanceEstimate could not be estimated (no performance audit and no resource metrics).",
        )


def rederive_traffic(b: ImputationBuilder) -> None:
    """Step 6: re-band an Unknown traffic class, adding heading count as a signal"""
    traffic = b.section("businessInsights.trafficEstimate")
    current = traffic.get("estimatedTrafficClass")
    if current and current != TrafficClass.UNKNOWN.value:
        return

    indicators = traffic.get("indicators") or {}
    pages = indicators.get("pagesIndexed")
    blog = indicators.get("blogPostsEstimate")
    footprint = indicators.get("resourceFootprint")
    headings = b.get("content.headers") or []

    if isinstance(headings, list) and len(headings) > HEADING_COUNT_HIGH_TRAFFIC:
        guessed = TrafficClass.HIGH
    else:
        guessed = classify_traffic(
            pages if is_number(pages) else None,
            blog if is_number(blog) else None,
            TrafficThresholds.from_settings(),
            resources_count=footprint if is_number(footprint) else None,
        )

    if guessed is not TrafficClass.UNKNOWN:
        traffic["estimatedTrafficClass"] = guessed.value
        b.estimated(
            "trafficEstimate",
            "heuristic from sitemap pages, blog links, resource footprint and heading count",
            f"trafficEstimate missing/unknown -> guessed '{guessed.value}' from pages={pages} blog={blog}.",
        )
    else:
        traffic["estimatedTrafficClass"] = TrafficClass.UNKNOWN.value
        b.gap(
            "trafficEstimate",
            "insufficient signals (no sitemap pages, blog links or headings)",
            "trafficEstimate could not be guessed (insufficient signals).",
        )


def guess_business_model(b: ImputationBuilder) -> None:
    """Step 7: secondary guess for an unknown business model"""
    model = b.section("businessInsights.businessModel")
    if model.get("inferredModel") and model["inferredModel"] != BusinessModel.UNKNOWN.value:
        return

    pricing = b.get("businessInsights.pricing") or {}
    guess = None
    if b.get("conversionSignals.hasCheckout") or (
        pricing.get("isSubscription") is False and pricing.get("hasTransparentPricing")
    ):
        guess = BusinessModel.ECOMMERCE
    elif pricing.get("isSubscription"):
        guess = BusinessModel.SAAS
    elif b.get("hosting.vercel"):
        guess = BusinessModel.SAAS

    if guess is not None:
        model["inferredModel"] = guess.value
        b.estimated(
            "businessModel",
            f"heuristic based on conversionSignals/pricing/hosting -> {guess.value}",
            f"businessModel.inferredModel missing/unknown -> guessed '{guess.value}'.",
        )
    else:
        model["inferredModel"] = BusinessModel.UNKNOWN.value
        b.gap(
            "businessModel",
            "no decisive conversion/tech signal",
            "businessModel.inferredModel could not be determined.",
        )


def mark_missing(b: ImputationBuilder) -> None:
    """Step 8: explicit log entries for absent page metadata"""
    for path in WATCHED_FIELDS:
        if not b.get(path):
            b.note(f"Missing: {path} not found on page.")


def final_clamp(b: ImputationBuilder) -> None:
    """Step 9: every score ends in [0, 100] or null"""
    summary = b.section("summarySignals")
    for name in SUMMARY_SCORE_FIELDS:
        value = summary.get(name)
        summary[name] = clamp(value) if is_number(value) else None

    for path in EXTRA_SCORE_FIELDS:
        section = path.partition(".")[0]
        if not isinstance(b.get(section), dict):
            continue
        value = b.get(path)
        if value is None:
            continue
        if not is_number(value):
            b.set(path, None)
            b.note(f"{path} is not a finite number -> set to null.")
        elif not 0 <= value <= 100:
            b.set(path, clamp(value))
            b.note(f"{path} out of range ({_fmt(value)}) -> clamped to {_fmt(clamp(value))}.")


STEPS: List[Tuple[str, Callable[[ImputationBuilder], None]]] = [
    ("coerce_numbers", coerce_numbers),
    ("normalize_scores", normalize_scores),
    ("reconcile_accessibility", reconcile_accessibility),
    ("derive_security", derive_security),
    ("estimate_performance", estimate_performance),
    ("backfill_resources", backfill_resources),
    ("rederive_traffic", rederive_traffic),
    ("guess_business_model", guess_business_model),
    ("mark_missing", mark_missing),
    ("final_clamp", final_clamp),
]


def sanitize(result: AnalysisResult) -> AnalysisResult:
    """
    Return a repaired copy of ``result``

    Each step is isolated: an unexpected error in one step is logged and the
    step is skipped, so sanitize never raises for malformed input.
    """
    builder = ImputationBuilder(result)
    for name, step in STEPS:
        try:
            step(builder)
        except Exception as e:
            logger.error(f"Imputation step {name} failed: {e!r}")
            builder.note(f"Imputation step {name} skipped after an internal error.")
    return builder.build()
