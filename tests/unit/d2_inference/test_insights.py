"""
Unit tests for traffic banding, margin bands, competitors, maturity,
target market, product complexity, moat signals and the insights bundle
"""
import pytest

from core.config import Settings
from d0_gateway.types import ResourceSummary
from d1_extraction.base import parse_html
from d2_inference.competitors import MAX_COMPETITORS, METHOD, discover_competitors
from d2_inference.insights import detect_business_insights
from d2_inference.margin import estimate_margin
from d2_inference.market import detect_moat_signals, infer_target_market, score_product_complexity
from d2_inference.maturity import detect_marketing_maturity, detect_sales_maturity
from d2_inference.traffic import TrafficThresholds, classify_traffic, estimate_traffic
from d2_inference.types import TrafficClass

from tests.fixtures.inference import make_inputs

pytestmark = pytest.mark.unit


class TestTrafficClass:
    @pytest.mark.parametrize(
        "pages, blog_links, expected",
        [
            (1500, 0, TrafficClass.HIGH),
            (0, 101, TrafficClass.HIGH),
            (1000, 0, TrafficClass.MID),
            (50, 25, TrafficClass.MID),
            (201, 0, TrafficClass.MID),
            (200, 20, TrafficClass.SMALL),
            (10, 0, TrafficClass.SMALL),
            (0, 0, TrafficClass.UNKNOWN),
            (None, None, TrafficClass.UNKNOWN),
        ],
    )
    def test_default_bands(self, pages, blog_links, expected):
        assert classify_traffic(pages, blog_links, TrafficThresholds()) is expected

    def test_custom_thresholds(self):
        thresholds = TrafficThresholds(high_pages=10, high_blog_links=5, mid_pages=3, mid_blog_links=2)

        assert classify_traffic(11, 0, thresholds) is TrafficClass.HIGH
        assert classify_traffic(4, 0, thresholds) is TrafficClass.MID

    @pytest.mark.parametrize(
        "resources_count, expected",
        [(1001, TrafficClass.HIGH), (1000, TrafficClass.UNKNOWN), (600, TrafficClass.UNKNOWN), (None, TrafficClass.UNKNOWN)],
    )
    def test_resource_footprint_band(self, resources_count, expected):
        assert classify_traffic(None, None, TrafficThresholds(), resources_count=resources_count) is expected

    def test_resource_footprint_threshold_is_configurable(self):
        thresholds = TrafficThresholds(high_resources=50)

        assert classify_traffic(10, 0, thresholds, resources_count=51) is TrafficClass.HIGH
        assert classify_traffic(10, 0, thresholds, resources_count=50) is TrafficClass.SMALL

    def test_thresholds_from_settings(self):
        settings = Settings(_env_file=None, traffic_high_pages=5000, traffic_mid_pages=500)

        thresholds = TrafficThresholds.from_settings(settings)

        assert thresholds.high_pages == 5000
        assert thresholds.mid_pages == 500
        assert thresholds.high_blog_links == 100
        assert thresholds.high_resources == 1000

    def test_heavy_page_is_high_traffic(self, plain_html):
        inputs = make_inputs(plain_html, resource_summary=ResourceSummary(resources_count=1200))

        traffic = estimate_traffic(inputs, TrafficThresholds())

        assert traffic["estimatedTrafficClass"] == "High (500k+/mo)"
        assert traffic["indicators"]["resourceFootprint"] == 1200

    def test_estimate_traffic_indicators(self, plain_html):
        inputs = make_inputs(
            plain_html,
            sitemap_pages=250,
            resource_summary=ResourceSummary(resources_count=42),
            multi_language=True,
        )

        traffic = estimate_traffic(inputs, TrafficThresholds())

        assert traffic == {
            "estimatedTrafficClass": "Mid (50k–300k/mo)",
            "indicators": {
                "pagesIndexed": 250,
                "blogPostsEstimate": 0,
                "multiLanguage": True,
                "resourceFootprint": 42,
            },
        }


class TestMarginEstimate:
    def test_saas_on_nextjs(self):
        margin = estimate_margin("saas", {"nextjs": True}, {})

        assert (margin["low"], margin["high"], margin["estimate"]) == (75, 95, "85%")
        assert margin["notes"] == "Heuristic based on model=saas; adjustments applied: 5"

    def test_band_is_clipped_and_midpoint_rounds_half_up(self):
        heavy = ResourceSummary(total_js_kb=2500.0)

        margin = estimate_margin("marketplace", {"shopify": True}, {}, heavy)

        assert (margin["low"], margin["high"], margin["estimate"]) == (0, 25, "13%")

    def test_cloudflare_hosting(self):
        margin = estimate_margin("ecommerce", {}, {"cloudflare": True})

        assert margin["estimate"] == "43%"

    def test_unknown_model_uses_default_band(self):
        margin = estimate_margin("app_product", {}, {})

        assert (margin["low"], margin["high"]) == (20, 60)


class TestCompetitors:
    def test_saas_page(self, saas_html):
        inputs = make_inputs(saas_html)

        competitors = discover_competitors(["task", "teams"], inputs.html, inputs.soup)

        assert competitors == {
            "likelyCompetitors": ["Asana", "Trello", "ClickUp", "Jira", "trello", "jira for growing teams"],
            "method": METHOD,
        }

    def test_keyword_match(self):
        competitors = discover_competitors(["crm"], "<p>Nothing here</p>", parse_html("<p>Nothing here</p>"))

        assert competitors["likelyCompetitors"] == ["HubSpot", "Salesforce", "Zoho CRM"]

    def test_capped(self):
        html = "".join(f'<a href="/vs/rival-{i}">Us vs Rival {i}</a>' for i in range(30))

        competitors = discover_competitors([], html, parse_html(html))

        assert len(competitors["likelyCompetitors"]) == MAX_COMPETITORS
        assert competitors["likelyCompetitors"][0] == "rival 0"


class TestMaturity:
    def test_saas_sales_maturity(self, saas_html):
        sales = detect_sales_maturity(make_inputs(saas_html))

        assert sales["salesMaturity"] == "High"
        assert sales["signals"]["score"] == 7

    def test_plain_sales_maturity(self, plain_html):
        sales = detect_sales_maturity(make_inputs(plain_html))

        assert sales["salesMaturity"] == "Low"
        assert sales["signals"]["score"] == 0

    def test_medium_sales_maturity(self):
        html = '<a href="/pricing">Pricing</a><p>Contact sales</p>'

        assert detect_sales_maturity(make_inputs(html))["salesMaturity"] == "Medium"

    def test_marketing_maturity_levels(self):
        social = "".join(
            f'<a href="https://{p}.com/acme">{p}</a>' for p in ("facebook", "twitter", "linkedin")
        )
        blog = "".join(f'<a href="/blog/post-{i}">Post {i}</a>' for i in range(21))
        html = f"<html><body>{social}{blog}</body></html>"

        high = detect_marketing_maturity(make_inputs(html, metadata={"title": "Acme"}))
        low = detect_marketing_maturity(make_inputs(html, metadata={}))

        assert high["marketingMaturity"] == "High"
        assert high["signals"] == {"blogLinks": 21, "socialCount": 3, "hasOg": True}
        assert low["marketingMaturity"] == "Low"


class TestMarket:
    def test_target_market(self):
        html = '<html lang="de"><body><a href="/de/shop">Shop</a> Preis 20 €</body></html>'

        market = infer_target_market(make_inputs(html))

        assert market == {"language": "de", "regionHint": "de", "currencySample": "€", "audience": "B2C"}

    def test_b2b_market(self, saas_html):
        market = infer_target_market(make_inputs(saas_html))

        assert market["audience"] == "B2B"
        assert market["language"] == "en"

    def test_product_complexity(self, saas_html):
        medium = score_product_complexity(make_inputs(saas_html))

        features = "".join(f'<a href="/features/{i}">Feature {i}</a>' for i in range(4))
        html = f'<a href="/docs">Docs</a><p>Connect with Zapier</p>{features}'
        high = score_product_complexity(make_inputs(html))

        assert (medium["productComplexity"], medium["score"]) == ("Medium", 40)
        assert (high["productComplexity"], high["score"]) == ("High", 90)

    def test_moat_signals(self):
        html = "<p>Our patented machine learning engine ships with a REST API.</p>"

        assert detect_moat_signals(html) == {
            "moatSignals": ["Patents mentioned", "ML/AI capability", "API-first architecture"]
        }


class TestBusinessInsights:
    def test_bundle(self, saas_html):
        insights = detect_business_insights(make_inputs(saas_html), TrafficThresholds())

        assert set(insights) == {
            "businessModel",
            "pricing",
            "marginEstimate",
            "competitors",
            "trafficEstimate",
            "salesMaturity",
            "marketingMaturity",
            "targetMarket",
            "productComplexity",
            "moatSignals",
        }
        assert insights["businessModel"]["inferredModel"] == "saas"
        assert insights["marginEstimate"]["estimate"] == "85%"
        assert insights["trafficEstimate"]["estimatedTrafficClass"] == "Unknown"

    def test_failing_scorer_uses_default(self, saas_html, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("scorer bug")

        monkeypatch.setattr("d2_inference.insights.detect_pricing", broken)

        insights = detect_business_insights(make_inputs(saas_html), TrafficThresholds())

        assert insights["pricing"] == {}
        assert insights["businessModel"]["inferredModel"] == "saas"
