import json
from typing import Any

from app.agent.artifacts import ComposedPrompt

SITE_AUDIT_SYSTEM_PROMPT = """
**Persona:**
You are "SEO-Flow Oracle", a senior SEO consultant with 20 years of experience across technical SEO,
on-page optimization, content strategy and user experience. You turn raw crawl data into a prioritized,
business-focused action plan: for every problem you explain *why* it matters, what it costs, and how to fix it.

**Objective:**
Audit the website data provided as JSON. Identify critical issues and opportunities and structure them
into a prioritized report. Every finding gets a severity (Low, Medium, High, Critical, or Opportunity),
a business impact and a recommended action.

**Steps:**
1. **Overall Site Health:** A single score from 0 to 100 for the site's SEO health plus a concise executive summary.
2. **Technical SEO:** Status code issues (4xx, 5xx), redirect chains and slow load times in `crawl_data`;
   Core Web Vitals from `core_web_vitals_summary` that miss Google's thresholds; site-wide canonicalization patterns.
3. **On-Page SEO:** Missing, duplicate, short or long title tags and meta descriptions; thin content (low `word_count`);
   heading problems (missing or multiple H1s); images missing alt text.
4. **Content & Strategy:** Cross-reference `crawl_data` with `google_search_console_summary` to find
   striking-distance keywords, content cannibalization and orphan pages.

Return a single JSON object in the required format and nothing else.
"""


def _page(site_url: str, path: str, status_code: int, **overrides: Any) -> dict[str, Any]:
    page = {
        "url": f"{site_url}{path}",
        "status_code": status_code,
        "title_tag": "",
        "meta_description": "",
        "h1_tags": [],
        "h2_tags": [],
        "word_count": 0,
        "internal_links_count": 0,
        "external_links_count": 0,
        "load_time_ms": 0,
        "has_schema": False,
        "schema_types": [],
        "image_count": 0,
        "images_missing_alt_text": 0,
        "is_canonicalized": False,
        "canonical_url": "",
    }
    page.update(overrides)
    return page


def build_simulated_crawl(site_url: str) -> dict[str, Any]:
    """
    Deterministic stand-in for crawler and Search Console output.
    There is no live crawler; the model audits this fixture shaped around the real site URL.
    """
    return {
        "site_url": site_url,
        "crawl_data": [
            _page(
                site_url, "/", 200,
                title_tag="Welcome to AwesomeSite",
                meta_description="The best site for awesome things.",
                h1_tags=["Welcome!"], h2_tags=["Our Services", "About Us"],
                word_count=800, internal_links_count=25, external_links_count=2, load_time_ms=1200,
                has_schema=True, schema_types=["Organization"], image_count=5, images_missing_alt_text=1,
                is_canonicalized=True, canonical_url=f"{site_url}/",
            ),
            _page(
                site_url, "/about", 200,
                title_tag="About Us | AwesomeSite",
                h1_tags=["Our Story"], h2_tags=["Our Team", "Our Mission"],
                word_count=450, internal_links_count=10, load_time_ms=2100,
                image_count=3, images_missing_alt_text=2,
                is_canonicalized=True, canonical_url=f"{site_url}/about",
            ),
            _page(
                site_url, "/blog/first-post", 200,
                title_tag="Our First Post",
                meta_description="Our exciting first blog post about stuff.",
                h1_tags=["Our First Post"], h2_tags=["Why we started", "What's next"],
                word_count=1500, internal_links_count=8, external_links_count=3, load_time_ms=900,
                has_schema=True, schema_types=["Article"], image_count=2,
                is_canonicalized=True, canonical_url=f"{site_url}/blog/first-post",
            ),
            _page(
                site_url, "/services", 200,
                title_tag="Services | AwesomeSite",
                meta_description="Our services are the best.",
                h1_tags=["What We Do"], h2_tags=["Service A", "Service B"],
                word_count=300, internal_links_count=5, external_links_count=1, load_time_ms=1800,
                canonical_url=f"{site_url}/products",
            ),
            _page(site_url, "/old-page", 301, load_time_ms=300),
            _page(
                site_url, "/broken-link", 404,
                title_tag="Not Found", h1_tags=["404 Not Found"],
                word_count=50, internal_links_count=1, load_time_ms=450,
            ),
        ],
        "error_summary": {
            "404_errors": [f"{site_url}/broken-link", f"{site_url}/another-missing-page"],
            "5xx_errors": [],
            "redirect_chains": [
                {
                    "source": f"{site_url}/redirect-a",
                    "destination": f"{site_url}/redirect-c",
                    "chain": [f"{site_url}/redirect-b"],
                }
            ],
        },
        "core_web_vitals_summary": {
            "lcp_average_ms": 3100,
            "cls_average_score": 0.21,
            "fid_average_ms": 150,
        },
        "google_search_console_summary": {
            "top_queries": [
                {"query": "awesome things", "clicks": 800, "impressions": 15000},
                {"query": "awesomesite services", "clicks": 200, "impressions": 3000},
                {"query": "what is awesomesite", "clicks": 50, "impressions": 5000},
            ],
            "top_pages": [
                {"url": f"{site_url}/", "clicks": 750, "impressions": 14000},
                {"url": f"{site_url}/services", "clicks": 150, "impressions": 2500},
            ],
            "manual_actions": "None",
        },
    }


def compose_site_audit(site_url: str) -> ComposedPrompt:
    crawl = build_simulated_crawl(site_url)
    return ComposedPrompt(
        system_instruction=SITE_AUDIT_SYSTEM_PROMPT,
        contents=f"Please perform a full site audit based on this data: {json.dumps(crawl, indent=2, ensure_ascii=False)}",
        failure_label=f'audit site "{site_url}"',
    )
