import json
from typing import Any

from app.agent.artifacts import ComposedPrompt

CONTENT_BRIEF_SYSTEM_PROMPT = """
**Persona:**
You are "The Content Architect", SEO-Flow's content strategist, with deep expertise in SEO and user psychology.
You deconstruct SERP data into an actionable content blueprint that a writer can turn into a best-in-class article.

**Objective:**
Analyze the simulated SERP data for the keyword and synthesize it into a content brief. The brief must be
logical, thorough and directly informed by the patterns in the data.

**Steps:**
1.  **User Intent:** From titles and snippets, decide whether intent is informational, commercial, navigational
    or transactional, and summarize what the searcher is trying to accomplish.
2.  **Recommended Structure:** Combine and rephrase the topics covered by the top results into a logical outline
    of H2s, each with its H3s.
3.  **Key Entities:** The most important and frequently mentioned concepts and themes, the "must-include" topics
    for topical authority.
4.  **People Also Ask:** The critical questions a searcher would have, phrased as direct questions.

Return a single JSON object in the required format and nothing else.
"""

_SERP_RESULT_TEMPLATES = (
    ("{k} - The Ultimate Guide",
     "Everything you need to know about {k}. Our comprehensive guide covers all aspects...",
     "The primary goal of this guide is to explain {k} in detail. We will cover its history, its applications, and future trends."),
    ("What is {k}? Explained Simply",
     "A simple explanation of {k} for beginners. Understand the core concepts quickly.",
     "For beginners, {k} can seem complex. This article breaks it down into easy-to-understand parts. We focus on the 'what' and 'why'."),
    ("Top 5 Benefits of Using {k}",
     "Discover the main advantages of implementing {k} in your workflow.",
     "Many people wonder about the benefits. This post outlines the top five advantages, including cost savings and efficiency."),
    ("How to Get Started with {k}",
     "A step-by-step tutorial on implementing {k} from scratch.",
     "This tutorial provides a clear, step-by-step process. We cover installation, setup, and first use."),
    ("Comparing {k} vs. Other Solutions",
     "See how {k} stacks up against its main competitors in the market.",
     "An in-depth comparison is crucial. We analyze features, pricing, and user reviews for {k} and its alternatives."),
    ("Advanced Techniques for {k}",
     "For experienced users, this article explores advanced strategies.",
     "Once you master the basics, you can explore these advanced techniques to get the most out of {k}."),
    ("Common {k} Mistakes to Avoid",
     "Learn about common pitfalls when using {k} and how to prevent them.",
     "Avoid these common mistakes. We've compiled a list of errors new users often make."),
    ("Case Study: How We Improved ROI with {k}",
     "A real-world case study showing the impact of {k}.",
     "This case study demonstrates the real-world success achieved by using {k}, with specific metrics on ROI."),
    ("The Future of {k}",
     "Experts predict the future trends and evolution of {k}.",
     "What does the future hold? We asked industry experts for their predictions on the evolution of {k}."),
    ("Frequently Asked Questions about {k}",
     "Get answers to the most common questions about {k}.",
     "This FAQ section answers the top questions we receive, covering everything from pricing to technical support."),
)


def build_simulated_serp(keyword: str) -> dict[str, Any]:
    """Deterministic top-10 SERP fixture for `keyword`; there is no live SERP API."""
    # Plain replace keeps braces in the keyword intact.
    return {
        "keyword": keyword,
        "top_10_results": [
            {
                "title": title.replace("{k}", keyword),
                "snippet": snippet.replace("{k}", keyword),
                "text_content": text.replace("{k}", keyword),
            }
            for title, snippet, text in _SERP_RESULT_TEMPLATES
        ],
    }


def compose_content_brief(keyword: str) -> ComposedPrompt:
    serp = build_simulated_serp(keyword)
    return ComposedPrompt(
        system_instruction=CONTENT_BRIEF_SYSTEM_PROMPT,
        contents=(
            f'Please generate a content brief for the keyword "{keyword}" '
            f"based on this simulated SERP data: {json.dumps(serp, indent=2, ensure_ascii=False)}"
        ),
        failure_label=f'generate brief for "{keyword}"',
    )
