from typing import Literal

from pydantic import BaseModel, Field


class AuditCheck(BaseModel):
    check_name: str = Field(
        description="The specific item being checked (e.g., 'Title Tag Presence', 'Meta Description Length')."
    )
    status: Literal["PASS", "WARN", "FAIL"] = Field(description="The result of the check.")
    description: str = Field(
        description="A one-sentence explanation of the check's result for the given URL."
    )
    recommendation: str = Field(
        description="A concrete, actionable recommendation to fix the issue if status is FAIL or WARN. If PASS, state what was done correctly."
    )


class AuditCategory(BaseModel):
    category_name: str = Field(
        description="The name of the audit category (e.g., 'On-Page SEO', 'Performance & Speed', 'Mobile Friendliness')."
    )
    checks: list[AuditCheck] = Field(description="A list of specific checks within this category.")


class TechnicalAuditResult(BaseModel):
    """Artifact produced by the technical audit."""
    audit_results: list[AuditCategory] = Field(description="A list of SEO audit categories.")


class AuditSummary(BaseModel):
    site_url: str
    overall_health_score: int = Field(ge=0, le=100, description="Overall SEO health from 0 to 100.")
    executive_summary: str


class AuditFinding(BaseModel):
    issue_id: str
    category: str
    title: str
    severity: Literal["Low", "Medium", "High", "Critical", "Opportunity"]
    description: str
    business_impact: str
    affected_urls: list[str]
    recommended_action: str


class SiteAuditResult(BaseModel):
    """Artifact produced by the full-site audit."""
    audit_summary: AuditSummary
    findings: list[AuditFinding]


class SerpSimulationResult(BaseModel):
    """Artifact produced by the SERP simulation."""
    predicted_rank: str = Field(
        description="The predicted ranking position for the draft content (e.g., '8-12', 'Top 5')."
    )
    strengths: list[str] = Field(
        description="A list of 2-3 key strengths of the draft content when compared to the likely competition."
    )
    weaknesses: list[str] = Field(
        description="A list of 2-3 critical weaknesses or gaps in the draft content."
    )
    recommendations: list[str] = Field(
        description="A list of the top 3-5 most impactful, actionable recommendations to improve the content's ranking potential."
    )


class ArticleSection(BaseModel):
    h2: str = Field(description="The text for an H2 heading.")
    h3s: list[str] = Field(description="A list of H3 subheadings that fall under this H2.")


class ContentBrief(BaseModel):
    """Artifact produced by the content brief generator."""
    target_keyword: str
    user_intent: str = Field(
        description="A concise summary of what the user is most likely trying to accomplish by searching for this keyword."
    )
    recommended_structure: list[ArticleSection] = Field(
        description="A logical article structure with H2s and corresponding H3s."
    )
    key_entities: list[str] = Field(
        description="A list of important concepts, people, or places that should be mentioned in the article to demonstrate expertise."
    )
    people_also_ask: list[str] = Field(
        description="A list of common questions related to the keyword that should be answered in the content."
    )


class OutreachEmail(BaseModel):
    """Plain-text outreach email draft. Never persisted."""
    body: str


class ComposedPrompt(BaseModel):
    """Instruction and context strings for one generation call."""
    system_instruction: str
    contents: str
    # Names the subject in failure messages, e.g. 'audit "https://example.com"'.
    failure_label: str


# Caller-supplied inputs, one model per report kind.

class TechnicalAuditParams(BaseModel):
    url: str = Field(min_length=1)


class SiteAuditParams(BaseModel):
    url: str = Field(min_length=1)


class SerpSimulationParams(BaseModel):
    keyword: str = Field(min_length=1)
    draft_content: str = Field(min_length=1)


class ContentBriefParams(BaseModel):
    keyword: str = Field(min_length=1)


class OutreachEmailParams(BaseModel):
    prospect_name: str = Field(min_length=1)
    prospect_website: str = Field(min_length=1)
    project_url: str = Field(min_length=1)
