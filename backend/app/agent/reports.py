from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel

from app.agent.artifacts import (
    ComposedPrompt,
    ContentBrief,
    ContentBriefParams,
    OutreachEmail,
    OutreachEmailParams,
    SerpSimulationParams,
    SerpSimulationResult,
    SiteAuditParams,
    SiteAuditResult,
    TechnicalAuditParams,
    TechnicalAuditResult,
)
from app.agent.persistence import (
    RecordWriter,
    save_content_brief,
    save_serp_simulation,
    save_site_audit,
    save_technical_audit,
)
from app.agent.prompts.content_brief import compose_content_brief
from app.agent.prompts.outreach import compose_outreach_email
from app.agent.prompts.serp_simulation import compose_serp_simulation
from app.agent.prompts.site_audit import compose_site_audit
from app.agent.prompts.technical_audit import compose_technical_audit
from app.agent.validators import (
    validate_content_brief,
    validate_outreach_email,
    validate_serp_simulation,
    validate_site_audit,
    validate_technical_audit,
)


@dataclass(frozen=True)
class ReportDefinition:
    """Everything that distinguishes one report kind from another."""

    kind: str
    # Used in user-facing messages, e.g. "Audit complete, but failed to save result".
    label: str
    params_model: type[BaseModel]
    response_model: type[BaseModel]
    compose: Callable[[Any], ComposedPrompt]
    validate: Callable[[str], Any]
    # None for kinds whose output is shown but never stored.
    persist: RecordWriter | None = None
    structured: bool = True
    model_setting: str = "MODEL_DEFAULT"


TECHNICAL_AUDIT = ReportDefinition(
    kind="technical_audit",
    label="Audit",
    params_model=TechnicalAuditParams,
    response_model=TechnicalAuditResult,
    compose=lambda params: compose_technical_audit(params.url),
    validate=validate_technical_audit,
    persist=save_technical_audit,
)

SITE_AUDIT = ReportDefinition(
    kind="site_audit",
    label="Audit",
    params_model=SiteAuditParams,
    response_model=SiteAuditResult,
    compose=lambda params: compose_site_audit(params.url),
    validate=validate_site_audit,
    persist=save_site_audit,
)

SERP_SIMULATION = ReportDefinition(
    kind="serp_simulation",
    label="Simulation",
    params_model=SerpSimulationParams,
    response_model=SerpSimulationResult,
    compose=lambda params: compose_serp_simulation(params.keyword, params.draft_content),
    validate=validate_serp_simulation,
    persist=save_serp_simulation,
)

CONTENT_BRIEF = ReportDefinition(
    kind="content_brief",
    label="Brief",
    params_model=ContentBriefParams,
    response_model=ContentBrief,
    compose=lambda params: compose_content_brief(params.keyword),
    validate=validate_content_brief,
    persist=save_content_brief,
)

OUTREACH_EMAIL = ReportDefinition(
    kind="outreach_email",
    label="Email",
    params_model=OutreachEmailParams,
    response_model=OutreachEmail,
    compose=lambda params: compose_outreach_email(
        params.prospect_name, params.prospect_website, params.project_url
    ),
    validate=validate_outreach_email,
    structured=False,
    model_setting="MODEL_OUTREACH",
)

REPORT_DEFINITIONS: dict[str, ReportDefinition] = {
    definition.kind: definition
    for definition in (TECHNICAL_AUDIT, SITE_AUDIT, SERP_SIMULATION, CONTENT_BRIEF, OUTREACH_EMAIL)
}
