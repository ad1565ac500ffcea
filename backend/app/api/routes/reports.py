import json
import logging
import uuid
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from sqlmodel import Session
from sse_starlette.sse import EventSourceResponse

from app.agent.pipeline import PipelineOutcome, iter_report_pipeline, run_report_pipeline
from app.agent.reports import REPORT_DEFINITIONS, ReportDefinition
from app.api.deps import CurrentUser, get_db
from app.api.routes.projects import get_owned_project
from app.crud import list_records
from app.models import (
    Audit,
    AuditPublic,
    ContentBriefRecord,
    ContentBriefRecordPublic,
    Project,
    SerpSimulation,
    SerpSimulationPublic,
)

router = APIRouter()
logger = logging.getLogger(__name__)

StoredReportKind = Literal["technical_audit", "site_audit", "serp_simulation", "content_brief"]

# HTTP status for each fatal error kind; anything unlisted is a 500.
# Save-time errors (persistence, authentication) are not fatal and return 200.
ERROR_STATUS_CODES = {
    "configuration": 503,
    "transport": 502,
    "validation": 502,
}


class ReportRunRequest(BaseModel):
    keyword: str | None = None
    draft_content: str | None = None


def _build_params(definition: ReportDefinition, project: Project, payload: ReportRunRequest) -> BaseModel:
    # Audits always target the project's own site.
    raw = {
        "url": project.site_url,
        "keyword": (payload.keyword or "").strip(),
        "draft_content": (payload.draft_content or "").strip(),
    }
    try:
        return definition.params_model.model_validate(raw)
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][-1]) for err in e.errors())
        raise HTTPException(status_code=422, detail=f"Missing or empty fields: {missing}") from e


def outcome_response(outcome: PipelineOutcome) -> Any:
    if outcome.succeeded:
        return outcome
    status_code = ERROR_STATUS_CODES.get(outcome.error_kind or "", 500)
    return JSONResponse(status_code=status_code, content=outcome.model_dump(mode="json"))


@router.post("/{project_id}/{kind}", response_model=PipelineOutcome)
async def run_report(
    project_id: uuid.UUID,
    kind: StoredReportKind,
    payload: ReportRunRequest,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
) -> Any:
    """
    Generate a report for a project and store it.
    A result that was generated but could not be saved still returns 200 with `warning` set.
    """
    project = get_owned_project(session, project_id, current_user.id)
    definition = REPORT_DEFINITIONS[kind]
    params = _build_params(definition, project, payload)

    outcome = await run_report_pipeline(
        definition,
        params,
        session=session,
        owner_id=current_user.id,
        project_id=project.id,
    )
    logger.info("%s for project %s finished in state %s", kind, project.id, outcome.state.value)
    return outcome_response(outcome)


@router.post("/{project_id}/{kind}/stream")
async def stream_report(
    project_id: uuid.UUID,
    kind: StoredReportKind,
    payload: ReportRunRequest,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
):
    """Same as `run_report`, streaming every pipeline state transition via SSE."""
    project = get_owned_project(session, project_id, current_user.id)
    definition = REPORT_DEFINITIONS[kind]
    params = _build_params(definition, project, payload)
    owner_id = current_user.id

    async def event_stream():
        async for event in iter_report_pipeline(
            definition,
            params,
            session=session,
            owner_id=owner_id,
            project_id=project.id,
        ):
            yield json.dumps(event.model_dump(mode="json"))

    return EventSourceResponse(event_stream())


@router.get("/{project_id}/audits", response_model=list[AuditPublic])
def read_project_audits(
    project_id: uuid.UUID,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
    limit: int | None = None,
) -> Any:
    project = get_owned_project(session, project_id, current_user.id)
    return list_records(
        session=session, model=Audit, owner_id=current_user.id, project_id=project.id, limit=limit
    )


@router.get("/{project_id}/briefs", response_model=list[ContentBriefRecordPublic])
def read_project_briefs(
    project_id: uuid.UUID,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
    limit: int | None = None,
) -> Any:
    project = get_owned_project(session, project_id, current_user.id)
    return list_records(
        session=session,
        model=ContentBriefRecord,
        owner_id=current_user.id,
        project_id=project.id,
        limit=limit,
    )


@router.get("/{project_id}/simulations", response_model=list[SerpSimulationPublic])
def read_project_simulations(
    project_id: uuid.UUID,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
    limit: int | None = None,
) -> Any:
    project = get_owned_project(session, project_id, current_user.id)
    return list_records(
        session=session,
        model=SerpSimulation,
        owner_id=current_user.id,
        project_id=project.id,
        limit=limit,
    )
