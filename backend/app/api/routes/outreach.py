import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.agent.artifacts import OutreachEmailParams
from app.agent.pipeline import run_report_pipeline
from app.agent.reports import OUTREACH_EMAIL
from app.api.deps import CurrentUser, get_db
from app.api.routes.projects import get_owned_project
from app.api.routes.reports import outcome_response
from app.crud import create_prospect, get_prospect, list_records, update_prospect_status
from app.models import (
    OutreachEmailPublic,
    OutreachProspect,
    OutreachProspectCreate,
    OutreachProspectPublic,
    OutreachProspectStatusUpdate,
)

router = APIRouter()


def _get_owned_prospect(session: Session, prospect_id: uuid.UUID, owner_id: uuid.UUID) -> OutreachProspect:
    prospect = get_prospect(session=session, prospect_id=prospect_id, owner_id=owner_id)
    if not prospect:
        raise HTTPException(status_code=404, detail="Prospect not found")
    return prospect


@router.get("/{project_id}/prospects", response_model=list[OutreachProspectPublic])
def read_prospects(
    project_id: uuid.UUID,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
    limit: int | None = None,
) -> Any:
    project = get_owned_project(session, project_id, current_user.id)
    return list_records(
        session=session,
        model=OutreachProspect,
        owner_id=current_user.id,
        project_id=project.id,
        limit=limit,
    )


@router.post("/{project_id}/prospects", response_model=OutreachProspectPublic)
def create_new_prospect(
    project_id: uuid.UUID,
    prospect_in: OutreachProspectCreate,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
) -> Any:
    project = get_owned_project(session, project_id, current_user.id)
    prospect_in.name = prospect_in.name.strip()
    prospect_in.website = prospect_in.website.strip()
    if not prospect_in.name or not prospect_in.website:
        raise HTTPException(status_code=422, detail="Prospect name and website are required.")
    if prospect_in.email is not None:
        prospect_in.email = prospect_in.email.strip() or None
    return create_prospect(
        session=session, prospect_in=prospect_in, project_id=project.id, owner_id=current_user.id
    )


@router.patch("/prospects/{id}/status", response_model=OutreachProspectPublic)
def change_prospect_status(
    id: uuid.UUID,
    status_in: OutreachProspectStatusUpdate,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
) -> Any:
    prospect = _get_owned_prospect(session, id, current_user.id)
    return update_prospect_status(session=session, db_prospect=prospect, status=status_in.status)


@router.post("/prospects/{id}/email", response_model=OutreachEmailPublic)
async def generate_prospect_email(
    id: uuid.UUID,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
) -> Any:
    """
    Draft a personalised outreach email for a prospect. The draft is returned, never stored.
    """
    prospect = _get_owned_prospect(session, id, current_user.id)
    project = get_owned_project(session, prospect.project_id, current_user.id)

    outcome = await run_report_pipeline(
        OUTREACH_EMAIL,
        OutreachEmailParams(
            prospect_name=prospect.name,
            prospect_website=prospect.website,
            project_url=project.site_url,
        ),
    )
    if not outcome.succeeded:
        return outcome_response(outcome)
    return OutreachEmailPublic(prospect_id=prospect.id, body=outcome.result["body"])
