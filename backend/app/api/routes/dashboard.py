from typing import Any

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.deps import CurrentUser, get_db
from app.core.config import settings
from app.crud import count_records, list_records
from app.models import (
    Audit,
    ContentBriefRecord,
    DashboardCounts,
    DashboardPublic,
    OutreachProspect,
    Project,
    SerpSimulation,
)

router = APIRouter()


@router.get("/", response_model=DashboardPublic)
def read_dashboard(
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
) -> Any:
    """
    KPI counts plus the most recent records of each kind across all of the user's projects.
    """
    owner_id = current_user.id
    recent = settings.DASHBOARD_RECENT_LIMIT

    counts = DashboardCounts(
        projects=count_records(session=session, model=Project, owner_id=owner_id),
        audits=count_records(session=session, model=Audit, owner_id=owner_id),
        content_briefs=count_records(session=session, model=ContentBriefRecord, owner_id=owner_id),
        serp_simulations=count_records(session=session, model=SerpSimulation, owner_id=owner_id),
        outreach_prospects=count_records(session=session, model=OutreachProspect, owner_id=owner_id),
        links_acquired=count_records(
            session=session, model=OutreachProspect, owner_id=owner_id, status="Link Acquired"
        ),
    )
    return dict(
        counts=counts,
        recent_projects=list_records(
            session=session, model=Project, owner_id=owner_id, limit=settings.DASHBOARD_PROJECTS_LIMIT
        ),
        recent_audits=list_records(session=session, model=Audit, owner_id=owner_id, limit=recent),
        recent_briefs=list_records(
            session=session, model=ContentBriefRecord, owner_id=owner_id, limit=recent
        ),
        recent_simulations=list_records(
            session=session, model=SerpSimulation, owner_id=owner_id, limit=recent
        ),
        recent_prospects=list_records(
            session=session, model=OutreachProspect, owner_id=owner_id, limit=recent
        ),
    )
