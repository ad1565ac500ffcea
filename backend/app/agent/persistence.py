import asyncio
import logging
import uuid
from typing import Any, Callable

from sqlmodel import Session, SQLModel

from app.agent.artifacts import (
    ContentBrief,
    ContentBriefParams,
    SerpSimulationParams,
    SerpSimulationResult,
    SiteAuditParams,
    SiteAuditResult,
    TechnicalAuditParams,
    TechnicalAuditResult,
)
from app.agent.exceptions import AuthenticationError, PersistenceError
from app.crud import create_audit, create_content_brief, create_serp_simulation
from app.models import AuditCreate, ContentBriefRecordCreate, SerpSimulationCreate

logger = logging.getLogger(__name__)

# (session, result, params, owner_id, project_id) -> stored row
RecordWriter = Callable[[Session, Any, Any, uuid.UUID, uuid.UUID], SQLModel]


def save_technical_audit(
    session: Session,
    result: TechnicalAuditResult,
    params: TechnicalAuditParams,
    owner_id: uuid.UUID,
    project_id: uuid.UUID,
) -> SQLModel:
    return create_audit(
        session=session,
        audit_in=AuditCreate(
            project_id=project_id,
            user_id=owner_id,
            audit_type="technical",
            status="completed",
            full_report=result.model_dump(),
        ),
    )


def save_site_audit(
    session: Session,
    result: SiteAuditResult,
    params: SiteAuditParams,
    owner_id: uuid.UUID,
    project_id: uuid.UUID,
) -> SQLModel:
    return create_audit(
        session=session,
        audit_in=AuditCreate(
            project_id=project_id,
            user_id=owner_id,
            audit_type="site",
            status="completed",
            full_report=result.model_dump(),
            overall_health_score=result.audit_summary.overall_health_score,
            executive_summary=result.audit_summary.executive_summary,
        ),
    )


def save_serp_simulation(
    session: Session,
    result: SerpSimulationResult,
    params: SerpSimulationParams,
    owner_id: uuid.UUID,
    project_id: uuid.UUID,
) -> SQLModel:
    return create_serp_simulation(
        session=session,
        simulation_in=SerpSimulationCreate(
            project_id=project_id,
            user_id=owner_id,
            target_keyword=params.keyword,
            input_draft_content=params.draft_content,
            simulation_report=result.model_dump(),
        ),
    )


def save_content_brief(
    session: Session,
    result: ContentBrief,
    params: ContentBriefParams,
    owner_id: uuid.UUID,
    project_id: uuid.UUID,
) -> SQLModel:
    return create_content_brief(
        session=session,
        brief_in=ContentBriefRecordCreate(
            project_id=project_id,
            user_id=owner_id,
            target_keyword=result.target_keyword,
            brief_data=result.model_dump(),
        ),
    )


def _rollback_session_safely(session: Session) -> None:
    try:
        session.rollback()
    except Exception as exc:
        logger.warning("Session rollback failed: %s", exc)


class ReportRecorder:
    """Writes validated results to the record store on behalf of an explicit owner."""

    def __init__(self, session: Session):
        self.session = session

    async def save(
        self,
        writer: RecordWriter,
        result: Any,
        params: Any,
        *,
        owner_id: uuid.UUID | None,
        project_id: uuid.UUID,
    ) -> SQLModel:
        if owner_id is None:
            raise AuthenticationError("User not authenticated.")

        try:
            record = await asyncio.to_thread(
                writer, self.session, result, params, owner_id, project_id
            )
        except Exception as exc:
            _rollback_session_safely(self.session)
            logger.warning("Failed to persist result for project %s: %s", project_id, exc)
            raise PersistenceError(str(exc)) from exc

        logger.info("Persisted %s %s for project %s", type(record).__name__, record.id, project_id)
        return record
