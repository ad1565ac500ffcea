import uuid
from typing import Any, TypeVar

from sqlmodel import Session, SQLModel, col, func, select

from app.core.security import get_password_hash, verify_password
from app.models import (
    Audit,
    AuditCreate,
    ContentBriefRecord,
    ContentBriefRecordCreate,
    OutreachProspect,
    OutreachProspectCreate,
    Project,
    ProjectCreate,
    ProjectFoldersUpdate,
    SerpSimulation,
    SerpSimulationCreate,
    User,
    UserRegister,
    get_datetime_utc,
)

RecordT = TypeVar("RecordT", Audit, ContentBriefRecord, SerpSimulation, OutreachProspect, Project)


def create_user(*, session: Session, user_create: UserRegister) -> User:
    db_obj = User.model_validate(
        user_create, update={"hashed_password": get_password_hash(user_create.password)}
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    session_user = session.exec(statement).first()
    return session_user


# Dummy hash to use for timing attack prevention when user is not found
# This is an Argon2 hash of a random password, used to ensure constant-time comparison
DUMMY_HASH = "$argon2id$v=19$m=65536,t=3,p=4$MjQyZWE1MzBjYjJlZTI0Yw$YTU4NGM5ZTZmYjE2NzZlZjY0ZWY3ZGRkY2U2OWFjNjk"


def authenticate(*, session: Session, email: str, password: str) -> User | None:
    db_user = get_user_by_email(session=session, email=email)
    if not db_user:
        # Keep response time similar whether or not the email exists
        verify_password(password, DUMMY_HASH)
        return None
    verified, updated_password_hash = verify_password(password, db_user.hashed_password)
    if not verified:
        return None
    if updated_password_hash:
        db_user.hashed_password = updated_password_hash
        session.add(db_user)
        session.commit()
        session.refresh(db_user)
    return db_user


def _insert(session: Session, db_obj: RecordT) -> RecordT:
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


# Projects

def create_project(*, session: Session, project_in: ProjectCreate, owner_id: uuid.UUID) -> Project:
    db_project = Project.model_validate(project_in, update={"user_id": owner_id})
    return _insert(session, db_project)


def get_project(*, session: Session, project_id: uuid.UUID, owner_id: uuid.UUID) -> Project | None:
    """Fetch a project only if `owner_id` owns it."""
    project = session.get(Project, project_id)
    if project is None or project.user_id != owner_id:
        return None
    return project


def update_project_folders(
    *, session: Session, db_project: Project, folders_in: ProjectFoldersUpdate
) -> Project:
    folder_data = folders_in.model_dump(exclude_unset=True)
    db_project.sqlmodel_update(folder_data)
    session.add(db_project)
    session.commit()
    session.refresh(db_project)
    return db_project


# Generated reports. Insert only; there is deliberately no update path.

def create_audit(*, session: Session, audit_in: AuditCreate) -> Audit:
    return _insert(session, Audit.model_validate(audit_in))


def create_content_brief(*, session: Session, brief_in: ContentBriefRecordCreate) -> ContentBriefRecord:
    return _insert(session, ContentBriefRecord.model_validate(brief_in))


def create_serp_simulation(*, session: Session, simulation_in: SerpSimulationCreate) -> SerpSimulation:
    return _insert(session, SerpSimulation.model_validate(simulation_in))


# Listing

def list_records(
    *,
    session: Session,
    model: type[RecordT],
    owner_id: uuid.UUID,
    project_id: uuid.UUID | None = None,
    limit: int | None = None,
) -> list[RecordT]:
    """
    Rows owned by `owner_id`, newest first.
    `project_id` narrows to one project (ignored for `Project` itself);
    `limit` caps the number of rows returned.
    """
    statement = select(model).where(model.user_id == owner_id)
    if project_id is not None and model is not Project:
        statement = statement.where(model.project_id == project_id)
    statement = statement.order_by(col(model.created_at).desc())
    if limit is not None:
        statement = statement.limit(max(0, limit))
    return list(session.exec(statement).all())


def count_records(
    *, session: Session, model: type[SQLModel], owner_id: uuid.UUID, **filters: Any
) -> int:
    statement = select(func.count()).select_from(model).where(model.user_id == owner_id)
    for field_name, value in filters.items():
        statement = statement.where(getattr(model, field_name) == value)
    return session.exec(statement).one()


# Outreach

def create_prospect(
    *,
    session: Session,
    prospect_in: OutreachProspectCreate,
    project_id: uuid.UUID,
    owner_id: uuid.UUID,
) -> OutreachProspect:
    db_prospect = OutreachProspect.model_validate(
        prospect_in, update={"project_id": project_id, "user_id": owner_id}
    )
    return _insert(session, db_prospect)


def get_prospect(
    *, session: Session, prospect_id: uuid.UUID, owner_id: uuid.UUID
) -> OutreachProspect | None:
    prospect = session.get(OutreachProspect, prospect_id)
    if prospect is None or prospect.user_id != owner_id:
        return None
    return prospect


def update_prospect_status(
    *, session: Session, db_prospect: OutreachProspect, status: str
) -> OutreachProspect:
    db_prospect.status = status
    if status == "Contacted":
        db_prospect.last_contacted = get_datetime_utc()
    session.add(db_prospect)
    session.commit()
    session.refresh(db_prospect)
    return db_prospect
