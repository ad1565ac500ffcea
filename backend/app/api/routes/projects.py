import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.api.deps import CurrentUser, get_db
from app.crud import create_project, get_project, list_records, update_project_folders
from app.models import Project, ProjectCreate, ProjectFoldersUpdate, ProjectPublic

router = APIRouter()


def get_owned_project(session: Session, project_id: uuid.UUID, owner_id: uuid.UUID) -> Project:
    project = get_project(session=session, project_id=project_id, owner_id=owner_id)
    if not project:
        # Other users' projects are indistinguishable from missing ones.
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("/", response_model=ProjectPublic)
def create_new_project(
    *,
    session: Session = Depends(get_db),
    current_user: CurrentUser,
    project_in: ProjectCreate
) -> Any:
    project = create_project(session=session, project_in=project_in, owner_id=current_user.id)
    return project

@router.get("/", response_model=list[ProjectPublic])
def read_projects(
    session: Session = Depends(get_db),
    current_user: CurrentUser = None,
    limit: int | None = None,
) -> Any:
    return list_records(session=session, model=Project, owner_id=current_user.id, limit=limit)

@router.get("/{id}", response_model=ProjectPublic)
def read_project(
    id: uuid.UUID,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None
) -> Any:
    return get_owned_project(session, id, current_user.id)

@router.patch("/{id}/folders", response_model=ProjectPublic)
def update_folders(
    id: uuid.UUID,
    folders_in: ProjectFoldersUpdate,
    session: Session = Depends(get_db),
    current_user: CurrentUser = None
) -> Any:
    """
    Update the free-text engagement folders of a project. Name and site URL are fixed.
    """
    project = get_owned_project(session, id, current_user.id)
    return update_project_folders(session=session, db_project=project, folders_in=folders_in)
