import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import EmailStr
from sqlalchemy import JSON, DateTime, Text
from sqlmodel import Field, Relationship, SQLModel


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


# Shared properties
class UserBase(SQLModel):
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    is_active: bool = True
    full_name: str | None = Field(default=None, max_length=255)


class UserRegister(SQLModel):
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8, max_length=128)
    full_name: str | None = Field(default=None, max_length=255)


# Database model, database table inferred from class name
class User(UserBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hashed_password: str
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class UserPublic(UserBase):
    id: uuid.UUID
    created_at: datetime | None = None


# JSON payload containing access token
class Token(SQLModel):
    access_token: str
    token_type: str = "bearer"


# Contents of JWT token
class TokenPayload(SQLModel):
    sub: str | None = None


# Projects


class ProjectFolders(SQLModel):
    folder_access_credentials: str | None = Field(default=None, sa_type=Text)
    folder_pre_fix_reports: str | None = Field(default=None, sa_type=Text)
    folder_fixes_logs: str | None = Field(default=None, sa_type=Text)
    folder_post_fix_reports: str | None = Field(default=None, sa_type=Text)
    folder_communication_logs: str | None = Field(default=None, sa_type=Text)
    folder_final_report: str | None = Field(default=None, sa_type=Text)


class ProjectBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    site_url: str = Field(min_length=1, max_length=2048)


class ProjectCreate(ProjectBase):
    pass


# Only the engagement folders are editable after creation.
class ProjectFoldersUpdate(ProjectFolders):
    pass


class Project(ProjectBase, ProjectFolders, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
        index=True,
    )
    user_id: uuid.UUID = Field(
        foreign_key="user.id", nullable=False, ondelete="CASCADE", index=True
    )
    audits: list["Audit"] = Relationship(back_populates="project", cascade_delete=True)
    content_briefs: list["ContentBriefRecord"] = Relationship(
        back_populates="project", cascade_delete=True
    )
    serp_simulations: list["SerpSimulation"] = Relationship(
        back_populates="project", cascade_delete=True
    )
    outreach_prospects: list["OutreachProspect"] = Relationship(
        back_populates="project", cascade_delete=True
    )


class ProjectPublic(ProjectBase, ProjectFolders):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime | None = None


# Generated report records. These are write-once: there is no update model.

class AuditBase(SQLModel):
    audit_type: str = Field(max_length=20)  # technical, site
    status: str = Field(default="completed", max_length=50)
    full_report: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    overall_health_score: int | None = None
    executive_summary: str | None = Field(default=None, sa_type=Text)


class AuditCreate(AuditBase):
    project_id: uuid.UUID
    user_id: uuid.UUID


class Audit(AuditBase, table=True):
    __tablename__ = "audits"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
        index=True,
    )
    project_id: uuid.UUID = Field(
        foreign_key="project.id", nullable=False, ondelete="CASCADE", index=True
    )
    user_id: uuid.UUID = Field(foreign_key="user.id", nullable=False, ondelete="CASCADE")
    project: Project | None = Relationship(back_populates="audits")


class AuditPublic(AuditBase):
    id: uuid.UUID
    project_id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime | None = None


class ContentBriefRecordBase(SQLModel):
    target_keyword: str = Field(max_length=500)
    brief_data: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)


class ContentBriefRecordCreate(ContentBriefRecordBase):
    project_id: uuid.UUID
    user_id: uuid.UUID


class ContentBriefRecord(ContentBriefRecordBase, table=True):
    __tablename__ = "content_briefs"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
        index=True,
    )
    project_id: uuid.UUID = Field(
        foreign_key="project.id", nullable=False, ondelete="CASCADE", index=True
    )
    user_id: uuid.UUID = Field(foreign_key="user.id", nullable=False, ondelete="CASCADE")
    project: Project | None = Relationship(back_populates="content_briefs")


class ContentBriefRecordPublic(ContentBriefRecordBase):
    id: uuid.UUID
    project_id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime | None = None


class SerpSimulationBase(SQLModel):
    target_keyword: str = Field(max_length=500)
    input_draft_content: str = Field(sa_type=Text)
    simulation_report: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)


class SerpSimulationCreate(SerpSimulationBase):
    project_id: uuid.UUID
    user_id: uuid.UUID


class SerpSimulation(SerpSimulationBase, table=True):
    __tablename__ = "serp_simulations"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
        index=True,
    )
    project_id: uuid.UUID = Field(
        foreign_key="project.id", nullable=False, ondelete="CASCADE", index=True
    )
    user_id: uuid.UUID = Field(foreign_key="user.id", nullable=False, ondelete="CASCADE")
    project: Project | None = Relationship(back_populates="serp_simulations")


class SerpSimulationPublic(SerpSimulationBase):
    id: uuid.UUID
    project_id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime | None = None


# Outreach

ProspectStatus = Literal["Identified", "Contacted", "Replied", "Link Acquired", "Rejected"]


class OutreachProspectBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    website: str = Field(min_length=1, max_length=2048)
    email: str | None = Field(default=None, max_length=255)
    status: str = Field(default="Identified", max_length=50)
    notes: str | None = Field(default=None, sa_type=Text)


class OutreachProspectCreate(OutreachProspectBase):
    status: ProspectStatus = "Identified"


class OutreachProspectStatusUpdate(SQLModel):
    status: ProspectStatus


class OutreachProspect(OutreachProspectBase, table=True):
    __tablename__ = "outreach_prospects"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
        index=True,
    )
    last_contacted: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    project_id: uuid.UUID = Field(
        foreign_key="project.id", nullable=False, ondelete="CASCADE", index=True
    )
    user_id: uuid.UUID = Field(foreign_key="user.id", nullable=False, ondelete="CASCADE")
    project: Project | None = Relationship(back_populates="outreach_prospects")


class OutreachProspectPublic(OutreachProspectBase):
    id: uuid.UUID
    project_id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime | None = None
    last_contacted: datetime | None = None


class OutreachEmailPublic(SQLModel):
    prospect_id: uuid.UUID
    body: str


# Dashboard

class DashboardCounts(SQLModel):
    projects: int = 0
    audits: int = 0
    content_briefs: int = 0
    serp_simulations: int = 0
    outreach_prospects: int = 0
    links_acquired: int = 0


class DashboardPublic(SQLModel):
    counts: DashboardCounts
    recent_projects: list[ProjectPublic]
    recent_audits: list[AuditPublic]
    recent_briefs: list[ContentBriefRecordPublic]
    recent_simulations: list[SerpSimulationPublic]
    recent_prospects: list[OutreachProspectPublic]
