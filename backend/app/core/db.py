from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings

connect_args = (
    {"check_same_thread": False}
    if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite")
    else {}
)
engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    connect_args=connect_args,
    pool_pre_ping=True,
)


def init_db(session: Session) -> None:
    # Tables are created from the SQLModel metadata; migrations are not managed here.
    from app import models  # noqa: F401

    SQLModel.metadata.create_all(session.get_bind())
