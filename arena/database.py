import logging
from typing import Annotated
from fastapi import Depends
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool
from .config import DEV, SQLITE_URL, POSTGRES_URL

logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # in-memory databases must share one connection across threads
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


if DEV:
    engine = build_engine(SQLITE_URL)
    logger.info("Using SQLite database for development")
else:
    if not POSTGRES_URL:
        raise ValueError("POSTGRES_URL environment variable is required in production")

    engine = build_engine(POSTGRES_URL)
    logger.info("Using PostgreSQL database for production")


def create_db_and_tables(bind: Engine | None = None):
    # registers the table classes on SQLModel.metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables created")


def get_session():
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_session)]
