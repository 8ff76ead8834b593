from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """
    One engine per application instance. With the default in-memory SQLite URL the StaticPool keeps a single
    connection alive, so every session sees the same tables for the lifetime of the process.
    """
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    # Register the mapped tables on Base before creating them
    from dropmate.infrastructure.models import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
