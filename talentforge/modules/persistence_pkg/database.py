# talentforge/modules/persistence_pkg/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base is the class our database models will inherit from.
Base = declarative_base()


def build_engine(database_url: str):
    """Creates an engine; in-memory SQLite shares one connection across threads."""
    if database_url.startswith("sqlite"):
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        # The connect_args is recommended for SQLite with FastAPI to allow multithreading.
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url)


def build_session_factory(engine):
    """This is what callers use to get a connection to the database."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind) -> None:
    """Creates any missing tables."""
    from . import models  # noqa: F401  (registers the tables on Base)
    Base.metadata.create_all(bind=bind)
