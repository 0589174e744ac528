"""Database engine and session factory for the session storage"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from milhar_shop.infrastructure.database.models import Base


def create_storage_engine(url: str) -> Engine:
    """Build an engine and make sure the storage table exists"""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    engine = create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        connect_args=connect_args,
    )
    Base.metadata.create_all(bind=engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, bind=engine)
