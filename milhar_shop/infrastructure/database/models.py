"""SQLAlchemy ORM models for the durable session storage"""

from sqlalchemy import Column, DateTime, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class StorageEntry(Base):
    """Opaque key/value pair surviving process restarts"""

    __tablename__ = "storage_entry"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
