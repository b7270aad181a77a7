"""SQLAlchemy models for the sources and content tables."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    metadata = MetaData()


class SourceORM(Base):
    __tablename__ = "sources"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(512), nullable=False)
    url = Column(String(2048), nullable=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)


class ContentORM(Base):
    __tablename__ = "content"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source_id = Column(Integer, ForeignKey("sources.id"), nullable=False, index=True)
    content_type = Column(String(16), nullable=False)  # text | image
    content_text = Column(Text, nullable=True)
    image_path = Column(String(1024), nullable=True)
    description = Column(Text, nullable=True)
    manual_description = Column(Boolean, nullable=False, default=False)
    organization = Column(String(255), nullable=True)
    source_type = Column(String(32), nullable=True)  # primary | secondary | tertiary
    people = Column(JSON, nullable=False, default=list)
    content_category = Column(String(32), nullable=True)
    industry = Column(String(255), nullable=True)
    content_date = Column(String(128), nullable=True)
    # JSON array of floats; decoded at the store boundary, see schemas.decode_embedding
    embedding = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)
