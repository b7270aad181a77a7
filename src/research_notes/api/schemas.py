from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from research_notes.vectorstore.schemas import ContentItem, Source


class SourceOut(BaseModel):
    id: int = Field(..., description="Source id.")
    title: str = Field(..., description="Source title.")
    url: Optional[str] = Field(None, description="Link to the source document.")
    created_at: Optional[datetime] = None

    @classmethod
    def from_source(cls, source: Source) -> "SourceOut":
        return cls(id=source.id, title=source.title, url=source.url, created_at=source.created_at)


class ContentItemOut(BaseModel):
    id: int
    source_id: int
    content_type: str
    content_text: Optional[str] = None
    image_path: Optional[str] = None
    description: str = ""
    manual_description: bool = False
    organization: Optional[str] = None
    source_type: Optional[str] = None
    people: List[str] = Field(default_factory=list)
    content_category: Optional[str] = None
    industry: Optional[str] = None
    content_date: Optional[str] = None
    created_at: Optional[datetime] = None
    source_title: Optional[str] = None
    source_url: Optional[str] = None

    @classmethod
    def fields_from_item(cls, item: ContentItem) -> dict:
        return {
            "id": item.id,
            "source_id": item.source_id,
            "content_type": item.content_type,
            "content_text": item.content_text,
            "image_path": item.image_path,
            "description": item.description,
            "manual_description": item.manual_description,
            **item.tags.to_dict(),
            "created_at": item.created_at,
            "source_title": item.source_title,
            "source_url": item.source_url,
        }

    @classmethod
    def from_item(cls, item: ContentItem) -> "ContentItemOut":
        return cls(**cls.fields_from_item(item))
