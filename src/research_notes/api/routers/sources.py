from __future__ import annotations

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from research_notes.api.deps import get_store
from research_notes.api.schemas import SourceOut
from research_notes.vectorstore.content_store import ContentStore


router = APIRouter(prefix="/sources", tags=["sources"])


class CreateSourceRequest(BaseModel):
    title: str = Field(..., min_length=1, description="Title of the document or link.")
    url: Optional[str] = Field(None, description="Where the source can be found.")


@router.get("", summary="List sources", response_model=List[SourceOut])
async def list_sources(store: ContentStore = Depends(get_store)) -> List[SourceOut]:
    try:
        sources = await asyncio.to_thread(store.list_sources)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to list sources: {e}") from e
    return [SourceOut.from_source(s) for s in sources]


@router.post("", summary="Create a source", response_model=SourceOut)
async def create_source(
    request: CreateSourceRequest, store: ContentStore = Depends(get_store)
) -> SourceOut:
    try:
        source = await asyncio.to_thread(store.add_source, request.title, request.url)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create source: {e}") from e
    return SourceOut.from_source(source)
