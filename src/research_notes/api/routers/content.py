from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from research_notes.api.deps import get_ingest_service, get_store
from research_notes.api.schemas import ContentItemOut
from research_notes.errors import SourceNotFound
from research_notes.ingest import IngestService
from research_notes.vectorstore.content_store import ContentStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


class AddContentRequest(BaseModel):
    source_id: int = Field(..., description="Source the snippet belongs to.")
    content_text: str = Field(..., min_length=1, description="Text snippet to catalog.")
    description: Optional[str] = Field(
        None, description="Client-written description, used only with manual_description."
    )
    manual_description: bool = Field(
        False, description="Skip AI annotation and keep the given description."
    )


@router.get("", summary="List all content", response_model=List[ContentItemOut])
async def list_content(store: ContentStore = Depends(get_store)) -> List[ContentItemOut]:
    try:
        items = await asyncio.to_thread(store.list_content)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to list content: {e}") from e
    return [ContentItemOut.from_item(i) for i in items]


@router.post("", summary="Add a text snippet to a source", response_model=ContentItemOut)
async def add_content(
    request: AddContentRequest,
    service: IngestService = Depends(get_ingest_service),
) -> ContentItemOut:
    """Annotate, embed and store a snippet.

    Annotation or embedding failures still store the snippet, without tags or
    without an embedding.
    """
    try:
        item = await service.aingest(
            request.source_id,
            request.content_text,
            description=request.description,
            manual_description=request.manual_description,
        )
    except SourceNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except Exception as e:
        logger.exception("Failed to process content")
        raise HTTPException(status_code=500, detail="Failed to process content") from e
    return ContentItemOut.from_item(item)
