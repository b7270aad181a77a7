from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from research_notes.api.deps import get_store
from research_notes.vectorstore.content_store import ContentStore


router = APIRouter(prefix="/filters", tags=["search"])


class FilterValuesResponse(BaseModel):
    organizations: List[str] = Field(default_factory=list)
    source_types: List[str] = Field(default_factory=list)
    content_categories: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)


@router.get(
    "",
    summary="Distinct tag values for the filter dropdowns",
    response_model=FilterValuesResponse,
)
async def filter_values(store: ContentStore = Depends(get_store)) -> FilterValuesResponse:
    try:
        values = await store.afilter_values()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load filter values: {e}") from e
    return FilterValuesResponse(**values)
