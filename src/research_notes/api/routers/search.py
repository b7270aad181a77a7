from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator

from research_notes.api.deps import get_search_service
from research_notes.api.schemas import ContentItemOut
from research_notes.errors import EmbeddingUnavailable
from research_notes.search import SearchService
from research_notes.vectorstore.schemas import (
    ContentCategory,
    ContentType,
    FilterSpec,
    ScoredResult,
    SourceType,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


class SearchFilters(BaseModel):
    content_type: Optional[ContentType] = Field(None, description="Only 'text' or only 'image' items.")
    organization: Optional[str] = Field(None, description="Substring of the organization tag.")
    source_type: Optional[SourceType] = Field(None, description="Exact source type.")
    content_category: Optional[ContentCategory] = Field(None, description="Exact content category.")
    industry: Optional[str] = Field(None, description="Substring of the industry tag.")

    # Unselected dropdowns arrive as empty strings
    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_filter_spec(self) -> FilterSpec:
        return FilterSpec(
            content_type=self.content_type.value if self.content_type else None,
            organization=self.organization,
            source_type=self.source_type.value if self.source_type else None,
            content_category=self.content_category.value if self.content_category else None,
            industry=self.industry,
        )


class SearchOptions(BaseModel):
    limit: Optional[int] = Field(
        None, ge=1, le=1000, description="Return at most this many results (default: all)."
    )


class QuerySearchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="Natural-language search query.")
    filters: Optional[SearchFilters] = Field(
        default=None, description="Optional tag filters."
    )
    options: SearchOptions = Field(
        default_factory=SearchOptions, description="Search options."
    )

    # Whitespace-only queries then fail min_length
    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, value):
        return value.strip() if isinstance(value, str) else value


class SearchResultItem(ContentItemOut):
    similarity_score: float = Field(..., description="Cosine similarity to the query (0.0 when not embedded).")

    @classmethod
    def from_result(cls, result: ScoredResult) -> "SearchResultItem":
        return cls(
            **ContentItemOut.fields_from_item(result.item),
            similarity_score=result.similarity_score,
        )


@router.post(
    "",
    summary="Semantic search by query",
    response_model=List[SearchResultItem],
)
async def search_by_query(
    request: QuerySearchRequest,
    service: SearchService = Depends(get_search_service),
) -> List[SearchResultItem]:
    """Rank content by similarity to a natural-language query, within the given filters."""

    filters = request.filters.to_filter_spec() if request.filters else FilterSpec()

    try:
        results = await service.asearch(request.query, filters)
    except EmbeddingUnavailable as exc:
        logger.error("Search failed, no query embedding: %s", exc)
        raise HTTPException(status_code=503, detail="Failed to generate search embedding") from exc
    except Exception as exc:
        logger.exception("Search failed")
        raise HTTPException(status_code=500, detail=f"Search failed: {exc}") from exc

    if request.options.limit is not None:
        results = results[: request.options.limit]
    return [SearchResultItem.from_result(r) for r in results]
