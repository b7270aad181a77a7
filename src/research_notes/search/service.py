from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from research_notes.config import default_config, section
from research_notes.errors import DimensionMismatch, EmbeddingUnavailable, MalformedEmbedding
from research_notes.vectorstore.content_store import ContentStore
from research_notes.vectorstore.embeddings import Embedder
from research_notes.vectorstore.schemas import FilterSpec, ScoredResult, as_vector

from .similarity import cosine_similarity


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchServiceConfig:
    embedding_timeout_seconds: Optional[float] = 10.0

    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]]) -> "SearchServiceConfig":
        search_cfg = section(cfg, "search")
        timeout = search_cfg.get("embedding_timeout_seconds", cls.embedding_timeout_seconds)
        if timeout is None:
            return cls(embedding_timeout_seconds=None)
        timeout = float(timeout)
        if timeout <= 0:
            raise ValueError(
                f"search.embedding_timeout_seconds must be positive or null, got {timeout}"
            )
        return cls(embedding_timeout_seconds=timeout)


def score_candidate(query_vector: Sequence[float], embedding: Any) -> float:
    """Similarity of one stored embedding to the query vector.

    Missing, malformed or wrong-sized embeddings score 0.0 instead of failing
    the search, as does a non-finite result.
    """
    if embedding is None or (isinstance(embedding, (list, tuple)) and not embedding):
        return 0.0
    try:
        score = cosine_similarity(query_vector, as_vector(embedding))
    except (DimensionMismatch, MalformedEmbedding) as exc:
        logger.debug("Scoring candidate as 0.0: %s", exc)
        return 0.0
    return score if math.isfinite(score) else 0.0


class SearchService:
    """Application-layer search service.

    Embeds the query, fetches every content item matching the structured
    filters, and ranks them by cosine similarity to the query. Items without a
    usable embedding stay in the result with a score of 0.0. The full ranked
    list is returned; truncation is up to the caller.
    """

    def __init__(
        self,
        config: SearchServiceConfig | None = None,
        *,
        store: ContentStore | None = None,
        embedder: Embedder | None = None,
    ):
        self.config = config or SearchServiceConfig.from_config(default_config())
        self.embedder = embedder or Embedder()
        self.store = store or ContentStore()

    def search(self, query: str, filters: Optional[FilterSpec] = None) -> List[ScoredResult]:
        """Blocking variant of asearch(); must not be called from a running event loop."""
        return asyncio.run(self.asearch(query, filters))

    async def asearch(
        self, query: str, filters: Optional[FilterSpec] = None
    ) -> List[ScoredResult]:
        """Search by a natural-language query string.

        Blank queries go to the provider like any other. Raises
        EmbeddingUnavailable when the query cannot be embedded; the store is
        not queried in that case.
        """

        filters = filters or FilterSpec()
        query_vector = await self._embed_query((query or "").strip())
        candidates = await asyncio.to_thread(self.store.query_content, filters)

        scored = [
            ScoredResult(item=item, similarity_score=score_candidate(query_vector, item.embedding))
            for item in candidates
        ]
        # sorted() is stable: equal scores keep the store's newest-first order
        ranked = sorted(scored, key=lambda r: r.similarity_score, reverse=True)

        logger.info(
            "Search query=%r filters=%s returned %d results",
            query,
            filters.predicates(),
            len(ranked),
        )
        return ranked

    async def _embed_query(self, query: str) -> List[float]:
        timeout = self.config.embedding_timeout_seconds
        try:
            vector = await asyncio.wait_for(self.embedder.aembed_query(query), timeout=timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Query embedding timed out after %ss", timeout)
            raise EmbeddingUnavailable(f"Embedding provider timed out after {timeout}s") from exc
        except Exception as exc:
            logger.error("Query embedding failed: %s", exc)
            raise EmbeddingUnavailable(f"Embedding provider failed: {exc}") from exc

        if not vector:
            raise EmbeddingUnavailable("Embedding provider returned no vector")
        try:
            return as_vector(vector)
        except MalformedEmbedding as exc:
            raise EmbeddingUnavailable(f"Embedding provider returned a malformed vector: {exc}") from exc
