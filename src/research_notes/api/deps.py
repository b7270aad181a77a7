from __future__ import annotations

from functools import lru_cache

from research_notes.ingest import IngestService
from research_notes.search import SearchService
from research_notes.vectorstore.content_store import ContentStore
from research_notes.vectorstore.embeddings import Embedder


# Share one store and one embedder between search and ingest so that stored and
# query vectors come from the same model.
@lru_cache(maxsize=1)
def get_store() -> ContentStore:
    return ContentStore()


@lru_cache(maxsize=1)
def get_embedder() -> Embedder:
    return Embedder()


@lru_cache(maxsize=1)
def get_search_service() -> SearchService:
    return SearchService(store=get_store(), embedder=get_embedder())


@lru_cache(maxsize=1)
def get_ingest_service() -> IngestService:
    return IngestService(store=get_store(), embedder=get_embedder())
