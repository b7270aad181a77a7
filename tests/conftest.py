from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

import pytest

from research_notes.vectorstore.content_store import ContentStore
from research_notes.vectorstore.db import get_engine
from research_notes.vectorstore.schemas import ContentItem, FilterSpec


class StubEmbedder:
    """Stands in for Embedder: returns canned vectors keyed by text."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, default=None, error=None, delay=0.0):
        self.vectors = vectors or {}
        self.default = default
        self.error = error
        self.delay = delay
        self.calls: List[str] = []

    async def aembed_query(self, text: str):
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.vectors.get(text, self.default)


class StubStore:
    """Stands in for ContentStore.query_content with a fixed candidate list."""

    def __init__(self, items: List[ContentItem]):
        self.items = items
        self.queries: List[FilterSpec] = []

    def query_content(self, filters: Optional[FilterSpec] = None) -> List[ContentItem]:
        self.queries.append(filters)
        return list(self.items)


def make_item(item_id: int, embedding=None, **kwargs) -> ContentItem:
    kwargs.setdefault("source_id", 1)
    kwargs.setdefault("content_type", "text")
    kwargs.setdefault("description", f"item {item_id}")
    return ContentItem(id=item_id, embedding=embedding, **kwargs)


@pytest.fixture
def store(tmp_path) -> ContentStore:
    engine = get_engine(f"sqlite+pysqlite:///{tmp_path / 'research.db'}")
    yield ContentStore(engine=engine)
    engine.dispose()
