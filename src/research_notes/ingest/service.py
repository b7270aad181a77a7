from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from research_notes.errors import SourceNotFound
from research_notes.vectorstore.content_store import ContentStore
from research_notes.vectorstore.embeddings import Embedder
from research_notes.vectorstore.schemas import ContentItem, ContentTags, ContentType

from .analyzer import Analysis, ContentAnalyzer


logger = logging.getLogger(__name__)


class IngestService:
    """Adds a content item to a source: annotate, embed the description, store.

    Annotation and embedding failures are logged and degrade the stored item
    (empty description/tags, null embedding); they never abort the ingest.
    """

    def __init__(
        self,
        *,
        store: ContentStore | None = None,
        embedder: Embedder | None = None,
        analyzer: ContentAnalyzer | None = None,
    ):
        self.store = store or ContentStore()
        self.embedder = embedder or Embedder()
        self.analyzer = analyzer or ContentAnalyzer()

    def ingest(
        self,
        source_id: int,
        content_text: Optional[str] = None,
        *,
        description: Optional[str] = None,
        manual_description: bool = False,
        image_bytes: Optional[bytes] = None,
        image_path: Optional[str] = None,
    ) -> ContentItem:
        """Blocking variant of aingest(); must not be called from a running event loop."""
        return asyncio.run(
            self.aingest(
                source_id,
                content_text,
                description=description,
                manual_description=manual_description,
                image_bytes=image_bytes,
                image_path=image_path,
            )
        )

    async def aingest(
        self,
        source_id: int,
        content_text: Optional[str] = None,
        *,
        description: Optional[str] = None,
        manual_description: bool = False,
        image_bytes: Optional[bytes] = None,
        image_path: Optional[str] = None,
    ) -> ContentItem:
        is_image = bool(image_bytes or image_path)
        if not (content_text and content_text.strip()) and not is_image:
            raise ValueError("content_text or an image is required")

        source = await asyncio.to_thread(self.store.get_source, source_id)
        if source is None:
            raise SourceNotFound(source_id)

        # A client-written description is only used when explicitly flagged as manual
        if manual_description and description and description.strip():
            analysis = Analysis(description=description.strip(), tags=ContentTags())
        else:
            analysis = await self.analyzer.aanalyze(content_text or "", image_bytes=image_bytes)
            manual_description = False

        embedding = await self._embed_description(analysis.description)

        item = await asyncio.to_thread(
            self.store.add_content,
            source_id=source_id,
            content_type=(ContentType.image if is_image else ContentType.text).value,
            description=analysis.description,
            tags=analysis.tags,
            embedding=embedding,
            content_text=content_text,
            image_path=image_path,
            manual_description=manual_description,
        )
        logger.info(
            "Ingested content %s into source %s (embedding=%s)",
            item.id,
            source_id,
            "yes" if embedding else "no",
        )
        return item

    async def _embed_description(self, description: str) -> Optional[List[float]]:
        if not description:
            logger.warning("No description to embed; storing content without embedding")
            return None
        try:
            vector = await self.embedder.aembed_query(description)
        except Exception as e:
            logger.warning("Embedding generation failed; storing content without embedding: %s", e)
            return None
        return vector or None
