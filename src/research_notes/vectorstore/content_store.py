import asyncio
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import distinct, inspect, select
from sqlalchemy.engine import Engine

from research_notes.errors import MalformedEmbedding, SourceNotFound

from .db import get_engine, session_scope
from .models import Base, ContentORM, SourceORM
from .schemas import (
    ContentItem,
    ContentTags,
    ContentType,
    FilterSpec,
    Source,
    decode_embedding,
    encode_embedding,
)


logger = logging.getLogger(__name__)

# Filter dropdown key -> column holding its values
FILTER_VALUE_COLUMNS = {
    "organizations": ContentORM.organization,
    "source_types": ContentORM.source_type,
    "content_categories": ContentORM.content_category,
    "industries": ContentORM.industry,
}


class SchemaManager:
    """Manages creation and teardown of the catalog tables."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def ensure_schema(self) -> None:
        existing = set(inspect(self.engine).get_table_names())
        if {"sources", "content"} <= existing:
            return
        logger.info("Creating catalog tables.")
        Base.metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        logger.info("Dropping catalog tables.")
        Base.metadata.drop_all(self.engine)

    def reset_schema(self) -> None:
        self.drop_schema()
        self.ensure_schema()


class ContentStore:
    """Read/write access to sources and content; delegates lifecycle to a SchemaManager."""

    def __init__(
        self,
        engine: Optional[Engine] = None,
        manager: Optional[SchemaManager] = None,
    ) -> None:
        self.engine = engine or get_engine()
        self.manager = manager or SchemaManager(self.engine)
        self.manager.ensure_schema()

    def reset(self) -> None:
        self.manager.reset_schema()

    # -- sources -----------------------------------------------------------

    def add_source(self, title: str, url: Optional[str] = None) -> Source:
        if not title or not title.strip():
            raise ValueError("source title must not be empty")
        with session_scope(self.engine) as session:
            row = SourceORM(title=title.strip(), url=(url or None))
            session.add(row)
            session.flush()
            return _to_source(row)

    def get_source(self, source_id: int) -> Optional[Source]:
        with session_scope(self.engine) as session:
            row = session.get(SourceORM, source_id)
            return _to_source(row) if row else None

    def list_sources(self) -> List[Source]:
        stmt = select(SourceORM).order_by(SourceORM.created_at.desc(), SourceORM.id.desc())
        with session_scope(self.engine) as session:
            return [_to_source(r) for r in session.execute(stmt).scalars().all()]

    # -- content -----------------------------------------------------------

    def add_content(
        self,
        *,
        source_id: int,
        content_type: str = ContentType.text.value,
        description: str = "",
        tags: Optional[ContentTags] = None,
        embedding: Optional[List[float]] = None,
        content_text: Optional[str] = None,
        image_path: Optional[str] = None,
        manual_description: bool = False,
    ) -> ContentItem:
        content_type = ContentType(content_type).value
        tags = tags or ContentTags()
        with session_scope(self.engine) as session:
            source = session.get(SourceORM, source_id)
            if source is None:
                raise SourceNotFound(source_id)
            row = ContentORM(
                source_id=source_id,
                content_type=content_type,
                content_text=content_text,
                image_path=image_path,
                description=description or "",
                manual_description=bool(manual_description),
                organization=tags.organization,
                source_type=tags.source_type,
                people=list(tags.people),
                content_category=tags.content_category,
                industry=tags.industry,
                content_date=tags.content_date,
                embedding=encode_embedding(embedding),
            )
            session.add(row)
            session.flush()
            return _to_item(row, source.title, source.url)

    def list_content(self) -> List[ContentItem]:
        return self.query_content(FilterSpec())

    def query_content(self, filters: Optional[FilterSpec] = None) -> List[ContentItem]:
        """Return content rows satisfying every predicate in filters, newest first.

        organization and industry use LIKE '%value%' (case-insensitive for ASCII
        under SQLite's default collation); the other predicates match exactly.
        Rows come back with their source title and url.
        """
        preds = (filters or FilterSpec()).predicates()
        stmt = select(ContentORM, SourceORM.title, SourceORM.url).join(
            SourceORM, ContentORM.source_id == SourceORM.id
        )
        if "content_type" in preds:
            stmt = stmt.where(ContentORM.content_type == preds["content_type"])
        if "organization" in preds:
            stmt = stmt.where(ContentORM.organization.contains(preds["organization"], autoescape=True))
        if "source_type" in preds:
            stmt = stmt.where(ContentORM.source_type == preds["source_type"])
        if "content_category" in preds:
            stmt = stmt.where(ContentORM.content_category == preds["content_category"])
        if "industry" in preds:
            stmt = stmt.where(ContentORM.industry.contains(preds["industry"], autoescape=True))
        stmt = stmt.order_by(ContentORM.created_at.desc(), ContentORM.id.desc())

        with session_scope(self.engine) as session:
            rows = session.execute(stmt).all()
            return [_to_item(row, title, url) for row, title, url in rows]

    # -- filter values -----------------------------------------------------

    def distinct_values(self, key: str) -> List[str]:
        column = FILTER_VALUE_COLUMNS[key]
        stmt = select(distinct(column)).where(column.is_not(None)).order_by(column)
        with session_scope(self.engine) as session:
            return [v for v in session.execute(stmt).scalars().all() if v]

    async def afilter_values(self) -> Dict[str, List[str]]:
        """Distinct values for every filter dropdown.

        The lookups run concurrently in worker threads and are joined before
        the mapping is built; a failing lookup fails the whole call.
        """
        keys = list(FILTER_VALUE_COLUMNS)
        values = await asyncio.gather(
            *(asyncio.to_thread(self.distinct_values, key) for key in keys)
        )
        return dict(zip(keys, values))


def _to_source(row: SourceORM) -> Source:
    return Source(id=row.id, title=row.title, url=row.url, created_at=row.created_at)


def _to_item(row: ContentORM, source_title: Optional[str], source_url: Optional[str]) -> ContentItem:
    try:
        embedding = decode_embedding(row.embedding)
    except MalformedEmbedding as e:
        logger.warning("Content %s has a malformed embedding, treating as missing: %s", row.id, e)
        embedding = None

    people: Any = row.people
    return ContentItem(
        id=row.id,
        source_id=row.source_id,
        content_type=row.content_type,
        description=row.description or "",
        tags=ContentTags(
            organization=row.organization,
            source_type=row.source_type,
            people=[str(p) for p in people] if isinstance(people, list) else [],
            content_category=row.content_category,
            industry=row.industry,
            content_date=row.content_date,
        ),
        embedding=embedding,
        created_at=row.created_at,
        content_text=row.content_text,
        image_path=row.image_path,
        manual_description=bool(row.manual_description),
        source_title=source_title,
        source_url=source_url,
    )
