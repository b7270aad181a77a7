from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from research_notes.errors import MalformedEmbedding
from research_notes.utils.text_cleaning import clean_names


class ContentType(str, Enum):
    text = "text"
    image = "image"


class SourceType(str, Enum):
    primary = "primary"
    secondary = "secondary"
    tertiary = "tertiary"


class ContentCategory(str, Enum):
    chart = "chart"
    research = "research"
    interview = "interview"
    opinion = "opinion"
    data = "data"
    analysis = "analysis"
    other = "other"


def _enum_value(enum_cls, value: Any) -> Optional[str]:
    """Return the canonical enum value for a loosely formatted tag, else None."""
    if value is None:
        return None
    candidate = str(value).strip().lower()
    try:
        return enum_cls(candidate).value
    except ValueError:
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


@dataclass
class ContentTags:
    organization: Optional[str] = None
    source_type: Optional[str] = None
    people: List[str] = field(default_factory=list)
    content_category: Optional[str] = None
    industry: Optional[str] = None
    content_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ContentTags":
        """Build tags from a model-produced mapping.

        Unknown keys are ignored. Enum tags that do not match a known value
        become None instead of being stored verbatim.
        """
        data = data if isinstance(data, dict) else {}
        return cls(
            organization=_optional_str(data.get("organization")),
            source_type=_enum_value(SourceType, data.get("source_type")),
            people=clean_names(data.get("people")),
            content_category=_enum_value(ContentCategory, data.get("content_category")),
            industry=_optional_str(data.get("industry")),
            content_date=_optional_str(data.get("content_date")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "organization": self.organization,
            "source_type": self.source_type,
            "people": list(self.people),
            "content_category": self.content_category,
            "industry": self.industry,
            "content_date": self.content_date,
        }


@dataclass
class Source:
    id: int
    title: str
    url: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class ContentItem:
    id: int
    source_id: int
    content_type: str
    description: str = ""
    tags: ContentTags = field(default_factory=ContentTags)
    embedding: Optional[List[float]] = None
    created_at: Optional[datetime] = None
    content_text: Optional[str] = None
    image_path: Optional[str] = None
    manual_description: bool = False
    source_title: Optional[str] = None
    source_url: Optional[str] = None

    def snippet(self, max_len: int = 160) -> str:
        """Return a centered snippet of the description: head + ... + tail.

        If the description fits in max_len it is returned whole. If max_len <= 3,
        returns the leading max_len characters.
        """
        s = self.description or self.content_text or ""
        if len(s) <= max_len:
            return s
        if max_len <= 3:
            return s[:max_len]
        budget = max_len - 3
        head_len = budget // 2
        tail_len = budget - head_len
        return f"{s[:head_len]}...{s[-tail_len:]}"


@dataclass(frozen=True)
class FilterSpec:
    """Optional predicates narrowing the candidate set before ranking.

    content_type, source_type and content_category match exactly;
    organization and industry match as substrings. None or "" means
    unconstrained.
    """

    content_type: Optional[str] = None
    organization: Optional[str] = None
    source_type: Optional[str] = None
    content_category: Optional[str] = None
    industry: Optional[str] = None

    def predicates(self) -> Dict[str, str]:
        return {
            name: value
            for name, value in (
                ("content_type", self.content_type),
                ("organization", self.organization),
                ("source_type", self.source_type),
                ("content_category", self.content_category),
                ("industry", self.industry),
            )
            if value
        }

    def is_empty(self) -> bool:
        return not self.predicates()


@dataclass
class ScoredResult:
    item: ContentItem
    similarity_score: float


def as_vector(data: Any) -> List[float]:
    """Coerce a list/tuple of numbers to a list of floats, else raise MalformedEmbedding."""
    if not isinstance(data, (list, tuple)):
        raise MalformedEmbedding(f"embedding must be a sequence of numbers, got {type(data).__name__}")
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in data):
        raise MalformedEmbedding("embedding contains non-numeric values")
    return [float(v) for v in data]


def encode_embedding(vector: Optional[List[float]]) -> Optional[str]:
    """Serialize an embedding for storage; None or empty means no embedding."""
    if not vector:
        return None
    return json.dumps([float(v) for v in vector])


def decode_embedding(raw: Optional[str]) -> Optional[List[float]]:
    """Parse a stored embedding.

    Returns None for a missing value or an empty array (rows whose embedding
    generation failed). Raises MalformedEmbedding when the value is not a JSON
    array of numbers.
    """
    if raw is None or not str(raw).strip():
        return None
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedEmbedding(f"embedding is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedEmbedding(f"embedding must be a JSON array, got {type(data).__name__}")
    if not data:
        return None
    return as_vector(data)


def format_scored_result(result: ScoredResult, max_len: int = 160) -> str:
    """Create a compact string representation for logs/printing.

    Example: "id=12; score=0.8731; source=Annual report; text=<snippet>"
    """
    item = result.item
    return (
        f"id={item.id}; score={result.similarity_score:.4f}; "
        f"source={item.source_title or item.source_id}; text={item.snippet(max_len)}"
    )
