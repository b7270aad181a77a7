"""Content ingestion: annotate new items with a chat model, embed, store."""

from .analyzer import Analysis, ContentAnalyzer, parse_analysis
from .service import IngestService

__all__ = ["Analysis", "ContentAnalyzer", "IngestService", "parse_analysis"]
