"""Search application layer.

Ranks stored content items against a free-text query:
- the query is embedded by the configured embedding provider
- candidates come from the content store, narrowed by tag filters
- each candidate is scored by cosine similarity and the list is sorted

Candidates without a usable embedding are kept with a score of 0.0.
"""

from .service import SearchService, SearchServiceConfig, score_candidate
from .similarity import cosine_similarity

__all__ = ["SearchService", "SearchServiceConfig", "cosine_similarity", "score_candidate"]
