"""Semantic search over the research notes catalog.

Configuration via constants below (no CLI args). Run:
	uv run python scripts/search.py

Environment:
	GOOGLE_API_KEY  (query embedding)
	DATABASE_URL    (default sqlite+pysqlite:///research.db)
"""

from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import List

# Ensure 'src' on path
CURRENT_DIR = Path(__file__).resolve().parent
SRC_DIR = CURRENT_DIR.parent / "src"
if str(SRC_DIR) not in sys.path:
	sys.path.insert(0, str(SRC_DIR))

from research_notes.errors import EmbeddingUnavailable  # noqa: E402
from research_notes.search import SearchService  # noqa: E402
from research_notes.vectorstore.schemas import (  # noqa: E402
	FilterSpec,
	ScoredResult,
	format_scored_result,
)


# ---------------------------------------------------------------------------
# Configuration Constants
# ---------------------------------------------------------------------------
QUERY_TEXT: str = "renewable energy adoption in emerging markets"
FILTERS: FilterSpec = FilterSpec(content_type="text")
TOP_K: int = 5
LOG_LEVEL: str = "INFO"


def search(query: str, filters: FilterSpec = FILTERS, top_k: int = TOP_K) -> List[ScoredResult]:
	"""Rank catalog items against the query and log the top_k of them.

	Returns the full ranked list.
	"""
	logger = logging.getLogger(__name__)

	results = SearchService().search(query, filters)
	header = f"Returned {min(top_k, len(results))} of {len(results)} results. \nQuery: {query!r} \n"
	lines: List[str] = [header]
	for idx, result in enumerate(results[:top_k], start=1):
		lines.append(f"{idx}. {format_scored_result(result)}")
		tags = result.item.tags
		if tags.organization or tags.industry:
			lines.append(f"    tags: organization={tags.organization!r} industry={tags.industry!r}")
	logger.info("\n".join(lines))
	return results


def main() -> int:
	logging.basicConfig(
		level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s - %(message)s",
	)
	try:
		search(QUERY_TEXT, FILTERS, TOP_K)
		return 0
	except EmbeddingUnavailable as e:
		logging.error("Could not embed the query: %s", e)
		return 2
	except Exception as e:  # pragma: no cover
		logging.exception("Search failed: %s", e)
		return 1

if __name__ == "__main__":  # pragma: no cover
	raise SystemExit(main())
