from __future__ import annotations


class ResearchNotesError(Exception):
    """Base class for errors raised by the research notes catalog."""


class EmbeddingUnavailable(ResearchNotesError):
    """The query embedding could not be produced (failure, empty vector or timeout)."""


class DimensionMismatch(ResearchNotesError, ValueError):
    """Two vectors of different length were compared."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"cannot compare vectors of dim {left} and {right}")
        self.left = left
        self.right = right


class MalformedEmbedding(ResearchNotesError, ValueError):
    """A stored embedding could not be decoded into a numeric sequence."""


class SourceNotFound(ResearchNotesError, LookupError):
    """Content was attached to a source id that does not exist."""

    def __init__(self, source_id: int) -> None:
        super().__init__(f"source {source_id} does not exist")
        self.source_id = source_id
