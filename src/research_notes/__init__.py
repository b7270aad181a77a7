"""Research notes catalog with semantic search over AI-annotated content."""

__version__ = "0.1.0"
