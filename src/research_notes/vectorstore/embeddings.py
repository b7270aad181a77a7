from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from langchain.embeddings import init_embeddings
from langchain_core.embeddings import DeterministicFakeEmbedding, Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from research_notes.config import default_config, section

logger = logging.getLogger(__name__)

FAKE_EMBEDDING_DIM = 64


class Embedder:
    """Generic embedding wrapper backed by LangChain embeddings.

    Credentials are read from environment as required by the chosen provider
    (e.g., GOOGLE_API_KEY, OPENAI_API_KEY, etc.).
    """

    def __init__(
        self,
        model: Optional[str] = None,
        *,
        provider: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        embeddings: Optional[Embeddings] = None,
    ) -> None:
        cfg: Dict[str, Any] = dict(config) if config is not None else default_config()
        embedding_cfg = section(cfg, "embedding_model")

        # Override with explicit args if provided
        if provider is not None:
            embedding_cfg["provider"] = provider
        if model is not None:
            embedding_cfg["model"] = model

        self._cfg = cfg
        self.dim: Optional[int] = None
        cfg_dim = cfg.get("dim") if isinstance(cfg, dict) else None
        if isinstance(cfg_dim, int) and cfg_dim > 0:
            logger.info("Using configured embedding dimension: %s", cfg_dim)
            self.dim = cfg_dim

        if embeddings is not None:
            self._emb = embeddings
            return

        if not embedding_cfg.get("provider") or not embedding_cfg.get("model"):
            raise ValueError(
                "Embedding configuration missing 'provider' and/or 'model'. "
                "Set them in config.yaml under 'embedding_model', or pass them to Embedder()."
            )

        provider_name = embedding_cfg.pop("provider").lower()
        model_name = embedding_cfg.pop("model")
        if provider_name == "google_genai":
            logger.info("Initializing Google GenAI embeddings with model '%s'", model_name)
            self._emb = GoogleGenerativeAIEmbeddings(model=model_name, **embedding_cfg)
        elif provider_name == "fake":
            size = self.dim or FAKE_EMBEDDING_DIM
            logger.info("Initializing deterministic fake embeddings (dim=%s)", size)
            self._emb = DeterministicFakeEmbedding(size=size)
        else:
            logger.info(
                "Initializing embeddings via init_embeddings provider=%s model=%s",
                provider_name,
                model_name,
            )
            self._emb = init_embeddings(model_name, provider=provider_name, **embedding_cfg)

    def _cache_dim(self, new_dim: int, source: str) -> None:
        """Cache embedding dimension once; warn on mismatches across calls."""
        if self.dim is None:
            self.dim = new_dim
            logger.info("Cached embedding dimension from %s: %s", source, new_dim)
        elif self.dim != new_dim:
            logger.warning(
                "Embedding dimension mismatch detected: cached=%s, new=%s.", self.dim, new_dim
            )

    def embed_query(self, text: str) -> List[float]:
        """Embed a single string synchronously.

        Returns an empty list when the provider produced no vector. Provider
        errors propagate to the caller.
        """
        vec: List[float] = list(self._emb.embed_query(text) or [])
        if vec:
            self._cache_dim(len(vec), "embed_query()")
        return vec

    async def aembed_query(self, text: str) -> List[float]:
        """Async single-text embedding; prefers provider aembed_query if available.

        Falls back to running the sync method in a worker thread to avoid
        blocking the event loop.
        """
        emb = self._emb
        if hasattr(emb, "aembed_query"):
            vec = await emb.aembed_query(text)
        else:
            logger.debug("Using sync embed_query in async aembed_query()")
            vec = await asyncio.to_thread(emb.embed_query, text)

        vec = list(vec or [])
        if vec:
            self._cache_dim(len(vec), "aembed_query()")
        return vec
