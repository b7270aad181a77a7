import asyncio

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from research_notes.vectorstore.embeddings import FAKE_EMBEDDING_DIM, Embedder


FAKE_CONFIG = {"embedding_model": {"provider": "fake", "model": "deterministic"}}


def test_fake_provider_is_deterministic():
    embedder = Embedder(config=FAKE_CONFIG)
    first = embedder.embed_query("battery storage")
    second = embedder.embed_query("battery storage")
    assert first == second
    assert len(first) == FAKE_EMBEDDING_DIM
    assert embedder.dim == FAKE_EMBEDDING_DIM


def test_configured_dim_sizes_fake_provider():
    embedder = Embedder(config={**FAKE_CONFIG, "dim": 8})
    assert len(embedder.embed_query("x")) == 8


def test_explicit_args_override_config():
    embedder = Embedder("anything", provider="FAKE", config={})
    assert len(embedder.embed_query("x")) == FAKE_EMBEDDING_DIM


def test_missing_provider_raises():
    with pytest.raises(ValueError, match="provider"):
        Embedder(config={"embedding_model": {"model": "m"}})


def test_injected_embeddings_async():
    embedder = Embedder(config={}, embeddings=DeterministicFakeEmbedding(size=4))
    vec = asyncio.run(embedder.aembed_query("wind"))
    assert len(vec) == 4
    assert vec == embedder.embed_query("wind")


class _EmptyEmbeddings:
    def embed_query(self, text):
        return None


def test_no_vector_yields_empty_list():
    embedder = Embedder(config={}, embeddings=_EmptyEmbeddings())
    assert embedder.embed_query("x") == []
    assert asyncio.run(embedder.aembed_query("x")) == []
    assert embedder.dim is None


def test_dimension_change_is_logged(caplog):
    embedder = Embedder(config={}, embeddings=DeterministicFakeEmbedding(size=3))
    embedder.embed_query("a")
    embedder._emb = DeterministicFakeEmbedding(size=5)
    embedder.embed_query("b")
    assert embedder.dim == 3
    assert "dimension mismatch" in caplog.text
