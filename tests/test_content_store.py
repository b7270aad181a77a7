import asyncio

import pytest

from research_notes.errors import SourceNotFound
from research_notes.vectorstore.content_store import ContentStore
from research_notes.vectorstore.db import get_engine
from research_notes.vectorstore.schemas import ContentTags, FilterSpec


def _add(store, source_id, description, embedding=None, content_type="text", **tags):
    return store.add_content(
        source_id=source_id,
        content_type=content_type,
        description=description,
        tags=ContentTags(**tags),
        embedding=embedding,
        content_text=f"text for {description}",
    )


@pytest.fixture
def seeded(store):
    src = store.add_source("Energy outlook", "https://example.org/outlook")
    items = {
        "solar": _add(store, src.id, "solar", [1.0, 0.0], organization="Acme Corp",
                      source_type="primary", content_category="data", industry="Renewable Energy"),
        "wind": _add(store, src.id, "wind", [0.0, 1.0], organization="Globex",
                     source_type="secondary", content_category="analysis", industry="Energy"),
        "chart": _add(store, src.id, "chart", None, content_type="image", organization="Acme",
                      source_type="primary", content_category="chart", industry="Finance"),
    }
    return store, src, items


def test_add_and_get_source(store):
    src = store.add_source("  Annual report ", "https://example.org")
    assert src.id is not None
    assert src.title == "Annual report"
    assert store.get_source(src.id).url == "https://example.org"
    assert store.get_source(src.id + 100) is None


def test_add_source_requires_title(store):
    with pytest.raises(ValueError):
        store.add_source("   ")


def test_list_sources_newest_first(store):
    first = store.add_source("first")
    second = store.add_source("second")
    assert [s.id for s in store.list_sources()] == [second.id, first.id]


def test_add_content_unknown_source(store):
    with pytest.raises(SourceNotFound):
        store.add_content(source_id=42, description="orphan")


def test_add_content_rejects_unknown_type(store):
    src = store.add_source("s")
    with pytest.raises(ValueError):
        store.add_content(source_id=src.id, content_type="video")


def test_content_roundtrip(seeded):
    store, src, items = seeded
    solar = next(i for i in store.list_content() if i.id == items["solar"].id)
    assert solar.embedding == [1.0, 0.0]
    assert solar.tags.organization == "Acme Corp"
    assert solar.source_title == "Energy outlook"
    assert solar.source_url == "https://example.org/outlook"
    assert solar.content_text == "text for solar"


def test_missing_embedding_reads_back_as_none(seeded):
    store, _, items = seeded
    chart = next(i for i in store.list_content() if i.id == items["chart"].id)
    assert chart.embedding is None


def test_people_keep_order(store):
    src = store.add_source("Interview")
    item = store.add_content(
        source_id=src.id, description="d", tags=ContentTags(people=["Zoe", "Adam", "Zoe"])
    )
    assert store.list_content()[0].tags.people == ["Zoe", "Adam", "Zoe"]
    assert item.tags.people == ["Zoe", "Adam", "Zoe"]


def test_query_without_filters_returns_all_newest_first(seeded):
    store, _, items = seeded
    ids = [i.id for i in store.query_content(FilterSpec())]
    assert ids == [items["chart"].id, items["wind"].id, items["solar"].id]


def test_organization_is_substring_match(seeded):
    store, _, items = seeded
    ids = {i.id for i in store.query_content(FilterSpec(organization="Acme"))}
    assert ids == {items["solar"].id, items["chart"].id}


def test_industry_is_substring_match(seeded):
    store, _, items = seeded
    ids = {i.id for i in store.query_content(FilterSpec(industry="Energy"))}
    assert ids == {items["solar"].id, items["wind"].id}


def test_substring_filter_escapes_wildcards(seeded):
    store, _, _ = seeded
    assert store.query_content(FilterSpec(organization="%")) == []


def test_exact_filters(seeded):
    store, _, items = seeded
    assert [i.id for i in store.query_content(FilterSpec(content_type="image"))] == [items["chart"].id]
    assert [i.id for i in store.query_content(FilterSpec(content_category="analysis"))] == [items["wind"].id]
    assert store.query_content(FilterSpec(source_type="tertiary")) == []
    # exact predicates do not match partial values
    assert store.query_content(FilterSpec(content_category="anal")) == []


def test_combined_filters_all_apply(seeded):
    store, _, items = seeded
    results = store.query_content(FilterSpec(organization="Acme", source_type="primary", content_type="text"))
    assert [i.id for i in results] == [items["solar"].id]


def test_empty_string_filter_is_unconstrained(seeded):
    store, _, items = seeded
    assert len(store.query_content(FilterSpec(organization="", industry=""))) == len(items)


def test_filter_values(seeded):
    store, _, _ = seeded
    values = asyncio.run(store.afilter_values())
    assert values == {
        "organizations": ["Acme", "Acme Corp", "Globex"],
        "source_types": ["primary", "secondary"],
        "content_categories": ["analysis", "chart", "data"],
        "industries": ["Energy", "Finance", "Renewable Energy"],
    }


def test_filter_values_empty_store(store):
    values = asyncio.run(store.afilter_values())
    assert all(v == [] for v in values.values())


def test_reset_clears_everything(seeded):
    store, _, _ = seeded
    store.reset()
    assert store.list_sources() == []
    assert store.list_content() == []


def test_in_memory_database_is_shared_across_threads():
    store = ContentStore(engine=get_engine("sqlite+pysqlite:///:memory:"))
    src = store.add_source("memory")
    sources = asyncio.run(asyncio.to_thread(store.list_sources))
    assert [s.id for s in sources] == [src.id]
