"""Tests for QueryEngine and the QueryFilter reducers."""

import pytest

from cardapio_cache.domain.services.query_service import (
    QueryEngine,
    clear_filter,
    normalize_filter,
    set_search_text,
    toggle_category,
    with_synthetic,
)
from cardapio_cache.ports.interfaces import QueryFilter

from conftest import make_item


@pytest.fixture
def engine(populated_store, settings):
    return QueryEngine(populated_store, settings)


class TestReducers:
    def test_toggle_adds_then_removes(self):
        base = QueryFilter()
        on = toggle_category(base, "Mains")
        off = toggle_category(on, "Mains")
        assert on.selected_categories == frozenset({"Mains"})
        assert off.selected_categories == frozenset()

    def test_reducers_do_not_mutate_input(self):
        base = QueryFilter(selected_categories=frozenset({"Starters"}), search_text="a")
        toggle_category(base, "Mains")
        set_search_text(base, "b")
        assert base == QueryFilter(selected_categories=frozenset({"Starters"}), search_text="a")

    def test_set_search_text_keeps_categories(self):
        flt = set_search_text(QueryFilter(selected_categories=frozenset({"Mains"})), "fish")
        assert flt.search_text == "fish"
        assert flt.selected_categories == frozenset({"Mains"})

    def test_clear_filter(self):
        assert clear_filter() == QueryFilter()

    def test_normalize_removes_control_chars_only(self):
        flt = normalize_filter(QueryFilter(search_text="  greek\x00  salad \t"))
        assert flt.search_text == "  greek  salad \t"


def test_with_synthetic_appends_missing_only():
    assert with_synthetic(["Mains", "Drinks"], ["Drinks", "Specials"]) == ["Mains", "Drinks", "Specials"]


def test_categories_always_include_synthetic(store, settings):
    assert QueryEngine(store, settings).categories() == ["Drinks", "Specials"]


def test_categories_observed_first(engine):
    assert engine.categories() == ["Starters", "Mains", "Desserts", "Drinks", "Specials"]


def test_empty_filter_returns_all_rows(engine, sample_items):
    assert engine.execute(QueryFilter()) == sample_items


def test_whitespace_in_search_text_is_matched_as_typed(engine):
    assert engine.execute(QueryFilter(search_text="  greek  ")) == []
    assert engine.execute(QueryFilter(search_text="greek  salad")) == []
    assert [i.name for i in engine.execute(QueryFilter(search_text="greek salad"))] == ["Greek Salad"]


def test_single_space_is_a_real_search(store, settings):
    store.insert_many([make_item("Pasta", "Mains", description="Penne"), make_item("Fish Soup", "Mains", description="Hake")])
    hits = QueryEngine(store, settings).execute(QueryFilter(search_text=" "))
    assert [i.name for i in hits] == ["Fish Soup"]


def test_execute_is_deterministic(engine):
    flt = QueryFilter(selected_categories=frozenset({"Mains", "Starters"}), search_text="e")
    assert engine.execute(flt) == engine.execute(flt)


@pytest.mark.parametrize("categories", [set(), {"Mains"}, {"Starters", "Desserts"}, {"Drinks"}])
@pytest.mark.parametrize("text", ["", "a", "GARLIC", "cheese", "xyz-no-match", " ", "greek  salad", "salad "])
def test_results_respect_filter(engine, categories, text):
    """Every hit honours the category set (or it is empty) and contains the search text."""
    flt = QueryFilter(selected_categories=frozenset(categories), search_text=text)
    for item in engine.execute(flt):
        assert not categories or item.category in categories
        assert text.lower() in item.name.lower() or text.lower() in item.description.lower()


def test_new_categories_from_data_are_accepted(store, settings):
    store.insert_many([make_item("Mojito", "Cocktails")])
    engine = QueryEngine(store, settings)
    assert engine.categories() == ["Cocktails", "Drinks", "Specials"]
    assert len(engine.execute(QueryFilter(selected_categories=frozenset({"Cocktails"})))) == 1
