"""Tests for zander.state.selectors."""

from __future__ import annotations

from dataclasses import replace

from zander.state.selectors import (
    get_current_category,
    get_visible_bookmarks,
    iter_categories,
)


class TestGetVisibleBookmarks:
    def test_no_selection_returns_all(self, sample_state):
        state = replace(sample_state, current_category_id=None)
        assert get_visible_bookmarks(state) == sample_state.bookmarks

    def test_selection_includes_descendants(self, sample_state):
        visible = get_visible_bookmarks(sample_state)  # "child" is selected
        assert [b.id for b in visible] == ["b-child", "b-grand"]

    def test_root_selection(self, sample_state):
        state = replace(sample_state, current_category_id="root")
        visible = get_visible_bookmarks(state)
        assert [b.id for b in visible] == ["b-root", "b-child", "b-grand", "b-sibling"]

    def test_leaf_selection(self, sample_state):
        state = replace(sample_state, current_category_id="other")
        assert [b.id for b in get_visible_bookmarks(state)] == ["b-other"]

    def test_unresolvable_selection_returns_all(self, sample_state):
        state = replace(sample_state, current_category_id="ghost")
        assert get_visible_bookmarks(state) == sample_state.bookmarks


class TestCurrentCategory:
    def test_selected(self, sample_state):
        assert get_current_category(sample_state).id == "child"

    def test_none(self, sample_state):
        state = replace(sample_state, current_category_id=None)
        assert get_current_category(state) is None


class TestIterCategories:
    def test_document_order_with_depth(self, forest):
        pairs = [(depth, c.id) for depth, c in iter_categories(forest)]
        assert pairs == [
            (0, "root"),
            (1, "child"),
            (2, "grandchild"),
            (1, "sibling"),
            (0, "other"),
        ]
