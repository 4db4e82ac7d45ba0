"""Tests for zander.state.tree -- add / move / delete / update on the forest."""

from __future__ import annotations

from dataclasses import replace

from zander.state.model import State
from zander.state.tree import (
    add_category,
    delete_category,
    find_category,
    move_category,
    remove_category,
    resolve_selection,
    update_category,
)


def _ids(categories):
    return [c.id for c in categories]


# -- find_category ------------------------------------------------------------


class TestFindCategory:
    def test_finds_nested(self, forest):
        assert find_category(forest, "grandchild").id == "grandchild"

    def test_missing_returns_none(self, forest):
        assert find_category(forest, "nope") is None

    def test_empty_forest(self):
        assert find_category((), "x") is None


# -- add_category -------------------------------------------------------------


class TestAddCategory:
    def test_append_root(self, forest):
        change = add_category(forest, None, "X", generate_id=lambda: "new")
        assert change.changed
        assert _ids(change.categories) == ["root", "other", "new"]
        assert change.category.name == "X"

    def test_default_name_and_color(self):
        change = add_category((), None)
        assert change.category.name == "New category"
        assert change.category.color == "#ffffff"
        assert change.category.children == ()

    def test_append_to_nested_parent(self, forest):
        change = add_category(forest, "child", "Leaf", generate_id=lambda: "leaf")
        child = find_category(change.categories, "child")
        assert _ids(child.children) == ["grandchild", "leaf"]
        assert len(change.categories) == 2

    def test_missing_parent_falls_back_to_root(self, make_category):
        single = (make_category("only"),)
        change = add_category(single, "missing-id", "X")
        assert len(change.categories) == 2
        assert change.categories[-1].name == "X"

    def test_untouched_subtrees_shared(self, forest):
        change = add_category(forest, "child", "Leaf")
        assert change.categories[1] is forest[1]
        sibling_before = forest[0].children[1]
        assert change.categories[0].children[1] is sibling_before

    def test_input_not_mutated(self, forest):
        add_category(forest, "root", "X")
        assert _ids(forest[0].children) == ["child", "sibling"]


# -- move_category ------------------------------------------------------------


class TestMoveCategory:
    def test_three_roots_up_then_up_again(self, make_category):
        abc = (make_category("A"), make_category("B"), make_category("C"))
        first = move_category(abc, "B", "up")
        assert _ids(first.categories) == ["B", "A", "C"]
        second = move_category(first.categories, "A", "up")
        assert _ids(second.categories) == ["A", "B", "C"]

    def test_move_down(self, make_category):
        abc = (make_category("A"), make_category("B"), make_category("C"))
        assert _ids(move_category(abc, "A", "down").categories) == ["B", "A", "C"]

    def test_boundary_up_is_noop(self, forest):
        change = move_category(forest, "root", "up")
        assert not change.changed
        assert change.categories is forest

    def test_boundary_down_is_noop(self, forest):
        change = move_category(forest, "other", "down")
        assert not change.changed
        assert change.categories is forest

    def test_missing_id_is_noop(self, forest):
        change = move_category(forest, "nope", "down")
        assert change.categories is forest

    def test_unknown_direction_is_noop(self, forest):
        assert move_category(forest, "root", "sideways").categories is forest

    def test_nested_swap_keeps_subtrees(self, forest):
        change = move_category(forest, "sibling", "up")
        root = change.categories[0]
        assert _ids(root.children) == ["sibling", "child"]
        # The moved subtree's own children are carried along intact.
        assert root.children[1] is forest[0].children[0]
        assert change.categories[1] is forest[1]

    def test_nested_boundary_is_noop(self, forest):
        change = move_category(forest, "grandchild", "up")
        assert change.categories is forest


# -- delete_category / remove_category ----------------------------------------


class TestDeleteCategory:
    def test_removes_subtree_ids(self, forest):
        change = delete_category(forest, "child")
        assert change.removed_ids == {"child", "grandchild"}
        assert _ids(change.categories[0].children) == ["sibling"]

    def test_delete_root(self, forest):
        change = delete_category(forest, "root")
        assert _ids(change.categories) == ["other"]
        assert change.removed_ids == {"root", "child", "grandchild", "sibling"}

    def test_missing_is_noop(self, forest):
        change = delete_category(forest, "nope")
        assert not change.changed
        assert change.categories is forest
        assert change.removed_ids == frozenset()


class TestRemoveCategory:
    def test_child_scenario(self, make_category, make_bookmark):
        state = State(
            categories=(make_category("root", make_category("child")),),
            bookmarks=(make_bookmark("r", "root"), make_bookmark("c", "child")),
            current_category_id="child",
        )
        result = remove_category(state, "child")
        assert result.categories == (make_category("root"),)
        assert [b.category_id for b in result.bookmarks] == ["root"]
        assert result.current_category_id == "root"

    def test_drops_exactly_subtree_bookmarks(self, sample_state):
        result = remove_category(sample_state, "child")
        assert [b.id for b in result.bookmarks] == ["b-root", "b-sibling", "b-other"]

    def test_selection_outside_subtree_kept(self, sample_state):
        state = replace(sample_state, current_category_id="other")
        assert remove_category(state, "child").current_category_id == "other"

    def test_last_category_clears_selection(self, make_category):
        state = State(
            categories=(make_category("solo"),), current_category_id="solo"
        )
        result = remove_category(state, "solo")
        assert result.categories == ()
        assert result.current_category_id is None

    def test_landing_cleared(self, sample_state):
        state = replace(sample_state, landing_category_id="grandchild")
        assert remove_category(state, "child").landing_category_id is None

    def test_missing_returns_same_state(self, sample_state):
        assert remove_category(sample_state, "nope") is sample_state


# -- update_category / resolve_selection --------------------------------------


class TestUpdateCategory:
    def test_rename_nested(self, forest):
        change = update_category(forest, "grandchild", name="Deep")
        assert find_category(change.categories, "grandchild").name == "Deep"
        assert change.category.name == "Deep"

    def test_recolour(self, forest):
        change = update_category(forest, "other", color="#ff0000")
        assert change.categories[1].color == "#ff0000"
        assert change.categories[1].name == "Other"

    def test_missing_is_noop(self, forest):
        change = update_category(forest, "nope", name="X")
        assert not change.changed
        assert change.categories is forest

    def test_no_fields_is_noop(self, forest):
        change = update_category(forest, "root")
        assert not change.changed
        assert change.category is forest[0]


class TestResolveSelection:
    def test_valid(self, forest):
        assert resolve_selection(forest, "sibling") == "sibling"

    def test_invalid_falls_back(self, forest):
        assert resolve_selection(forest, "nope") == "root"

    def test_none_stays_none(self, forest):
        assert resolve_selection(forest, None) is None
