import pytest

from conftest import make_member
from errors import StructuralError
from graph import build_graph, get_subtree_ids
from hierarchy import build_hierarchy, iter_links, iter_nodes
from validation import find_structural_problems


def test_example_tree_builds_with_children_in_order(abc_members):
    root = build_hierarchy(abc_members)

    assert root.id == "A"
    assert [child.id for child in root.children] == ["B", "C"]
    assert [child.depth for child in root.children] == [1, 1]
    assert len(list(iter_nodes(root))) == 3


def test_node_count_matches_collection(family):
    root = build_hierarchy(family)

    assert len(list(iter_nodes(root))) == len(family)
    assert {n.id: n.depth for n in iter_nodes(root)} == {"A": 0, "B": 1, "C": 1, "D": 2, "E": 3, "F": 2}


def test_children_follow_collection_order_not_parent_position():
    members = [make_member("C", "A"), make_member("A"), make_member("B", "A")]

    root = build_hierarchy(members)

    assert [child.id for child in root.children] == ["C", "B"]


def test_links_pair_each_child_with_its_parent(family):
    links = [(p.id, c.id) for p, c in iter_links(build_hierarchy(family))]

    assert sorted(links) == [("A", "B"), ("A", "C"), ("B", "D"), ("C", "F"), ("D", "E")]


def test_two_roots_fail():
    with pytest.raises(StructuralError) as exc_info:
        build_hierarchy([make_member("A"), make_member("B")])

    assert any("Multiple root" in p for p in exc_info.value.problems)


def test_no_root_fails():
    with pytest.raises(StructuralError):
        build_hierarchy([make_member("A", "B"), make_member("B", "A")])


def test_dangling_parent_fails():
    with pytest.raises(StructuralError) as exc_info:
        build_hierarchy([make_member("A"), make_member("B", "missing")])

    assert any("missing" in p for p in exc_info.value.problems)


def test_cycle_detached_from_root_fails():
    members = [make_member("A"), make_member("B", "C"), make_member("C", "B")]

    with pytest.raises(StructuralError) as exc_info:
        build_hierarchy(members)

    assert any("Cycle" in p for p in exc_info.value.problems)


def test_self_parent_is_a_cycle():
    problems = find_structural_problems([make_member("A"), make_member("B", "B")])

    assert any("Cycle" in p for p in problems)


def test_duplicate_ids_fail():
    with pytest.raises(StructuralError) as exc_info:
        build_hierarchy([make_member("A"), make_member("B", "A"), make_member("B", "A")])

    assert any("Duplicate" in p for p in exc_info.value.problems)


def test_empty_collection_fails():
    with pytest.raises(StructuralError):
        build_hierarchy([])


def test_valid_collection_has_no_problems(family):
    assert find_structural_problems(family) == []


def test_subtree_ids(family):
    G = build_graph(family)

    assert get_subtree_ids(G, "B") == {"B", "D", "E"}
    assert get_subtree_ids(G, "F") == {"F"}
    assert get_subtree_ids(G, "nobody") == set()
