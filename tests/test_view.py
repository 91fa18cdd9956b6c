from conftest import make_member
from scene import INVALID_TREE_MESSAGE, Viewport
from view import derive_view

DIMENSIONS = (1000.0, 600.0)


def test_valid_tree_produces_cards_and_links(family):
    scene = derive_view(family, "D", DIMENSIONS)

    assert scene.is_renderable
    assert scene.diagnostic is None
    assert len(scene.cards) == len(family)
    assert len(scene.links) == len(family) - 1
    assert [c.member_id for c in scene.cards if c.selected] == ["D"]
    assert scene.viewport == Viewport.initial(*DIMENSIONS)


def test_structural_error_becomes_diagnostic():
    scene = derive_view([make_member("A"), make_member("B")], None, DIMENSIONS)

    assert not scene.is_renderable
    assert scene.diagnostic == INVALID_TREE_MESSAGE
    assert scene.links == []


def test_empty_collection_is_blank_without_diagnostic():
    scene = derive_view([], None, DIMENSIONS)

    assert not scene.is_renderable
    assert scene.diagnostic is None


def test_view_is_pure(family):
    first = derive_view(family, "B", DIMENSIONS)
    second = derive_view(family, "B", DIMENSIONS)

    assert first == second
