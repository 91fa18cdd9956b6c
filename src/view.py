"""Derive the drawable scene from editor state."""

import logging

from errors import StructuralError
from hierarchy import build_hierarchy
from layout import compute_layout
from models import Member
from scene import FONT_FAMILY, INVALID_TREE_MESSAGE, Scene, build_scene, empty_scene

logger = logging.getLogger(__name__)


def derive_view(
    members: list[Member],
    selected_id: str | None,
    dimensions: tuple[float, float],
    font_family=FONT_FAMILY,
) -> Scene:
    """
    Run hierarchy -> layout -> scene for the current state.

    Pure in (members, selected_id, dimensions). An empty collection gives an
    empty scene; a structural error gives an empty scene carrying a diagnostic
    message instead of raising.
    """
    if not members:
        return empty_scene(dimensions, font_family=font_family)

    try:
        root = build_hierarchy(members)
    except StructuralError as exc:
        logger.error("Cannot lay out tree: %s", exc)
        return empty_scene(dimensions, diagnostic=INVALID_TREE_MESSAGE, font_family=font_family)

    layout = compute_layout(root)
    return build_scene(layout, selected_id, dimensions, font_family=font_family)
