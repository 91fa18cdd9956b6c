"""Tidy-tree layout for the family hierarchy."""

from dataclasses import dataclass

from hierarchy import TreeNode, iter_links, iter_nodes

# Horizontal and vertical size of one node slot; a card is 220 x 110.
NODE_SIZE = (240.0, 160.0)
CARD_WIDTH = 220.0
CARD_HEIGHT = 110.0


@dataclass
class Layout:
    root: TreeNode
    positions: dict[str, tuple[float, float]]
    node_size: tuple[float, float] = NODE_SIZE

    def nodes(self) -> list[TreeNode]:
        return list(iter_nodes(self.root))

    def links(self) -> list[tuple[TreeNode, TreeNode]]:
        return list(iter_links(self.root))


def _place_subtree(node: TreeNode, gap: float) -> tuple[dict[str, float], float, float]:
    """
    Lay out ``node``'s subtree in slot units relative to ``node`` itself.

    Returns (offsets, low, high) where offsets maps member id to horizontal
    offset and [low, high] is the horizontal extent of the subtree.
    """
    if not node.children:
        return {node.id: 0.0}, 0.0, 0.0

    placed: list[tuple[dict[str, float], float]] = []
    right_edge = None
    for child in node.children:
        offsets, low, high = _place_subtree(child, gap)
        # Shift each sibling subtree right until it clears the previous one.
        shift = 0.0 if right_edge is None else right_edge + gap - low
        placed.append((offsets, shift))
        right_edge = high + shift

    center = (placed[0][1] + placed[-1][1]) / 2
    result = {node.id: 0.0}
    for offsets, shift in placed:
        for member_id, x in offsets.items():
            result[member_id] = x + shift - center

    return result, min(result.values()), max(result.values())


def compute_layout(
    root: TreeNode, node_size: tuple[float, float] = NODE_SIZE, gap: float = 1.0
) -> Layout:
    """
    Assign a position to every node of the tree.

    - Depth maps to the vertical axis, one slot height per generation
    - Siblings keep their child-list order from left to right
    - A parent is centered over its first and last child
    - Sibling subtrees never share horizontal span; ``gap`` is the minimum
      distance between them in slots
    - The root is at (0, 0)

    Args:
        root: Root node from ``build_hierarchy``
        node_size: (width, height) of one node slot in layout units
        gap: Minimum slot distance between adjacent sibling subtrees

    Returns:
        A Layout mapping each member id to its (x, y) center.
    """
    slot_width, slot_height = node_size
    offsets, _, _ = _place_subtree(root, gap)

    positions = {}
    for node in iter_nodes(root):
        positions[node.id] = (offsets[node.id] * slot_width, node.depth * slot_height)

    return Layout(root=root, positions=positions, node_size=node_size)
