"""Rooted tree construction from the flat member list."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from errors import StructuralError
from graph import build_graph
from models import Member
from validation import find_structural_problems

logger = logging.getLogger(__name__)


@dataclass
class TreeNode:
    member: Member
    depth: int = 0
    children: list["TreeNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.member.id


def build_hierarchy(members: list[Member]) -> TreeNode:
    """
    Convert the flat member list into a rooted tree.

    The collection is validated on every call. Children keep the order in
    which they appear in ``members``.

    Raises:
        StructuralError: if the members do not form exactly one rooted tree.
    """
    problems = find_structural_problems(members)
    if problems:
        logger.warning("Invalid tree structure: %s", "; ".join(problems))
        raise StructuralError(problems)

    G = build_graph(members)
    root_member = next(m for m in members if m.parent_id is None)

    root = TreeNode(root_member)
    stack = [root]
    while stack:
        node = stack.pop()
        for child_id in G.successors(node.id):
            child = TreeNode(G.nodes[child_id]["member"], depth=node.depth + 1)
            node.children.append(child)
            stack.append(child)

    return root


def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Yield every node in pre-order, children left to right."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_links(root: TreeNode) -> Iterator[tuple[TreeNode, TreeNode]]:
    """Yield (parent, child) pairs in pre-order."""
    for node in iter_nodes(root):
        for child in node.children:
            yield node, child
