"""Structural validation for the member collection."""

from collections import Counter

import networkx as nx

from graph import build_graph
from models import Member


def find_structural_problems(members: list[Member]) -> list[str]:
    """
    Check that the members form a single rooted tree:
    - The collection is not empty
    - Member IDs are unique
    - Exactly one member has no parent
    - Every parent reference resolves
    - Parent references contain no cycle

    Returns a list of problem messages (empty when the tree is valid).
    """
    problems: list[str] = []

    if not members:
        return ["No members in the tree"]

    counts = Counter(m.id for m in members)
    duplicates = sorted(member_id for member_id, n in counts.items() if n > 1)
    if duplicates:
        problems.append(f"Duplicate member IDs: {duplicates}")

    roots = [m.id for m in members if m.parent_id is None]
    if not roots:
        problems.append("No root member found")
    elif len(roots) > 1:
        problems.append(f"Multiple root members: {roots}")

    for member in members:
        if member.parent_id is not None and member.parent_id not in counts:
            problems.append(
                f"{member.name} ({member.id}) references missing parent {member.parent_id}"
            )

    G = build_graph(members)
    try:
        cycle = nx.find_cycle(G, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        problems.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    return problems
