"""NetworkX graph building and subtree queries."""

import networkx as nx

from models import Member


def build_graph(members: list[Member]) -> nx.DiGraph:
    """
    Build a directed parent -> child graph from the flat member list.

    Children are added in collection order, so ``G.successors(parent)`` yields
    them in the same order the members were listed. Parent references that do
    not resolve are left out; validation reports them separately.
    """
    G = nx.DiGraph()

    for member in members:
        G.add_node(member.id, member=member)

    for member in members:
        if member.parent_id is not None and member.parent_id in G:
            G.add_edge(member.parent_id, member.id, relationship_type="PARENT_OF")

    return G


def get_subtree_ids(G: nx.DiGraph, member_id: str) -> set[str]:
    """
    Return ``member_id`` together with every transitive descendant.

    Args:
        G: Graph from ``build_graph``
        member_id: The member whose subtree to collect

    Returns:
        The set of member IDs in the subtree, or an empty set if the member
        does not exist.
    """
    if member_id not in G:
        return set()
    return {member_id} | nx.descendants(G, member_id)
