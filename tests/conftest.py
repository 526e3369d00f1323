"""Shared test fixtures for the strategic graph explorer."""

import pytest

from src.graph import Node, Relationship, build_index


def make_node(node_id: str, node_type: str = "company", label: str | None = None) -> Node:
    return Node(id=node_id, label=label or node_id, type=node_type)


def make_rel(
    from_id: str,
    to_id: str,
    rel_type: str = "related_to",
    rel_id: str | None = None,
    **properties,
) -> Relationship:
    return Relationship(
        id=rel_id or f"{from_id}-{to_id}-{rel_type}",
        from_node_id=from_id,
        to_node_id=to_id,
        relationship_type=rel_type,
        properties=properties,
    )


@pytest.fixture
def scenario_nodes():
    """Two companies joined through a technology and a market."""
    return [
        make_node("A", "company", "Acme Corp"),
        make_node("B", "company", "Beta Industries"),
        make_node("C", "technology", "Quantum Sensing"),
        make_node("D", "market", "Defense Market"),
    ]


@pytest.fixture
def scenario_relationships():
    return [
        make_rel("A", "C", "develops"),
        make_rel("C", "D", "serves"),
        make_rel("D", "B", "competes_in"),
    ]


@pytest.fixture
def scenario_index(scenario_nodes, scenario_relationships):
    return build_index(scenario_nodes, scenario_relationships)


@pytest.fixture
def diamond_index():
    """Small graph with several routes between S and T.

    S-X-T, S-Y-T, S-X-Y-T, S-Y-X-T, plus a dead-end branch S-Z.
    """
    nodes = [make_node(n, "company") for n in ("S", "X", "Y", "Z", "T")]
    rels = [
        make_rel("S", "X"),
        make_rel("S", "Y"),
        make_rel("X", "Y"),
        make_rel("X", "T"),
        make_rel("Y", "T"),
        make_rel("S", "Z"),
    ]
    return build_index(nodes, rels)


@pytest.fixture
def wide_index():
    """Start and end joined through twelve parallel intermediaries."""
    middles = [f"M{i}" for i in range(12)]
    nodes = [make_node("S"), make_node("T")] + [make_node(m, "technology") for m in middles]
    rels = []
    for m in middles:
        rels.append(make_rel("S", m))
        rels.append(make_rel(m, "T"))
    return build_index(nodes, rels)
