"""Tests for the graph data model and index."""

import pytest

from src.graph import EdgeDirection, Node, Relationship, build_index

from .conftest import make_node, make_rel


class TestRecordNormalization:
    """Tests for building nodes and relationships from store records."""

    def test_node_from_store_record(self):
        """Store records use node_type rather than type."""
        node = Node.from_dict(
            {"id": "n1", "label": "Acme", "node_type": "company", "properties": {"hq": "SP"}}
        )

        assert node.id == "n1"
        assert node.type == "company"
        assert node.properties == {"hq": "SP"}

    def test_node_without_type_is_other(self):
        """Missing node type falls back to 'other'."""
        node = Node.from_dict({"id": 7, "label": "Loose"})

        assert node.id == "7"
        assert node.type == "other"

    def test_relationship_from_snake_case(self):
        rel = Relationship.from_dict(
            {
                "id": "r1",
                "from_node_id": "a",
                "to_node_id": "b",
                "relationship_type": "invests_in",
            }
        )

        assert rel.from_node_id == "a"
        assert rel.to_node_id == "b"
        assert rel.relationship_type == "invests_in"

    def test_relationship_from_camel_case(self):
        rel = Relationship.from_dict(
            {
                "id": "r2",
                "fromNodeId": "a",
                "toNodeId": "b",
                "relationshipType": "competes_with",
                "properties": {"confidence": 0.8, "aiInferred": True},
            }
        )

        assert rel.relationship_type == "competes_with"
        assert rel.properties["aiInferred"] is True

    def test_relationship_from_source_target(self):
        """Visualisation records name endpoints source_id/target_id."""
        rel = Relationship.from_dict({"id": "r3", "source_id": "x", "target_id": "y"})

        assert (rel.from_node_id, rel.to_node_id) == ("x", "y")
        assert rel.relationship_type == "related_to"

    def test_relationship_missing_endpoint_raises(self):
        with pytest.raises(KeyError):
            Relationship.from_dict({"id": "r4", "from_node_id": "x"})


class TestNeighbors:
    """Tests for adjacency lookups."""

    def test_symmetry(self, scenario_index, scenario_relationships):
        """Every relationship is visible from both endpoints."""
        for rel in scenario_relationships:
            assert rel.to_node_id in scenario_index.neighbor_ids(rel.from_node_id)
            assert rel.from_node_id in scenario_index.neighbor_ids(rel.to_node_id)

    def test_direction_is_preserved(self, scenario_index):
        """Outgoing from the from-node, incoming at the to-node."""
        from_a = scenario_index.neighbors("A")
        at_c = [n for n in scenario_index.neighbors("C") if n.neighbor_id == "A"]

        assert from_a[0].direction == EdgeDirection.OUTGOING
        assert from_a[0].relationship_type == "develops"
        assert at_c[0].direction == EdgeDirection.INCOMING
        assert at_c[0].relationship_id == from_a[0].relationship_id

    def test_unknown_node_returns_empty(self, scenario_index):
        assert scenario_index.neighbors("missing") == []
        assert scenario_index.neighbor_ids("missing") == []
        assert scenario_index.connections("missing") == []

    def test_dangling_relationship_is_tolerated(self):
        """Edges to nodes outside the snapshot contribute nothing."""
        index = build_index(
            [make_node("A"), make_node("B")],
            [make_rel("A", "B"), make_rel("A", "ghost")],
        )

        assert index.neighbor_ids("A") == ["B"]
        assert index.neighbors("ghost") == []

    def test_relationship_type_allowlist(self):
        index = build_index(
            [make_node("A"), make_node("B"), make_node("C")],
            [make_rel("A", "B", "invests_in"), make_rel("A", "C", "mentions")],
        )

        assert index.neighbor_ids("A", {"invests_in"}) == ["B"]
        assert index.neighbor_ids("A") == ["B", "C"]

    def test_parallel_relationships_give_distinct_neighbor_once(self):
        index = build_index(
            [make_node("A"), make_node("B")],
            [make_rel("A", "B", "invests_in"), make_rel("B", "A", "partners_with")],
        )

        assert len(index.neighbors("A")) == 2
        assert index.neighbor_ids("A") == ["B"]


class TestIndexViews:
    """Tests for derived views over the index."""

    def test_duplicate_node_ids_keep_first(self):
        index = build_index([make_node("A", label="first"), make_node("A", label="second")], [])

        assert len(index) == 1
        assert index.get_node("A").label == "first"

    def test_connections_join_nodes(self, scenario_index):
        connections = scenario_index.connections("C")

        assert [c.node.id for c in connections] == ["A", "D"]
        assert connections[0].direction == EdgeDirection.INCOMING
        assert connections[1].direction == EdgeDirection.OUTGOING

    def test_relationships_between(self, scenario_index):
        rels = scenario_index.relationships_between("D", "C")

        assert len(rels) == 1
        assert rels[0].relationship_type == "serves"
        assert scenario_index.relationships_between("A", "B") == []

    def test_relationships_within(self, scenario_index):
        rels = scenario_index.relationships_within(["A", "C", "D"])

        assert {r.relationship_type for r in rels} == {"develops", "serves"}

    def test_focus(self, scenario_index):
        assert [n.id for n in scenario_index.focus("C")] == ["C", "A", "D"]
        assert scenario_index.focus("missing") == []

    def test_same_snapshot_same_index(self, scenario_nodes, scenario_relationships):
        first = build_index(scenario_nodes, scenario_relationships)
        second = build_index(scenario_nodes, scenario_relationships)

        for node in scenario_nodes:
            assert first.neighbors(node.id) == second.neighbors(node.id)
