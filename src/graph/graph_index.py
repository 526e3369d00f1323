"""Graph Index - In-memory adjacency lookups over a node/relationship snapshot."""

from collections.abc import Iterable

import structlog

from .models import Connection, EdgeDirection, Neighbor, Node, Relationship

logger = structlog.get_logger()


class GraphIndex:
    """Read-only index over one snapshot of the graph.

    Relationships are directed for display but indexed symmetrically: each
    relationship contributes an OUTGOING entry to its from-node and an
    INCOMING entry to its to-node.  The index is never mutated after
    construction; a changed snapshot means building a new index.
    """

    def __init__(self, nodes: Iterable[Node], relationships: Iterable[Relationship]):
        self._nodes: dict[str, Node] = {}
        for node in nodes:
            self._nodes.setdefault(node.id, node)

        self._relationships: dict[str, Relationship] = {}
        self._adjacency: dict[str, list[Neighbor]] = {}
        dangling = 0

        for rel in relationships:
            self._relationships[rel.id] = rel
            self._adjacency.setdefault(rel.from_node_id, []).append(
                Neighbor(
                    neighbor_id=rel.to_node_id,
                    relationship_type=rel.relationship_type,
                    direction=EdgeDirection.OUTGOING,
                    relationship_id=rel.id,
                )
            )
            self._adjacency.setdefault(rel.to_node_id, []).append(
                Neighbor(
                    neighbor_id=rel.from_node_id,
                    relationship_type=rel.relationship_type,
                    direction=EdgeDirection.INCOMING,
                    relationship_id=rel.id,
                )
            )
            if rel.from_node_id not in self._nodes or rel.to_node_id not in self._nodes:
                dangling += 1

        if dangling:
            logger.warning("dangling_relationships", count=dangling)

        logger.debug(
            "index_built",
            nodes=len(self._nodes),
            relationships=len(self._relationships),
        )

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    @property
    def nodes(self) -> list[Node]:
        """All nodes in snapshot order."""
        return list(self._nodes.values())

    @property
    def relationships(self) -> list[Relationship]:
        """All relationships in snapshot order."""
        return list(self._relationships.values())

    def get_node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def get_relationship(self, relationship_id: str) -> Relationship | None:
        return self._relationships.get(relationship_id)

    def neighbors(
        self,
        node_id: str,
        relationship_types: set[str] | None = None,
    ) -> list[Neighbor]:
        """Get adjacency entries for a node.

        Entries pointing at nodes missing from the snapshot are skipped, so
        dangling relationships contribute nothing.

        Args:
            node_id: Node to look up; unknown ids yield an empty list
            relationship_types: Optional allowlist of relationship types

        Returns:
            Neighbor entries in relationship snapshot order
        """
        if node_id not in self._nodes:
            return []

        return [
            entry
            for entry in self._adjacency.get(node_id, [])
            if entry.neighbor_id in self._nodes
            and (relationship_types is None or entry.relationship_type in relationship_types)
        ]

    def neighbor_ids(
        self,
        node_id: str,
        relationship_types: set[str] | None = None,
    ) -> list[str]:
        """Distinct neighbor ids in first-seen order."""
        seen: dict[str, None] = {}
        for entry in self.neighbors(node_id, relationship_types):
            seen.setdefault(entry.neighbor_id, None)
        return list(seen)

    def connections(self, node_id: str) -> list[Connection]:
        """Get neighbors joined with their node records."""
        return [
            Connection(
                node=self._nodes[entry.neighbor_id],
                relationship_type=entry.relationship_type,
                direction=entry.direction,
                relationship_id=entry.relationship_id,
            )
            for entry in self.neighbors(node_id)
        ]

    def relationships_between(self, node_a: str, node_b: str) -> list[Relationship]:
        """Get every relationship joining two nodes, in either direction."""
        return [
            self._relationships[entry.relationship_id]
            for entry in self.neighbors(node_a)
            if entry.neighbor_id == node_b
        ]

    def relationships_within(self, node_ids: Iterable[str]) -> list[Relationship]:
        """Get relationships whose endpoints both lie in ``node_ids``."""
        members = set(node_ids)
        return [
            rel
            for rel in self._relationships.values()
            if rel.from_node_id in members and rel.to_node_id in members
        ]

    def focus(self, node_id: str) -> list[Node]:
        """Get a node followed by its immediate neighbors.

        Returns an empty list for unknown nodes.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return []

        return [node] + [
            self._nodes[neighbor_id]
            for neighbor_id in self.neighbor_ids(node_id)
            if neighbor_id != node_id
        ]


def build_index(
    nodes: Iterable[Node],
    relationships: Iterable[Relationship],
) -> GraphIndex:
    """Build a GraphIndex from a snapshot of nodes and relationships."""
    return GraphIndex(nodes, relationships)
