"""Graph Models - Nodes, relationships and adjacency entries for the strategic graph."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_NODE_TYPE = "other"


class EdgeDirection(Enum):
    """Direction of a relationship as seen from one of its endpoints."""

    OUTGOING = "outgoing"  # Node is the relationship's from_node_id
    INCOMING = "incoming"  # Node is the relationship's to_node_id


@dataclass(frozen=True)
class Node:
    """A strategic entity (company, person, technology, market, ...)."""

    id: str
    label: str
    type: str = DEFAULT_NODE_TYPE
    properties: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Node":
        """Build a node from a store record.

        Accepts both the store's snake_case fields (``node_type``) and the
        plain ``type`` key.
        """
        node_type = data.get("node_type") or data.get("type") or DEFAULT_NODE_TYPE
        return cls(
            id=str(data["id"]),
            label=data.get("label") or "",
            type=node_type,
            properties=dict(data.get("properties") or {}),
        )


@dataclass(frozen=True)
class Relationship:
    """A directed, typed connection between two nodes."""

    id: str
    from_node_id: str
    to_node_id: str
    relationship_type: str
    properties: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Relationship":
        """Build a relationship from a store record.

        Endpoint keys vary between store collections, so ``from_node_id``,
        ``fromNodeId`` and ``source_id`` (and their ``to`` counterparts) are
        all recognised.
        """
        from_id = _first_present(data, "from_node_id", "fromNodeId", "source_id", "from")
        to_id = _first_present(data, "to_node_id", "toNodeId", "target_id", "to")
        rel_type = (
            data.get("relationship_type") or data.get("relationshipType") or data.get("type")
        )
        return cls(
            id=str(data["id"]),
            from_node_id=str(from_id),
            to_node_id=str(to_id),
            relationship_type=rel_type or "related_to",
            properties=dict(data.get("properties") or {}),
        )

    def other_end(self, node_id: str) -> str:
        """Return the endpoint opposite ``node_id``."""
        return self.to_node_id if node_id == self.from_node_id else self.from_node_id


@dataclass(frozen=True)
class Neighbor:
    """One adjacency entry: a neighbor reached through a single relationship."""

    neighbor_id: str
    relationship_type: str
    direction: EdgeDirection
    relationship_id: str


@dataclass(frozen=True)
class Connection:
    """An adjacency entry joined with the neighboring node."""

    node: Node
    relationship_type: str
    direction: EdgeDirection
    relationship_id: str


def _first_present(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    raise KeyError(keys[0])
