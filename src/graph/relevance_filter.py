"""Relevance Filter - Derive the working node set from text filters and expansions."""

from collections.abc import Iterable

import structlog

from src.config import DEFAULT_VIEW_SIZE, RELEVANT_MAX_NODES

from .graph_index import GraphIndex
from .models import Node

logger = structlog.get_logger()


def normalize_filters(filters: Iterable[str | None]) -> list[str]:
    """Lowercase and strip filter strings, dropping blank ones."""
    normalized = []
    for text in filters:
        if text is None:
            continue
        cleaned = text.strip().lower()
        if cleaned and cleaned not in normalized:
            normalized.append(cleaned)
    return normalized


def label_matches(label: str, filters: list[str]) -> bool:
    """Check the two-way substring rule against normalized filters.

    A label matches when it contains a filter text or a filter text contains
    it.  Empty labels never match.
    """
    lowered = (label or "").strip().lower()
    if not lowered:
        return False
    return any(text in lowered or lowered in text for text in filters)


class RelevanceFilter:
    """Compute the relevant node set shown for an exploration session.

    Ordering contract: direct label matches come first, in snapshot order,
    followed by nodes reached through them or through expanded nodes, also
    in snapshot order.
    """

    def __init__(
        self,
        index: GraphIndex,
        default_view_size: int = DEFAULT_VIEW_SIZE,
        max_nodes: int | None = RELEVANT_MAX_NODES,
    ):
        self.index = index
        self.default_view_size = default_view_size
        self.max_nodes = max_nodes

    def relevant_nodes(
        self,
        filters: Iterable[str | None] = (),
        expanded_ids: Iterable[str] = (),
        insight_filters: Iterable[str | None] = (),
    ) -> list[Node]:
        """Get the relevant node set.

        Args:
            filters: Free-text context labels
            expanded_ids: Nodes whose neighbors are pulled into the set
            insight_filters: Additional free-text filters owned by the session

        Returns:
            Direct matches followed by connected nodes
        """
        texts = normalize_filters([*filters, *insight_filters])
        expanded = [node_id for node_id in dict.fromkeys(expanded_ids) if node_id in self.index]

        if not texts and not expanded:
            return self.index.nodes[: self.default_view_size]

        direct_matches = (
            [node for node in self.index.nodes if label_matches(node.label, texts)]
            if texts
            else []
        )
        direct_ids = {node.id for node in direct_matches}

        connected_ids: set[str] = set()
        for node in direct_matches:
            connected_ids.update(self.index.neighbor_ids(node.id))
        for node_id in expanded:
            connected_ids.add(node_id)
            connected_ids.update(self.index.neighbor_ids(node_id))

        connected = [
            node
            for node in self.index.nodes
            if node.id in connected_ids and node.id not in direct_ids
        ]

        result = direct_matches + connected
        if self.max_nodes is not None:
            result = result[: self.max_nodes]

        logger.debug(
            "relevant_nodes_computed",
            filters=len(texts),
            expanded=len(expanded),
            direct=len(direct_matches),
            connected=len(connected),
            returned=len(result),
        )

        return result

    @staticmethod
    def search(
        nodes: Iterable[Node],
        term: str | None = None,
        node_type: str | None = None,
    ) -> list[Node]:
        """Narrow a node list by label substring and node type.

        ``node_type`` of None or "all" accepts every type.
        """
        needle = (term or "").strip().lower()
        any_type = node_type is None or node_type == "all"
        return [
            node
            for node in nodes
            if (not needle or needle in (node.label or "").lower())
            and (any_type or node.type == node_type)
        ]
