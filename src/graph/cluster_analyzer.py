"""Cluster Analyzer - Group a node set by type for at-a-glance summaries."""

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from src.config import CLUSTER_ACTIVATION_SIZE, CLUSTER_MIN_SIZE

from .models import DEFAULT_NODE_TYPE, Node

logger = structlog.get_logger()


@dataclass
class Cluster:
    """A group of same-typed nodes."""

    type: str
    count: int
    node_ids: list[str] = field(default_factory=list)


class ClusterAnalyzer:
    """Summarize large node sets by type.

    Clustering only fires once the set reaches ``activation_size`` nodes,
    and only types with at least ``min_size`` members are reported.
    """

    def __init__(
        self,
        min_size: int = CLUSTER_MIN_SIZE,
        activation_size: int = CLUSTER_ACTIVATION_SIZE,
    ):
        self.min_size = min_size
        self.activation_size = activation_size

    def clusters(self, nodes: Iterable[Node]) -> list[Cluster]:
        """Get type clusters for a node set, largest first.

        Ties keep first-seen type order.
        """
        nodes = list(nodes)
        if len(nodes) < self.activation_size:
            return []

        clusters = [c for c in self.group_by_type(nodes) if c.count >= self.min_size]
        clusters.sort(key=lambda c: c.count, reverse=True)

        logger.debug(
            "clusters_computed",
            nodes=len(nodes),
            clusters=len(clusters),
        )

        return clusters

    @staticmethod
    def group_by_type(nodes: Iterable[Node]) -> list[Cluster]:
        """Group every node by type, in first-seen type order, with no thresholds."""
        groups: dict[str, Cluster] = {}
        for node in nodes:
            node_type = node.type or DEFAULT_NODE_TYPE
            cluster = groups.setdefault(node_type, Cluster(type=node_type, count=0))
            cluster.count += 1
            cluster.node_ids.append(node.id)
        return list(groups.values())
