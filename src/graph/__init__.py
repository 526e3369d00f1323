"""Graph module - In-memory strategic knowledge graph index and queries."""

from .cluster_analyzer import Cluster, ClusterAnalyzer
from .graph_index import GraphIndex, build_index
from .models import Connection, EdgeDirection, Neighbor, Node, Relationship
from .path_finder import CandidatePaths, PathConfig, PathFinder
from .relevance_filter import RelevanceFilter, label_matches, normalize_filters

__all__ = [
    "CandidatePaths",
    "Cluster",
    "ClusterAnalyzer",
    "Connection",
    "EdgeDirection",
    "GraphIndex",
    "Neighbor",
    "Node",
    "PathConfig",
    "PathFinder",
    "Relationship",
    "RelevanceFilter",
    "build_index",
    "label_matches",
    "normalize_filters",
]
