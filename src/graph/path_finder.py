"""Path Finder - Shortest paths and bounded candidate-path enumeration."""

from collections import deque
from dataclasses import dataclass, field

import structlog

from src.config import MAX_CANDIDATE_PATHS, MAX_PATH_DEPTH
from src.ranking.oracle import PathCandidate

from .graph_index import GraphIndex

logger = structlog.get_logger()


@dataclass
class PathConfig:
    """Configuration for path search."""

    max_depth: int = MAX_PATH_DEPTH
    max_candidates: int = MAX_CANDIDATE_PATHS
    relationship_types: set[str] | None = None  # None traverses every type


@dataclass
class CandidatePaths:
    """Result of a bounded all-paths enumeration."""

    start_id: str
    end_id: str
    max_depth: int
    paths: list[list[str]] = field(default_factory=list)
    total_found: int = 0

    @property
    def truncated(self) -> bool:
        return self.total_found > len(self.paths)

    @property
    def found(self) -> bool:
        return bool(self.paths)

    def summary(self) -> str:
        """Human-readable disclosure of the candidate bound."""
        if not self.paths:
            return "no path found"
        return f"{len(self.paths)} of {self.total_found} candidates considered"


class PathFinder:
    """Find paths between nodes of a GraphIndex.

    Both searches treat relationships as undirected and never revisit a
    node within a single path.
    """

    def __init__(self, index: GraphIndex, config: PathConfig | None = None):
        self.index = index
        self.config = config or PathConfig()

    def find_path(self, start_id: str, end_id: str) -> list[str]:
        """Find the shortest path (fewest edges) between two nodes.

        Returns:
            Node ids from start to end; ``[start_id]`` when both are the same
            node; an empty list when either node is unknown or unreachable
        """
        if start_id not in self.index or end_id not in self.index:
            return []

        if start_id == end_id:
            return [start_id]

        parents: dict[str, str | None] = {start_id: None}
        queue: deque[str] = deque([start_id])

        while queue:
            current = queue.popleft()

            for neighbor_id in self.index.neighbor_ids(current, self.config.relationship_types):
                if neighbor_id in parents:
                    continue

                parents[neighbor_id] = current

                if neighbor_id == end_id:
                    path = self._unwind(parents, end_id)
                    logger.debug("path_found", start=start_id, end=end_id, hops=len(path) - 1)
                    return path

                queue.append(neighbor_id)

        logger.debug("no_path_found", start=start_id, end=end_id, explored=len(parents))
        return []

    def find_candidate_paths(
        self,
        start_id: str,
        end_id: str,
        max_depth: int | None = None,
        max_candidates: int | None = None,
    ) -> CandidatePaths:
        """Enumerate simple paths up to ``max_depth`` edges.

        Keeps the first ``max_candidates`` paths in DFS discovery order and
        counts every path found so truncation can be reported.

        Args:
            start_id: Starting node
            end_id: Target node
            max_depth: Maximum edges per path (default: config max_depth)
            max_candidates: Cap on returned paths (default: config max_candidates)

        Returns:
            CandidatePaths; empty when no path exists within the bound
        """
        depth = self.config.max_depth if max_depth is None else max_depth
        cap = self.config.max_candidates if max_candidates is None else max_candidates

        result = CandidatePaths(start_id=start_id, end_id=end_id, max_depth=depth)

        if start_id not in self.index or end_id not in self.index or depth < 0:
            return result

        if start_id == end_id:
            result.paths.append([start_id])
            result.total_found = 1
            return result

        path = [start_id]
        on_path = {start_id}
        self._enumerate(start_id, end_id, depth, path, on_path, result, cap)

        logger.debug(
            "candidate_paths_enumerated",
            start=start_id,
            end=end_id,
            max_depth=depth,
            kept=len(result.paths),
            total=result.total_found,
        )

        return result

    def _enumerate(
        self,
        current: str,
        end_id: str,
        remaining: int,
        path: list[str],
        on_path: set[str],
        result: CandidatePaths,
        cap: int,
    ) -> None:
        if remaining == 0:
            return

        for neighbor_id in self.index.neighbor_ids(current, self.config.relationship_types):
            if neighbor_id in on_path:
                continue

            if neighbor_id == end_id:
                result.total_found += 1
                if len(result.paths) < cap:
                    result.paths.append([*path, end_id])
                continue

            path.append(neighbor_id)
            on_path.add(neighbor_id)
            self._enumerate(neighbor_id, end_id, remaining - 1, path, on_path, result, cap)
            on_path.discard(neighbor_id)
            path.pop()

    def to_candidate(self, path: list[str]) -> PathCandidate:
        """Describe a path with node labels and one relationship type per hop."""
        labels = []
        for node_id in path:
            node = self.index.get_node(node_id)
            labels.append(node.label if node else node_id)

        relationship_types = []
        confidences = []
        for from_id, to_id in zip(path, path[1:]):
            rels = [
                rel
                for rel in self.index.relationships_between(from_id, to_id)
                if self.config.relationship_types is None
                or rel.relationship_type in self.config.relationship_types
            ]
            if rels:
                relationship_types.append(rels[0].relationship_type)
                confidences.append(_confidence(rels[0].properties))
            else:
                relationship_types.append("related_to")
                confidences.append(1.0)

        return PathCandidate(
            node_labels=labels,
            relationship_types=relationship_types,
            confidences=confidences,
        )

    @staticmethod
    def _unwind(parents: dict[str, str | None], end_id: str) -> list[str]:
        path = []
        node: str | None = end_id
        while node is not None:
            path.append(node)
            node = parents[node]
        path.reverse()
        return path


def _confidence(properties: dict) -> float:
    try:
        return float(properties.get("confidence", 1.0))
    except (TypeError, ValueError):
        return 1.0
