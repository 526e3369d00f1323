"""Exploration Session - Selection/expansion state machine over a graph snapshot."""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

import structlog

from src.config import RANKING_TIMEOUT_SECONDS
from src.graph import (
    CandidatePaths,
    Cluster,
    ClusterAnalyzer,
    GraphIndex,
    Node,
    PathConfig,
    PathFinder,
    Relationship,
    RelevanceFilter,
    build_index,
    normalize_filters,
)
from src.ranking import RankingDecision, RankingOracle

from .state import ExplorationState, PathAnnotation, SelectionMode

logger = structlog.get_logger()


class Outcome(Enum):
    """How a state machine operation ended."""

    OK = "ok"
    UNKNOWN_NODE = "unknown_node"  # Absent reference, nothing changed
    NO_PATH = "no_path"  # Valid request, the nodes are not connected
    PRECONDITION_NOT_MET = "precondition_not_met"  # Caller asked at the wrong time
    IN_PROGRESS = "in_progress"  # Ranking already outstanding for this pair
    STALE = "stale"  # Selection changed while the oracle was answering
    TIMED_OUT = "timed_out"  # Oracle did not answer in time


@dataclass
class OperationResult:
    """Result of a state machine operation."""

    outcome: Outcome
    path: list[str] = field(default_factory=list)
    message: str = ""
    warnings: list[str] = field(default_factory=list)
    candidates: CandidatePaths | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.OK


class ExplorationSession:
    """Drive interactive exploration of one graph snapshot.

    Owns a single ExplorationState and mutates it only through the
    operations below.  Every operation is synchronous except
    ``request_ranked_path``, whose oracle call is the only await point.
    """

    def __init__(
        self,
        index: GraphIndex,
        oracle: RankingOracle | None = None,
        path_config: PathConfig | None = None,
        cluster_analyzer: ClusterAnalyzer | None = None,
        ranking_timeout: float | None = RANKING_TIMEOUT_SECONDS,
        selection_mode: SelectionMode = SelectionMode.SINGLE,
    ):
        self.oracle = oracle
        self.path_config = path_config or PathConfig()
        self.cluster_analyzer = cluster_analyzer or ClusterAnalyzer()
        self.ranking_timeout = ranking_timeout
        self.state = ExplorationState(selection_mode=selection_mode)

        self._ranking_pairs: set[frozenset[str]] = set()
        self._set_index(index)

    @classmethod
    def from_snapshot(
        cls,
        nodes: Iterable[Node],
        relationships: Iterable[Relationship],
        **kwargs,
    ) -> "ExplorationSession":
        return cls(build_index(nodes, relationships), **kwargs)

    def _set_index(self, index: GraphIndex) -> None:
        self.index = index
        self.path_finder = PathFinder(index, self.path_config)
        self.relevance_filter = RelevanceFilter(index)

    def load_snapshot(
        self,
        nodes: Iterable[Node],
        relationships: Iterable[Relationship],
    ) -> None:
        """Replace the graph with a freshly indexed snapshot.

        State keeps plain ids, so selections that no longer resolve simply
        contribute nothing to later queries.
        """
        self._set_index(build_index(nodes, relationships))
        logger.info("session_snapshot_loaded", nodes=len(self.index))

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def ranking_in_progress(self) -> bool:
        return bool(self._ranking_pairs)

    def is_ranking(self, node_a: str, node_b: str) -> bool:
        """Whether a ranking request is outstanding for this pair."""
        return frozenset((node_a, node_b)) in self._ranking_pairs

    def set_selection_mode(self, mode: SelectionMode) -> None:
        """Switch selection mode; single mode keeps only the latest selection."""
        self.state.selection_mode = mode
        if mode == SelectionMode.SINGLE and len(self.state.selected_node_ids) > 1:
            self.state.selected_node_ids = self.state.selected_node_ids[-1:]
            self.state.clear_highlight()

    def select_single(self, node_id: str) -> OperationResult:
        """Make ``node_id`` the only selected node."""
        if node_id not in self.index:
            return OperationResult(Outcome.UNKNOWN_NODE, message=f"Unknown node: {node_id}")

        if self.state.selected_node_ids != [node_id]:
            self.state.clear_highlight()
        self.state.selected_node_ids = [node_id]

        logger.debug("node_selected", node_id=node_id)
        return OperationResult(Outcome.OK)

    def toggle_multi_select(self, node_id: str) -> OperationResult:
        """Add or remove ``node_id`` from a multi-selection."""
        if self.state.selection_mode != SelectionMode.MULTI:
            return OperationResult(
                Outcome.PRECONDITION_NOT_MET,
                message="Multi-select mode is not active",
            )

        selected = self.state.selected_node_ids
        if node_id in selected:
            selected.remove(node_id)
        elif node_id in self.index:
            selected.append(node_id)
        else:
            return OperationResult(Outcome.UNKNOWN_NODE, message=f"Unknown node: {node_id}")

        logger.debug("multi_select_toggled", node_id=node_id, selected=len(selected))
        return OperationResult(Outcome.OK)

    def clear_selection(self) -> None:
        """Drop the selection and highlighted path; expansions and filters stay."""
        self.state.selected_node_ids = []
        self.state.clear_highlight()

    def selected_nodes(self) -> list[Node]:
        """Selected nodes that still resolve in the current snapshot."""
        return [
            node
            for node in (self.index.get_node(node_id) for node_id in self.state.selected_node_ids)
            if node is not None
        ]

    # ------------------------------------------------------------------
    # Expansion and filters
    # ------------------------------------------------------------------

    def toggle_expansion(self, node_id: str) -> OperationResult:
        """Expand or collapse a node's neighbors in the relevant set."""
        expanded = self.state.expanded_node_ids
        if node_id in expanded:
            expanded.discard(node_id)
            logger.info("node_collapsed", node_id=node_id)
        elif node_id in self.index:
            expanded.add(node_id)
            logger.info("node_expanded", node_id=node_id)
        else:
            return OperationResult(Outcome.UNKNOWN_NODE, message=f"Unknown node: {node_id}")

        return OperationResult(Outcome.OK)

    def add_insight_filter(self, text: str) -> bool:
        """Append a filter; blank text or a case/whitespace duplicate is rejected."""
        key = normalize_filters([text])
        if not key or key[0] in normalize_filters(self.state.insight_filters):
            return False

        self.state.insight_filters.append(text)
        logger.info("insight_filter_added", filter=text)
        return True

    def remove_insight_filter(self, text: str) -> bool:
        if text not in self.state.insight_filters:
            return False

        self.state.insight_filters.remove(text)
        logger.info("insight_filter_removed", filter=text)
        return True

    def relevant_nodes(self, context_labels: Iterable[str] = ()) -> list[Node]:
        """The relevant set for the current expansions and filters."""
        return self.relevance_filter.relevant_nodes(
            filters=context_labels,
            expanded_ids=self.state.expanded_node_ids,
            insight_filters=self.state.insight_filters,
        )

    def relevant_relationships(self, context_labels: Iterable[str] = ()) -> list[Relationship]:
        """Relationships drawn between members of the relevant set."""
        return self.index.relationships_within(
            node.id for node in self.relevant_nodes(context_labels)
        )

    def clusters(self, context_labels: Iterable[str] = ()) -> list[Cluster]:
        return self.cluster_analyzer.clusters(self.relevant_nodes(context_labels))

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def request_shortest_path(self) -> OperationResult:
        """Highlight the shortest path between the two selected nodes."""
        pair = self.state.selected_pair()
        if pair is None:
            return OperationResult(
                Outcome.PRECONDITION_NOT_MET,
                message=(
                    "Select exactly two nodes to find a path "
                    f"({len(self.state.selected_node_ids)} selected)"
                ),
            )

        return self._highlight_shortest(*pair)

    def request_path_to(self, node_id: str) -> OperationResult:
        """Highlight the shortest path from the single selected node to ``node_id``."""
        if len(self.state.selected_node_ids) != 1:
            return OperationResult(
                Outcome.PRECONDITION_NOT_MET,
                message="Select exactly one node to find a path from",
            )
        if node_id not in self.index:
            return OperationResult(Outcome.UNKNOWN_NODE, message=f"Unknown node: {node_id}")

        return self._highlight_shortest(self.state.selected_node_ids[0], node_id)

    def _highlight_shortest(self, start_id: str, end_id: str) -> OperationResult:
        path = self.path_finder.find_path(start_id, end_id)
        self.state.highlighted_path = path
        self.state.path_annotation = None

        if not path:
            logger.info("shortest_path_not_found", start=start_id, end=end_id)
            return OperationResult(
                Outcome.NO_PATH,
                message=f"No path found between {start_id} and {end_id}",
            )

        logger.info("shortest_path_highlighted", start=start_id, end=end_id, nodes=len(path))
        return OperationResult(
            Outcome.OK,
            path=list(path),
            message=f"Path found: {len(path)} nodes",
        )

    async def request_ranked_path(self) -> OperationResult:
        """Highlight the oracle's preferred path between the two selected nodes.

        Candidate paths are enumerated up to the configured depth and handed
        to the oracle.  Oracle errors and out-of-range choices fall back to
        the first candidate with a warning.  A timeout leaves the highlighted
        path untouched; cancellation does too and then propagates.
        """
        pair = self.state.selected_pair()
        if pair is None:
            return OperationResult(
                Outcome.PRECONDITION_NOT_MET,
                message=(
                    "Select exactly two nodes to rank paths "
                    f"({len(self.state.selected_node_ids)} selected)"
                ),
            )

        key = frozenset(pair)
        if key in self._ranking_pairs:
            return OperationResult(
                Outcome.IN_PROGRESS,
                message="Ranking already in progress for this selection",
            )

        start_id, end_id = pair
        candidates = self.path_finder.find_candidate_paths(start_id, end_id)

        if not candidates.found:
            self.state.clear_highlight()
            logger.info("ranked_path_not_found", start=start_id, end=end_id)
            return OperationResult(
                Outcome.NO_PATH,
                message=f"No path found between {start_id} and {end_id}",
                candidates=candidates,
            )

        warnings: list[str] = []
        decision: RankingDecision | None = None
        oracle_failed = False

        self._ranking_pairs.add(key)
        try:
            decision = await self._ask_oracle(candidates, start_id, end_id)
        except asyncio.TimeoutError:
            logger.warning("ranking_timed_out", start=start_id, end=end_id, timeout=self.ranking_timeout)
            return OperationResult(
                Outcome.TIMED_OUT,
                path=list(self.state.highlighted_path),
                message=f"Ranking timed out after {self.ranking_timeout}s",
                warnings=["Ranking oracle timed out; highlighted path unchanged"],
                candidates=candidates,
            )
        except asyncio.CancelledError:
            logger.warning("ranking_cancelled", start=start_id, end=end_id)
            raise
        except Exception as e:
            logger.warning("ranking_failed", start=start_id, end=end_id, error=str(e))
            warnings.append(f"Ranking oracle failed ({e}); using first candidate")
            oracle_failed = True
        finally:
            self._ranking_pairs.discard(key)

        if self.state.selected_pair() != pair:
            logger.info("ranking_result_discarded", start=start_id, end=end_id)
            return OperationResult(
                Outcome.STALE,
                path=list(self.state.highlighted_path),
                message="Selection changed while ranking; result discarded",
                candidates=candidates,
            )

        if self.oracle is None:
            warnings.append("No ranking oracle available; using first candidate")
        elif not oracle_failed and not isinstance(decision, RankingDecision):
            logger.warning("ranking_failed", start=start_id, end=end_id, error="no decision")
            warnings.append("Ranking oracle returned no decision; using first candidate")
            decision = None

        chosen = 0
        if decision is not None:
            if _usable_index(decision.chosen_index, len(candidates.paths)):
                chosen = decision.chosen_index
            else:
                warnings.append(
                    f"Ranking oracle chose invalid index {decision.chosen_index}; "
                    "using first candidate"
                )
                decision = None

        path = candidates.paths[chosen]
        self.state.highlighted_path = list(path)
        self.state.path_annotation = PathAnnotation(
            score=decision.score if decision else 0.0,
            rationale=decision.rationale if decision else "",
            opportunities=list(decision.opportunities) if decision else [],
            candidates_considered=len(candidates.paths),
            candidates_found=candidates.total_found,
            fallback=decision is None,
        )

        logger.info(
            "ranked_path_highlighted",
            start=start_id,
            end=end_id,
            chosen=chosen,
            considered=len(candidates.paths),
            found=candidates.total_found,
            fallback=decision is None,
        )

        return OperationResult(
            Outcome.OK,
            path=list(path),
            message=candidates.summary(),
            warnings=warnings,
            candidates=candidates,
        )

    async def _ask_oracle(
        self,
        candidates: CandidatePaths,
        start_id: str,
        end_id: str,
    ) -> RankingDecision | None:
        if self.oracle is None:
            return None

        payload = [self.path_finder.to_candidate(path) for path in candidates.paths]
        start_label = self._label(start_id)
        end_label = self._label(end_id)

        call = self.oracle.rank(payload, start_label, end_label)
        if self.ranking_timeout is None:
            return await call
        return await asyncio.wait_for(call, timeout=self.ranking_timeout)

    def _label(self, node_id: str) -> str:
        node = self.index.get_node(node_id)
        return node.label if node else node_id


def _usable_index(index: object, count: int) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < count
