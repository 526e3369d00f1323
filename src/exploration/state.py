"""Exploration State - The per-session selection, expansion and filter facets."""

from dataclasses import dataclass, field
from enum import Enum


class SelectionMode(Enum):
    """How node selection behaves."""

    SINGLE = "single"  # At most one selected node
    MULTI = "multi"  # Clicks toggle membership


@dataclass
class PathAnnotation:
    """Auxiliary notes attached to a ranked highlighted path.

    Not authoritative: the highlighted path itself is the source of truth.
    """

    score: float = 0.0
    rationale: str = ""
    opportunities: list[str] = field(default_factory=list)
    candidates_considered: int = 0
    candidates_found: int = 0
    fallback: bool = False


@dataclass
class ExplorationState:
    """Mutable state of one exploration session.

    Holds plain node ids only.  ``selected_node_ids`` is kept in selection
    order and never contains duplicates, so the first two entries define the
    start and end of a path request.
    """

    selection_mode: SelectionMode = SelectionMode.SINGLE
    selected_node_ids: list[str] = field(default_factory=list)
    expanded_node_ids: set[str] = field(default_factory=set)
    highlighted_path: list[str] = field(default_factory=list)
    insight_filters: list[str] = field(default_factory=list)
    path_annotation: PathAnnotation | None = None

    def selected_pair(self) -> tuple[str, str] | None:
        """The (start, end) pair when exactly two nodes are selected."""
        if len(self.selected_node_ids) != 2:
            return None
        return self.selected_node_ids[0], self.selected_node_ids[1]

    def clear_highlight(self) -> None:
        self.highlighted_path = []
        self.path_annotation = None
