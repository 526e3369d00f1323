"""Ranking Oracle - Contract for choosing the most meaningful candidate path."""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()


class RankingError(Exception):
    """Raised by an oracle that cannot produce a usable decision."""


@dataclass
class PathCandidate:
    """A candidate path described for ranking.

    ``relationship_types`` and ``confidences`` hold one entry per hop.
    """

    node_labels: list[str]
    relationship_types: list[str]
    confidences: list[float] = field(default_factory=list)

    @property
    def hops(self) -> int:
        return max(len(self.node_labels) - 1, 0)

    @property
    def path_string(self) -> str:
        """Human-readable path representation."""
        if not self.node_labels:
            return ""

        parts = [self.node_labels[0]]
        for rel_type, label in zip(self.relationship_types, self.node_labels[1:]):
            parts.append(f"-[{rel_type.replace('_', ' ')}]-")
            parts.append(label)
        return " ".join(parts)


@dataclass
class RankingDecision:
    """The oracle's choice among candidates."""

    chosen_index: int
    score: float = 0.0
    rationale: str = ""
    opportunities: list[str] = field(default_factory=list)


@runtime_checkable
class RankingOracle(Protocol):
    """Anything that can pick the best of a list of candidate paths."""

    async def rank(
        self,
        candidates: list[PathCandidate],
        start_label: str,
        end_label: str,
    ) -> RankingDecision: ...


class HeuristicRankingOracle:
    """Rank candidates without a model call.

    Prefers the highest mean relationship confidence, then the fewest hops.
    Ties keep enumeration order.
    """

    async def rank(
        self,
        candidates: list[PathCandidate],
        start_label: str,
        end_label: str,
    ) -> RankingDecision:
        if not candidates:
            raise RankingError("no candidates to rank")

        best_index = 0
        best_key = self._key(candidates[0])
        for index, candidate in enumerate(candidates[1:], start=1):
            key = self._key(candidate)
            if key > best_key:
                best_index, best_key = index, key

        best = candidates[best_index]
        confidence = best_key[0]

        logger.debug(
            "heuristic_ranking",
            candidates=len(candidates),
            chosen=best_index,
            confidence=confidence,
        )

        return RankingDecision(
            chosen_index=best_index,
            score=round(confidence / max(best.hops, 1), 4),
            rationale=(
                f"{start_label} reaches {end_label} in {best.hops} hop(s) "
                f"with mean relationship confidence {confidence:.2f}"
            ),
        )

    @staticmethod
    def _key(candidate: PathCandidate) -> tuple[float, int]:
        if candidate.confidences:
            mean = sum(candidate.confidences) / len(candidate.confidences)
        else:
            mean = 1.0
        return (mean, -candidate.hops)
