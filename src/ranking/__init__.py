"""Ranking package - Pluggable oracles that choose among candidate paths."""

from .llm_oracle import LLMRankingOracle
from .oracle import (
    HeuristicRankingOracle,
    PathCandidate,
    RankingDecision,
    RankingError,
    RankingOracle,
)

__all__ = [
    "HeuristicRankingOracle",
    "LLMRankingOracle",
    "PathCandidate",
    "RankingDecision",
    "RankingError",
    "RankingOracle",
]
