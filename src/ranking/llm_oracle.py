"""LLM Ranking Oracle - Ask a model which candidate path matters most strategically."""

import json
import re

import structlog

from src.config import RANKING_MODEL

from . import completion
from .oracle import PathCandidate, RankingDecision, RankingError

logger = structlog.get_logger()


class LLMRankingOracle:
    """Rank candidate paths with a language model.

    The model sees each candidate as a labelled chain of entities and
    relationship types and answers with a JSON object naming the chosen
    candidate.  Any transport or parse failure surfaces as RankingError so
    the caller can fall back.
    """

    RANKING_PROMPT = """You are a strategic intelligence analyst reviewing a knowledge graph of companies, people, technologies, markets and strategies.

Below are candidate paths connecting "{start_label}" to "{end_label}".

{candidates}

Choose the path that reveals the most strategically meaningful connection between the two entities: indirect influence, competitive exposure, investment flows, or technology dependencies.

Return ONLY a JSON object:
{{
  "chosen_index": <index of the chosen path, starting at 0>,
  "score": 0.0-1.0,
  "rationale": "why this path matters",
  "opportunities": ["strategic opportunity 1", "strategic opportunity 2"]
}}"""

    def __init__(
        self,
        model: str = RANKING_MODEL,
        max_tokens: int = 1024,
        json_mode: bool = True,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.json_mode = json_mode

    async def rank(
        self,
        candidates: list[PathCandidate],
        start_label: str,
        end_label: str,
    ) -> RankingDecision:
        if not candidates:
            raise RankingError("no candidates to rank")

        prompt = self.RANKING_PROMPT.format(
            start_label=start_label,
            end_label=end_label,
            candidates=self._format_candidates(candidates),
        )

        try:
            response = await completion.call_llm(
                model=self.model,
                prompt=prompt,
                max_tokens=self.max_tokens,
                json_mode=self.json_mode,
            )
        except RankingError:
            raise
        except Exception as e:
            logger.error("ranking_api_error", model=self.model, error=str(e))
            raise RankingError(f"ranking call failed: {e}") from e

        decision = self._parse_response(response.text)

        logger.debug(
            "llm_ranking",
            model=self.model,
            candidates=len(candidates),
            chosen=decision.chosen_index,
            score=decision.score,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
        )

        return decision

    def _format_candidates(self, candidates: list[PathCandidate]) -> str:
        lines = []
        for index, candidate in enumerate(candidates):
            lines.append(f"[{index}] ({candidate.hops} hops) {candidate.path_string}")
        return "\n".join(lines)

    def _parse_response(self, response_text: str) -> RankingDecision:
        """Parse the model's JSON answer into a RankingDecision."""
        try:
            json_match = re.search(r"\{[\s\S]*\}", response_text)
            if json_match:
                parsed = json.loads(json_match.group())
            else:
                parsed = json.loads(response_text)

            if not isinstance(parsed, dict):
                raise ValueError("expected a JSON object")

            opportunities = parsed.get("opportunities", [])
            if isinstance(opportunities, str):
                opportunities = [opportunities]

            return RankingDecision(
                chosen_index=int(parsed["chosen_index"]),
                score=float(parsed.get("score", 0.0)),
                rationale=str(parsed.get("rationale", "")),
                opportunities=[str(o) for o in opportunities],
            )

        except (json.JSONDecodeError, ValueError, KeyError, TypeError) as e:
            logger.warning(
                "failed_to_parse_ranking",
                error=str(e),
                response=response_text[:500],
            )
            raise RankingError(f"unparseable ranking response: {e}") from e
