"""Ranking completions via LiteLLM.

Ranking answers are always a single JSON object, so requests ask the
provider for JSON output and run at temperature 0 so the same candidate
list ranks the same way twice.
"""

from dataclasses import dataclass

from litellm import acompletion

RANKING_SYSTEM_PROMPT = (
    "You rank connection paths in a business knowledge graph. "
    "Reply with one JSON object and nothing else."
)

JSON_RESPONSE_FORMAT = {"type": "json_object"}


@dataclass
class RankingCompletion:
    text: str
    input_tokens: int
    output_tokens: int
    model: str


async def call_llm(
    model: str,
    prompt: str,
    max_tokens: int = 1024,
    json_mode: bool = True,
) -> RankingCompletion:
    """Send one ranking prompt and return the raw answer text.

    `json_mode` asks for a JSON object response; turn it off for models
    whose provider rejects `response_format`.
    """
    kwargs = {}
    if json_mode:
        kwargs["response_format"] = JSON_RESPONSE_FORMAT

    response = await acompletion(
        model=model,
        messages=[
            {"role": "system", "content": RANKING_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        max_tokens=max_tokens,
        temperature=0,
        **kwargs,
    )

    choice = response.choices[0]
    usage = response.usage

    return RankingCompletion(
        text=choice.message.content or "",
        input_tokens=usage.prompt_tokens,
        output_tokens=usage.completion_tokens,
        model=model,
    )
