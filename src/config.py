"""Central configuration -- all settings driven by environment variables.

Scripts call ``load_dotenv()`` before importing ``src.*`` so values from a
local .env file are visible here.

LLM model strings use LiteLLM conventions:
  - claude-*              -> Anthropic  (ANTHROPIC_API_KEY)
  - gemini/*              -> Google     (GEMINI_API_KEY)
  - openrouter/*          -> OpenRouter (OPENROUTER_API_KEY)
  - openai/*              -> OpenAI-compat  (OPENAI_API_KEY + OPENAI_API_BASE)
  - ollama/*              -> Ollama     (OLLAMA_API_BASE, default localhost:11434)
  - and many more: https://docs.litellm.ai/docs/providers
"""

import os

# ---------------------------------------------------------------------------
# Relevant-node view
# ---------------------------------------------------------------------------
# With no filters and no expansions a fresh session sees the first
# GRAPH_DEFAULT_VIEW_SIZE nodes of the snapshot.  Once filters or expansions
# are active the relevant set is capped at GRAPH_RELEVANT_MAX_NODES.

DEFAULT_VIEW_SIZE = int(os.environ.get("GRAPH_DEFAULT_VIEW_SIZE", "50"))
RELEVANT_MAX_NODES = int(os.environ.get("GRAPH_RELEVANT_MAX_NODES", "100"))

# ---------------------------------------------------------------------------
# Path search
# ---------------------------------------------------------------------------
# MAX_PATH_DEPTH bounds the edge count of enumerated candidate paths;
# MAX_CANDIDATE_PATHS bounds how many are handed to the ranking oracle.

MAX_PATH_DEPTH = int(os.environ.get("GRAPH_MAX_PATH_DEPTH", "4"))
MAX_CANDIDATE_PATHS = int(os.environ.get("GRAPH_MAX_CANDIDATE_PATHS", "10"))

# ---------------------------------------------------------------------------
# Clustering
# ---------------------------------------------------------------------------

CLUSTER_MIN_SIZE = int(os.environ.get("GRAPH_CLUSTER_MIN_SIZE", "3"))
CLUSTER_ACTIVATION_SIZE = int(os.environ.get("GRAPH_CLUSTER_ACTIVATION_SIZE", "8"))

# ---------------------------------------------------------------------------
# Path ranking
# ---------------------------------------------------------------------------

MODEL_BALANCED = os.environ.get("LLM_MODEL_BALANCED", "claude-sonnet-4-5-20250929")
RANKING_MODEL = os.environ.get("LLM_MODEL_RANKING", MODEL_BALANCED)
RANKING_TIMEOUT_SECONDS = float(os.environ.get("RANKING_TIMEOUT_SECONDS", "30"))
