"""
LLM client utilities for gpt-review.

Uses LiteLLM for unified access to chat completion models. Prompt budgets
are measured in characters, not tokens: 1 token is taken to be 4
characters, see https://help.openai.com/en/articles/4936856

## Model Registry

The registry records the context window of each supported model so the
prompt can be sized for it. Models missing from the registry get the
budget of DEFAULT_MODEL.

Configure via the `model` action input or a `--model <name>` comment:
    model: gpt-4          (default)
    model: gpt-4o
    model: claude-sonnet  (alias, see MODEL_ALIASES)
"""

from typing import Any, Dict, List, Optional

import litellm
from pydantic import BaseModel, ConfigDict, Field

from .actions import debug, error
from .errors import IncompleteCompletionError
from .escaping import escape_bot_marker
from .models import Message, messages_to_dicts

# Suppress LiteLLM's verbose logging
litellm.suppress_debug_info = True

CHARS_PER_TOKEN = 4
DEFAULT_TEMPERATURE = 0.8


# =============================================================================
# PYDANTIC MODELS
# =============================================================================


class LLMUsage(BaseModel):
    """Token usage and cost information from an LLM call."""

    model_config = ConfigDict(strict=True, frozen=True)

    model: str = Field(description="Model identifier used for the call")
    prompt_tokens: int = Field(ge=0, description="Number of input tokens")
    completion_tokens: int = Field(ge=0, description="Number of output tokens")
    total_tokens: int = Field(ge=0, description="Total tokens (prompt + completion)")
    cost_usd: float = Field(ge=0.0, description="Estimated cost in USD")

    def format_summary(self) -> str:
        """Format a human-readable summary for the job summary."""
        return (
            f"**AI Usage:** {self.total_tokens:,} tokens "
            f"({self.prompt_tokens:,} in / {self.completion_tokens:,} out) · "
            f"${self.cost_usd:.4f} · {self.model}"
        )

    def format_compact(self) -> str:
        """Format a compact single-line summary."""
        return f"{self.total_tokens:,} tokens · ${self.cost_usd:.4f}"


class LLMResponse(BaseModel):
    """Response from a completion call."""

    model_config = ConfigDict(strict=True)

    content: str = Field(description="Reply content, tagged with the bot marker")
    finish_reason: Optional[str] = Field(default=None, description="Why generation stopped")
    usage: Optional[LLMUsage] = Field(default=None, description="Token usage and cost info")


class CompletionRequest(BaseModel):
    """Parameters for a chat completion."""

    model: str = Field(description="Model to call")
    messages: List[Message] = Field(description="Ordered prompt")
    temperature: Optional[float] = Field(default=None, description="Sampling temperature")
    top_p: Optional[float] = Field(default=None, description="Nucleus sampling")
    max_tokens: Optional[int] = Field(default=None, description="Reply length limit")


class ModelCapabilities(BaseModel):
    """Capability metadata for a chat model."""

    model_config = ConfigDict(strict=True, frozen=True)

    context: int = Field(ge=0, description="Context window size in tokens")
    provider: str = Field(description="Provider name")


# =============================================================================
# MODEL CAPABILITY REGISTRY
# =============================================================================
#
# Provider docs for updates:
# - OpenAI: https://platform.openai.com/docs/models
# - Anthropic: https://docs.anthropic.com/en/docs/about-claude/models
# =============================================================================

MODEL_REGISTRY: Dict[str, ModelCapabilities] = {
    "gpt-4": ModelCapabilities(context=8_192, provider="openai"),
    "gpt-4-32k": ModelCapabilities(context=32_768, provider="openai"),
    "gpt-4-turbo": ModelCapabilities(context=128_000, provider="openai"),
    "gpt-4o": ModelCapabilities(context=128_000, provider="openai"),
    "gpt-4o-mini": ModelCapabilities(context=128_000, provider="openai"),
    "gpt-3.5-turbo": ModelCapabilities(context=16_385, provider="openai"),
    "claude-sonnet-4-5-20250929": ModelCapabilities(context=200_000, provider="anthropic"),
    "claude-haiku-4-5-20251001": ModelCapabilities(context=200_000, provider="anthropic"),
}

# Add prefixed versions for LiteLLM compatibility
for model_id, caps in list(MODEL_REGISTRY.items()):
    prefixed = f"{caps.provider}/{model_id}"
    if prefixed not in MODEL_REGISTRY:
        MODEL_REGISTRY[prefixed] = caps

DEFAULT_MODEL = "gpt-4"

MODEL_ALIASES = {
    "gpt4": "gpt-4",
    "gpt-4o": "gpt-4o",
    "gpt3": "gpt-3.5-turbo",
    "claude": "claude-sonnet-4-5-20250929",
    "claude-sonnet": "claude-sonnet-4-5-20250929",
    "claude-haiku": "claude-haiku-4-5-20251001",
    "default": DEFAULT_MODEL,
}


def resolve_model(*candidates: Optional[str]) -> str:
    """Return the first non-empty candidate, alias-resolved, or DEFAULT_MODEL."""
    for model in candidates:
        if model and model.strip():
            model = model.strip()
            return MODEL_ALIASES.get(model, model)
    return DEFAULT_MODEL


def get_model_capabilities(model: str) -> Optional[ModelCapabilities]:
    """Get capabilities for a model from the registry."""
    if model in MODEL_REGISTRY:
        return MODEL_REGISTRY[model]

    resolved = MODEL_ALIASES.get(model)
    if resolved and resolved in MODEL_REGISTRY:
        return MODEL_REGISTRY[resolved]

    return None


def get_char_budget(model: Optional[str] = None) -> int:
    """Character budget of a model's context window (4 chars per token)."""
    caps = get_model_capabilities(model or DEFAULT_MODEL)
    if caps is None:
        caps = MODEL_REGISTRY[DEFAULT_MODEL]
    return caps.context * CHARS_PER_TOKEN


# Budget of the default model, the reference for prompt section limits
LLM_MAX_CHARS = get_char_budget(DEFAULT_MODEL)


# =============================================================================
# COMPLETION
# =============================================================================


def _build_kwargs(api_key: str, request: CompletionRequest) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "model": request.model,
        "messages": messages_to_dicts(request.messages),
        "temperature": (
            request.temperature if request.temperature is not None else DEFAULT_TEMPERATURE
        ),
        "n": 1,
        "stream": False,
        "api_key": api_key,
    }
    if request.top_p is not None:
        kwargs["top_p"] = request.top_p
    if request.max_tokens is not None:
        kwargs["max_tokens"] = request.max_tokens
    return kwargs


def _extract_usage(response, model: str) -> LLMUsage:
    usage_data = response.usage
    prompt_tokens = getattr(usage_data, "prompt_tokens", 0) or 0
    completion_tokens = getattr(usage_data, "completion_tokens", 0) or 0
    total_tokens = getattr(usage_data, "total_tokens", 0) or (prompt_tokens + completion_tokens)

    try:
        cost = float(litellm.completion_cost(completion_response=response))
    except Exception:
        cost = 0.0

    return LLMUsage(
        model=model,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
        cost_usd=cost,
    )


def generate_completion(api_key: str, request: CompletionRequest) -> LLMResponse:
    """
    Create a chat completion and return the reply tagged as bot-authored.

    Returns:
        LLMResponse whose content carries the bot marker

    Raises:
        IncompleteCompletionError: If the reply was cut short or is empty
        Exception: Any transport/API error from LiteLLM, after logging it
    """
    try:
        response = litellm.completion(**_build_kwargs(api_key, request))
    except Exception as e:
        status = getattr(e, "status_code", None)
        if status:
            error(f"Request to {request.model} failed with status {status}: {e}")
            error("API Error Codes: https://docs.litellm.ai/docs/exception_mapping")
        else:
            error(f"Request to {request.model} failed: {e}")
        raise

    choice = response.choices[0]
    content = choice.message.content if choice.message else None
    finish_reason = choice.finish_reason
    debug("Completion", {"finish_reason": finish_reason, "content": content})

    if not content or finish_reason != "stop":
        raise IncompleteCompletionError(f"API return incomplete: {finish_reason}")

    return LLMResponse(
        content=escape_bot_marker(content),
        finish_reason=finish_reason,
        usage=_extract_usage(response, request.model),
    )
