"""
LLM Usage and Cost Tracking Types

Defines the LLMUsage dataclass and helpers that pull token counts and
cost out of LiteLLM responses. The content generator logs these per call
so generation spend can be attributed to a pipeline and operation.

Usage:
    from studybuddy.models.llm_usage import LLMUsage, extract_usage_from_response

    usage = extract_usage_from_response(
        response=litellm_response,
        model="openai/gpt-5-mini",
        request_type="text",
        latency_ms=850,
        operation="FLASHCARD_GENERATION",
    )
"""

import logging
import uuid
from dataclasses import asdict, dataclass, field
from typing import Optional

import litellm

logger = logging.getLogger(__name__)


@dataclass
class LLMUsage:
    """
    Token and cost accounting for a single LLM call.

    Attributes:
        request_id: Unique identifier for this request (auto-generated UUID)
        model: Full model identifier (e.g., "openai/gpt-5-mini")
        provider: Provider prefix of the model (e.g., "openai")
        request_type: Type of request ("text" for all generation calls)
        prompt_tokens: Number of input tokens
        completion_tokens: Number of output tokens
        total_tokens: Total tokens used
        cost_usd: Total cost in USD, when LiteLLM can price the model
        pipeline: Calling pipeline for attribution
        operation: Operation name for attribution
        latency_ms: Request latency in milliseconds
        success: Whether the request succeeded
        error_message: Error message if request failed
    """

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    model: str = ""
    provider: str = ""
    request_type: str = ""

    # Token usage
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    cost_usd: Optional[float] = None

    # Context for attribution
    pipeline: Optional[str] = None
    operation: Optional[str] = None

    # Performance
    latency_ms: Optional[int] = None
    success: bool = True
    error_message: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def total_cost(self) -> float:
        """Return total cost, defaulting to 0 if not available."""
        return self.cost_usd or 0.0

    def __str__(self) -> str:
        cost_str = f"${self.cost_usd:.4f}" if self.cost_usd else "N/A"
        tokens_str = str(self.total_tokens) if self.total_tokens else "N/A"
        return f"LLMUsage({self.model}, cost={cost_str}, tokens={tokens_str})"


def extract_provider(model: str) -> str:
    """Provider prefix of a LiteLLM model id, or "unknown"."""
    if "/" in model:
        return model.split("/")[0]
    return "unknown"


def _enum_value(value) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", value)


def extract_usage_from_response(
    response,
    model: str,
    request_type: str,
    latency_ms: int,
    pipeline=None,
    operation=None,
) -> LLMUsage:
    """
    Extract usage and cost information from a LiteLLM response.

    Args:
        response: LiteLLM response object
        model: Model identifier used for the request
        request_type: Type of request
        latency_ms: Measured latency in milliseconds
        pipeline: Optional PipelineName (or string) for attribution
        operation: Optional PipelineOperation (or string) for attribution

    Returns:
        LLMUsage populated with whatever the response exposes
    """
    usage = LLMUsage(
        model=model,
        provider=extract_provider(model),
        request_type=request_type,
        latency_ms=latency_ms,
        pipeline=_enum_value(pipeline),
        operation=_enum_value(operation),
    )

    response_usage = getattr(response, "usage", None)
    if response_usage:
        usage.prompt_tokens = getattr(response_usage, "prompt_tokens", None)
        usage.completion_tokens = getattr(response_usage, "completion_tokens", None)
        usage.total_tokens = getattr(response_usage, "total_tokens", None)

    hidden = getattr(response, "_hidden_params", None)
    if isinstance(hidden, dict):
        usage.cost_usd = hidden.get("response_cost")

    # LiteLLM did not price the call; compute it from the response if the model is known
    if usage.cost_usd is None and usage.total_tokens:
        try:
            usage.cost_usd = litellm.completion_cost(completion_response=response)
        except Exception as e:
            logger.debug(f"Cost calculation unavailable for {model}: {e}")

    return usage


def create_error_usage(
    model: str,
    request_type: str,
    latency_ms: int,
    error_message: str,
    pipeline=None,
    operation=None,
) -> LLMUsage:
    """Create an LLMUsage record for a failed request."""
    return LLMUsage(
        model=model,
        provider=extract_provider(model),
        request_type=request_type,
        latency_ms=latency_ms,
        success=False,
        error_message=error_message,
        pipeline=_enum_value(pipeline),
        operation=_enum_value(operation),
    )
