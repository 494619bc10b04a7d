"""
LLM Client

Async chat completions for the study content generators, routed through
LiteLLM so any "provider/model-name" string works. Notes, flashcards,
schedules and fun content can each run on a different model (see
GENERATION_MODEL_* settings). Calls retry with exponential backoff, and
every call, failed or not, yields an LLMUsage cost record.

Usage:
    from studybuddy.enums import PipelineName, PipelineOperation
    from studybuddy.services.llm import build_messages, get_llm_client

    client = get_llm_client()

    data, usage = await client.complete(
        operation=PipelineOperation.FLASHCARD_GENERATION,
        messages=build_messages("Generate 5 flashcards about react"),
        json_mode=True,
        pipeline=PipelineName.REQUEST_ORCHESTRATION,
    )
    print(f"Cost: ${usage.total_cost:.4f}")
"""

import json
import logging
import os
import time
from typing import Any, Optional, Union

import litellm
from litellm import acompletion
from tenacity import retry, stop_after_attempt, wait_exponential

from studybuddy.config.generation import generation_settings
from studybuddy.config.settings import settings
from studybuddy.enums.pipeline import PipelineName, PipelineOperation
from studybuddy.models.llm_usage import (
    LLMUsage,
    create_error_usage,
    extract_usage_from_response,
)

logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.drop_params = True  # Drop unsupported params instead of erroring
if settings.DEBUG:
    os.environ["LITELLM_LOG"] = "DEBUG"


def build_messages(
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[dict[str, str]]:
    """
    Build messages list from prompt and optional system prompt.

    Args:
        prompt: User prompt text
        system_prompt: Optional system prompt

    Returns:
        List of message dicts for LLM API
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


def _adjust_temperature_for_model(model: str, temperature: float) -> float:
    """Gemini 3 models require temperature=1.0; other models keep the requested value."""
    if "gemini-3" in model.lower():
        return 1.0
    return temperature


class LLMClient:
    """
    Completion client for the content generators.

    Each generation operation maps to its own model (MODELS); anything
    unmapped falls back to settings.TEXT_MODEL. Successful calls return
    their LLMUsage to the caller. Failed attempts, retries included, are
    kept in failed_usages so their latency and cost are not lost.
    """

    MODELS = {
        PipelineOperation.NOTE_GENERATION: generation_settings.MODEL_NOTES,
        PipelineOperation.FLASHCARD_GENERATION: generation_settings.MODEL_FLASHCARDS,
        PipelineOperation.SCHEDULE_GENERATION: generation_settings.MODEL_SCHEDULE,
        PipelineOperation.FUN_CONTENT_GENERATION: generation_settings.MODEL_FUN,
    }

    def __init__(self):
        self.failed_usages: list[LLMUsage] = []
        self._validate_api_keys()

    def _validate_api_keys(self):
        """Log the configured providers; warn when none are set."""
        available_keys = []

        if os.getenv("OPENAI_API_KEY") or settings.OPENAI_API_KEY:
            available_keys.append("OpenAI")
        if os.getenv("ANTHROPIC_API_KEY") or settings.ANTHROPIC_API_KEY:
            available_keys.append("Anthropic")
        if os.getenv("GEMINI_API_KEY") or settings.GEMINI_API_KEY:
            available_keys.append("Google/Gemini")
        if os.getenv("MISTRAL_API_KEY") or settings.MISTRAL_API_KEY:
            available_keys.append("Mistral")

        if not available_keys:
            logger.warning(
                "No LLM API keys configured. Set at least one of: "
                "OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY, MISTRAL_API_KEY"
            )
        else:
            logger.info(f"LLM client initialized with providers: {available_keys}")

    def get_model_for_operation(self, operation: Union[PipelineOperation, str]) -> str:
        """
        Get the configured model for a specific operation.

        Args:
            operation: PipelineOperation enum value (or its string value)

        Returns:
            Model identifier in LiteLLM format (provider/model-name)
        """
        if isinstance(operation, str) and not isinstance(operation, PipelineOperation):
            try:
                operation = PipelineOperation(operation)
            except ValueError:
                logger.warning(
                    f"Unknown operation type: {operation}, using default model"
                )
                return settings.TEXT_MODEL
        return self.MODELS.get(operation, settings.TEXT_MODEL)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def complete(
        self,
        operation: Union[PipelineOperation, str],
        messages: list[dict],
        temperature: float = 0.3,
        max_tokens: int = 4096,
        json_mode: bool = False,
        pipeline: Optional[Union[PipelineName, str]] = None,
        model: Optional[str] = None,
    ) -> tuple[Union[str, Any], LLMUsage]:
        """
        Run one chat completion for a generation operation.

        Args:
            operation: Generation operation; selects the model and is
                recorded on the usage
            messages: OpenAI-style chat messages
            temperature: Sampling temperature
            max_tokens: Response token limit
            json_mode: Ask for a JSON object and return it parsed; invalid
                JSON is retried
            pipeline: Pipeline recorded on the usage
            model: Model override, skipping the operation lookup

        Returns:
            (text, or parsed JSON in json_mode; LLMUsage)

        Raises:
            json.JSONDecodeError: If the final attempt still returns invalid JSON
            Exception: Provider errors, once retries are exhausted; each failed
                attempt is appended to failed_usages
        """
        model = model or self.get_model_for_operation(operation)

        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": _adjust_temperature_for_model(model, temperature),
            "max_tokens": max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        start_time = time.perf_counter()

        try:
            response = await acompletion(**kwargs)
            latency_ms = int((time.perf_counter() - start_time) * 1000)

            usage = extract_usage_from_response(
                response=response,
                model=model,
                request_type="text",
                latency_ms=latency_ms,
                pipeline=pipeline,
                operation=operation,
            )

            if usage.cost_usd:
                logger.debug(
                    f"LLM completion [{model}] - Cost: ${usage.cost_usd:.4f}, "
                    f"Tokens: {usage.total_tokens}, Latency: {latency_ms}ms"
                )

            content = response.choices[0].message.content

            if json_mode:
                # JSONDecodeError will trigger @retry
                content = json.loads(content)

            return content, usage

        except json.JSONDecodeError:
            logger.warning(f"JSON decode error, will retry (model={model})")
            raise
        except Exception as e:
            latency_ms = int((time.perf_counter() - start_time) * 1000)
            logger.error(f"LLM completion failed: {e} (model={model})")
            usage = create_error_usage(
                model=model,
                request_type="text",
                latency_ms=latency_ms,
                error_message=str(e),
                pipeline=pipeline,
                operation=operation,
            )
            self.failed_usages.append(usage)
            raise


# Singleton instance
_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """
    Get or create singleton LLM client.

    Returns:
        Shared LLMClient instance
    """
    global _client
    if _client is None:
        _client = LLMClient()
    return _client


def reset_llm_client():
    """Reset the singleton client (useful for testing)."""
    global _client
    _client = None
