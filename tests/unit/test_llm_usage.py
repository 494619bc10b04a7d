"""
Unit tests for LLM usage tracking.
"""

from unittest.mock import MagicMock, patch

from studybuddy.enums.pipeline import PipelineName, PipelineOperation
from studybuddy.models.llm_usage import (
    LLMUsage,
    create_error_usage,
    extract_provider,
    extract_usage_from_response,
)


class TestLLMUsage:
    """Tests for the LLMUsage dataclass."""

    def test_request_id_unique(self):
        assert LLMUsage().request_id != LLMUsage().request_id

    def test_total_cost_defaults_to_zero(self):
        assert LLMUsage(cost_usd=0.05).total_cost == 0.05
        assert LLMUsage().total_cost == 0.0

    def test_str_without_cost(self):
        assert str(LLMUsage(model="openai/gpt-5-mini")) == (
            "LLMUsage(openai/gpt-5-mini, cost=N/A, tokens=N/A)"
        )

    def test_to_dict(self):
        result = LLMUsage(model="gemini/gemini-3-flash-preview", total_tokens=42).to_dict()

        assert result["model"] == "gemini/gemini-3-flash-preview"
        assert result["total_tokens"] == 42


class TestExtraction:
    """Tests for building usage records from LiteLLM responses."""

    def test_extract_provider(self):
        assert extract_provider("anthropic/claude-sonnet") == "anthropic"
        assert extract_provider("gpt-4") == "unknown"

    def test_extract_from_response(self):
        response = MagicMock()
        response.usage.prompt_tokens = 100
        response.usage.completion_tokens = 40
        response.usage.total_tokens = 140
        response._hidden_params = {"response_cost": 0.002}

        usage = extract_usage_from_response(
            response=response,
            model="openai/gpt-5-mini",
            request_type="text",
            latency_ms=900,
            pipeline=PipelineName.REQUEST_ORCHESTRATION,
            operation=PipelineOperation.NOTE_GENERATION,
        )

        assert usage.provider == "openai"
        assert usage.total_tokens == 140
        assert usage.cost_usd == 0.002
        assert usage.pipeline == "REQUEST_ORCHESTRATION"
        assert usage.operation == "NOTE_GENERATION"

    def test_cost_fallback_failure_ignored(self):
        response = MagicMock()
        response.usage.total_tokens = 10
        response._hidden_params = {}

        with patch(
            "studybuddy.models.llm_usage.litellm.completion_cost",
            side_effect=Exception("unknown model"),
        ):
            usage = extract_usage_from_response(
                response=response, model="custom/model", request_type="text", latency_ms=5
            )

        assert usage.cost_usd is None

    def test_error_usage(self):
        usage = create_error_usage(
            model="mistral/mistral-large",
            request_type="text",
            latency_ms=120,
            error_message="rate limit",
            operation="FUN_CONTENT_GENERATION",
        )

        assert usage.success is False
        assert usage.error_message == "rate limit"
        assert usage.provider == "mistral"
        assert usage.operation == "FUN_CONTENT_GENERATION"
